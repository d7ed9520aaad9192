"""Service layer modules."""

from gifter.services.auth_service import (
    authenticate,
    complete_onboarding,
    create_session_for_user,
    register_user,
    revoke_sessions,
)
from gifter.services.errors import (
    ConflictError,
    GifterServiceError,
    NotFoundOrForbidden,
    StoreError,
    ValidationError,
)
from gifter.services.gift_service import (
    create_gifts,
    delete_gift,
    update_gift_status,
    upsert_gift,
)
from gifter.services.person_service import (
    append_person,
    delete_person,
    list_people,
    reorder_people,
    replace_people,
)

__all__ = [
    # Auth
    "authenticate",
    "complete_onboarding",
    "create_session_for_user",
    "register_user",
    "revoke_sessions",
    # Errors
    "ConflictError",
    "GifterServiceError",
    "NotFoundOrForbidden",
    "StoreError",
    "ValidationError",
    # Gifts
    "create_gifts",
    "delete_gift",
    "update_gift_status",
    "upsert_gift",
    # People
    "append_person",
    "delete_person",
    "list_people",
    "reorder_people",
    "replace_people",
]
