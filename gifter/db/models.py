"""SQLAlchemy ORM models for users, people and gifts.

Ownership chain: User -> Person -> Gift. Every query in the service layer
follows this chain; a Gift has no user column of its own.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Uuid, false, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from gifter.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Identity
# =============================================================================

class User(Base):
    """
    Application user.

    Credentials are email + bcrypt password hash. token_version is embedded in
    the session JWT; bumping it revokes every outstanding session.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    onboarding_completed: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    token_version: Mapped[int] = mapped_column(
        Integer, default=1, server_default=text("1"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=_utcnow, onupdate=_utcnow, nullable=False
    )

    # Relationships
    people: Mapped[list["Person"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Person.order",
    )


# =============================================================================
# Gift planning
# =============================================================================

class Person(Base):
    """
    A gift recipient tracked by one user.

    - order: display position; unique enough to sort, not necessarily contiguous
    - user_id is immutable after creation
    """

    __tablename__ = "people"
    __table_args__ = (Index("idx_people_user_order", "user_id", "order"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    # Relationships
    user: Mapped["User"] = relationship(back_populates="people")
    gifts: Mapped[list["Gift"]] = relationship(
        back_populates="person",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [Gift.created_at, Gift.id],
    )


class Gift(Base):
    """
    A gift idea attached to a person.

    purchased and gift_wrapped are independent flags; any combination is valid
    and either can be flipped back at any time.
    """

    __tablename__ = "gifts"
    __table_args__ = (Index("idx_gifts_person", "person_id"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    person_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("people.id", ondelete="CASCADE"),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(String(500), nullable=False)
    purchased: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    gift_wrapped: Mapped[bool] = mapped_column(
        Boolean, default=False, server_default=false(), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(default=_utcnow, nullable=False)

    # Relationships
    person: Mapped["Person"] = relationship(back_populates="gifts")
