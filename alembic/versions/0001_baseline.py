"""Baseline migration - users, people and gifts

Revision ID: 0001_baseline
Revises: 
Create Date: 2026-10-19

Creates the identity table and the User -> Person -> Gift ownership chain.
Portable across SQLite and Postgres.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users, people and gifts."""

    # ==========================================================================
    # Users
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(50), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('onboarding_completed', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('token_version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )

    # ==========================================================================
    # People (owned by one user)
    # ==========================================================================
    op.create_table(
        'people',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'],
            name='fk_people_user_id_users',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_people'),
    )
    op.create_index('idx_people_user_order', 'people', ['user_id', 'order'])

    # ==========================================================================
    # Gifts (owned by one person)
    # ==========================================================================
    op.create_table(
        'gifts',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('person_id', sa.Uuid(), nullable=False),
        sa.Column('description', sa.String(500), nullable=False),
        sa.Column('purchased', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('gift_wrapped', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ['person_id'], ['people.id'],
            name='fk_gifts_person_id_people',
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_gifts'),
    )
    op.create_index('idx_gifts_person', 'gifts', ['person_id'])


def downgrade() -> None:
    """Drop all tables."""

    # Drop tables in reverse order (respecting foreign keys)
    op.drop_index('idx_gifts_person', table_name='gifts')
    op.drop_table('gifts')
    op.drop_index('idx_people_user_order', table_name='people')
    op.drop_table('people')
    op.drop_table('users')
