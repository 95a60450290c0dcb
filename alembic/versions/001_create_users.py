"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-18
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id      VARCHAR(255)    PRIMARY KEY,
            name    TEXT            NOT NULL,
            email   TEXT            NOT NULL,
            age     INTEGER         NOT NULL,
            CONSTRAINT uq_users_email UNIQUE (email)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'User records; cached as one snapshot under the users key';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
