"""Initial schema – users

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19

Creates the users table, its soft-delete index and the per-group unique
index on (group_id, username).  The unique index is partial on live rows
where the dialect supports it.
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("group_id", sa.BigInteger(), nullable=False, server_default="0"),
        sa.Column("username", sa.String(255), nullable=False),
        # base64( 64-byte scrypt key ) / base64( 32-byte salt ) – never plaintext
        sa.Column("password", sa.String(255), nullable=False, server_default=""),
        sa.Column("salt", sa.String(255), nullable=False, server_default=""),
        sa.Column("type", sa.String(255), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("admin", sa.Boolean(), nullable=True),
        sa.Column("mfa", sa.Boolean(), nullable=True),
        sa.Column("mfa_secret", sa.String(64), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
    )

    op.create_index("ix_users_deleted_at", "users", ["deleted_at"])
    op.create_index(
        "idx_per_group",
        "users",
        ["group_id", "username"],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
        sqlite_where=sa.text("deleted_at IS NULL"),
    )


def downgrade() -> None:
    op.drop_index("idx_per_group", table_name="users")
    op.drop_index("ix_users_deleted_at", table_name="users")
    op.drop_table("users")
