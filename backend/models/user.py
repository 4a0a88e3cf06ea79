# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""User ORM model."""

from sqlalchemy import BigInteger, Boolean, Column, DateTime, Index, Integer, String, text
from sqlalchemy.sql import func

from database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        # Unique among live rows.  MySQL has no partial indexes and enforces
        # it across soft-deleted rows as well.
        Index(
            "idx_per_group",
            "group_id",
            "username",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    # 64-bit; SQLite only autoincrements a column declared plain INTEGER
    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    group_id = Column(BigInteger, nullable=False, default=0)
    username = Column(String(255), nullable=False)
    # base64 scrypt key / base64 salt – never plaintext
    password = Column(String(255), nullable=False, default="")
    salt = Column(String(255), nullable=False, default="")
    type = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    # NULL = never specified
    admin = Column(Boolean, nullable=True)
    mfa = Column(Boolean, nullable=True)
    mfa_secret = Column(String(64), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    deleted_at = Column(DateTime(timezone=True), nullable=True, index=True)
