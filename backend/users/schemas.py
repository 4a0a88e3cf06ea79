# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the user subjects."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, TypeAdapter, field_validator


# -- Requests --------------------------------------------------------------
# Unknown keys (salt, mfa_secret, created_at …) are ignored: those fields are
# only ever derived server-side.


class UserDescriptor(BaseModel):
    """Identifying fields of a get / del / find request."""

    id: Optional[int] = None
    username: Optional[str] = None
    group_id: Optional[int] = None

    @field_validator("id", "group_id", mode="before")
    @classmethod
    def _reject_bool(cls, value):
        # JSON true/false would otherwise coerce to 1/0
        if isinstance(value, bool):
            raise ValueError("must be an integer, not a boolean")
        return value

    @property
    def has_id(self) -> bool:
        return bool(self.id)


class UserPatch(UserDescriptor):
    """
    Body of a set request.  Every field is optional; ``None`` means the key
    was absent (or null) and the stored value must be left alone.
    """

    password: Optional[str] = None
    type: Optional[str] = None
    email: Optional[str] = None
    admin: Optional[bool] = None
    mfa: Optional[bool] = None


# -- Responses -------------------------------------------------------------


class UserRecord(BaseModel):
    """Full entity as returned on the wire, hash and salt included."""

    id: int
    group_id: int
    username: str
    password: str
    type: str
    email: str
    salt: str
    admin: Optional[bool] = None
    mfa: Optional[bool] = None
    mfa_secret: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


UserRecordList = TypeAdapter(List[UserRecord])
