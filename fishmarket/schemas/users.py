from typing import ClassVar, FrozenSet, Optional

from pydantic import Field

from fishmarket.schemas.base import FieldMask, QueryModel


class UserFilters(QueryModel):
    search: Optional[str] = None
    is_admin: Optional[bool] = None
    is_active: Optional[bool] = None
    limit: Optional[int] = Field(None, gt=0)
    offset: Optional[int] = Field(None, ge=0)


class UpdateUserRequest(FieldMask):
    NULLABLE: ClassVar[FrozenSet[str]] = frozenset({'phone', 'avatar_url'})

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=64)
    avatar_url: Optional[str] = None
