"""Pydantic models for backend response contracts"""

from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, Field
from pydantic import ValidationError as SchemaError

from underwriter_console.domain.exceptions import ServerError
from underwriter_console.domain.models import ListResult


class PageMeta(BaseModel):
    """Pagination metadata; services disagree on field names"""

    page: int = Field(validation_alias=AliasChoices("page", "currentPage"))
    total_pages: int = Field(validation_alias=AliasChoices("totalPages", "total_pages"))
    total: int = Field(validation_alias=AliasChoices("total", "totalRecords"))


class BackendRole(BaseModel):
    id: Optional[int] = None
    name: str = ""
    slug: str = ""


class BackendPermission(BaseModel):
    id: Optional[int] = None
    name: str = ""
    slug: str = ""


class LoginUser(BaseModel):
    """The ``user`` object of a login response"""

    id: Union[int, str]
    email: str = ""
    name: str = ""
    last_name: str = ""
    full_name: Optional[str] = None
    roles: List[BackendRole] = []
    permissions: List[BackendPermission] = []
    profile: Optional[Dict[str, Any]] = None

    @property
    def display_name(self) -> str:
        if self.full_name:
            return self.full_name
        return " ".join(part for part in (self.name, self.last_name) if part) or self.email


class LoginResponse(BaseModel):
    """Response for POST /login"""

    success: bool = False
    message: str = ""
    token: Optional[str] = None
    user: Optional[LoginUser] = None


def parse_page(payload: Any) -> ListResult:
    """
    Normalize a list response into a ListResult.

    Accepted shapes:
        {"data": {"items": [...], "meta": {"page", "totalPages", "total"}}}
        {"data": {"data": [...], "meta": {...}}}
        {"data": [...], "meta": {"currentPage", "totalPages", "totalRecords"}}
    """
    if not isinstance(payload, dict):
        raise ServerError("Unexpected list response")

    data = payload.get("data")
    meta = payload.get("meta")
    if isinstance(data, dict):
        meta = data.get("meta", meta)
        items = data.get("items", data.get("data"))
    else:
        items = data

    if not isinstance(items, list) or not isinstance(meta, dict):
        raise ServerError("Unexpected list response")

    try:
        page_meta = PageMeta.model_validate(meta)
    except SchemaError as e:
        raise ServerError("Unexpected pagination metadata") from e

    return ListResult(
        items=tuple(items),
        page=page_meta.page,
        total_pages=page_meta.total_pages,
        total_count=page_meta.total,
    )


def parse_record(payload: Any) -> Dict[str, Any]:
    """Unwrap {"data": {...}} from a detail endpoint"""
    if not isinstance(payload, dict) or not isinstance(payload.get("data"), dict):
        raise ServerError("Unexpected detail response")
    return payload["data"]
