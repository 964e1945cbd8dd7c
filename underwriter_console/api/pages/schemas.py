"""Pydantic schemas for console request/response validation"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from underwriter_console.core.navigation import NavigationItem
from underwriter_console.domain.models import DetailSnapshot, ListViewSnapshot, Session, UserProfileBundle


class LoginRequest(BaseModel):
    """Request body for POST /login"""

    email: str = ""
    password: str = ""


class SessionResponse(BaseModel):
    """Current operator"""

    user_id: str
    display_name: str
    email: str
    role: str
    permissions: List[str]

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            user_id=session.user_id,
            display_name=session.display_name,
            email=session.email,
            role=session.role.value,
            permissions=list(session.permissions),
        )


class NavigationEntry(BaseModel):
    label: str
    path: str
    icon: str


class NavigationResponse(BaseModel):
    items: List[NavigationEntry]

    @classmethod
    def from_items(cls, items: List[NavigationItem], paths: Dict[str, str]) -> "NavigationResponse":
        return cls(items=[NavigationEntry(label=i.label, path=paths[i.route], icon=i.icon) for i in items])


class PageRequest(BaseModel):
    page: int


class PageSizeRequest(BaseModel):
    page_size: int


class SearchRequest(BaseModel):
    term: str = ""
    field: Optional[str] = None


class FilterRequest(BaseModel):
    name: str
    value: Optional[str] = None


class ListPageResponse(BaseModel):
    """One list view as the browser renders it"""

    state: str
    items: List[Any]
    page: int
    total_pages: int
    total_count: int
    page_size: int
    search_term: str
    search_field: Optional[str] = None
    filters: Dict[str, str]
    error: Optional[str] = None

    @classmethod
    def from_snapshot(cls, snapshot: ListViewSnapshot) -> "ListPageResponse":
        return cls(
            state=snapshot.state.value,
            items=list(snapshot.items),
            page=snapshot.page,
            total_pages=snapshot.total_pages,
            total_count=snapshot.total_count,
            page_size=snapshot.query.page_size,
            search_term=snapshot.query.search_term,
            search_field=snapshot.query.search_field,
            filters=dict(snapshot.query.filters),
            error=snapshot.error,
        )


class DetailResponse(BaseModel):
    """A detail modal"""

    state: str
    record_id: Optional[str] = None
    record: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    form_error: Optional[str] = None

    @classmethod
    def from_snapshot(cls, snapshot: DetailSnapshot) -> "DetailResponse":
        record = snapshot.record
        if isinstance(record, UserProfileBundle):
            record = {
                "userId": record.user_id,
                "details": record.details,
                "loanAnalysis": record.loan_analysis,
            }
        return cls(
            state=snapshot.state.value,
            record_id=snapshot.record_id,
            record=record,
            error=snapshot.error,
            form_error=snapshot.form_error,
        )


class DecisionRequest(BaseModel):
    """Request body for POST /users/{user_id}/decisions; fields are raw form input"""

    kind: str = Field(..., description="approve | reject | review_limit | edit_name")
    credit_limit: Optional[Union[str, int, float]] = None
    reason: Optional[str] = None
    direction: Optional[str] = None
    new_limit: Optional[Union[str, int, float]] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class DecisionResponse(BaseModel):
    ok: bool
    message: str
    detail: DetailResponse
