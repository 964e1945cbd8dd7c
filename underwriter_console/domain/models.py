"""Domain models - pure Python dataclasses representing console state"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class Role(str, Enum):
    """Staff role, derived from the first backend role slug"""

    ADMIN = "ADMIN"
    SENIOR_UNDERWRITER = "SENIOR_UNDERWRITER"
    UNDERWRITER = "UNDERWRITER"
    ANALYST = "ANALYST"


@dataclass(frozen=True)
class Session:
    """Authenticated identity, as persisted between restarts"""

    user_id: str
    display_name: str
    role: Role
    token: str
    email: str = ""
    permissions: Tuple[str, ...] = ()
    roles: Tuple[str, ...] = ()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)


class ViewState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ListQuery:
    """Parameters of one list fetch. Page is 1-based."""

    page: int = 1
    page_size: int = 20
    search_term: str = ""
    search_field: Optional[str] = None
    filters: Dict[str, str] = field(default_factory=dict)

    def with_changes(self, **changes: Any) -> "ListQuery":
        """Copy with changes applied; anything but ``page`` sends us back to page 1"""
        if "page" not in changes:
            changes["page"] = 1
        if "filters" in changes:
            changes["filters"] = dict(changes["filters"])
        return replace(self, **changes)

    def to_params(self) -> Dict[str, Any]:
        """Query-string parameters for the backend"""
        params: Dict[str, Any] = {"page": self.page, "limit": self.page_size}
        if self.search_term and self.search_field:
            params[self.search_field] = self.search_term
        for name, value in self.filters.items():
            if value:
                params[name] = value
        return params


@dataclass(frozen=True)
class ListResult(Generic[T]):
    """One page of a backend collection, in server order"""

    items: Tuple[T, ...]
    page: int
    total_pages: int
    total_count: int


@dataclass(frozen=True)
class ListViewSnapshot:
    """Immutable view of a list controller, handed to the view layer"""

    state: ViewState
    query: ListQuery
    items: Tuple[Any, ...]
    page: int
    total_pages: int
    total_count: int
    error: Optional[str] = None


@dataclass(frozen=True)
class DetailSnapshot:
    """Immutable view of a detail controller"""

    state: ViewState
    record_id: Optional[str] = None
    record: Any = None
    error: Optional[str] = None
    form_error: Optional[str] = None


@dataclass(frozen=True)
class UserProfileBundle:
    """Full user profile: complete details plus loan analysis when available"""

    user_id: str
    details: Dict[str, Any]
    loan_analysis: Optional[Dict[str, Any]] = None

    @property
    def credit_limit(self) -> Optional[float]:
        profile = self.details.get("userProfile") or {}
        return profile.get("creditLimit")


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of submitting a decision form"""

    ok: bool
    message: str
