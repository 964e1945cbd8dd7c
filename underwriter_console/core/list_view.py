"""List-view controller: the paging / search / filter state machine behind every table.

States run ``idle -> loading -> ready | failed`` and re-enter ``loading`` on
any parameter change. Only the most recently issued fetch may update the
visible state; a slower, older response is dropped when it lands.
"""

import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Sequence, Tuple

from underwriter_console.config import settings
from underwriter_console.domain.exceptions import ConsoleError, Unauthorized, ValidationError
from underwriter_console.domain.models import ListQuery, ListResult, ListViewSnapshot, ViewState
from underwriter_console.infrastructure.observability.metrics import list_fetch_failures_counter
from underwriter_console.utils.validation import is_valid_account_number, is_valid_bvn

logger = logging.getLogger(__name__)

Fetcher = Callable[[ListQuery], Awaitable[ListResult]]

GENERIC_FAILURE = "Something went wrong while loading. Please try again."

# Search fields whose terms have a fixed format
SEARCH_TERM_CHECKS = {
    "bvn": (is_valid_bvn, "BVN must be 11 digits"),
    "accountNumber": (is_valid_account_number, "Account number must be 10 digits"),
}


class ListViewController:
    """Owns one list view's query and its latest result"""

    def __init__(
        self,
        name: str,
        fetch: Fetcher,
        search_fields: Iterable[str] = (),
        filters: Optional[Dict[str, Sequence[str]]] = None,
        page_size: Optional[int] = None,
        page_size_options: Optional[Sequence[int]] = None,
    ):
        self.name = name
        self._fetch = fetch
        self.search_fields: Tuple[str, ...] = tuple(search_fields)
        self.filters: Dict[str, Tuple[str, ...]] = {k: tuple(v) for k, v in (filters or {}).items()}
        self.page_size_options: Tuple[int, ...] = tuple(page_size_options or settings.page_size_options)

        self._query = ListQuery(page_size=page_size or settings.default_page_size)
        self._state = ViewState.IDLE
        self._items: Tuple[Any, ...] = ()
        self._page = 0
        self._total_pages = 0
        self._total_count = 0
        self._error: Optional[str] = None
        self._seq = 0

    @property
    def query(self) -> ListQuery:
        return self._query

    @property
    def state(self) -> ViewState:
        return self._state

    def snapshot(self) -> ListViewSnapshot:
        return ListViewSnapshot(
            state=self._state,
            query=self._query,
            items=self._items,
            page=self._page,
            total_pages=self._total_pages,
            total_count=self._total_count,
            error=self._error,
        )

    async def load(self) -> ListViewSnapshot:
        """First fetch for a freshly opened view; later calls just report state"""
        if self._state is ViewState.IDLE:
            return await self._run(self._query)
        return self.snapshot()

    async def refresh(self) -> ListViewSnapshot:
        """Re-issue the current query unchanged"""
        return await self._run(self._query)

    async def set_page(self, page: int) -> ListViewSnapshot:
        """Go to a page; out-of-range requests, or the page already shown, do nothing"""
        if page < 1 or page > self._total_pages or page == self._page:
            return self.snapshot()
        return await self._run(self._query.with_changes(page=page))

    async def set_search(self, term: str, field: Optional[str] = None) -> ListViewSnapshot:
        """
        Search by one field. An empty term clears the search.

        Raises:
            ValidationError: unsupported field or malformed term; nothing is fetched
        """
        term = (term or "").strip()
        if not term:
            return await self.clear_search()

        field = field or (self.search_fields[0] if self.search_fields else None)
        if field not in self.search_fields:
            raise ValidationError(f"Cannot search {self.name} by {field}")
        check = SEARCH_TERM_CHECKS.get(field)
        if check is not None and not check[0](term):
            raise ValidationError(check[1])

        return await self._run(self._query.with_changes(search_term=term, search_field=field))

    async def clear_search(self) -> ListViewSnapshot:
        return await self._run(self._query.with_changes(search_term="", search_field=None))

    async def set_filter(self, name: str, value: Optional[str]) -> ListViewSnapshot:
        """
        Set or remove (None / empty value) one status filter.

        Raises:
            ValidationError: unknown filter or value; nothing is fetched
        """
        if name not in self.filters:
            raise ValidationError(f"Unknown filter: {name}")

        filters = dict(self._query.filters)
        if value:
            allowed = self.filters[name]
            if allowed and value not in allowed:
                raise ValidationError(f"Invalid value for {name}: {value}")
            filters[name] = value
        else:
            filters.pop(name, None)

        return await self._run(self._query.with_changes(filters=filters))

    async def set_page_size(self, page_size: int) -> ListViewSnapshot:
        if page_size not in self.page_size_options:
            raise ValidationError(f"Page size must be one of {', '.join(map(str, self.page_size_options))}")
        return await self._run(self._query.with_changes(page_size=page_size))

    async def _run(self, query: ListQuery) -> ListViewSnapshot:
        self._seq += 1
        seq = self._seq

        self._query = query
        self._state = ViewState.LOADING
        self._error = None

        try:
            result = await self._fetch(query)
        except Unauthorized:
            # The session is gone; the view goes back to idle, not to an error
            if seq == self._seq:
                self._reset()
            return self.snapshot()
        except ConsoleError as e:
            if seq == self._seq:
                self._fail(e.message)
            return self.snapshot()
        except Exception:
            if seq == self._seq:
                logger.exception(f"Unexpected error loading {self.name}", extra={"view": self.name})
                self._fail(GENERIC_FAILURE)
            return self.snapshot()

        if seq != self._seq:
            logger.debug("Discarded superseded list response", extra={"view": self.name, "seq": seq})
            return self.snapshot()

        # Replace everything at once; no await between these assignments
        self._query = replace(query, page=result.page)
        self._items = tuple(result.items)
        self._page = result.page
        self._total_pages = result.total_pages
        self._total_count = result.total_count
        self._state = ViewState.READY
        return self.snapshot()

    def _reset(self) -> None:
        self._query = ListQuery(page_size=self._query.page_size)
        self._items = ()
        self._page = 0
        self._total_pages = 0
        self._total_count = 0
        self._error = None
        self._state = ViewState.IDLE

    def _fail(self, message: str) -> None:
        # Page metadata from the last good fetch stays, the rows do not
        list_fetch_failures_counter.labels(view=self.name).inc()
        logger.warning(f"Failed to load {self.name}: {message}", extra={"view": self.name})
        self._items = ()
        self._error = message
        self._state = ViewState.FAILED
