"""List pages: applications, BVN records and selfies share one set of actions"""

from fastapi import APIRouter, Depends

from underwriter_console.api.dependencies import get_console, redirect_if_forced, require_route
from underwriter_console.api.pages.schemas import (
    FilterRequest,
    ListPageResponse,
    PageRequest,
    PageSizeRequest,
    SearchRequest,
)
from underwriter_console.core.console import Console
from underwriter_console.domain.models import ListViewSnapshot

LIST_PAGES = ("applications", "bvn", "selfie")


def build_list_router(page: str) -> APIRouter:
    """
    Routes driving one list controller.

    GET returns the current state (fetching on first visit); every other
    route is one controller input and returns the state it produced.
    """
    router = APIRouter(prefix=f"/{page}")
    guard = require_route(page)

    def render(console: Console, snapshot: ListViewSnapshot) -> ListPageResponse:
        redirect_if_forced(console)
        return ListPageResponse.from_snapshot(snapshot)

    @router.get("", response_model=ListPageResponse)
    async def show(_=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].load())

    @router.post("/refresh", response_model=ListPageResponse)
    async def refresh(_=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].refresh())

    @router.post("/page", response_model=ListPageResponse)
    async def set_page(body: PageRequest, _=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].set_page(body.page))

    @router.post("/page-size", response_model=ListPageResponse)
    async def set_page_size(body: PageSizeRequest, _=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].set_page_size(body.page_size))

    @router.post("/search", response_model=ListPageResponse)
    async def set_search(body: SearchRequest, _=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].set_search(body.term, body.field))

    @router.delete("/search", response_model=ListPageResponse)
    async def clear_search(_=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].clear_search())

    @router.post("/filters", response_model=ListPageResponse)
    async def set_filter(body: FilterRequest, _=Depends(guard), console: Console = Depends(get_console)):
        return render(console, await console.lists[page].set_filter(body.name, body.value))

    return router


routers = [build_list_router(page) for page in LIST_PAGES]
