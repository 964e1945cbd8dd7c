"""BVN verification API client"""

from typing import Any, Dict

from underwriter_console.domain.exceptions import ServerError
from underwriter_console.domain.models import ListQuery, ListResult
from underwriter_console.infrastructure.clients.base import ResourceClient, path_segment
from underwriter_console.infrastructure.clients.schemas import parse_page, parse_record


class BVNClient(ResourceClient):
    """Client for the BVN verification service"""

    service_name = "bvn"

    search_fields = ("bvn", "search")
    filters: Dict[str, tuple] = {}

    async def list_records(self, query: ListQuery) -> ListResult:
        payload = await self.request("GET", "/verifications/bvn/records", params=query.to_params())
        self._check_status(payload, "Failed to fetch BVN records")
        return parse_page(payload)

    async def get_record(self, bvn: str) -> Dict[str, Any]:
        payload = await self.request("GET", f"/verifications/bvn/records/{path_segment(bvn)}")
        self._check_status(payload, "Failed to fetch BVN details")
        return parse_record(payload)

    @staticmethod
    def _check_status(payload: Any, fallback: str) -> None:
        # This service reports failures in the body with a 200
        if isinstance(payload, dict) and payload.get("status") is False:
            raise ServerError(payload.get("message") or fallback)
