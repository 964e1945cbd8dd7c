"""Selfie verification API client"""

from typing import Dict

from underwriter_console.domain.models import ListQuery, ListResult
from underwriter_console.infrastructure.clients.base import ResourceClient
from underwriter_console.infrastructure.clients.schemas import parse_page


class SelfiesClient(ResourceClient):
    """Client for the selfie verification service"""

    service_name = "selfies"

    search_fields: tuple = ()
    filters: Dict[str, tuple] = {}

    async def list_selfies(self, query: ListQuery) -> ListResult:
        payload = await self.request("GET", "/admin/get-selfies", params=query.to_params())
        return parse_page(payload)
