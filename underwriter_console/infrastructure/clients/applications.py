"""Credit applications API client"""

from typing import Any, Dict

from underwriter_console.domain.models import ListQuery, ListResult
from underwriter_console.infrastructure.clients.base import ResourceClient, path_segment
from underwriter_console.infrastructure.clients.schemas import parse_page, parse_record


class ApplicationsClient(ResourceClient):
    """Client for the credit-application service"""

    service_name = "applications"

    search_fields = ("userId", "bvn", "accountNumber")
    filters = {
        "creditReportStatus": ("pending", "approved", "not_approved"),
        "bankStatementStatus": ("pending", "approved", "not_approved", "cancelled"),
    }

    async def list_applications(self, query: ListQuery) -> ListResult:
        """Fetch one page of credit applications, newest first as the backend orders them"""
        payload = await self.request("GET", "/admin/credit-applications", params=query.to_params())
        return parse_page(payload)

    async def get_application(self, application_id: str) -> Dict[str, Any]:
        payload = await self.request("GET", f"/admin/credit-applications/{path_segment(application_id)}")
        return parse_record(payload)
