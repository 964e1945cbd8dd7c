"""User profile, decision and loan analysis API clients"""

from typing import Any, Dict, Optional

from underwriter_console.domain.decisions import Decision, DecisionKind
from underwriter_console.infrastructure.clients.base import ResourceClient, path_segment
from underwriter_console.infrastructure.clients.schemas import parse_record

DECISION_ENDPOINTS = {
    DecisionKind.APPROVE: "/admin/approve-application/{user_id}",
    DecisionKind.REJECT: "/admin/decline-application/{user_id}",
    DecisionKind.REVIEW_LIMIT: "/admin/review-limit/{user_id}",
    DecisionKind.EDIT_NAME: "/admin/update-user-name/{user_id}",
}


class UsersClient(ResourceClient):
    """Client for the user service: complete profiles and underwriting decisions"""

    service_name = "users"

    async def get_complete_details(self, user_id: str) -> Dict[str, Any]:
        """User, profile, selfie attempts, documents, card account and BVN data in one call"""
        payload = await self.request("GET", f"/admin/user-complete-details/{path_segment(user_id)}")
        return parse_record(payload)

    async def submit_decision(self, decision: Decision) -> str:
        """
        Send a validated decision to its endpoint.

        Raises:
            ValidationError: before any network call, on bad form input
            HttpError: when the backend refuses the decision

        Returns:
            The backend's confirmation message
        """
        body = decision.payload()
        path = DECISION_ENDPOINTS[decision.kind].format(user_id=path_segment(decision.target_user_id))
        payload = await self.request("POST", path, json=body)
        message: Optional[str] = payload.get("message") if isinstance(payload, dict) else None
        return message or "Decision recorded"


class LoanAnalysisClient(ResourceClient):
    """Client for the loan-bot service: statements, decisions, bureau report and scores"""

    service_name = "loan_analysis"

    async def get_loan_analysis(self, user_id: str) -> Dict[str, Any]:
        payload = await self.request("GET", f"/admin/users/{path_segment(user_id)}")
        return parse_record(payload)
