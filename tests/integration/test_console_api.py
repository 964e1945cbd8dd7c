"""Integration tests for the console shell endpoints"""

import pytest
from fastapi.testclient import TestClient

from underwriter_console.core.console import Console
from underwriter_console.domain.models import ViewState
from underwriter_console.mock_backend.server import MockData

pytestmark = pytest.mark.integration


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "console_backend_requests_total" in response.text


def test_request_id_is_echoed(client: TestClient):
    """Test X-Request-ID from a proxy is kept"""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


def test_signed_out_pages_redirect_to_login(client: TestClient):
    """Test signed out pages redirect to login"""
    for path in ("/", "/applications", "/bvn", "/selfie", "/audit", "/users/user-001"):
        response = client.get(path)
        assert response.status_code == 302, path
        assert response.headers["location"] == "/login"


def test_login_page_is_public(client: TestClient):
    """Test login route is open to signed-out visitors"""
    assert client.get("/login").json() == {"view": "login"}


def test_login_returns_operator(client: TestClient, password: str):
    """Test POST /login returns the signed-in operator"""
    response = client.post("/login", json={"email": "senior@example.com", "password": password})

    assert response.status_code == 200
    data = response.json()
    assert data["role"] == "SENIOR_UNDERWRITER"
    assert data["display_name"] == "Bola Ade"
    assert data["permissions"] == ["view-applications"]


def test_login_with_wrong_password(client: TestClient):
    """Test login with wrong password"""
    response = client.post("/login", json={"email": "admin@example.com", "password": "not-the-one"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid email or password"
    assert client.get("/").status_code == 302


def test_login_form_validation(client: TestClient):
    """Test login form validation"""
    response = client.post("/login", json={"email": "admin@example.com", "password": "123"})

    assert response.status_code == 422
    assert "at least 6" in response.json()["detail"]


def test_signed_in_operator_is_sent_away_from_login(admin_client: TestClient, password: str):
    """Test signed in operator is sent away from login"""
    assert admin_client.get("/login").headers["location"] == "/"
    response = admin_client.post("/login", json={"email": "admin@example.com", "password": password})
    assert response.status_code == 302


def test_logout(admin_client: TestClient):
    """Test POST /logout"""
    assert admin_client.post("/logout").json() == {"status": "signed_out"}
    assert admin_client.get("/session").status_code == 302
    # Logging out twice is harmless
    assert admin_client.post("/logout").status_code == 200


def test_underwriter_is_denied_audit(underwriter_client: TestClient):
    """Test underwriter is denied audit"""
    response = underwriter_client.get("/audit")

    assert response.status_code == 403
    assert response.json()["view"] == "access_denied"


def test_admin_may_open_audit(admin_client: TestClient):
    """Test admin may open audit"""
    response = admin_client.get("/audit")

    assert response.status_code == 200
    assert response.json()["role"] == "ADMIN"


def test_navigation_follows_role(admin_client: TestClient, client: TestClient, password: str):
    """Test navigation follows role"""
    admin_paths = [item["path"] for item in admin_client.get("/navigation").json()["items"]]
    assert "/audit" in admin_paths

    client.post("/logout")
    client.post("/login", json={"email": "analyst@example.com", "password": password})
    analyst_paths = [item["path"] for item in client.get("/navigation").json()["items"]]
    assert "/audit" not in analyst_paths
    assert "/applications" in analyst_paths


def test_applications_list_paging(underwriter_client: TestClient):
    """Test applications list paging"""
    first = underwriter_client.get("/applications").json()
    assert first["state"] == "ready"
    assert first["total_count"] == 100
    assert first["total_pages"] == 5
    assert first["items"][0]["id"] == "app-100"

    second = underwriter_client.post("/applications/page", json={"page": 2}).json()
    assert second["page"] == 2
    assert second["items"][0]["id"] == "app-080"

    out_of_range = underwriter_client.post("/applications/page", json={"page": 9}).json()
    assert out_of_range["page"] == 2


def test_applications_filter_resets_page(underwriter_client: TestClient):
    """Test applications filter resets page"""
    underwriter_client.get("/applications")
    underwriter_client.post("/applications/page", json={"page": 3})

    data = underwriter_client.post(
        "/applications/filters", json={"name": "bankStatementStatus", "value": "cancelled"}
    ).json()

    assert data["page"] == 1
    assert data["filters"] == {"bankStatementStatus": "cancelled"}
    assert data["total_count"] == 25
    assert all(app["bankStatementStatus"] == "cancelled" for app in data["items"])


def test_applications_search_and_clear(underwriter_client: TestClient):
    """Test applications search and clear"""
    found = underwriter_client.post(
        "/applications/search", json={"term": "0100000042", "field": "accountNumber"}
    ).json()
    assert [app["userId"] for app in found["items"]] == ["user-042"]

    cleared = underwriter_client.delete("/applications/search").json()
    assert cleared["search_term"] == ""
    assert cleared["total_count"] == 100


def test_bad_search_term_is_rejected(underwriter_client: TestClient):
    """Test bad search term is rejected"""
    response = underwriter_client.post("/applications/search", json={"term": "123", "field": "bvn"})

    assert response.status_code == 422
    assert response.json()["detail"] == "BVN must be 11 digits"


def test_page_size_change(underwriter_client: TestClient):
    """Test POST /bvn/page-size with valid and invalid sizes"""
    data = underwriter_client.post("/bvn/page-size", json={"page_size": 10}).json()

    assert data["page_size"] == 10
    assert data["total_pages"] == 3
    assert underwriter_client.post("/bvn/page-size", json={"page_size": 7}).status_code == 422


def test_selfie_list(underwriter_client: TestClient):
    """Test GET /selfie"""
    data = underwriter_client.get("/selfie").json()
    assert data["total_count"] == 12


def test_application_details(underwriter_client: TestClient):
    """Test GET /applications/{id} for found and missing records"""
    found = underwriter_client.get("/applications/app-010").json()
    missing = underwriter_client.get("/applications/app-999").json()

    assert found["state"] == "ready"
    assert found["record"]["userId"] == "user-010"
    assert missing["state"] == "failed"
    assert missing["error"] == "Application not found"


def test_bvn_details(underwriter_client: TestClient):
    """Test GET /bvn/{bvn}"""
    data = underwriter_client.get("/bvn/22200000003").json()
    assert data["record"]["name"] == "Applicant 3"


def test_user_profile_bundle(underwriter_client: TestClient):
    """Test GET and DELETE /users/{user_id}"""
    analysed = underwriter_client.get("/users/user-002").json()
    assert analysed["record"]["loanAnalysis"]["summary"]["totalDecisions"] == 1

    fresh = underwriter_client.get("/users/user-001").json()
    assert fresh["state"] == "ready"
    assert fresh["record"]["loanAnalysis"] is None

    closed = underwriter_client.delete("/users/user-001").json()
    assert closed["state"] == "idle"


def test_approve_decision_refreshes_profile(underwriter_client: TestClient, mock_data: MockData):
    """Test approve decision refreshes profile"""
    underwriter_client.get("/applications")
    underwriter_client.get("/users/user-005")

    response = underwriter_client.post(
        "/users/user-005/decisions", json={"kind": "approve", "credit_limit": "75,000"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["message"] == "Application approved"
    assert data["detail"]["record"]["details"]["userProfile"]["creditLimit"] == 75000
    assert mock_data.users["user-005"]["userProfile"]["status"] == "approved"


def test_invalid_decision_never_reaches_backend(underwriter_client: TestClient, mock_data: MockData):
    """Test invalid decision never reaches backend"""
    response = underwriter_client.post("/users/user-006/decisions", json={"kind": "reject", "reason": "  "})

    assert response.status_code == 422
    data = response.json()
    assert data["ok"] is False
    assert data["detail"]["form_error"] == data["message"]
    assert mock_data.users["user-006"]["userProfile"]["status"] == "pending"


def test_refused_decision_keeps_profile_open(underwriter_client: TestClient):
    """Test refused decision keeps profile open"""
    response = underwriter_client.post(
        "/users/user-007/decisions",
        json={"kind": "review_limit", "direction": "decrease", "new_limit": "100"},
    )

    assert response.status_code == 422
    data = response.json()
    assert data["message"] == "New limit must be below the current limit"
    assert data["detail"]["state"] == "ready"


def test_unknown_decision_kind(underwriter_client: TestClient):
    """Test POST decision with an unknown kind"""
    response = underwriter_client.post("/users/user-007/decisions", json={"kind": "escalate"})
    assert response.status_code == 422


def test_revoked_token_redirects_to_login(underwriter_client: TestClient, mock_data: MockData):
    """Test revoked token redirects to login"""
    mock_data.tokens.clear()

    response = underwriter_client.get("/applications")

    assert response.status_code == 302
    assert response.headers["location"] == "/login"
    # The session is gone for every later request too
    assert underwriter_client.get("/").headers["location"] == "/login"


def test_views_reset_between_operators(underwriter_client: TestClient, password: str):
    """Test views reset between operators"""
    underwriter_client.post("/applications/page-size", json={"page_size": 50})

    underwriter_client.post("/logout")
    underwriter_client.post("/login", json={"email": "analyst@example.com", "password": password})

    assert underwriter_client.get("/applications").json()["page_size"] == 20


def test_approved_filter_keeps_filter_across_pages(underwriter_client: TestClient):
    """Test approved filter keeps filter across pages"""
    first = underwriter_client.get("/applications").json()
    assert (first["page"], first["total_pages"], first["total_count"]) == (1, 5, 100)

    filtered = underwriter_client.post(
        "/applications/filters", json={"name": "creditReportStatus", "value": "approved"}
    ).json()
    assert filtered["page"] == 1
    assert filtered["total_count"] == 34

    second = underwriter_client.post("/applications/page", json={"page": 2}).json()
    assert second["page"] == 2
    assert second["filters"] == {"creditReportStatus": "approved"}
    assert all(app["creditReportStatus"] == "approved" for app in second["items"])


def test_unknown_page_when_signed_out(client: TestClient):
    """Test unknown paths send a signed-out visitor to login"""
    response = client.get("/nowhere")

    assert response.status_code == 302
    assert response.headers["location"] == "/login"


def test_unknown_page_when_signed_in(underwriter_client: TestClient):
    """Test unknown paths send an operator to the dashboard"""
    for path in ("/nowhere", "/users/user-001/history", "/applications/app-001/notes/2"):
        response = underwriter_client.get(path)
        assert response.status_code == 302, path
        assert response.headers["location"] == "/"


def test_known_page_with_trailing_slash(underwriter_client: TestClient):
    """Test a trailing slash lands on the page itself, still guarded"""
    assert underwriter_client.get("/applications/").headers["location"] == "/applications"
    assert underwriter_client.get("/audit/").status_code == 403


def test_numeric_credit_limit_is_accepted(underwriter_client: TestClient, mock_data: MockData):
    """Test POST decision with a JSON number instead of form text"""
    response = underwriter_client.post("/users/user-009/decisions", json={"kind": "approve", "credit_limit": 50000})

    assert response.status_code == 200
    assert response.json()["ok"] is True
    assert mock_data.users["user-009"]["userProfile"]["creditLimit"] == 50000


def test_revoked_token_discards_operator_views(
    underwriter_client: TestClient, console: Console, mock_data: MockData
):
    """Test a forced logout leaves no list or detail state behind"""
    underwriter_client.get("/applications")
    underwriter_client.post("/applications/page", json={"page": 2})
    previous = console.lists["applications"]
    mock_data.tokens.clear()

    assert underwriter_client.get("/users/user-002").status_code == 302

    applications = console.lists["applications"]
    assert applications is not previous
    assert applications.state is ViewState.IDLE
    assert applications.snapshot().error is None
    assert console.details["users"].snapshot().record is None
