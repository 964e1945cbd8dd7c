"""Mock backend emulating the auth, credit-application, BVN, selfie, user and loan-bot services.

One app serves every service under ``/api`` so a single base URL (or one
ASGI transport in tests) covers them all. Run it with:

    uvicorn underwriter_console.mock_backend.server:app --port 7007
"""

import math
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse

STAFF = {
    "admin@example.com": {"id": 1, "name": "Ada", "last_name": "Obi", "role": "super_admin"},
    "senior@example.com": {"id": 2, "name": "Bola", "last_name": "Ade", "role": "senior_supervisor"},
    "underwriter@example.com": {"id": 3, "name": "Chidi", "last_name": "Eze", "role": "credit_officer"},
    "analyst@example.com": {"id": 4, "name": "Dayo", "last_name": "Uche", "role": "risk_analyst"},
}
STAFF_PASSWORD = "password123"

CREDIT_REPORT_STATUSES = ("pending", "approved", "not_approved")
BANK_STATEMENT_STATUSES = ("pending", "approved", "not_approved", "cancelled")


class MockData:
    """In-memory records; every app instance gets its own copy"""

    def __init__(self, application_count: int = 100, bvn_count: int = 25, selfie_count: int = 12):
        self.tokens: Dict[str, str] = {}
        self.applications: List[Dict[str, Any]] = [self._application(i) for i in range(application_count, 0, -1)]
        self.users: Dict[str, Dict[str, Any]] = {
            f"user-{i:03d}": self._user(i) for i in range(1, application_count + 1)
        }
        self.bvn_records: List[Dict[str, Any]] = [self._bvn_record(i) for i in range(bvn_count, 0, -1)]
        self.selfies: List[Dict[str, Any]] = [self._selfie(i) for i in range(selfie_count, 0, -1)]

    @staticmethod
    def _application(i: int) -> Dict[str, Any]:
        return {
            "id": f"app-{i:03d}",
            "userId": f"user-{i:03d}",
            "bvn": f"222{i:08d}",
            "accountNumber": f"01{i:08d}",
            "bankCode": "058",
            "accountName": f"Applicant {i}",
            "accountNameMatch": i % 5 != 0,
            "creditReportStatus": CREDIT_REPORT_STATUSES[i % 3],
            "bankStatementStatus": BANK_STATEMENT_STATUSES[i % 4],
            "creditReportLimit": 50000 + i * 1000,
            "createdAt": f"2024-01-01T00:{i // 60:02d}:{i % 60:02d}Z",
            "user": {"firstName": "Applicant", "lastName": str(i), "email": f"user{i}@example.com"},
        }

    @staticmethod
    def _user(i: int) -> Dict[str, Any]:
        return {
            "user": {"id": f"user-{i:03d}", "name": "Applicant", "lastName": str(i), "status": "active"},
            "userProfile": {"userId": f"user-{i:03d}", "bvn": f"222{i:08d}", "creditLimit": 0, "status": "pending"},
            "selfieAttempts": [],
            "documents": [],
            "personalCardAccounts": None,
            "bvnData": {"bvn": f"222{i:08d}", "firstName": "Applicant", "lastName": str(i)},
        }

    @staticmethod
    def _bvn_record(i: int) -> Dict[str, Any]:
        return {
            "bvn": f"222{i:08d}",
            "phoneNumber": f"0803{i:07d}",
            "name": f"Applicant {i}",
            "gender": "Female" if i % 2 else "Male",
            "email": f"user{i}@example.com",
            "maritalStatus": "Single",
        }

    @staticmethod
    def _selfie(i: int) -> Dict[str, Any]:
        return {
            "id": i,
            "userId": f"user-{i:03d}",
            "bvn": f"222{i:08d}",
            "image": f"https://selfies.example.com/{i}.jpg",
            "response": {"bvn": f"222{i:08d}", "confidence": 0.9, "similarity": 0.8 + i / 100},
        }


def paginate(items: List[Dict[str, Any]], page: int, limit: int) -> Dict[str, Any]:
    total = len(items)
    start = (page - 1) * limit
    return {
        "items": items[start:start + limit],
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
    }


def get_data(request: Request) -> MockData:
    return request.app.state.data


def require_token(request: Request, authorization: Optional[str] = Header(None)) -> str:
    """Bearer token issued by /login and not yet revoked"""
    data = get_data(request)
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Unauthenticated")
    token = authorization[len("Bearer "):]
    if token not in data.tokens:
        raise HTTPException(status_code=401, detail="Token is invalid or expired")
    return data.tokens[token]


router = APIRouter(prefix="/api")


@router.post("/login")
async def login(request: Request):
    body = await request.json()
    email = body.get("email", "")
    staff = STAFF.get(email)
    if staff is None or body.get("password") != STAFF_PASSWORD:
        return JSONResponse(status_code=401, content={"success": False, "message": "Invalid email or password"})

    token = f"mock-token-{staff['id']}"
    get_data(request).tokens[token] = email
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": {
            "id": staff["id"],
            "name": staff["name"],
            "last_name": staff["last_name"],
            "full_name": f"{staff['name']} {staff['last_name']}",
            "email": email,
            "roles": [{"id": 1, "name": staff["role"].title(), "slug": staff["role"]}],
            "permissions": [{"id": 1, "name": "View applications", "slug": "view-applications"}],
        },
    }


@router.get("/admin/credit-applications")
def list_applications(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    userId: Optional[str] = None,
    bvn: Optional[str] = None,
    accountNumber: Optional[str] = None,
    creditReportStatus: Optional[str] = None,
    bankStatementStatus: Optional[str] = None,
    _: str = Depends(require_token),
):
    criteria = {
        "userId": userId,
        "bvn": bvn,
        "accountNumber": accountNumber,
        "creditReportStatus": creditReportStatus,
        "bankStatementStatus": bankStatementStatus,
    }
    items = [
        app for app in get_data(request).applications
        if all(value is None or app[key] == value for key, value in criteria.items())
    ]
    result = paginate(items, page, limit)
    return {
        "data": {
            "items": result["items"],
            "meta": {
                "page": result["page"],
                "limit": result["limit"],
                "totalPages": result["totalPages"],
                "total": result["total"],
            },
        },
        "message": "Credit applications retrieved",
    }


@router.get("/admin/credit-applications/{application_id}")
def get_application(application_id: str, request: Request, _: str = Depends(require_token)):
    for app in get_data(request).applications:
        if app["id"] == application_id:
            return {"data": app, "message": "Credit application retrieved"}
    raise HTTPException(status_code=404, detail="Credit application not found")


@router.get("/verifications/bvn/records")
def list_bvn_records(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: Optional[str] = None,
    bvn: Optional[str] = None,
    _: str = Depends(require_token),
):
    items = get_data(request).bvn_records
    if bvn:
        items = [r for r in items if r["bvn"] == bvn]
    if search:
        items = [r for r in items if search.lower() in r["name"].lower()]
    result = paginate(items, page, limit)
    return {
        "message": "BVN records retrieved",
        "status": True,
        "data": result["items"],
        "meta": {
            "currentPage": result["page"],
            "limit": result["limit"],
            "totalRecords": result["total"],
            "totalPages": result["totalPages"],
            "hasNextPage": result["page"] < result["totalPages"],
            "hasPreviousPage": result["page"] > 1,
        },
    }


@router.get("/verifications/bvn/records/{bvn}")
def get_bvn_record(bvn: str, request: Request, _: str = Depends(require_token)):
    for record in get_data(request).bvn_records:
        if record["bvn"] == bvn:
            return {"message": "BVN record retrieved", "status": True, "data": record}
    # This service reports misses in the body
    return {"message": "BVN record not found", "status": False, "data": None}


@router.get("/admin/get-selfies")
def list_selfies(
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    _: str = Depends(require_token),
):
    result = paginate(get_data(request).selfies, page, limit)
    return {
        "data": {
            "items": result["items"],
            "meta": {
                "page": result["page"],
                "limit": result["limit"],
                "totalPages": result["totalPages"],
                "total": result["total"],
            },
        },
        "message": "Selfies retrieved",
    }


def _user_or_404(data: MockData, user_id: str) -> Dict[str, Any]:
    user = data.users.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/admin/user-complete-details/{user_id}")
def user_complete_details(user_id: str, request: Request, _: str = Depends(require_token)):
    return {"data": _user_or_404(get_data(request), user_id), "message": "User details retrieved"}


@router.get("/admin/users/{user_id}")
def loan_analysis(user_id: str, request: Request, _: str = Depends(require_token)):
    user = _user_or_404(get_data(request), user_id)
    index = int(user_id.split("-")[-1])
    # Only every other user has been through the loan bot
    if index % 2:
        raise HTTPException(status_code=404, detail="No loan analysis for user")
    return {
        "data": {
            "userId": user_id,
            "statements": [],
            "decisions": [{"id": f"dec-{index}", "decisionType": "credit_card", "loanBotStatus": "approved"}],
            "creditReport": None,
            "creditScores": [],
            "summary": {
                "totalStatements": 0,
                "totalDecisions": 1,
                "hasCreditReport": False,
                "totalCreditScores": 0,
                "bvn": user["userProfile"]["bvn"],
            },
        },
        "message": "Loan analysis retrieved",
    }


@router.post("/admin/approve-application/{user_id}")
async def approve_application(user_id: str, request: Request, _: str = Depends(require_token)):
    body = await request.json()
    user = _user_or_404(get_data(request), user_id)
    credit_limit = body.get("creditLimit")
    if not isinstance(credit_limit, (int, float)) or credit_limit <= 0:
        return JSONResponse(status_code=400, content={"message": "creditLimit must be a positive number"})
    user["userProfile"].update(creditLimit=credit_limit, status="approved")
    return {"data": user["userProfile"], "message": "Application approved"}


@router.post("/admin/decline-application/{user_id}")
async def decline_application(user_id: str, request: Request, _: str = Depends(require_token)):
    body = await request.json()
    user = _user_or_404(get_data(request), user_id)
    if not body.get("reason"):
        return JSONResponse(status_code=400, content={"message": "reason is required"})
    user["userProfile"].update(status="declined", declineReason=body["reason"])
    return {"data": user["userProfile"], "message": "Application declined"}


@router.post("/admin/review-limit/{user_id}")
async def review_limit(user_id: str, request: Request, _: str = Depends(require_token)):
    body = await request.json()
    user = _user_or_404(get_data(request), user_id)
    if body.get("action") not in ("increase", "decrease"):
        return JSONResponse(status_code=400, content={"message": "action must be increase or decrease"})
    current = user["userProfile"]["creditLimit"]
    new_limit = body.get("newLimit")
    if not isinstance(new_limit, (int, float)) or new_limit <= 0:
        return JSONResponse(status_code=400, content={"message": "newLimit must be a positive number"})
    if body["action"] == "increase" and new_limit <= current:
        return JSONResponse(status_code=400, content={"message": "New limit must be above the current limit"})
    if body["action"] == "decrease" and new_limit >= current:
        return JSONResponse(status_code=400, content={"message": "New limit must be below the current limit"})
    user["userProfile"]["creditLimit"] = new_limit
    return {"data": user["userProfile"], "message": f"Credit limit {body['action']}d"}


@router.post("/admin/update-user-name/{user_id}")
async def update_user_name(user_id: str, request: Request, _: str = Depends(require_token)):
    body = await request.json()
    user = _user_or_404(get_data(request), user_id)
    user["user"].update(name=body.get("firstName"), lastName=body.get("lastName", ""))
    return {"data": user["user"], "message": "Name updated"}


def create_mock_backend(data: Optional[MockData] = None) -> FastAPI:
    app = FastAPI(title="Mock Underwriting Backend", version="1.0.0")
    app.state.data = data or MockData()

    @app.exception_handler(HTTPException)
    async def message_body(request: Request, exc: HTTPException):
        # The real services answer {"message": ...}, not FastAPI's {"detail": ...}
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(router)
    return app


app = create_mock_backend()
