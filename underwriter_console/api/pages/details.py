"""Detail modals and underwriting decisions"""

from fastapi import APIRouter, Depends, Response

from underwriter_console.api.dependencies import get_console, redirect_if_forced, require_route
from underwriter_console.api.pages.schemas import DecisionRequest, DecisionResponse, DetailResponse
from underwriter_console.core.console import Console
from underwriter_console.domain.decisions import decision_from_form

router = APIRouter()


@router.get("/applications/{application_id}", response_model=DetailResponse)
async def application_details(
    application_id: str,
    _=Depends(require_route("application_details")),
    console: Console = Depends(get_console),
):
    snapshot = await console.details["applications"].open(application_id)
    redirect_if_forced(console)
    return DetailResponse.from_snapshot(snapshot)


@router.get("/bvn/{bvn}", response_model=DetailResponse)
async def bvn_details(
    bvn: str,
    _=Depends(require_route("bvn_details")),
    console: Console = Depends(get_console),
):
    snapshot = await console.details["bvn"].open(bvn)
    redirect_if_forced(console)
    return DetailResponse.from_snapshot(snapshot)


@router.get("/users/{user_id}", response_model=DetailResponse)
async def user_profile(
    user_id: str,
    _=Depends(require_route("user_profile")),
    console: Console = Depends(get_console),
):
    """Complete profile plus loan analysis"""
    snapshot = await console.details["users"].open(user_id)
    redirect_if_forced(console)
    return DetailResponse.from_snapshot(snapshot)


@router.delete("/users/{user_id}", response_model=DetailResponse)
def close_user_profile(
    user_id: str,
    _=Depends(require_route("user_profile")),
    console: Console = Depends(get_console),
):
    detail = console.details["users"]
    if detail.record_id == user_id:
        detail.close()
    return DetailResponse.from_snapshot(detail.snapshot())


@router.post("/users/{user_id}/decisions", response_model=DecisionResponse)
async def submit_decision(
    user_id: str,
    body: DecisionRequest,
    response: Response,
    _=Depends(require_route("user_profile")),
    console: Console = Depends(get_console),
):
    """
    Approve, reject, review the limit of, or rename a user.

    Returns 200 when the backend accepted the decision and 422 when it was
    refused locally or by the backend; the profile stays open either way.
    """
    detail = console.details["users"]
    if detail.record_id != user_id:
        await detail.open(user_id)
        redirect_if_forced(console)

    decision = decision_from_form(user_id, body.kind, body.model_dump(exclude={"kind"}))
    result = await detail.submit(decision)
    redirect_if_forced(console)

    if not result.ok:
        response.status_code = 422
    return DecisionResponse(
        ok=result.ok,
        message=result.message,
        detail=DetailResponse.from_snapshot(detail.snapshot()),
    )
