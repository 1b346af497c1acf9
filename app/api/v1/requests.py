import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Path, Query, status as http_status

from app.clients.erp_api import ErpApiClient, ErpApiError, get_erp_client
from app.core.config import settings
from app.core.feature_flags import features
from app.core.rbac import can_view_labor, is_self_service
from app.core.security import get_current_user
from app.schemas.common import CanonicalStatus, RequestDomain
from app.schemas.request_schema import FlattenedRequestRow, RequestListOut, StatusMapOut
from app.schemas.timeline_schema import TimelineView
from app.services.adapters import MalformedPayloadError, to_snapshot, to_snapshots
from app.services.status_service import flatten_requests, reconcile_status, status_map
from app.services.timeline_loader import TimelineLoader
from app.services.timeline_service import synthesize
from app.utils.labels import label

router = APIRouter(prefix="/requests", tags=["requests"])
logger = logging.getLogger("uvicorn.error")

_PASSTHROUGH_STATUSES = {401, 403, 404}


def _upstream_error(exc: ErpApiError) -> HTTPException:
    code = exc.status if exc.status in _PASSTHROUGH_STATUSES else http_status.HTTP_502_BAD_GATEWAY
    return HTTPException(status_code=code, detail=exc.message)


def _guard_domain(domain: RequestDomain, user: dict) -> None:
    if domain == RequestDomain.labor and not can_view_labor(user["role"]):
        raise HTTPException(status_code=http_status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")


def _own_employee_no(domain: RequestDomain, user: dict) -> Optional[int]:
    # Restrict employees to their own leave and loan requests
    if domain == RequestDomain.labor or not is_self_service(user["role"]):
        return None
    if user.get("employee_no") is None:
        raise HTTPException(status_code=400, detail="No employee profile linked to your account")
    return user["employee_no"]


@router.get("/{domain}/status-map", response_model=StatusMapOut)
async def get_status_map(domain: RequestDomain, current_user=Depends(get_current_user)):
    return {"domain": domain, "mapping": status_map(domain)}


@router.get("/{domain}", response_model=RequestListOut)
async def list_requests(
    domain: RequestDomain,
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=100),
    status: Optional[CanonicalStatus] = Query(None),
    client: ErpApiClient = Depends(get_erp_client),
    current_user=Depends(get_current_user),
):
    """One page of backend requests as flattened rows.

    ``total`` counts backend requests and drives paging. ``status`` only
    filters the rows of the fetched page, so ``row_count`` may be lower than
    ``size`` even when more matching requests exist on other pages.
    """
    _guard_domain(domain, current_user)
    employee_no = _own_employee_no(domain, current_user)
    try:
        result = await client.list_requests(domain, current_user["token"], page, size, employee_no)
        snapshots = to_snapshots(domain, result.content)
    except ErpApiError as exc:
        raise _upstream_error(exc) from exc
    except MalformedPayloadError as exc:
        raise HTTPException(status_code=http_status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    items = flatten_requests(snapshots)
    if status:
        items = [i for i in items if i.status == status]
    return {
        "items": items,
        "total": result.total_elements,
        "row_count": len(items),
        "page": page,
        "size": size,
    }


@router.get("/{domain}/{request_id}", response_model=list[FlattenedRequestRow])
async def get_request(
    domain: RequestDomain,
    request_id: int = Path(..., ge=1),
    client: ErpApiClient = Depends(get_erp_client),
    current_user=Depends(get_current_user),
):
    _guard_domain(domain, current_user)
    try:
        snapshot = to_snapshot(domain, await client.get_request(domain, request_id, current_user["token"]))
    except ErpApiError as exc:
        raise _upstream_error(exc) from exc
    except MalformedPayloadError as exc:
        raise HTTPException(status_code=http_status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    own = _own_employee_no(domain, current_user)
    if own is not None and snapshot.requester_no != own:
        raise HTTPException(status_code=404, detail="Request not found")
    return flatten_requests([snapshot])


@router.get("/{domain}/{request_id}/timeline", response_model=TimelineView)
async def get_timeline(
    domain: RequestDomain,
    request_id: int = Path(..., ge=1),
    locale: Optional[str] = Query(None),
    client: ErpApiClient = Depends(get_erp_client),
    current_user=Depends(get_current_user),
):
    _guard_domain(domain, current_user)
    locale = locale or settings.DEFAULT_LOCALE
    try:
        snapshot = to_snapshot(domain, await client.get_request(domain, request_id, current_user["token"]))
    except ErpApiError as exc:
        raise _upstream_error(exc) from exc
    except MalformedPayloadError as exc:
        raise HTTPException(status_code=http_status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    own = _own_employee_no(domain, current_user)
    if own is not None and snapshot.requester_no != own:
        raise HTTPException(status_code=404, detail="Request not found")

    canonical = reconcile_status(snapshot)
    steps = None
    advisory = None
    loader = TimelineLoader(client)
    if features.detailed and loader.has_history(domain):
        steps = await loader.load(domain, request_id, current_user["token"])
        if steps is None:
            advisory = label("advisory_summary", locale)

    nxt = snapshot.next_approval
    view = synthesize(
        canonical,
        snapshot.request_date,
        snapshot.approval_date,
        steps,
        next_level=nxt.level_no if nxt else None,
        next_level_name=nxt.level_name if nxt else None,
        next_approver_no=nxt.approver_no if nxt else None,
        next_approver_name=nxt.approver_name if nxt else None,
        rejection_reason=snapshot.rejection_reason,
        locale=locale,
    )
    view.advisory = advisory
    return view
