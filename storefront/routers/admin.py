from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import JSONResponse

from storefront.core.errors import error_response
from storefront.schemas.stores import (BlockRequest, PauseRequest,
                                       ScheduleUpdate, windows_payload)
from storefront.services.auth import login_admin, logout_admin, require_admin
from storefront.services.stores import StoreControl, get_store_control

router = APIRouter()


@router.post("/admin/login")
def admin_login(request: Request, password: str = Form(...)) -> JSONResponse:
    if not login_admin(request, password):
        return error_response(
            "Invalid password", status_code=401, code="unauthorized"
        )
    return JSONResponse({"ok": True})


@router.post("/admin/logout")
def admin_logout(request: Request) -> JSONResponse:
    logout_admin(request)
    return JSONResponse({"ok": True})


@router.delete("/api/stores/{store_id}")
def admin_store_delete(
    store_id: str,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    control.delete_store(store_id)
    return JSONResponse({"ok": True, "storeId": store_id})


@router.put("/api/stores/{store_id}/schedule")
def admin_schedule_set(
    store_id: str,
    payload: ScheduleUpdate,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    schedule = control.set_schedule(store_id, windows_payload(payload.schedule))
    return JSONResponse({"storeId": store_id, "schedule": schedule})


@router.post("/api/stores/{store_id}/pause")
def admin_store_pause(
    store_id: str,
    payload: PauseRequest,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    pause = control.pause_store(store_id, payload.minutes, payload.reason)
    return JSONResponse({"storeId": store_id, "pause": pause.to_dict()})


@router.delete("/api/stores/{store_id}/pause")
def admin_store_resume(
    store_id: str,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    pause = control.resume_store_pause(store_id)
    return JSONResponse({"storeId": store_id, "pause": pause.to_dict()})


@router.post("/api/stores/{store_id}/block")
def admin_store_block(
    store_id: str,
    payload: BlockRequest,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    block = control.block_store(
        store_id,
        payload.reason,
        payload.is_financial_block,
        payload.financial_value,
        payload.financial_installments,
    )
    return JSONResponse(
        {"storeId": store_id, "block": block.to_dict(), "isActive": False}
    )


@router.delete("/api/stores/{store_id}/block")
def admin_store_unblock(
    store_id: str,
    request: Request,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    require_admin(request)
    block = control.unblock_store(store_id)
    return JSONResponse(
        {
            "storeId": store_id,
            "block": block.to_dict(),
            "isActive": not block.blocked,
        }
    )
