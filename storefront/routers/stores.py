from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.schemas.stores import StoreCreate, windows_payload
from storefront.services.stores import StoreControl, get_store_control

router = APIRouter(prefix="/api/stores")


@router.get("")
def list_stores(
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    results = control.list_availability()
    return JSONResponse(
        {"ok": True, "stores": [result.to_dict() for result in results]}
    )


@router.post("")
def create_store(
    payload: StoreCreate,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    store = control.create_store(
        payload.name, windows_payload(payload.schedule)
    )
    return JSONResponse(
        {"ok": True, "store": control.describe_store(store.id)},
        status_code=201,
    )


@router.get("/{store_id}")
def store_detail(
    store_id: str,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    return JSONResponse({"ok": True, "store": control.describe_store(store_id)})


@router.get("/{store_id}/availability")
def store_availability(
    store_id: str,
    control: StoreControl = Depends(get_store_control),
) -> JSONResponse:
    return JSONResponse(control.get_availability(store_id).to_dict())
