from typing import Optional

from fastapi.responses import JSONResponse


class StoreError(Exception):
    status_code = 400
    code: Optional[str] = None

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    status_code = 400
    code = "invalid"


class NotFoundError(StoreError):
    status_code = 404
    code = "not-found"

    def __init__(self, store_id: str) -> None:
        super().__init__(f"Store {store_id} not found")
        self.store_id = store_id


class StaleReadWarning(UserWarning):
    def __init__(self, store_id: str, cause: Exception) -> None:
        super().__init__(
            f"Could not persist expired pause for store {store_id}: {cause}"
        )
        self.store_id = store_id
        self.cause = cause


def error_response(
    message: str, status_code: int = 400, code: Optional[str] = None
) -> JSONResponse:
    payload = {"ok": False, "message": message}
    if code:
        payload["code"] = code
    return JSONResponse(payload, status_code=status_code)
