from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from storefront.core.config import (AVAILABILITY_CACHE_TTL, LOG_LEVEL,
                                    SESSION_SECRET)
from storefront.core.database import init_db
from storefront.core.errors import StoreError, error_response
from storefront.core.log import configure_logging
from storefront.core.time import SystemClock
from storefront.routers import admin, stores
from storefront.services.availability import AvailabilityResolver


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    init_db()
    yield


app = FastAPI(title="Storefront availability", lifespan=lifespan)
app.add_middleware(
    SessionMiddleware, secret_key=SESSION_SECRET, same_site="lax"
)
app.state.resolver = AvailabilityResolver(SystemClock(), AVAILABILITY_CACHE_TTL)

app.include_router(stores.router)
app.include_router(admin.router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return error_response(exc.message, exc.status_code, exc.code)


HTTP_ERROR_CODES = {401: "unauthorized", 403: "forbidden", 404: "not-found"}


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return error_response("Invalid request", 400, "invalid")
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return error_response(message, 400, "invalid")


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    response = error_response(
        str(exc.detail), exc.status_code, HTTP_ERROR_CODES.get(exc.status_code)
    )
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8000)
