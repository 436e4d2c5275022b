from __future__ import annotations

import uuid
from collections.abc import Callable
from contextlib import asynccontextmanager

import anyio
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import ValidationError

from app.core.config import settings
from app.core.errors import MenuItemNotFound, MenuItemValidationError, StoreError
from app.core.logging import configure_logging, request_id_ctx
from app.core.sentry import init_sentry
from app.db.memory import InMemoryMenuItemStore
from app.db.menu_items import PostgresMenuItemStore
from app.db.pool import close_pool, create_pool
from app.menu.routes import router as menu_router
from app.menu.service import MenuItemService
from app.menu.store import MenuItemStore
from app.menu.validation import INVALID_PAYLOAD, error_fields
from app.ui.page import render_menu_page

configure_logging(
    settings.log_level, service=settings.app_name, environment=settings.environment
)
logger = structlog.get_logger(__name__)

GENERIC_ERROR = "Something went wrong!"
SAVE_FAILED = "Menu item could not be saved"
NOT_FOUND = "Menu item not found"


def build_store() -> MenuItemStore:
    if settings.store_backend == "memory":
        return InMemoryMenuItemStore()
    pool = create_pool()
    try:
        return PostgresMenuItemStore(pool, auto_create=settings.db_auto_create)
    except StoreError:
        close_pool(pool)
        raise


def create_app(store_factory: Callable[[], MenuItemStore] = build_store) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = store_factory()
        app.state.store = store
        app.state.menu_service = MenuItemService(
            store, skip_falsy_updates=settings.menu_update_skip_falsy
        )
        logger.info("service_started", store=type(store).__name__)
        try:
            yield
        finally:
            store.close()
            logger.info("service_stopped")

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(menu_router)

    @app.middleware("http")
    async def add_request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request_id_token = request_id_ctx.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_ctx.reset(request_id_token)

        response.headers["x-request-id"] = request_id
        return response

    @app.exception_handler(MenuItemValidationError)
    async def menu_validation_handler(request: Request, exc: MenuItemValidationError):
        logger.warning(
            "menu_item_rejected",
            path=request.url.path,
            reason=exc.message,
            invalid_fields=exc.invalid_fields,
        )
        return JSONResponse(status_code=400, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        logger.warning("request_validation_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={
                "message": "Invalid request body",
                "invalidFields": error_fields(exc.errors()),
            },
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        logger.warning("pydantic_validation_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=400,
            content={"message": INVALID_PAYLOAD, "invalidFields": error_fields(exc.errors())},
        )

    @app.exception_handler(MenuItemNotFound)
    async def not_found_handler(request: Request, exc: MenuItemNotFound):
        logger.info("menu_item_not_found", path=request.url.path, item_id=exc.item_id)
        return JSONResponse(status_code=404, content={"message": NOT_FOUND})

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        logger.exception(
            "store_failed",
            path=request.url.path,
            operation=exc.operation,
            exc_info=exc,
        )
        # Failed writes are reported to the caller as rejected saves
        if request.method in ("POST", "PUT"):
            return JSONResponse(status_code=400, content={"message": SAVE_FAILED})
        return JSONResponse(status_code=500, content={"message": GENERIC_ERROR})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": GENERIC_ERROR})

    @app.get("/", response_class=HTMLResponse, include_in_schema=False)
    async def menu_page() -> HTMLResponse:
        return HTMLResponse(render_menu_page("/api"))

    @app.get("/health")
    async def health() -> dict[str, str]:
        logger.info("health_check")
        return {"status": "ok"}

    @app.get("/ready")
    async def ready(request: Request) -> JSONResponse:
        store: MenuItemStore = request.app.state.store
        try:
            with anyio.fail_after(1.5):
                await anyio.to_thread.run_sync(store.ping, abandon_on_cancel=True)
            checks = {"store": {"status": "ok"}}
            status_code = 200
        except Exception as exc:  # noqa: BLE001 - narrow errors not needed for health
            checks = {"store": {"status": "error", "error": str(exc) or type(exc).__name__}}
            status_code = 503

        overall = "ok" if status_code == 200 else "error"
        return JSONResponse(status_code=status_code, content={"status": overall, "checks": checks})

    return app


init_sentry()
app = create_app()


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
