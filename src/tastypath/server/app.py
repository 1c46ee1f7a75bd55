"""ASGI application for the TastyPath shopping list."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any, Optional
from uuid import uuid4

from fastapi import Body, Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tastypath import __version__, metrics
from tastypath.config import Settings, get_settings
from tastypath.export.pdf import render_shopping_list_pdf
from tastypath.logging_utils import configure_logging as configure_app_logging
from tastypath.models.plan import PlanMetadataUpdate, WeeklyPlan
from tastypath.models.shopping import (
    Category,
    ShoppingListItem,
    ShoppingListPlan,
    ShoppingListSummary,
    ShoppingListView,
)
from tastypath.server import deps
from tastypath.shopping.aggregator import build_shopping_list_plan
from tastypath.shopping.categorizer import categorize
from tastypath.shopping.heuristics import Heuristics
from tastypath.shopping.merger import ItemNotFoundError
from tastypath.shopping.parser import capitalize_first, slugify
from tastypath.shopping.pricing import item_price
from tastypath.shopping.store import ShoppingListStore

logger = logging.getLogger(__name__)

PDF_FILENAME = "lista-compras-tastypath.pdf"


def _json_safe(value: Any) -> Any:
    """Convert non-serializable values into JSON-safe representations."""

    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, (list, tuple)):
        return [_json_safe(entry) for entry in value]
    if isinstance(value, dict):
        return {key: _json_safe(sub_value) for key, sub_value in value.items()}
    return repr(value)


def _configure_logging(settings: Settings) -> None:
    configure_app_logging(settings.log_level, settings.log_format, [settings.api_token])


def create_app() -> FastAPI:
    """Create and configure a FastAPI application instance."""

    settings = get_settings()
    _configure_logging(settings)

    application = FastAPI(title="TastyPath Shopping List", version=__version__)
    logger.debug("Application created with log level %s", settings.log_level)

    if settings.log_requests:
        access_logger = logging.getLogger("tastypath.access")

        @application.middleware("http")
        async def log_request_response(request: Request, call_next):
            """Log request/response details and record request metrics."""

            request_id = request.headers.get("X-Request-ID") or uuid4().hex
            request.state.request_id = request_id
            start = perf_counter()
            method, path = request.method, request.url.path
            try:
                response: Response = await call_next(request)
            except Exception:
                duration_ms = (perf_counter() - start) * 1000
                access_logger.exception(
                    "HTTP %s %s status=500 duration_ms=%.2f",
                    method,
                    path,
                    duration_ms,
                    extra={"request_id": request_id},
                )
                metrics.REQUEST_COUNT.labels(method=method, path=path, status="500").inc()
                metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
                raise

            duration_ms = (perf_counter() - start) * 1000
            response.headers.setdefault("X-Request-ID", request_id)
            access_logger.info(
                "HTTP %s %s status=%s duration_ms=%.2f",
                method,
                path,
                response.status_code,
                duration_ms,
                extra={"request_id": request_id},
            )
            metrics.REQUEST_COUNT.labels(method=method, path=path, status=str(response.status_code)).inc()
            metrics.REQUEST_LATENCY.labels(method=method, path=path).observe(duration_ms / 1000.0)
            return response

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        log_kwargs: dict[str, Any] = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            log_kwargs["extra"] = {"request_id": request_id}
        logger.warning(
            "Validation error on %s %s: %s",
            request.method,
            request.url.path,
            exc.errors(),
            **log_kwargs,
        )
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": _json_safe(exc.errors())},
        )

    @application.exception_handler(ItemNotFoundError)
    async def item_not_found_handler(request: Request, exc: ItemNotFoundError):
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

    @application.post(
        "/plans/shopping-list",
        response_model=ShoppingListPlan,
        summary="Aggregate a weekly plan into a shopping list",
    )
    def plan_shopping_list(
        plan: WeeklyPlan = Body(...),
        merge: bool = Query(default=True),
        preserve_checked: bool = Query(default=False),
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
        heuristics: Heuristics = Depends(deps.get_heuristics),
    ) -> ShoppingListPlan:
        """Aggregate ``plan``; with ``merge`` its items replace the plan's previous contribution."""

        if merge:
            return store.add_plan(plan, preserve_checked=preserve_checked)
        return build_shopping_list_plan(plan, heuristics=heuristics)

    @application.patch(
        "/plans/{plan_id}",
        response_model=list[ShoppingListItem],
        summary="Rename a plan or move its week",
    )
    def plan_update(
        plan_id: str,
        payload: PlanMetadataUpdate = Body(...),
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> list[ShoppingListItem]:
        if not payload.model_dump(exclude_unset=True):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields provided for update")
        return store.update_plan_metadata(plan_id, payload)

    @application.delete(
        "/plans/{plan_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Remove every item a plan contributed",
    )
    def plan_delete(
        plan_id: str,
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> None:
        store.remove_plan(plan_id)

    @application.get(
        "/shopping-list",
        response_model=ShoppingListView,
        summary="List shopping list items, scaled to the weekly budget",
    )
    def shopping_list_view(
        plan_id: Optional[str] = Query(default=None, min_length=1),
        budget: Optional[float] = Query(default=None, gt=0),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> ShoppingListView:
        return store.view(plan_id=plan_id, budget=budget)

    @application.get(
        "/shopping-list/summary",
        response_model=ShoppingListSummary,
        summary="Totals for the shopping list",
    )
    def shopping_list_summary(
        plan_id: Optional[str] = Query(default=None, min_length=1),
        budget: Optional[float] = Query(default=None, gt=0),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> ShoppingListSummary:
        return store.view(plan_id=plan_id, budget=budget).summary

    @application.get("/shopping-list/export.pdf", summary="Export the shopping list as PDF")
    def shopping_list_export(
        plan_id: Optional[str] = Query(default=None, min_length=1),
        budget: Optional[float] = Query(default=None, gt=0),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> Response:
        view = store.view(plan_id=plan_id, budget=budget)
        if not view.items:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Shopping list is empty")
        content = render_shopping_list_pdf(view.items, summary=view.summary)
        headers = {"Content-Disposition": f'attachment; filename="{PDF_FILENAME}"'}
        return Response(content=content, media_type="application/pdf", headers=headers)

    @application.post(
        "/shopping-list",
        response_model=ShoppingListItem,
        status_code=status.HTTP_201_CREATED,
        summary="Add an item by hand",
    )
    def shopping_list_create(
        payload: ShoppingListCreateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
        heuristics: Heuristics = Depends(deps.get_heuristics),
    ) -> ShoppingListItem:
        name = capitalize_first(payload.name.strip())
        item = ShoppingListItem(
            id=f"manual-{slugify(name) or 'item'}-{uuid4().hex[:8]}",
            name=name,
            amount=payload.amount,
            unit=payload.unit,
            category=payload.category or categorize(name),
            price=(
                payload.price
                if payload.price is not None
                else item_price(name, payload.amount, payload.unit, heuristics=heuristics)
            ),
            notes=payload.notes,
        )
        items = store.add_item(item)
        key = (item.name.lower(), item.category)
        return next(entry for entry in items if (entry.name.lower(), entry.category) == key)

    @application.patch(
        "/shopping-list/{item_id}",
        response_model=ShoppingListItem,
        summary="Update a shopping list item",
    )
    def shopping_list_update(
        item_id: str,
        payload: ShoppingListUpdateRequest = Body(...),
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> ShoppingListItem:
        changes = payload.model_dump(exclude_unset=True)
        if not changes:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields provided for update")
        return store.update_item(item_id, **changes)

    @application.post(
        "/shopping-list/clear-checked",
        summary="Remove every checked item",
    )
    def shopping_list_clear_checked(
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> dict[str, int]:
        return {"removed": store.clear_checked()}

    @application.post(
        "/shopping-list/reset",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Reset shopping list",
    )
    def shopping_list_reset(
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> None:
        store.clear_all()

    @application.post(
        "/shopping-list/{item_id}/toggle",
        response_model=ShoppingListItem,
        summary="Check or uncheck an item",
    )
    def shopping_list_toggle(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> ShoppingListItem:
        return store.toggle_item(item_id)

    @application.delete(
        "/shopping-list/{item_id}",
        status_code=status.HTTP_204_NO_CONTENT,
        summary="Delete shopping list item",
    )
    def shopping_list_delete(
        item_id: str,
        auth: None = Depends(deps.require_api_token),
        store: ShoppingListStore = Depends(deps.get_store),
    ) -> None:
        store.remove_item(item_id)

    @application.get("/healthz", include_in_schema=False)
    def healthcheck() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @application.get("/metrics", include_in_schema=False)
    def metrics_endpoint() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    return application


class ShoppingListCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    amount: float = Field(default=1.0, ge=0)
    unit: str = Field(default="", max_length=64)
    category: Optional[Category] = Field(default=None)
    price: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShoppingListUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[float] = Field(default=None, ge=0)
    unit: Optional[str] = Field(default=None, max_length=64)
    category: Optional[Category] = Field(default=None)
    price: Optional[float] = Field(default=None, ge=0)
    is_checked: Optional[bool] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=1000)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


app = create_app()

__all__ = ["app", "create_app"]
