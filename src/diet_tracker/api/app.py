"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from diet_tracker.api.models import CsvExportRequest, SaveRequest
from diet_tracker.app_logging import configure_logging
from diet_tracker.config import MISSING_BACKEND_MESSAGE, MissingSettingsError
from diet_tracker.containers import AppContainer
from diet_tracker.domain.nutrients import ProxyResult
from diet_tracker.domain.saves import SaveBinding
from diet_tracker.services.export import CSV_FILENAME, CSV_MEDIA_TYPE, build_csv
from diet_tracker.services.totals import totals_or_none


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(MissingSettingsError)
    async def missing_settings(
        request: Request, exc: MissingSettingsError
    ) -> PlainTextResponse:
        return PlainTextResponse(str(exc), status_code=500)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/supabase-function")
    async def nutrient_totals(request: Request) -> Response:
        """Relay a food list to the aggregation function."""
        state_container: AppContainer = request.app.state.container
        if not state_container.totals_proxy.configured:
            return PlainTextResponse(MISSING_BACKEND_MESSAGE, status_code=500)
        try:
            body = await request.json()
        except ValueError as exc:
            logger.warning("Unreadable totals request body: %s", exc)
            return PlainTextResponse(str(exc), status_code=500)
        result = await state_container.totals_proxy.forward(body)
        return _proxy_response(result)

    @app.get("/api/foods/search")
    async def search_foods(request: Request, q: str = "") -> dict[str, object]:
        """Search the food database by description."""
        state_container: AppContainer = request.app.state.container
        try:
            results = state_container.search_service.search(q)
        except MissingSettingsError:
            raise
        except Exception as exc:
            logger.exception("Food search failed", extra={"query": q})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return {"results": [asdict(item) for item in results]}

    @app.get("/api/foods/{food_id}/conversions")
    async def food_conversions(food_id: str, request: Request) -> dict[str, object]:
        """Return the selectable units for a food."""
        state_container: AppContainer = request.app.state.container
        options = state_container.conversion_resolver.resolve(food_id)
        return {"options": [asdict(option) for option in options]}

    @app.get("/api/saves")
    async def list_saves(
        request: Request, owner_id: str | None = None
    ) -> dict[str, object]:
        """Return the owner's saves."""
        state_container: AppContainer = request.app.state.container
        saves = state_container.save_service.list_saves(owner_id)
        return {"saves": [asdict(save) for save in saves]}

    @app.post("/api/saves")
    async def save_food_list(
        payload: SaveRequest, request: Request
    ) -> dict[str, object]:
        """Persist a food list, creating the save when no id is given."""
        state_container: AppContainer = request.app.state.container
        try:
            binding = state_container.save_service.save(
                SaveBinding(save_id=payload.save_id),
                payload.label,
                payload.owner_id,
                [line.to_domain() for line in payload.lines],
            )
        except MissingSettingsError:
            raise
        except Exception as exc:
            logger.exception("Save failed", extra={"save_id": payload.save_id})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)
            ) from exc
        return {"save_id": binding.save_id}

    @app.get("/api/saves/{save_id}")
    async def load_food_list(save_id: str, request: Request) -> dict[str, object]:
        """Rebuild a saved food list with fresh units."""
        state_container: AppContainer = request.app.state.container
        loaded = state_container.save_service.load(save_id)
        if loaded is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return asdict(loaded)

    @app.post("/api/export/csv")
    async def export_csv(payload: CsvExportRequest) -> Response:
        """Download allow-listed totals and the food list as CSV."""
        csv_text = build_csv(
            totals_or_none(payload.totals),
            [line.to_domain() for line in payload.lines],
        )
        if csv_text is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return Response(
            content=csv_text.encode("utf-8"),
            media_type=CSV_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
        )

    return app


def _proxy_response(result: ProxyResult) -> Response:
    """Translate a relayed upstream reply into an HTTP response."""
    if result.is_json:
        return JSONResponse(result.json_body, status_code=result.status_code)
    headers = {"content-type": result.content_type} if result.content_type else None
    return Response(
        content=result.body or "", status_code=result.status_code, headers=headers
    )
