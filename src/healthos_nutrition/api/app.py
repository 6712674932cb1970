"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import UUID

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response, status

from healthos_nutrition.api.models import LogFoodRequest, SaveFoodRequest
from healthos_nutrition.app_logging import configure_logging
from healthos_nutrition.containers import AppContainer
from healthos_nutrition.domain.errors import (
    CatalogEntryNotFound,
    StoreError,
    ValidationError,
)


async def require_user_id(x_user_id: str | None = Header(default=None)) -> UUID:
    """Read the caller identity forwarded by the authenticating gateway."""
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    try:
        return UUID(x_user_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED) from exc


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/nutrition/search")
    async def search_nutrition(
        request: Request,
        q: str | None = None,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Search the personal catalog and external nutrition databases."""
        state_container: AppContainer = request.app.state.container
        try:
            envelope = await state_container.resolution_aggregator.resolve(user_id, q)
        except ValidationError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except StoreError as exc:
            logger.exception("Nutrition search failed for user %s", user_id)
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Failed to search nutrition database",
            ) from exc
        return envelope.to_dict()

    @app.post("/nutrition/save")
    async def save_food(
        body: SaveFoodRequest,
        request: Request,
        response: Response,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Save a food into the personal catalog, reusing known external foods."""
        state_container: AppContainer = request.app.state.container
        try:
            entry, created = state_container.catalog_service.save(
                user_id, body.to_entry()
            )
        except ValidationError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except StoreError as exc:
            logger.exception("Catalog save failed for user %s", user_id)
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Failed to save food to catalog",
            ) from exc
        response.status_code = (
            status.HTTP_201_CREATED if created else status.HTTP_200_OK
        )
        return {"data": entry.to_dict()}

    @app.post("/nutrition/log", status_code=status.HTTP_201_CREATED)
    async def log_food(
        body: LogFoodRequest,
        request: Request,
        user_id: UUID = Depends(require_user_id),
    ) -> dict[str, object]:
        """Log a portion of a catalog food with its nutrition snapshot."""
        state_container: AppContainer = request.app.state.container
        try:
            entry = state_container.food_log_service.log_food(
                user_id=user_id,
                food_catalog_id=body.food_catalog_id,
                portion_g=body.portion_g,
                meal_type=body.meal_type,
                notes=body.notes,
                logged_at=body.logged_at,
            )
        except CatalogEntryNotFound as exc:
            raise HTTPException(
                status.HTTP_404_NOT_FOUND, "Food not found in catalog"
            ) from exc
        except ValidationError as exc:
            raise HTTPException(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
        except StoreError as exc:
            logger.exception("Food log failed for user %s", user_id)
            raise HTTPException(
                status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to log food entry"
            ) from exc
        return {"data": entry.to_dict()}

    return app
