"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fitness_coach.api.chat import router as chat_router
from fitness_coach.api.meals import router as meals_router
from fitness_coach.app_logging import configure_logging
from fitness_coach.containers import AppContainer
from fitness_coach.domain.errors import (
    FitnessCoachError,
    InvalidInputError,
    NoFoodItemsError,
    NotFoundError,
    ParseError,
    UpstreamAPIError,
    UpstreamTransportError,
)

HTTP_422_UNPROCESSABLE = 422


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

    app.include_router(meals_router)
    app.include_router(chat_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "invalid_request", str(exc), "INVALID_REQUEST"
        )

    @app.exception_handler(InvalidInputError)
    async def handle_invalid_input(
        request: Request, exc: InvalidInputError
    ) -> JSONResponse:
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "invalid_input", str(exc), "INVALID_INPUT"
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return _error_response(
            status.HTTP_404_NOT_FOUND, "not_found", str(exc), "NOT_FOUND"
        )

    @app.exception_handler(NoFoodItemsError)
    async def handle_no_food_items(
        request: Request, exc: NoFoodItemsError
    ) -> JSONResponse:
        return _error_response(
            HTTP_422_UNPROCESSABLE,
            "no_food_items",
            "could not extract any food items",
            "NO_FOOD_ITEMS",
        )

    @app.exception_handler(ParseError)
    async def handle_parse_error(request: Request, exc: ParseError) -> JSONResponse:
        return _error_response(
            HTTP_422_UNPROCESSABLE, "parse_failed", str(exc), "PARSE_FAILED"
        )

    @app.exception_handler(UpstreamTransportError)
    @app.exception_handler(UpstreamAPIError)
    async def handle_upstream_error(
        request: Request, exc: FitnessCoachError
    ) -> JSONResponse:
        logger.exception("Upstream model call failed", exc_info=exc)
        return _error_response(
            status.HTTP_502_BAD_GATEWAY, "upstream_error", str(exc), "UPSTREAM_ERROR"
        )

    @app.exception_handler(FitnessCoachError)
    async def handle_coach_error(
        request: Request, exc: FitnessCoachError
    ) -> JSONResponse:
        logger.exception("Request failed", exc_info=exc)
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", str(exc), "INTERNAL"
        )

    return app


def _error_response(
    status_code: int, error: str, message: str, code: str
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "code": code},
    )
