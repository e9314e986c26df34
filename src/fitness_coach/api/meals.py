"""Meal parsing and confirmation endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Depends, Request, status
from fastapi.encoders import jsonable_encoder

from fitness_coach.api.auth import current_user_id
from fitness_coach.api.schemas import (  # noqa: TC001
    ConfirmMealRequest,
    ParseMealRequest,
    ParsePhotoRequest,
)

if TYPE_CHECKING:
    from fitness_coach.containers import AppContainer

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("/parse")
async def parse_meal(
    body: ParseMealRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Parse a free-text meal description."""
    container: AppContainer = request.app.state.container
    parsed = await container.meal_parser.parse_text(
        user_id, body.description, body.meal_type
    )
    return jsonable_encoder(parsed)


@router.post("/parse-photo")
async def parse_meal_photo(
    body: ParsePhotoRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Parse a meal photo available at a public URL."""
    container: AppContainer = request.app.state.container
    parsed = await container.meal_parser.parse_photo(user_id, body.photo_url)
    return jsonable_encoder(parsed)


@router.post("/confirm", status_code=status.HTTP_201_CREATED)
async def confirm_meal(
    body: ConfirmMealRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> dict[str, object]:
    """Persist a parsed meal, applying optional adjustments."""
    container: AppContainer = request.app.state.container
    meal = container.meal_service.confirm_parsed_meal(
        user_id,
        body.parsed_meal.to_domain(),
        body.adjustments.to_domain() if body.adjustments else None,
    )
    return jsonable_encoder(meal)
