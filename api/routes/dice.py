"""Dice history routes."""

from fastapi import APIRouter, Query

from daggerboard.schemas import DiceRoll, DiceRollsByDate

from ..deps import get_state_manager
from ..models import ClearDiceResponse, SaveDiceRollRequest

router = APIRouter()


@router.post("", response_model=DiceRoll, status_code=201)
def save_roll(request: SaveDiceRollRequest):
    return get_state_manager().save_dice_roll(**request.model_dump())


@router.get("", response_model=list[DiceRoll])
def list_rolls(campaign_id: str | None = None, limit: int | None = Query(default=None, ge=1)):
    """Most recent rolls first."""
    return get_state_manager().get_dice_rolls(campaign_id, limit)


@router.get("/by-date", response_model=list[DiceRollsByDate])
def list_rolls_by_date(campaign_id: str | None = None, limit: int | None = Query(default=None, ge=1)):
    return get_state_manager().get_dice_rolls_by_date(campaign_id, limit)


@router.delete("/{roll_id}", status_code=204)
def delete_roll(roll_id: str):
    get_state_manager().delete_dice_roll(roll_id)


@router.delete("", response_model=ClearDiceResponse)
def clear_history(campaign_id: str | None = None):
    return ClearDiceResponse(removed=get_state_manager().clear_dice_history(campaign_id))
