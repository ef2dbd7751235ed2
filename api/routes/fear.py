"""Fear level routes (always the current campaign)."""

from fastapi import APIRouter

from ..deps import get_state_manager
from ..models import AmountRequest, FearLevelResponse, ValueRequest

router = APIRouter()


@router.get("", response_model=FearLevelResponse)
def get_fear_level():
    return FearLevelResponse(level=get_state_manager().get_fear_level())


@router.post("/adjust", response_model=FearLevelResponse)
def adjust_fear_level(request: AmountRequest):
    return FearLevelResponse(level=get_state_manager().adjust_fear_level(request.amount))


@router.put("", response_model=FearLevelResponse)
def set_fear_level(request: ValueRequest):
    return FearLevelResponse(level=get_state_manager().set_fear_level(request.value))


@router.post("/reset", response_model=FearLevelResponse)
def reset_fear_level():
    return FearLevelResponse(level=get_state_manager().reset_fear_level())
