"""Player character routes."""

from fastapi import APIRouter

from daggerboard.schemas import CreatePlayerCharacter, PlayerCharacter, UpdatePlayerCharacter

from ..deps import get_state_manager
from ..models import AmountRequest

router = APIRouter()


@router.get("", response_model=list[PlayerCharacter])
def list_characters(campaign_id: str | None = None):
    return get_state_manager().get_player_characters(campaign_id)


@router.post("", response_model=PlayerCharacter, status_code=201)
def create_character(data: CreatePlayerCharacter, campaign_id: str | None = None):
    return get_state_manager().create_player_character(data, campaign_id)


@router.get("/{character_id}", response_model=PlayerCharacter)
def get_character(character_id: str):
    return get_state_manager().get_player_character(character_id)


@router.patch("/{character_id}", response_model=PlayerCharacter)
def update_character(character_id: str, data: UpdatePlayerCharacter):
    """Apply only the fields present in the body."""
    return get_state_manager().update_player_character(character_id, data)


@router.delete("/{character_id}", status_code=204)
def delete_character(character_id: str):
    get_state_manager().delete_player_character(character_id)


@router.post("/{character_id}/hp", response_model=PlayerCharacter)
def adjust_hp(character_id: str, request: AmountRequest):
    return get_state_manager().adjust_player_hp(character_id, request.amount)


@router.post("/{character_id}/hope", response_model=PlayerCharacter)
def adjust_hope(character_id: str, request: AmountRequest):
    return get_state_manager().adjust_player_hope(character_id, request.amount)


@router.post("/{character_id}/stress", response_model=PlayerCharacter)
def adjust_stress(character_id: str, request: AmountRequest):
    return get_state_manager().adjust_player_stress(character_id, request.amount)


@router.post("/{character_id}/armor", response_model=PlayerCharacter)
def adjust_armor(character_id: str, request: AmountRequest):
    return get_state_manager().adjust_player_armor(character_id, request.amount)
