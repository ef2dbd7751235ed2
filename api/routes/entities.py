"""Entity routes: NPCs and adversaries."""

from fastapi import APIRouter

from daggerboard.schemas import DamageResult, DamageThresholds, Entity, StressResult

from ..deps import get_state_manager
from ..models import (
    AmountRequest,
    CreateEntityRequest,
    DamageRequest,
    NameRequest,
    ValueRequest,
    VisibilityRequest,
)

router = APIRouter()


@router.get("", response_model=list[Entity])
def list_entities(visible_only: bool = False):
    return get_state_manager().get_entities(visible_only=visible_only)


@router.post("", response_model=Entity, status_code=201)
def create_entity(request: CreateEntityRequest):
    return get_state_manager().create_entity(
        request.name,
        request.hp_max,
        request.thresholds,
        entity_type=request.entity_type,
        stress_max=request.stress_max,
    )


@router.put("/visibility", response_model=list[Entity])
def set_all_visibility(request: VisibilityRequest):
    return get_state_manager().set_all_entities_visibility(request.visible)


@router.get("/{entity_id}", response_model=Entity)
def get_entity(entity_id: str):
    return get_state_manager().get_entity(entity_id)


@router.delete("/{entity_id}", status_code=204)
def delete_entity(entity_id: str):
    get_state_manager().delete_entity(entity_id)


@router.post("/{entity_id}/hp", response_model=Entity)
def update_hp(entity_id: str, request: AmountRequest):
    return get_state_manager().update_entity_hp(entity_id, request.amount)


@router.put("/{entity_id}/hp", response_model=Entity)
def set_hp(entity_id: str, request: ValueRequest):
    return get_state_manager().set_entity_hp(entity_id, request.value)


@router.post("/{entity_id}/damage", response_model=DamageResult)
def apply_damage(entity_id: str, request: DamageRequest):
    return get_state_manager().apply_damage(entity_id, request.damage)


@router.post("/{entity_id}/stress", response_model=StressResult)
def adjust_stress(entity_id: str, request: AmountRequest):
    return get_state_manager().adjust_entity_stress(entity_id, request.amount)


@router.put("/{entity_id}/thresholds", response_model=Entity)
def update_thresholds(entity_id: str, thresholds: DamageThresholds):
    return get_state_manager().update_entity_thresholds(entity_id, thresholds)


@router.put("/{entity_id}/name", response_model=Entity)
def update_name(entity_id: str, request: NameRequest):
    return get_state_manager().update_entity_name(entity_id, request.name)


@router.put("/{entity_id}/visibility", response_model=Entity)
def toggle_visibility(entity_id: str, request: VisibilityRequest):
    return get_state_manager().toggle_entity_visibility(entity_id, request.visible)
