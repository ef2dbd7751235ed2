"""Countdown tracker routes."""

from fastapi import APIRouter

from daggerboard.schemas import CountdownTracker

from ..deps import get_state_manager
from ..models import (
    AmountRequest,
    CreateTrackerRequest,
    NameVisibilityRequest,
    TickLabelRequest,
    ValueRequest,
    VisibilityRequest,
)

router = APIRouter()


@router.get("", response_model=list[CountdownTracker])
def list_trackers(visible_only: bool = False):
    return get_state_manager().get_trackers(visible_only=visible_only)


@router.post("", response_model=CountdownTracker, status_code=201)
def create_tracker(request: CreateTrackerRequest):
    return get_state_manager().create_tracker(
        request.name,
        request.max,
        tracker_type=request.tracker_type,
        visible_to_players=request.visible_to_players,
        hide_name_from_players=request.hide_name_from_players,
    )


@router.put("/visibility", response_model=list[CountdownTracker])
def set_all_visibility(request: VisibilityRequest):
    return get_state_manager().set_all_trackers_visibility(request.visible)


@router.get("/{tracker_id}", response_model=CountdownTracker)
def get_tracker(tracker_id: str):
    return get_state_manager().get_tracker(tracker_id)


@router.delete("/{tracker_id}", status_code=204)
def delete_tracker(tracker_id: str):
    get_state_manager().delete_tracker(tracker_id)


@router.post("/{tracker_id}/adjust", response_model=CountdownTracker)
def update_value(tracker_id: str, request: AmountRequest):
    return get_state_manager().update_tracker_value(tracker_id, request.amount)


@router.put("/{tracker_id}/value", response_model=CountdownTracker)
def set_value(tracker_id: str, request: ValueRequest):
    return get_state_manager().set_tracker_value(tracker_id, request.value)


@router.put("/{tracker_id}/visibility", response_model=CountdownTracker)
def toggle_visibility(tracker_id: str, request: VisibilityRequest):
    return get_state_manager().toggle_tracker_visibility(tracker_id, request.visible)


@router.put("/{tracker_id}/name-visibility", response_model=CountdownTracker)
def toggle_name_visibility(tracker_id: str, request: NameVisibilityRequest):
    return get_state_manager().toggle_tracker_name_visibility(tracker_id, request.hide_name)


@router.put("/{tracker_id}/ticks/{tick}", response_model=CountdownTracker)
def set_tick_label(tracker_id: str, tick: int, request: TickLabelRequest):
    return get_state_manager().set_tick_label(tracker_id, tick, request.label)


@router.delete("/{tracker_id}/ticks/{tick}", response_model=CountdownTracker)
def remove_tick_label(tracker_id: str, tick: int):
    return get_state_manager().remove_tick_label(tracker_id, tick)
