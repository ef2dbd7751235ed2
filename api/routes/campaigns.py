"""Campaign routes: lifecycle, current-campaign switch, settings and notes."""

from fastapi import APIRouter

from daggerboard.schemas import Campaign, CampaignNote, CampaignSettings

from ..deps import get_state_manager
from ..models import CreateNoteRequest, NameRequest, SwitchCampaignRequest, UpdateNoteRequest

router = APIRouter()
notes_router = APIRouter()


@router.get("", response_model=list[Campaign])
def list_campaigns():
    """All campaigns, newest first."""
    return get_state_manager().get_campaigns()


@router.post("", response_model=Campaign, status_code=201)
def create_campaign(request: NameRequest):
    return get_state_manager().create_campaign(request.name)


@router.get("/current", response_model=Campaign | None)
def get_current_campaign():
    return get_state_manager().get_current_campaign()


@router.put("/current", response_model=Campaign)
def switch_campaign(request: SwitchCampaignRequest):
    return get_state_manager().set_current_campaign(request.campaign_id)


@router.get("/{campaign_id}", response_model=Campaign)
def get_campaign(campaign_id: str):
    return get_state_manager().get_campaign(campaign_id)


@router.put("/{campaign_id}", response_model=Campaign)
def rename_campaign(campaign_id: str, request: NameRequest):
    return get_state_manager().rename_campaign(campaign_id, request.name)


@router.delete("/{campaign_id}", status_code=204)
def delete_campaign(campaign_id: str):
    get_state_manager().delete_campaign(campaign_id)


@router.get("/{campaign_id}/settings", response_model=CampaignSettings)
def get_settings(campaign_id: str):
    return get_state_manager().get_campaign_settings(campaign_id)


@router.put("/{campaign_id}/settings", response_model=CampaignSettings)
def update_settings(campaign_id: str, settings: CampaignSettings):
    return get_state_manager().update_campaign_settings(campaign_id, settings)


@router.get("/{campaign_id}/notes", response_model=list[CampaignNote])
def list_notes(campaign_id: str):
    return get_state_manager().get_campaign_notes(campaign_id)


@router.post("/{campaign_id}/notes", response_model=CampaignNote, status_code=201)
def create_note(campaign_id: str, request: CreateNoteRequest):
    return get_state_manager().create_note(campaign_id, request.title)


# ── Notes by id ─────────────────────────────────────────────────────

@notes_router.get("/{note_id}", response_model=CampaignNote)
def get_note(note_id: str):
    return get_state_manager().get_note(note_id)


@notes_router.put("/{note_id}", response_model=CampaignNote)
def update_note(note_id: str, request: UpdateNoteRequest):
    return get_state_manager().update_note(note_id, request.title, request.content)


@notes_router.delete("/{note_id}", status_code=204)
def delete_note(note_id: str):
    get_state_manager().delete_note(note_id)
