"""Notes mixin: free-form GM notes attached to a campaign.

Split from state_manager.py for maintainability.
"""

import logging

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..errors import EntityNotFound
from . import queries
from .models import CampaignNote, new_id, utcnow

logger = logging.getLogger(__name__)


class NotesMixin:
    """Campaign note CRUD."""

    @staticmethod
    def _get_note_row(db: SQLAlchemySession, note_id: str) -> CampaignNote:
        note = db.get(CampaignNote, note_id)
        if note is None:
            raise EntityNotFound(f"Note {note_id}")
        return note

    def get_campaign_notes(self, campaign_id: str | None = None) -> list[schemas.CampaignNote]:
        """Notes for a campaign, most recently edited first."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            return queries.list_notes(db, campaign_id)

    def get_note(self, note_id: str) -> schemas.CampaignNote:
        with self._guard.locked() as db:
            return schemas.CampaignNote.model_validate(self._get_note_row(db, note_id))

    def create_note(self, campaign_id: str | None = None, title: str | None = None) -> schemas.CampaignNote:
        """Create an empty note."""
        with self._guard.locked() as db:
            campaign_id = self._resolve_campaign_id(db, campaign_id)
            now = utcnow()
            row = CampaignNote(
                id=new_id(),
                campaign_id=campaign_id,
                title=title,
                content="",
                created_at=now,
                updated_at=now,
            )
            db.add(row)
            db.flush()
            note = schemas.CampaignNote.model_validate(row)
            self._broadcaster.note_created(db, note)
            self._broadcaster.notes_updated(db, note.campaign_id)

        return note

    def update_note(self, note_id: str, title: str | None, content: str) -> schemas.CampaignNote:
        with self._guard.locked() as db:
            row = self._get_note_row(db, note_id)
            row.title = title
            row.content = content
            row.updated_at = utcnow()
            note = schemas.CampaignNote.model_validate(row)
            self._broadcaster.note_updated(db, note)
            self._broadcaster.notes_updated(db, note.campaign_id)

        return note

    def delete_note(self, note_id: str) -> None:
        with self._guard.locked() as db:
            row = self._get_note_row(db, note_id)
            campaign_id = row.campaign_id
            db.delete(row)
            self._broadcaster.note_deleted(db, note_id, campaign_id)
            self._broadcaster.notes_updated(db, campaign_id)
