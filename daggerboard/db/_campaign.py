"""Campaign mixin: campaign lifecycle, settings and the current-campaign selector.

Split from state_manager.py for maintainability.
"""

import logging

from sqlalchemy.orm import Session as SQLAlchemySession

from .. import schemas
from ..enums import AppStateKey
from ..errors import EntityNotFound, InvalidOperation, ValidationFailed
from . import queries
from .models import AppState, Campaign, new_id

logger = logging.getLogger(__name__)

DEFAULT_CAMPAIGN_NAME = "My Campaign"


def _campaign_not_found(campaign_id: str) -> EntityNotFound:
    return EntityNotFound(f"Campaign {campaign_id}")


class CampaignMixin:
    """Campaign CRUD and scope resolution."""

    # ── Scope helpers (call inside a guarded block) ───────────────────

    @staticmethod
    def _require_campaign_id(db: SQLAlchemySession) -> str:
        campaign_id = queries.current_campaign_id(db)
        if campaign_id is None:
            raise InvalidOperation("No campaign selected")
        return campaign_id

    @classmethod
    def _resolve_campaign_id(cls, db: SQLAlchemySession, campaign_id: str | None) -> str:
        """Explicit campaign id (which must exist) or the current one."""
        if campaign_id is None:
            return cls._require_campaign_id(db)
        if db.get(Campaign, campaign_id) is None:
            raise _campaign_not_found(campaign_id)
        return campaign_id

    @staticmethod
    def _get_campaign_row(db: SQLAlchemySession, campaign_id: str) -> Campaign:
        campaign = db.get(Campaign, campaign_id)
        if campaign is None:
            raise _campaign_not_found(campaign_id)
        return campaign

    @staticmethod
    def _write_selector(db: SQLAlchemySession, campaign_id: str) -> None:
        # Delete-then-insert: a NULL campaign_id never collides in the unique key
        db.query(AppState).filter(
            AppState.key == AppStateKey.CURRENT_CAMPAIGN,
            AppState.campaign_id.is_(None),
        ).delete(synchronize_session=False)
        db.add(AppState(key=AppStateKey.CURRENT_CAMPAIGN.value, campaign_id=None, value=campaign_id))

    # ── Selector ──────────────────────────────────────────────────────

    def get_current_campaign_id(self) -> str | None:
        with self._guard.locked() as db:
            return queries.current_campaign_id(db)

    def require_current_campaign_id(self) -> str:
        """Current campaign id, or InvalidOperation when none is selected."""
        with self._guard.locked() as db:
            return self._require_campaign_id(db)

    def get_current_campaign(self) -> schemas.Campaign | None:
        with self._guard.locked() as db:
            campaign_id = queries.current_campaign_id(db)
            if campaign_id is None:
                return None
            row = db.get(Campaign, campaign_id)
            return schemas.Campaign.model_validate(row) if row else None

    def set_current_campaign(self, campaign_id: str) -> schemas.Campaign:
        """Switch the active campaign and tell every window to refetch."""
        with self._guard.locked() as db:
            row = self._get_campaign_row(db, campaign_id)
            self._write_selector(db, campaign_id)
            campaign = schemas.Campaign.model_validate(row)
            self._broadcaster.current_campaign_changed(db, campaign)
            self._broadcaster.campaign_switched(db, campaign.id)

        logger.info(f"Switched to campaign '{campaign.name}' ({campaign.id})")
        return campaign

    def ensure_campaign_exists(self) -> str:
        """Make sure a valid current campaign exists and return its id.

        Keeps a valid selector untouched. Otherwise selects the most recent
        campaign, or creates "My Campaign" when there are none.
        """
        with self._guard.locked() as db:
            current = queries.current_campaign_id(db)
            if current is not None and db.get(Campaign, current) is not None:
                return current

            if current is not None:
                logger.warning(f"Current campaign {current} no longer exists, reselecting")

            row = db.query(Campaign).order_by(Campaign.created_at.desc(), Campaign.id).first()
            if row is None:
                row = Campaign(id=new_id(), name=DEFAULT_CAMPAIGN_NAME)
                db.add(row)
                db.flush()
                logger.info(f"Created default campaign {row.id}")
                self._broadcaster.campaigns_updated(db)
            self._write_selector(db, row.id)
            campaign = schemas.Campaign.model_validate(row)
            self._broadcaster.current_campaign_changed(db, campaign)

        return campaign.id

    # ── CRUD ──────────────────────────────────────────────────────────

    def create_campaign(self, name: str) -> schemas.Campaign:
        with self._guard.locked() as db:
            row = Campaign(id=new_id(), name=name)
            db.add(row)
            db.flush()
            campaign = schemas.Campaign.model_validate(row)
            self._broadcaster.campaigns_updated(db)

        logger.info(f"Created campaign '{name}' ({campaign.id})")
        return campaign

    def get_campaigns(self) -> list[schemas.Campaign]:
        """All campaigns, newest first."""
        with self._guard.locked() as db:
            return queries.list_campaigns(db)

    def get_campaign(self, campaign_id: str) -> schemas.Campaign:
        with self._guard.locked() as db:
            return schemas.Campaign.model_validate(self._get_campaign_row(db, campaign_id))

    def rename_campaign(self, campaign_id: str, name: str) -> schemas.Campaign:
        with self._guard.locked() as db:
            row = self._get_campaign_row(db, campaign_id)
            row.name = name
            campaign = schemas.Campaign.model_validate(row)
            self._broadcaster.campaigns_updated(db)
            if queries.current_campaign_id(db) == campaign_id:
                self._broadcaster.current_campaign_changed(db, campaign)

        return campaign

    def delete_campaign(self, campaign_id: str) -> None:
        """Delete a campaign and everything it owns.

        The active campaign and the last remaining campaign cannot be deleted.
        """
        with self._guard.locked() as db:
            if queries.current_campaign_id(db) == campaign_id:
                raise ValidationFailed(
                    "Cannot delete the active campaign. Switch to another campaign first."
                )
            if db.query(Campaign).count() <= 1:
                raise ValidationFailed(
                    "Cannot delete the last campaign. There must be at least one campaign."
                )
            row = self._get_campaign_row(db, campaign_id)
            name = row.name
            db.delete(row)
            self._broadcaster.campaigns_updated(db)

        logger.info(f"Deleted campaign '{name}' ({campaign_id})")

    # ── Settings ──────────────────────────────────────────────────────

    def get_campaign_settings(self, campaign_id: str) -> schemas.CampaignSettings:
        with self._guard.locked() as db:
            return schemas.CampaignSettings.model_validate(self._get_campaign_row(db, campaign_id))

    def update_campaign_settings(
        self, campaign_id: str, settings: schemas.CampaignSettings
    ) -> schemas.CampaignSettings:
        with self._guard.locked() as db:
            row = self._get_campaign_row(db, campaign_id)
            row.allow_massive_damage = settings.allow_massive_damage
            updated = schemas.CampaignSettings.model_validate(row)
            self._broadcaster.campaign_settings_updated(db, campaign_id, updated)
            self._broadcaster.campaigns_updated(db)

        return updated
