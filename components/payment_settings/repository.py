"""Repository for payment settings."""

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core import config
from components.core.exceptions import ValidationFailed
from components.payment_category.repository import PaymentCategoryRepository
from components.payment_settings.models import PaymentSettings
from components.payment_settings import schemas

logger = logging.getLogger(__name__)


class PaymentSettingsRepository:
    """
    Repository for the payment settings of a single user.

    The ledger has no user accounts, so the user defaults to the
    configured DEFAULT_USER_ID.
    """

    def __init__(self, session: AsyncSession, user_id: Optional[str] = None):
        """Initialize repository with database session."""
        self.session = session
        self.user_id = user_id or config.get_settings().DEFAULT_USER_ID

    async def _get_model(self) -> Optional[PaymentSettings]:
        result = await self.session.execute(
            select(PaymentSettings).where(PaymentSettings.user_id == self.user_id)
        )
        return result.scalar_one_or_none()

    async def get(self) -> schemas.PaymentSettings:
        """Get the stored settings, or the defaults when none were saved."""
        record = await self._get_model()
        if not record:
            return schemas.default_settings()
        return schemas.PaymentSettings.model_validate_json(record.settings_data)

    async def save(self, data: schemas.PaymentSettings) -> schemas.PaymentSettings:
        """Create or replace the settings document."""
        default_category = data.preferences.default_category
        if not await PaymentCategoryRepository(self.session).get_by_name(default_category):
            raise ValidationFailed(f'Payment category "{default_category}" does not exist')

        record = await self._get_model()
        if record:
            record.settings_data = data.model_dump_json()
        else:
            self.session.add(PaymentSettings(user_id=self.user_id, settings_data=data.model_dump_json()))
        await self.session.commit()
        logger.info("Saved payment settings for user %s", self.user_id)
        return data
