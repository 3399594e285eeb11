"""
Platform Content Services.

Landing-page content (pricing plans, menu examples, testimonials, contact
details) and the advertisements shown on free-tier menus. Public reads
only ever see active rows; the admin console manages everything and every
admin change lands in admin_log.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import AdSettings, Advertisement, ContactInfo, MenuExample, PricingPlan, Testimonial
from rest_api.repositories import (
    AdSettingsRepository,
    AdvertisementRepository,
    ModelRepository,
    RepositoryFilters,
    RestaurantRepository,
)
from rest_api.services.audit import log_admin_action
from rest_api.services.base_service import BaseCRUDService
from rest_api.services.domain.subscription_service import SubscriptionService
from shared.config.constants import AdminAction, AdPosition, Limits, SubscriptionLimits
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.dates import as_utc, utcnow
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.schemas import (
    AdvertisementOutput,
    ContactInfoOutput,
    MenuExampleOutput,
    PricingPlanOutput,
    TestimonialOutput,
)

logger = get_logger(__name__)

ALL_ROWS = RepositoryFilters(limit=Limits.MAX_PAGE_SIZE)
ACTIVE_ROWS = RepositoryFilters(limit=Limits.MAX_PAGE_SIZE, active_only=True)


class _ActiveContentService(BaseCRUDService):
    """CRUD plus the active-only listing the landing page uses."""

    def list_all(self) -> list:
        return [self.to_output(e) for e in self._repo.find_all(ALL_ROWS)]

    def list_active(self) -> list:
        return [self.to_output(e) for e in self._repo.find_all(ACTIVE_ROWS)]

    def get_active(self, entity_id: int):
        """
        Raises:
            NotFoundError: Unknown or inactive row.
        """
        entity = self._repo.find_by_id(entity_id)
        if entity is None or not entity.is_active:
            raise NotFoundError(self._entity_name, entity_id)
        return self.to_output(entity)


class PricingPlanService(_ActiveContentService):
    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=ModelRepository(db, PricingPlan, order_by=PricingPlan.id),
            output_schema=PricingPlanOutput,
            entity_name="Pricing plan",
            audit_entity_type="pricing_plan",
        )


class MenuExampleService(_ActiveContentService):
    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=ModelRepository(db, MenuExample, order_by=MenuExample.display_order),
            output_schema=MenuExampleOutput,
            entity_name="Menu example",
            audit_entity_type="menu_example",
        )


class TestimonialService(_ActiveContentService):
    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=ModelRepository(db, Testimonial, order_by=Testimonial.display_order),
            output_schema=TestimonialOutput,
            entity_name="Testimonial",
            audit_entity_type="testimonial",
        )


class ContactInfoService:
    """The single contact_info row, with configured defaults until one is saved."""

    def __init__(self, db: Session):
        self._db = db
        self._repo = ModelRepository(db, ContactInfo)

    def _current(self) -> ContactInfo | None:
        rows = self._repo.find_all(RepositoryFilters(limit=1))
        return rows[0] if rows else None

    def get(self) -> ContactInfoOutput:
        row = self._current()
        if row is None:
            return ContactInfoOutput(
                address=settings.default_contact_address,
                email=settings.default_contact_email,
                phone=settings.default_contact_phone,
            )
        return ContactInfoOutput.model_validate(row)

    def update(self, data: dict[str, Any], *, admin_id: int) -> ContactInfoOutput:
        """Update the row, creating it from the defaults on first save."""
        row = self._current()
        if row is None:
            defaults = self.get().model_dump()
            row = self._repo.save(ContactInfo(**{**defaults, **data}))
        else:
            for field_name, value in data.items():
                setattr(row, field_name, value)

        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.UPDATE,
            entity_type="contact_info",
            entity_id=row.id,
            details={"changes": data},
        )
        safe_commit(self._db)
        self._db.refresh(row)
        return ContactInfoOutput.model_validate(row)


class AdSettingsService:
    """Per-position ad switches. Missing positions count as enabled."""

    def __init__(self, db: Session):
        self._db = db
        self._repo = AdSettingsRepository(db)

    def list_all(self) -> list[AdSettings]:
        return list(self._repo.find_all(ALL_ROWS))

    def is_enabled(self, position: str) -> bool:
        row = self._repo.find_by_position(position)
        return row is None or row.is_enabled

    def ensure_defaults(self) -> None:
        """Create a settings row for every position that has none."""
        created = False
        for position in AdPosition.ALL:
            if self._repo.find_by_position(position) is None:
                self._repo.save(AdSettings(position=position, is_enabled=True))
                created = True
        if created:
            safe_commit(self._db)

    def upsert(self, position: str, data: dict[str, Any], *, admin_id: int) -> AdSettings:
        """
        Raises:
            ValidationError: Unknown position.
        """
        if position not in AdPosition.ALL:
            raise ValidationError(f"Invalid ad position: {position}", position=position)

        row = self._repo.find_by_position(position)
        if row is None:
            row = self._repo.save(AdSettings(position=position, **data))
        else:
            for field_name, value in data.items():
                setattr(row, field_name, value)

        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=AdminAction.UPDATE,
            entity_type="ad_settings",
            entity_id=row.id,
            details={"position": position, "changes": data},
        )
        safe_commit(self._db)
        self._db.refresh(row)
        return row


class AdvertisementService(BaseCRUDService[Advertisement, AdvertisementOutput]):
    """Admin-managed ads and the ad lookup for public menus."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=AdvertisementRepository(db),
            output_schema=AdvertisementOutput,
            entity_name="Advertisement",
            audit_entity_type="advertisement",
        )
        self._ads: AdvertisementRepository = self._repo
        self._restaurants = RestaurantRepository(db)
        self._ad_settings = AdSettingsService(db)
        self._subscriptions = SubscriptionService(db)

    def list_all(self) -> list[AdvertisementOutput]:
        return [self.to_output(a) for a in self._ads.find_all(ALL_ROWS)]

    def create_as_admin(self, data: dict[str, Any], admin_id: int) -> AdvertisementOutput:
        data["created_by"] = admin_id
        return self.create(data, admin_id=admin_id)

    def _validate_create(self, data: dict[str, Any]) -> None:
        self._check_window(data.get("start_date"), data.get("end_date"))

    def _validate_update(self, entity: Advertisement, data: dict[str, Any]) -> None:
        self._check_window(data.get("start_date", entity.start_date), data.get("end_date", entity.end_date))

    @staticmethod
    def _check_window(start, end) -> None:
        if start is not None and end is not None and as_utc(end) < as_utc(start):
            raise ValidationError("Advertisement end date must be after its start date")

    def find_for_position(self, position: str | None, restaurant_id: int | None = None) -> AdvertisementOutput | None:
        """
        The ad to show in a menu slot, or None.

        None when the restaurant's owner is on a tier without ads, when the
        position is switched off, or when nothing is running. Among running
        ads the newest wins. An unknown restaurant id is ignored.

        Raises:
            ValidationError: Missing or unknown position.
        """
        if not position:
            raise ValidationError("Position parameter is required")
        if position not in AdPosition.ALL:
            raise ValidationError(f"Invalid ad position: {position}", position=position)

        if restaurant_id is not None:
            restaurant = self._restaurants.find_by_id(restaurant_id)
            if restaurant is not None and restaurant.owner is not None:
                tier = self._subscriptions.effective_tier(restaurant.owner)
                if not SubscriptionLimits.for_tier(tier).has_ads:
                    logger.debug("Ad suppressed for premium restaurant", restaurant_id=restaurant_id)
                    return None

        if not self._ad_settings.is_enabled(position):
            return None

        running = self._ads.find_running(position, utcnow())
        return self.to_output(running[0]) if running else None
