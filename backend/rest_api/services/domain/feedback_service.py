"""
Feedback Service.

Diners may leave feedback only on restaurants whose owner is premium.
New feedback starts as pending; the owner or an admin approves or
rejects it.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from rest_api.models import Feedback
from rest_api.repositories import (
    FeedbackFilters,
    FeedbackRepository,
    MenuItemRepository,
    RestaurantRepository,
)
from rest_api.services.audit import log_admin_action
from rest_api.services.base_service import OwnedEntityService
from rest_api.services.domain.restaurant_service import ensure_restaurant_owner
from rest_api.services.domain.subscription_service import SubscriptionService
from shared.config.constants import AdminAction, FeedbackStatus, SubscriptionTier
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import NotFoundError, PremiumRequiredError, ValidationError
from shared.utils.schemas import FeedbackOutput

logger = get_logger(__name__)


class FeedbackService(OwnedEntityService[Feedback, FeedbackOutput]):
    """Service for feedback submission and moderation."""

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            repo=FeedbackRepository(db),
            output_schema=FeedbackOutput,
            entity_name="Feedback",
        )
        self._feedback: FeedbackRepository = self._repo
        self._restaurants = RestaurantRepository(db)
        self._items = MenuItemRepository(db)
        self._subscriptions = SubscriptionService(db)

    def owner_id_of(self, entity: Feedback) -> int:
        return entity.restaurant.user_id

    # =========================================================================
    # Query Methods
    # =========================================================================

    def list_for_owner(self, restaurant_id: int, user_id: int) -> list[FeedbackOutput]:
        """Newest first."""
        restaurant = self._restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)
        ensure_restaurant_owner(restaurant, user_id, "view feedback for this restaurant")
        return [self.to_output(f) for f in self._feedback.find_by_restaurant(restaurant_id)]

    def list_for_admin(self, status: str | None = None, restaurant_id: int | None = None) -> list[FeedbackOutput]:
        """Admin view across every restaurant, newest first."""
        filters = FeedbackFilters(status=status, restaurant_id=restaurant_id)
        return [self.to_output(f) for f in self._feedback.find_all(filters)]

    # =========================================================================
    # Command Methods
    # =========================================================================

    def submit(self, restaurant_id: int, data: dict[str, Any]) -> FeedbackOutput:
        """
        Raises:
            NotFoundError: Unknown restaurant or menu item.
            PremiumRequiredError: The restaurant's owner is on the free tier.
            ValidationError: The menu item is on another restaurant's menu.
        """
        restaurant = self._restaurants.find_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError("Restaurant", restaurant_id)

        if self._subscriptions.effective_tier(restaurant.owner) != SubscriptionTier.PREMIUM:
            raise PremiumRequiredError("Customer feedback", restaurant_id=restaurant_id)

        item_id = data.get("menu_item_id")
        if item_id is not None:
            item = self._items.find_by_id(item_id)
            if item is None:
                raise NotFoundError("Menu item", item_id)
            if item.category.restaurant_id != restaurant_id:
                raise ValidationError("Menu item does not belong to this restaurant", menu_item_id=item_id)

        data["restaurant_id"] = restaurant_id
        data["status"] = FeedbackStatus.PENDING
        output = self.create(data)
        logger.info("Feedback submitted", feedback_id=output.id, restaurant_id=restaurant_id, rating=output.rating)
        return output

    def moderate_as_owner(self, feedback_id: int, status: str, user_id: int) -> FeedbackOutput:
        feedback = self.get_owned(feedback_id, user_id, action="moderate this feedback")
        return self._set_status(feedback, status)

    def moderate_as_admin(self, feedback_id: int, status: str, admin_id: int) -> FeedbackOutput:
        feedback = self.get_entity(feedback_id)
        action = AdminAction.APPROVE_FEEDBACK if status == FeedbackStatus.APPROVED else AdminAction.REJECT_FEEDBACK
        log_admin_action(
            self._db,
            admin_id=admin_id,
            action=action,
            entity_type="feedback",
            entity_id=feedback_id,
            details={"previous_status": feedback.status},
        )
        return self._set_status(feedback, status)

    def _set_status(self, feedback: Feedback, status: str) -> FeedbackOutput:
        if status not in FeedbackStatus.ALL:
            raise ValidationError(f"Invalid feedback status: {status}")
        feedback.status = status
        safe_commit(self._db)
        self._db.refresh(feedback)
        logger.info("Feedback moderated", feedback_id=feedback.id, status=status)
        return self.to_output(feedback)
