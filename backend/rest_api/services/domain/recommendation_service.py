"""
Menu recommendation scoring.

score_items() is a pure function: it ranks a restaurant's items against a
diner's dietary preference without touching the database. The service
class around it only loads the inputs.

Per item:
1. Any allergen of the diner listed on the item: score -100, no match.
2. No dietary info on the item (null, not an empty map): score 0, no match.
3. +10 per preference flag the diner wants (True) that the item has (True).
4. With both a calorie goal and item calories: up to +10, losing one
   point per 100 kcal of distance; a match when within 20% of the goal.

Results are sorted by score, highest first. Ties keep menu order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from sqlalchemy.orm import Session

from rest_api.models import MenuItem
from rest_api.repositories import DietaryPreferenceRepository, MenuItemRepository, RestaurantRepository
from shared.config.constants import RecommendationScore
from shared.config.logging import menu_logger
from shared.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class ScoredItem:
    """One ranked recommendation."""

    item: Any
    score: float
    match: bool


def _field(source: Any, name: str, default: Any = None) -> Any:
    if isinstance(source, Mapping):
        return source.get(name, default)
    return getattr(source, name, default)


def calorie_score(goal: float, calories: float) -> float:
    """Closeness bonus in [0, 10]; 10 on target, 0 at 1000 kcal away or more."""
    distance = abs(goal - calories)
    return RecommendationScore.CALORIE_MAX_BONUS - min(
        RecommendationScore.CALORIE_MAX_BONUS,
        distance / RecommendationScore.CALORIE_STEP,
    )


def score_item(
    item: Any,
    preferences: Mapping[str, bool],
    allergies: Iterable[str],
    calorie_goal: float | None,
) -> ScoredItem:
    """Score a single item. See the module docstring for the rules."""
    item_allergens = _field(item, "allergens") or []
    if any(allergy in item_allergens for allergy in allergies):
        return ScoredItem(item=item, score=RecommendationScore.ALLERGEN_PENALTY, match=False)

    dietary_info = _field(item, "dietary_info")
    if dietary_info is None:
        return ScoredItem(item=item, score=0, match=False)

    score: float = 0
    match = False

    for flag, wanted in preferences.items():
        if wanted is True and dietary_info.get(flag) is True:
            score += RecommendationScore.PREFERENCE_MATCH
            match = True

    calories = _field(item, "calories")
    if calorie_goal is not None and calories is not None:
        score += calorie_score(calorie_goal, calories)
        if abs(calorie_goal - calories) < calorie_goal * RecommendationScore.CALORIE_MATCH_TOLERANCE:
            match = True

    return ScoredItem(item=item, score=score, match=match)


def score_items(preference: Any, items: Sequence[Any]) -> list[ScoredItem]:
    """
    Rank items for a dietary preference.

    Args:
        preference: DietaryPreference row or mapping with preferences,
            allergies and calorie_goal.
        items: MenuItem rows or mappings with allergens, dietary_info
            and calories.

    Returns:
        One ScoredItem per input item, highest score first.
    """
    preferences = _field(preference, "preferences") or {}
    allergies = list(_field(preference, "allergies") or [])
    calorie_goal = _field(preference, "calorie_goal")

    scored = [score_item(item, preferences, allergies, calorie_goal) for item in items]
    # sorted() is stable, equal scores keep menu order
    return sorted(scored, key=lambda s: s.score, reverse=True)


class RecommendationService:
    """Loads a diner's preference and a restaurant's items, then scores them."""

    def __init__(self, db: Session):
        self._db = db
        self._restaurants = RestaurantRepository(db)
        self._items = MenuItemRepository(db)
        self._preferences = DietaryPreferenceRepository(db)

    def recommend(
        self,
        restaurant_id: int,
        *,
        user_id: int | None = None,
        session_id: str | None = None,
    ) -> list[ScoredItem]:
        """
        Raises:
            NotFoundError: Unknown restaurant, or no preference for the caller.
        """
        if not self._restaurants.exists(restaurant_id):
            raise NotFoundError("Restaurant", restaurant_id)

        preference = self._preferences.find_for_caller(user_id, session_id)
        if preference is None:
            raise NotFoundError("Dietary preference", user_id=user_id, session_id=session_id)

        items: Sequence[MenuItem] = self._items.find_by_restaurant(restaurant_id)
        results = score_items(preference, items)

        menu_logger.debug(
            "Recommendations scored",
            restaurant_id=restaurant_id,
            item_count=len(results),
            match_count=sum(1 for r in results if r.match),
        )
        return results
