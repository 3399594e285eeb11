"""
Property-based tests with Hypothesis for the recommendation scorer and
the subscription tier policy.
"""

from hypothesis import given, settings, strategies as st

from rest_api.services.domain import score_item, score_items
from rest_api.services.domain.recommendation_service import calorie_score
from shared.config.constants import SubscriptionLimits, SubscriptionTier


FLAGS = ["vegan", "vegetarian", "glutenFree", "dairyFree", "spicy"]
ALLERGENS = ["nuts", "peanuts", "dairy", "gluten", "soy", "shellfish"]

preferences_st = st.dictionaries(st.sampled_from(FLAGS), st.booleans())
allergies_st = st.lists(st.sampled_from(ALLERGENS), unique=True, max_size=3)
calories_st = st.one_of(st.none(), st.integers(min_value=0, max_value=3000))

item_st = st.fixed_dictionaries(
    {},
    optional={
        "dietary_info": st.one_of(st.none(), st.dictionaries(st.sampled_from(FLAGS), st.booleans())),
        "calories": calories_st,
        "allergens": st.one_of(st.none(), st.lists(st.sampled_from(ALLERGENS), unique=True, max_size=3)),
    },
)


class TestScorerProperties:
    """Invariants of score_item / score_items."""

    @given(item=item_st, preferences=preferences_st, allergies=allergies_st, goal=calories_st)
    def test_allergen_hit_is_always_minus_100(self, item, preferences, allergies, goal):
        result = score_item(item, preferences, allergies, goal)
        if set(item.get("allergens") or []) & set(allergies):
            assert result.score == -100
            assert result.match is False

    @given(item=item_st, preferences=preferences_st, goal=calories_st)
    def test_no_dietary_info_scores_zero(self, item, preferences, goal):
        if item.get("dietary_info") is not None:
            return
        result = score_item(item, preferences, [], goal)
        assert result.score == 0
        assert result.match is False

    @given(
        goal=st.integers(min_value=0, max_value=5000),
        a=st.integers(min_value=0, max_value=5000),
        b=st.integers(min_value=0, max_value=5000),
    )
    def test_calorie_score_is_bounded_and_monotonic(self, goal, a, b):
        near, far = sorted([a, b], key=lambda c: abs(goal - c))
        assert 0 <= calorie_score(goal, far) <= calorie_score(goal, near) <= 10

    @settings(max_examples=50)
    @given(
        items=st.lists(item_st, max_size=15),
        preferences=preferences_st,
        allergies=allergies_st,
        goal=calories_st,
    )
    def test_ranking_keeps_every_item_in_score_order(self, items, preferences, allergies, goal):
        preference = {"preferences": preferences, "allergies": allergies, "calorie_goal": goal}
        results = score_items(preference, items)

        assert len(results) == len(items)
        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)


class TestTierPolicyProperties:
    """The tier policy is the single source of limits."""

    @given(tier=st.sampled_from([SubscriptionTier.FREE, SubscriptionTier.PREMIUM]))
    def test_premium_is_never_below_free(self, tier):
        limits = SubscriptionLimits.for_tier(tier)
        free = SubscriptionLimits.for_tier(SubscriptionTier.FREE)
        assert limits.max_restaurants >= free.max_restaurants
        assert limits.max_menu_item_images >= free.max_menu_item_images

    @given(tier=st.text(max_size=10))
    def test_unknown_tiers_get_free_limits(self, tier):
        if tier == SubscriptionTier.PREMIUM:
            return
        assert SubscriptionLimits.for_tier(tier) == SubscriptionLimits.for_tier(SubscriptionTier.FREE)
