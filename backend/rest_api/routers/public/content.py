"""
Public landing-page content - no authentication required.
Only active rows are visible here; the admin console manages the rest.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    AdvertisementOutput,
    ContactInfoOutput,
    MenuExampleOutput,
    PricingPlanOutput,
    TestimonialOutput,
)
from rest_api.services.domain import (
    AdvertisementService,
    ContactInfoService,
    MenuExampleService,
    PricingPlanService,
    TestimonialService,
)


router = APIRouter(prefix="/api", tags=["public"])


@router.get("/pricing", response_model=list[PricingPlanOutput])
def list_pricing_plans(db: Session = Depends(get_db)):
    return PricingPlanService(db).list_active()


@router.get("/pricing/{plan_id}", response_model=PricingPlanOutput)
def get_pricing_plan(plan_id: int, db: Session = Depends(get_db)):
    return PricingPlanService(db).get_active(plan_id)


@router.get("/contact-info", response_model=ContactInfoOutput)
def get_contact_info(db: Session = Depends(get_db)):
    """Saved contact details, or the configured defaults."""
    return ContactInfoService(db).get()


@router.get("/menu-examples", response_model=list[MenuExampleOutput])
def list_menu_examples(db: Session = Depends(get_db)):
    return MenuExampleService(db).list_active()


@router.get("/testimonials", response_model=list[TestimonialOutput])
def list_testimonials(db: Session = Depends(get_db)):
    return TestimonialService(db).list_active()


@router.get("/advertisements", response_model=Optional[AdvertisementOutput])
def get_advertisement(
    position: Optional[str] = None,
    restaurant_id: Optional[int] = Query(default=None, alias="restaurantId"),
    db: Session = Depends(get_db),
):
    """
    One running ad for a menu slot, or null.

    Premium restaurants and disabled positions get null.
    Missing position: 400.
    """
    return AdvertisementService(db).find_for_position(position, restaurant_id)
