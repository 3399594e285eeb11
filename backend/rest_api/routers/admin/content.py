"""
Landing-page content and advertisement management.

Pricing plans, advertisements, menu examples and testimonials share the
same CRUD shape; contact info is a single row and ad settings are keyed by
position.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    AdSettingsOutput,
    AdSettingsUpdate,
    AdvertisementCreate,
    AdvertisementUpdate,
    ContactInfoUpdate,
    MenuExampleCreate,
    MenuExampleUpdate,
    PricingPlanCreate,
    PricingPlanUpdate,
    TestimonialCreate,
    TestimonialUpdate,
)
from shared.utils.schemas import (
    AdvertisementOutput,
    ContactInfoOutput,
    MenuExampleOutput,
    PricingPlanOutput,
    TestimonialOutput,
)
from rest_api.routers.admin._base import get_admin_id, require_admin
from rest_api.services.domain import (
    AdSettingsService,
    AdvertisementService,
    ContactInfoService,
    MenuExampleService,
    PricingPlanService,
    TestimonialService,
)


router = APIRouter(tags=["admin-content"])


# =============================================================================
# Pricing Plans
# =============================================================================


@router.get("/pricing", response_model=list[PricingPlanOutput])
def list_pricing_plans(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    """All plans, including inactive ones."""
    return PricingPlanService(db).list_all()


@router.post("/pricing", response_model=PricingPlanOutput, status_code=status.HTTP_201_CREATED)
def create_pricing_plan(
    body: PricingPlanCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return PricingPlanService(db).create(body.model_dump(), admin_id=get_admin_id(ctx))


@router.patch("/pricing/{plan_id}", response_model=PricingPlanOutput)
def update_pricing_plan(
    plan_id: int,
    body: PricingPlanUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return PricingPlanService(db).update(plan_id, body.model_dump(exclude_unset=True), admin_id=get_admin_id(ctx))


@router.delete("/pricing/{plan_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_pricing_plan(
    plan_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> Response:
    PricingPlanService(db).delete(plan_id, admin_id=get_admin_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Advertisements
# =============================================================================


@router.get("/advertisements", response_model=list[AdvertisementOutput])
def list_advertisements(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    return AdvertisementService(db).list_all()


@router.post("/advertisements", response_model=AdvertisementOutput, status_code=status.HTTP_201_CREATED)
def create_advertisement(
    body: AdvertisementCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    """endDate must not precede startDate (400)."""
    return AdvertisementService(db).create_as_admin(body.model_dump(), get_admin_id(ctx))


@router.patch("/advertisements/{ad_id}", response_model=AdvertisementOutput)
def update_advertisement(
    ad_id: int,
    body: AdvertisementUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return AdvertisementService(db).update(ad_id, body.model_dump(exclude_unset=True), admin_id=get_admin_id(ctx))


@router.delete("/advertisements/{ad_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_advertisement(
    ad_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> Response:
    AdvertisementService(db).delete(ad_id, admin_id=get_admin_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Menu Examples
# =============================================================================


@router.get("/menu-examples", response_model=list[MenuExampleOutput])
def list_menu_examples(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    return MenuExampleService(db).list_all()


@router.post("/menu-examples", response_model=MenuExampleOutput, status_code=status.HTTP_201_CREATED)
def create_menu_example(
    body: MenuExampleCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return MenuExampleService(db).create(body.model_dump(), admin_id=get_admin_id(ctx))


@router.patch("/menu-examples/{example_id}", response_model=MenuExampleOutput)
def update_menu_example(
    example_id: int,
    body: MenuExampleUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return MenuExampleService(db).update(
        example_id, body.model_dump(exclude_unset=True), admin_id=get_admin_id(ctx)
    )


@router.delete("/menu-examples/{example_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_example(
    example_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> Response:
    MenuExampleService(db).delete(example_id, admin_id=get_admin_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Testimonials
# =============================================================================


@router.get("/testimonials", response_model=list[TestimonialOutput])
def list_testimonials(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    return TestimonialService(db).list_all()


@router.post("/testimonials", response_model=TestimonialOutput, status_code=status.HTTP_201_CREATED)
def create_testimonial(
    body: TestimonialCreate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return TestimonialService(db).create(body.model_dump(), admin_id=get_admin_id(ctx))


@router.patch("/testimonials/{testimonial_id}", response_model=TestimonialOutput)
def update_testimonial(
    testimonial_id: int,
    body: TestimonialUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return TestimonialService(db).update(
        testimonial_id, body.model_dump(exclude_unset=True), admin_id=get_admin_id(ctx)
    )


@router.delete("/testimonials/{testimonial_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_testimonial(
    testimonial_id: int,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
) -> Response:
    TestimonialService(db).delete(testimonial_id, admin_id=get_admin_id(ctx))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Contact Info and Ad Settings
# =============================================================================


@router.get("/contact-info", response_model=ContactInfoOutput)
def get_contact_info(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    return ContactInfoService(db).get()


@router.patch("/contact-info", response_model=ContactInfoOutput)
def update_contact_info(
    body: ContactInfoUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    return ContactInfoService(db).update(body.model_dump(exclude_unset=True), admin_id=get_admin_id(ctx))


@router.get("/ad-settings", response_model=list[AdSettingsOutput])
def list_ad_settings(db: Session = Depends(get_db), ctx: dict = Depends(require_admin)):
    return AdSettingsService(db).list_all()


@router.put("/ad-settings", response_model=AdSettingsOutput)
def update_ad_settings(
    body: AdSettingsUpdate,
    db: Session = Depends(get_db),
    ctx: dict = Depends(require_admin),
):
    """Switch a position on or off and tune its frequency."""
    data = body.model_dump(exclude_unset=True, exclude={"position"})
    return AdSettingsService(db).upsert(body.position, data, admin_id=get_admin_id(ctx))
