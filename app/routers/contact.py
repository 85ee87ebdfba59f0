import logging

from fastapi import APIRouter, Depends, Request
from slowapi.util import get_remote_address

from app.dependencies import db_dependency, enforce_rate_limit
from app.schemas.contact import (
    CallbackRequest,
    ContactSubmission,
    NewsletterSubscription,
    PropertyInquiry,
)
from app.services.property_service import PropertyService
from app.utils.responses import success

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/contact",
    tags=["contact"],
    dependencies=[Depends(enforce_rate_limit)],
)

# Submissions are logged only; there is no mail transport or persistence.


@router.post("/submit")
def submit_contact_form(submission: ContactSubmission, request: Request):
    logger.info(
        "Contact form submission from %s: %s",
        get_remote_address(request),
        submission.model_dump(mode="json"),
    )
    return success(message="Thank you for your message. We will get back to you soon!")


@router.post("/property-inquiry")
def submit_property_inquiry(
    inquiry: PropertyInquiry, request: Request, db: db_dependency
):
    property = PropertyService(db).get_property(inquiry.property_id, active_only=True)
    logger.info(
        "Property inquiry from %s for %r (%s, %s): %s",
        get_remote_address(request),
        property.title,
        property.full_address,
        property.price,
        inquiry.model_dump(mode="json"),
    )
    return success(
        message="Your inquiry has been sent to the property agent. They will contact you soon!"
    )


@router.post("/callback-request")
def submit_callback_request(callback: CallbackRequest, request: Request):
    logger.info(
        "Callback request from %s: %s",
        get_remote_address(request),
        callback.model_dump(mode="json"),
    )
    return success(message="Callback request received. We will call you back soon!")


@router.post("/newsletter")
def subscribe_newsletter(subscription: NewsletterSubscription, request: Request):
    logger.info(
        "Newsletter subscription from %s: %s",
        get_remote_address(request),
        subscription.email,
    )
    return success(message="Thank you for subscribing to our newsletter!")
