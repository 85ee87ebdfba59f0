from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, EmailStr, Field

from app.utils.text import is_valid_phone


class ContactType(str, Enum):
    GENERAL = "general"
    PROPERTY_INQUIRY = "property-inquiry"
    CALLBACK_REQUEST = "callback-request"


class InquiryType(str, Enum):
    VIEWING = "viewing"
    PRICE_INFO = "price-info"
    AVAILABILITY = "availability"


def _check_name(v: str) -> str:
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name is required and must be at least 2 characters")
    return v


def _check_phone(v: str) -> str:
    if not is_valid_phone(v):
        raise ValueError("Please provide a valid phone number")
    return v.strip()


def _check_message(v: str) -> str:
    v = v.strip()
    if len(v) < 10:
        raise ValueError("Message is required and must be at least 10 characters")
    return v


def _strip(v: str) -> Optional[str]:
    return v.strip() or None


def _strip_input(v):
    return v.strip() if isinstance(v, str) else v


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


Name = Annotated[str, AfterValidator(_check_name)]
Email = Annotated[EmailStr, BeforeValidator(_strip_input), AfterValidator(str.lower)]
Phone = Annotated[str, AfterValidator(_check_phone)]
Text = Annotated[str, AfterValidator(_strip)]
OptionalPhone = Annotated[Optional[Phone], BeforeValidator(_blank_to_none)]


class ContactSubmission(BaseModel):
    name: Name
    email: Email
    phone: OptionalPhone = None
    subject: Optional[Text] = Field(None, max_length=200)
    message: Annotated[str, AfterValidator(_check_message)]
    property_id: Optional[int] = None
    type: ContactType = ContactType.GENERAL


class PropertyInquiry(BaseModel):
    name: Name
    email: Email
    phone: OptionalPhone = None
    message: Optional[Text] = None
    property_id: int
    inquiry_type: InquiryType = InquiryType.VIEWING


class CallbackRequest(BaseModel):
    name: Name
    phone: Phone
    preferred_time: Optional[str] = None
    subject: Optional[Text] = None
    property_id: Optional[int] = None


class NewsletterSubscription(BaseModel):
    email: Email
    name: Optional[Text] = None
