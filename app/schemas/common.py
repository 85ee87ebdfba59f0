from typing import Optional

from pydantic import BaseModel, ConfigDict


class ImageRef(BaseModel):
    url: str
    alt: Optional[str] = None


class PaginationResponse(BaseModel):
    current_page: int
    items_per_page: int
    total_pages: int
    total: int
    has_next: bool
    has_prev: bool
    next_page: Optional[int] = None
    prev_page: Optional[int] = None


class AgentSummary(BaseModel):
    """Public projection of a User attached to a listing or post."""

    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: str
    display_name: str
    avatar: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)
