"""Review-related Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReviewResponse(BaseModel):
    """Schema for review information returned by the API."""

    review_id: int
    user_id: int | None
    office_id: int
    rating: int
    comment: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
