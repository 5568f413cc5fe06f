# backend/app/schemas/hero_banner_schema.py
from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.product_schema import CamelModel


class HeroBannerResponse(CamelModel):
    id: str
    desktop_image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    is_active: bool = True
    order: int = Field(default=0, validation_alias="sort_order")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
