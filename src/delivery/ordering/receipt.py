"""Order receipt returned to the caller of a successful checkout."""

from datetime import datetime

from pydantic import BaseModel, Field


class OrderReceipt(BaseModel):
    order_id: str
    user_id: str
    restaurant_id: str
    restaurant_name: str
    total: int = Field(ge=0)
    rider_id: str
    remaining_balance: int = Field(ge=0)
    notified: bool
    notification_failure: str | None = None
    placed_at: datetime

    model_config = {"frozen": True}
