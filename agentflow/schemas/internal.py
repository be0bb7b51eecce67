"""Internal (scheduler) endpoint schemas."""

from pydantic import BaseModel


class SpendResetResponse(BaseModel):
    success: bool = True
    daily_reset: int
    monthly_reset: int
