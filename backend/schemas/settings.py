from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime


class DaySchedule(BaseModel):
    isOpen: bool = True
    open: str = Field(default="11:00", pattern=r"^\d{2}:\d{2}$")
    close: str = Field(default="22:00", pattern=r"^\d{2}:\d{2}$")


class ClosedDate(BaseModel):
    date: str
    reason: Optional[str] = None


WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def default_schedule() -> Dict[str, DaySchedule]:
    return {day: DaySchedule() for day in WEEKDAYS}


# Full settings record. Saving replaces every field.
class StoreSettingsIn(BaseModel):
    restaurant_name: str = Field(default="Restaurant", min_length=1)
    business_phone: Optional[str] = None
    logo_url: Optional[str] = None
    webhook_url: Optional[str] = None
    is_open: bool = True
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    schedule: Dict[str, DaySchedule] = Field(default_factory=default_schedule)
    closed_dates: List[ClosedDate] = Field(default_factory=list)
    is_delivery_enabled: bool = True
    is_pickup_enabled: bool = True
    vat_enabled: bool = False
    vat_percentage: float = Field(default=0.0, ge=0, le=100)

    @field_validator("schedule", mode="before")
    @classmethod
    def _fill_schedule(cls, v):
        # Rows saved before schedules existed have none
        if not v:
            return default_schedule()
        return {**default_schedule(), **v}

    @field_validator("closed_dates", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return v or []

    @field_validator("vat_percentage", mode="before")
    @classmethod
    def _vat_default(cls, v):
        return 0.0 if v is None else v


# Immutable snapshot handed to readers
class StoreSettingsOut(StoreSettingsIn):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: Optional[int] = None
    updated_at: Optional[datetime] = None


class WebhookTestResult(BaseModel):
    delivered: bool
    status_code: Optional[int] = None
