import datetime

from pydantic import BaseModel, Field

from barbershop.application.use_cases.schedule_policy import DateStatus
from barbershop.domain.entities.booking_draft import BookingStep
from barbershop.domain.entities.manage_draft import ManageAction, ManageStep


class ReservationSchema(BaseModel):
    id: str
    date: datetime.date
    time: str
    name: str
    email: str
    phone: str
    created_at: str | None = None
    amount: float | None = None
    payment_type: str | None = None


class DateAvailabilitySchema(BaseModel):
    date: datetime.date
    status: DateStatus
    hours: str
    slots: list[str] = Field(default_factory=list)


class SelectDateRequestSchema(BaseModel):
    date: datetime.date


class SelectTimeRequestSchema(BaseModel):
    time: str


class DetailsRequestSchema(BaseModel):
    name: str = ""
    email: str = ""
    phone: str | None = None


class LookupRequestSchema(BaseModel):
    phone: str = ""


class ChooseRequestSchema(BaseModel):
    reservation_id: str
    action: ManageAction


class BookingFlowResponseSchema(BaseModel):
    flow_id: str
    step: BookingStep
    action: str
    date: datetime.date | None = None
    time: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    slots: list[str] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None
    fields: list[str] = Field(default_factory=list)
    reservation: ReservationSchema | None = None
    calendar: str | None = None
    notified: bool | None = None


class ManageFlowResponseSchema(BaseModel):
    flow_id: str
    step: ManageStep
    action: str
    phone: str | None = None
    reservations: list[ReservationSchema] = Field(default_factory=list)
    selected: ReservationSchema | None = None
    date: datetime.date | None = None
    time: str | None = None
    slots: list[str] = Field(default_factory=list)
    message: str | None = None
    error: str | None = None
    reservation: ReservationSchema | None = None
    calendar: str | None = None
