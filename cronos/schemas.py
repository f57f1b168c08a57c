# cronos/schemas.py

import uuid
from datetime import datetime, date
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


def new_id() -> str:
    return str(uuid.uuid4())


class Weekday(str, Enum):
    monday = "monday"
    tuesday = "tuesday"
    wednesday = "wednesday"
    thursday = "thursday"
    friday = "friday"
    saturday = "saturday"
    sunday = "sunday"

    @classmethod
    def for_date(cls, day: date) -> "Weekday":
        # date.weekday(): 0 = Monday ... 6 = Sunday, same order as the members
        return list(cls)[day.weekday()]


class Role(str, Enum):
    master_admin = "MASTER_ADMIN"
    company_admin = "EMPRESA_ADMIN"
    client = "CLIENTE"


ADMIN_ROLES = (Role.master_admin, Role.company_admin)


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    on_way = "on_way"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class AppointmentType(str, Enum):
    service = "service"
    block = "block"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"


class PaymentMethod(str, Enum):
    pix = "pix"
    credit_card = "credit_card"
    money = "money"
    debit_card = "debit_card"
    boleto = "boleto"
    transfer = "transfer"


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class TransactionStatus(str, Enum):
    paid = "paid"
    pending = "pending"


class CustomFieldType(str, Enum):
    text = "text"
    textarea = "textarea"
    number = "number"
    email = "email"
    phone = "phone"
    checkbox = "checkbox"
    select = "select"


# --- Availability ---

HHMM_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class TimeRange(BaseModel):
    start: str = Field(pattern=HHMM_PATTERN)
    end: str = Field(pattern=HHMM_PATTERN)
    active: bool = True


class DaySchedule(BaseModel):
    active: bool = True
    interval_minutes: int = Field(default=60, gt=0)
    morning: TimeRange
    afternoon: TimeRange
    night: TimeRange


# Exactly seven entries keyed by Weekday values
WeekAvailability = Dict[str, DaySchedule]


class DayException(BaseModel):
    date: date
    schedule: DaySchedule


class SlotsResponse(BaseModel):
    date: date
    active: bool
    interval_minutes: int
    available_starts: List[str]


# --- Appointments ---

class Appointment(BaseModel):
    id: str = Field(default_factory=new_id)
    client_id: str
    provider_id: Optional[str] = None
    service_id: Optional[str] = None
    title: str = "Atendimento"
    start: datetime
    end: datetime
    status: AppointmentStatus = AppointmentStatus.confirmed
    notes: Optional[str] = None
    type: AppointmentType = AppointmentType.service
    custom_fields: Dict[str, Any] = Field(default_factory=dict)
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[PaymentMethod] = None
    price: Optional[float] = None


class Transaction(BaseModel):
    id: str = Field(default_factory=new_id)
    description: str
    amount: float = Field(ge=0)
    type: TransactionType
    status: TransactionStatus
    date: datetime
    payment_method: Optional[PaymentMethod] = None
    category: Optional[str] = None
    related_appointment_id: Optional[str] = None
    related_event_id: Optional[str] = None
    provider_id: Optional[str] = None


class SaveResult(BaseModel):
    appointment: Appointment
    transaction: Optional[Transaction] = None
    warnings: List[str] = Field(default_factory=list)


# --- Catalog ---

class Client(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    email: str
    phone: str
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)


class Service(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    duration_minutes: int = Field(gt=0)
    price: float = Field(ge=0)
    active: bool = True


class Provider(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    email: Optional[str] = None
    active: bool = True
    avatar: Optional[str] = None


class Event(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str = Field(min_length=1)
    description: Optional[str] = None
    date: datetime
    duration_minutes: int = Field(default=60, gt=0)
    capacity: int = Field(default=20, ge=0)
    meeting_url: Optional[str] = None
    speaker: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)
    attachments: List[str] = Field(default_factory=list)


class CustomField(BaseModel):
    id: str = Field(default_factory=new_id)
    label: str = Field(min_length=1)
    type: CustomFieldType = CustomFieldType.text
    required: bool = False
    options: List[str] = Field(default_factory=list)


# --- Reports ---

class FinancialSummary(BaseModel):
    month: str
    income: float
    expense: float
    pending: float
    balance: float
    by_payment_method: Dict[str, float]
    transactions: List[Transaction]


class DayCount(BaseModel):
    date: date
    count: int


class DashboardStats(BaseModel):
    today_count: int
    total_clients: int
    upcoming: List[Appointment]
    next_days: List[DayCount]


# --- Assistant ---

class ExtractedAppointment(BaseModel):
    title: str
    client_name: Optional[str] = None
    start: datetime
    end: datetime
    notes: Optional[str] = None


class SuggestRequest(BaseModel):
    text: str = Field(min_length=1)
    reference_time: Optional[datetime] = None


class AppointmentDraft(BaseModel):
    """Pre-filled booking form. Not an appointment until a client is picked."""
    client_id: Optional[str] = None
    client_name: Optional[str] = None
    provider_id: Optional[str] = None
    title: str
    start: datetime
    end: datetime
    notes: Optional[str] = None


class SuggestResponse(BaseModel):
    available: bool
    draft: Optional[AppointmentDraft] = None
    extracted: Optional[ExtractedAppointment] = None


class ReminderResponse(BaseModel):
    appointment_id: str
    message: str


# --- Auth ---

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    avatar: Optional[str] = None
