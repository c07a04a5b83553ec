"""
Scheduling Policy Model.

Typed payloads for the six policy kinds, the embedded recurrence and
time-window shapes, and the stored Policy record.

Payloads are pydantic models joined in a discriminated union on ``kind``,
so a raw dict validates into exactly one variant or fails as a whole.
Field names are snake_case in Python and camelCase on the wire.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    TypeAdapter,
    field_serializer,
    model_validator,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from core.domain import ValidationError


# =============================================================================
# ENUMS
# =============================================================================

class PolicyKind(str, Enum):
    """The closed set of policy kinds."""
    AVAILABILITY = "AVAILABILITY"
    BLOCK = "BLOCK"
    OVERRIDE = "OVERRIDE"
    DURATION = "DURATION"
    APPOINTMENT_TYPE = "APPOINTMENT_TYPE"
    BOOKING_WINDOW = "BOOKING_WINDOW"


class BookingAction(str, Enum):
    """Actions a caller can ask the conflict engine about."""
    BOOK = "book"
    BLOCK = "block"
    RESCHEDULE = "reschedule"


# Labels used when explaining policies to people
KIND_LABELS: Dict[PolicyKind, str] = {
    PolicyKind.AVAILABILITY: "Working Hours",
    PolicyKind.BLOCK: "Blocked Time",
    PolicyKind.OVERRIDE: "Schedule Override",
    PolicyKind.DURATION: "Appointment Duration",
    PolicyKind.APPOINTMENT_TYPE: "Appointment Type",
    PolicyKind.BOOKING_WINDOW: "Booking Window",
}


# =============================================================================
# FIELD TYPES
# =============================================================================

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def whole_number(value: float) -> Union[int, float]:
    """24.0 -> 24; fractional values are left alone."""
    return int(value) if float(value).is_integer() else value


def _require_iso_date(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DATE_RE.match(value):
        raise PydanticCustomError("date_format", "Date must be YYYY-MM-DD")
    return value


CalendarDate = Annotated[date, BeforeValidator(_require_iso_date)]
ClockTime = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]
DayOfWeek = Annotated[int, Field(ge=0, le=6)]
Minutes = Annotated[int, Field(ge=5, le=480)]
BufferMinutes = Annotated[int, Field(ge=0, le=60)]


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TimeWindow(_WireModel):
    """Half-open clock interval [start, end) in zero-padded HH:MM."""
    start: ClockTime
    end: ClockTime

    @model_validator(mode="after")
    def _start_before_end(self) -> "TimeWindow":
        if self.start >= self.end:
            raise PydanticCustomError("time_window_order", "Start time must be before end time")
        return self


class Recurrence(_WireModel):
    """Which calendar dates a recurring policy applies to."""
    type: Literal["daily", "weekly", "biweekly", "monthly", "once"]
    days_of_week: Optional[List[DayOfWeek]] = None
    start_date: CalendarDate
    end_date: Optional[CalendarDate] = None

    @model_validator(mode="after")
    def _weekly_needs_days(self) -> "Recurrence":
        if self.type in ("weekly", "biweekly") and not self.days_of_week:
            raise PydanticCustomError(
                "missing_days_of_week",
                "Weekly/biweekly recurrence must specify daysOfWeek",
            )
        return self


# =============================================================================
# PAYLOAD VARIANTS
# =============================================================================

class AvailabilityData(_WireModel):
    """When the provider is working."""
    kind: Literal["AVAILABILITY"] = "AVAILABILITY"
    recurrence: Recurrence
    time_windows: List[TimeWindow] = Field(min_length=1)


class BlockData(_WireModel):
    """Recurring time the provider is not available (lunch, admin)."""
    kind: Literal["BLOCK"] = "BLOCK"
    recurrence: Recurrence
    time_windows: List[TimeWindow] = Field(min_length=1)
    reason: Optional[str] = None


class OverrideData(_WireModel):
    """One-date exception (vacation, special hours)."""
    kind: Literal["OVERRIDE"] = "OVERRIDE"
    date: CalendarDate
    action: Literal["block", "available"]
    time_windows: List[TimeWindow] = Field(min_length=1)
    reason: Optional[str] = None


class DurationData(_WireModel):
    """Practice-wide appointment length defaults."""
    kind: Literal["DURATION"] = "DURATION"
    default_length: Minutes
    buffer_before: Optional[BufferMinutes] = None
    buffer_after: Optional[BufferMinutes] = None
    max_per_day: Optional[Annotated[int, Field(ge=1, le=100)]] = None


class AppointmentTypeData(_WireModel):
    """Catalog entry for a type of appointment."""
    kind: Literal["APPOINTMENT_TYPE"] = "APPOINTMENT_TYPE"
    type_name: Annotated[str, Field(min_length=1)]
    duration: Minutes
    buffer_before: Optional[BufferMinutes] = None
    buffer_after: Optional[BufferMinutes] = None
    color: Optional[Annotated[str, Field(pattern=r"^#[0-9A-Fa-f]{6}$")]] = None


class BookingWindowData(_WireModel):
    """How far in advance patients may book."""
    kind: Literal["BOOKING_WINDOW"] = "BOOKING_WINDOW"
    min_advance_hours: Annotated[float, Field(ge=0)]
    max_advance_days: Annotated[float, Field(ge=1, le=365)]

    @model_validator(mode="after")
    def _min_fits_in_max(self) -> "BookingWindowData":
        if self.min_advance_hours > self.max_advance_days * 24:
            raise PydanticCustomError(
                "booking_window_order",
                "minAdvanceHours must not exceed maxAdvanceDays * 24",
            )
        return self

    @field_serializer("min_advance_hours", "max_advance_days")
    def _whole_numbers_as_int(self, value: float) -> Union[int, float]:
        return whole_number(value)


PolicyData = Annotated[
    Union[
        AvailabilityData,
        BlockData,
        OverrideData,
        DurationData,
        AppointmentTypeData,
        BookingWindowData,
    ],
    Field(discriminator="kind"),
]

_POLICY_DATA_ADAPTER: TypeAdapter = TypeAdapter(PolicyData)


# =============================================================================
# POLICY RECORD
# =============================================================================

@dataclass
class Policy:
    """A stored scheduling rule for one provider."""
    id: str
    provider_id: str
    kind: PolicyKind
    label: str
    data: PolicyData
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "providerId": self.provider_id,
            "kind": self.kind.value,
            "label": self.label,
            "data": self.data.to_dict(),
            "isActive": self.is_active,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


# =============================================================================
# VALIDATION
# =============================================================================

@dataclass
class ValidationOutcome:
    """Either a typed payload or the list of everything wrong with it."""
    data: Optional[PolicyData] = None
    errors: Optional[List[ValidationError]] = None

    @property
    def success(self) -> bool:
        return not self.errors


def parse_kind(value: Any) -> Optional[PolicyKind]:
    """Return the PolicyKind for a raw value, or None if unrecognized."""
    if isinstance(value, PolicyKind):
        return value
    try:
        return PolicyKind(value)
    except ValueError:
        return None


def validate_policy_data(raw: Any, kind: Optional[PolicyKind] = None) -> ValidationOutcome:
    """
    Validate an untyped payload into one of the six policy variants.

    Args:
        raw: The payload, normally a dict decoded from JSON
        kind: The owning policy's kind. Injected when the payload omits
            the discriminant; a payload naming a different kind is rejected.

    Returns:
        ValidationOutcome holding either the typed payload or the errors
    """
    if not isinstance(raw, dict):
        return ValidationOutcome(errors=[ValidationError("data", "Policy data must be an object")])

    payload = dict(raw)
    if kind is not None:
        declared = payload.get("kind")
        if declared is None:
            payload["kind"] = kind.value
        elif parse_kind(declared) != kind:
            return ValidationOutcome(errors=[
                ValidationError("kind", f"Data kind '{declared}' does not match policy kind '{kind.value}'"),
            ])

    try:
        data = _POLICY_DATA_ADAPTER.validate_python(payload)
    except PydanticValidationError as e:
        return ValidationOutcome(errors=[_to_validation_error(err) for err in e.errors()])
    return ValidationOutcome(data=data)


def _to_validation_error(err: Dict[str, Any]) -> ValidationError:
    loc = [str(part) for part in err.get("loc", ())]
    # The discriminated union prefixes locations with the matched tag
    if loc and parse_kind(loc[0]) is not None:
        loc = loc[1:]
    if err.get("type") in ("union_tag_invalid", "union_tag_not_found"):
        return ValidationError("kind", "Kind must be one of " + ", ".join(k.value for k in PolicyKind), err["type"])
    return ValidationError(".".join(loc) or "data", err.get("msg", "Invalid value"), err.get("type", "invalid"))
