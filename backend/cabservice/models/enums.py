"""
Closed vocabularies shared by models, schemas and services.

Booking and inquiry lifecycles live here so bucket membership ("active" vs
"archived") and allowed transitions are derived in exactly one place.
"""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class TripType(str, Enum):
    ONE_WAY = "ONE_WAY"
    ROUND_TRIP = "ROUND_TRIP"
    LOCAL = "LOCAL"
    AIRPORT = "AIRPORT"


# Trip types a route supports when it is first created by a pricing upsert
DEFAULT_ROUTE_TRIP_TYPES = [TripType.ONE_WAY.value, TripType.ROUND_TRIP.value]


class UserRole(str, Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class InquiryStatus(str, Enum):
    PENDING = "pending"
    CLOSED = "closed"


BOOKING_TRANSITIONS: dict[BookingStatus, frozenset[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.IN_PROGRESS: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.REJECTED: frozenset(),
}

INQUIRY_TRANSITIONS: dict[InquiryStatus, frozenset[InquiryStatus]] = {
    InquiryStatus.PENDING: frozenset({InquiryStatus.CLOSED}),
    InquiryStatus.CLOSED: frozenset(),
}


def is_archived(status: Enum) -> bool:
    """A booking or inquiry is archived once it can no longer change state."""
    if isinstance(status, BookingStatus):
        return not BOOKING_TRANSITIONS[status]
    if isinstance(status, InquiryStatus):
        return not INQUIRY_TRANSITIONS[status]
    raise TypeError(f"Unsupported status type: {type(status).__name__}")


def statuses_in_bucket(status_type: type[Enum], archived: bool) -> list:
    return [s for s in status_type if is_archived(s) == archived]


def can_transition(current: Enum, target: Enum) -> bool:
    table = BOOKING_TRANSITIONS if isinstance(current, BookingStatus) else INQUIRY_TRANSITIONS
    return target in table[current]


def enum_column(enum_cls: type[Enum], name: str) -> SAEnum:
    """String-backed enum column storing member values, guarded by a CHECK constraint."""
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=20,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )
