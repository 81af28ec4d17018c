from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status values as stored by the attendance service."""

    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    HALF_DAY = "Half Day"
    ON_LEAVE = "On Leave"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PROCESSED = "Processed"
    PAID = "Paid"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "Bank Transfer"
    CASH = "Cash"
    CHECK = "Check"
    OTHER = "Other"


class CalculationMode(str, Enum):
    """Where the effective working days of a pay period come from."""

    AUTOMATIC = "Automatic"
    MANUAL = "Manual"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
