# pta/schemas/enums.py
from decimal import Decimal
from enum import Enum
from typing import Dict, Any


class UserRole(str, Enum):
    PARENT = "parent"
    TEACHER = "teacher"
    TREASURER = "treasurer"
    PRINCIPAL = "principal"
    ADMIN = "admin"
    # Never stored; assigned to callers whose role cannot be resolved
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "UserRole":
        if isinstance(value, cls):
            return value
        try:
            role = cls(str(value).strip().lower())
        except ValueError:
            return cls.UNKNOWN
        return role

    @classmethod
    def assignable(cls) -> set:
        return {role for role in cls if role is not cls.UNKNOWN}


class PaymentMethod(str, Enum):
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    GCASH = "gcash"
    OTHER = "other"


class PaymentCategory(str, Enum):
    MEMBERSHIP = "membership"
    FUNDRAISING = "fundraising"
    DONATION = "donation"
    EVENT = "event"
    SUPPLIES = "supplies"
    UNIFORM = "uniform"
    OTHER = "other"


PAYMENT_CATEGORIES: Dict[PaymentCategory, Dict[str, Any]] = {
    PaymentCategory.MEMBERSHIP: {
        "label": "PTA Membership",
        "description": "Annual PTA membership dues",
        "default_amount": Decimal("250"),
    },
    PaymentCategory.FUNDRAISING: {
        "label": "Fundraising",
        "description": "Fundraising events and activities",
        "default_amount": Decimal("0"),
    },
    PaymentCategory.DONATION: {
        "label": "Donations",
        "description": "General donations to the PTA",
        "default_amount": Decimal("0"),
    },
    PaymentCategory.EVENT: {
        "label": "Event Fees",
        "description": "School event participation fees",
        "default_amount": Decimal("100"),
    },
    PaymentCategory.SUPPLIES: {
        "label": "School Supplies",
        "description": "Contribution for school supplies",
        "default_amount": Decimal("150"),
    },
    PaymentCategory.UNIFORM: {
        "label": "Uniform Fees",
        "description": "School uniform payments",
        "default_amount": Decimal("500"),
    },
    PaymentCategory.OTHER: {
        "label": "Other Income",
        "description": "Other miscellaneous income",
        "default_amount": Decimal("0"),
    },
}
