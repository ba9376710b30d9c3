# premium_engine/risk/profile.py
"""
Customer risk profile.

A profile is the customer's self-reported attributes grouped as:
- demographic: age, occupation, employment status, income
- health     : smoker, chronic illness, BMI, health status
- lifestyle  : dangerous hobbies, hobbies, exercise frequency
- financial  : credit score, debt, savings, bankruptcy history
- geographic : country, city, risk zone

Every attribute is optional. Missing values are neutral for pricing; values
outside their domain are rejected with InvalidInput.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar

from premium_engine.errors import InvalidInput


class RiskCategory(str, Enum):
    PERSONAL = "personal"
    HEALTH = "health"
    FINANCIAL = "financial"
    LIFESTYLE = "lifestyle"
    GEOGRAPHIC = "geographic"


class Occupation(str, Enum):
    PROFESSIONAL = "professional"
    ADMINISTRATIVE = "administrative"
    MANUAL = "manual"
    HAZARDOUS = "hazardous"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    TECHNOLOGY = "technology"
    FINANCE = "finance"
    UNEMPLOYED = "unemployed"


class EmploymentStatus(str, Enum):
    EMPLOYED = "employed"
    SELF_EMPLOYED = "self-employed"
    UNEMPLOYED = "unemployed"
    RETIRED = "retired"
    STUDENT = "student"


class HealthStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"


class ExerciseFrequency(str, Enum):
    NONE = "none"
    OCCASIONAL = "occasional"
    REGULAR = "regular"
    DAILY = "daily"


class RiskZone(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


# Closed numeric domains: (min, max); None = unbounded
NUMERIC_DOMAINS: Dict[str, Tuple[Optional[float], Optional[float]]] = {
    "age": (18, 100),
    "annual_income": (0, None),
    "bmi": (10, 50),
    "credit_score": (300, 850),
    "debt": (0, None),
    "savings": (0, None),
}

ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "occupation": Occupation,
    "employment_status": EmploymentStatus,
    "health_status": HealthStatus,
    "exercise_frequency": ExerciseFrequency,
    "risk_zone": RiskZone,
}

BOOLEAN_FIELDS = (
    "smoker",
    "has_chronic_illness",
    "has_dangerous_hobbies",
    "has_bankruptcy_history",
)

# Fields the portal requires before a profile counts as complete
REQUIRED_FOR_COMPLETENESS = ("age", "occupation", "annual_income", "employment_status")

# Portal payload names -> profile fields
_ALIASES = {
    "annualIncome": "annual_income",
    "employmentStatus": "employment_status",
    "hasChronicIllness": "has_chronic_illness",
    "isSmoker": "smoker",
    "healthStatus": "health_status",
    "hasDangerousHobbies": "has_dangerous_hobbies",
    "exerciseFrequency": "exercise_frequency",
    "creditScore": "credit_score",
    "hasBankruptcyHistory": "has_bankruptcy_history",
    "riskZone": "risk_zone",
    "locationRisk": "risk_zone",
}

_YN_MAP = {
    "yes": True,
    "no": False,
    "y": True,
    "n": False,
    "true": True,
    "false": False,
    "1": True,
    "0": False,
}

E = TypeVar("E", bound=Enum)


def _unwrap(val: Any) -> Any:
    # numpy scalars from DataFrame rows
    if hasattr(val, "item") and not isinstance(val, (str, bytes, tuple, list)):
        return val.item()
    return val


def _is_missing(val: Any) -> bool:
    return val is None or (isinstance(val, float) and math.isnan(val))


def _coerce_enum(enum_cls: Type[E], val: Any, name: str) -> Optional[E]:
    if _is_missing(val):
        return None
    if isinstance(val, enum_cls):
        return val
    key = str(val).strip().lower()
    try:
        return enum_cls(key)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidInput(f"{name} must be one of [{allowed}], got: {val!r}", field=name, value=val) from None


def _coerce_number(val: Any, name: str) -> Optional[float]:
    val = _unwrap(val)
    if _is_missing(val):
        return None
    if isinstance(val, bool):
        raise InvalidInput(f"{name} must be numeric, got a boolean", field=name, value=val)
    try:
        num = float(val)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be numeric, got: {val!r}", field=name, value=val) from None
    if math.isnan(num):
        return None
    lo, hi = NUMERIC_DOMAINS[name]
    if (lo is not None and num < lo) or (hi is not None and num > hi):
        raise InvalidInput(f"{name} must be within [{lo}, {hi if hi is not None else 'inf'}], got: {val!r}", field=name, value=val)
    return num


def _coerce_bool(val: Any, name: str) -> bool:
    val = _unwrap(val)
    if _is_missing(val):
        return False
    if isinstance(val, bool):
        return val
    if isinstance(val, (int, float)) and val in (0, 1):
        return bool(val)
    if isinstance(val, str) and val.strip().lower() in _YN_MAP:
        return _YN_MAP[val.strip().lower()]
    raise InvalidInput(f"{name} must be a boolean, got: {val!r}", field=name, value=val)


@dataclass(frozen=True)
class RiskProfile:
    # Demographic
    age: Optional[float] = None
    occupation: Optional[Occupation] = None
    employment_status: Optional[EmploymentStatus] = None
    annual_income: Optional[float] = None

    # Health
    smoker: bool = False
    has_chronic_illness: bool = False
    bmi: Optional[float] = None
    health_status: Optional[HealthStatus] = None

    # Lifestyle
    has_dangerous_hobbies: bool = False
    hobbies: Tuple[str, ...] = field(default_factory=tuple)
    exercise_frequency: Optional[ExerciseFrequency] = None

    # Financial
    credit_score: Optional[float] = None
    debt: Optional[float] = None
    savings: Optional[float] = None
    has_bankruptcy_history: bool = False

    # Geographic
    country: Optional[str] = None
    city: Optional[str] = None
    risk_zone: Optional[RiskZone] = None

    def __post_init__(self) -> None:
        # Normalise in place; the dataclass stays frozen for callers
        for name in NUMERIC_DOMAINS:
            object.__setattr__(self, name, _coerce_number(getattr(self, name), name))
        for name, enum_cls in ENUM_FIELDS.items():
            object.__setattr__(self, name, _coerce_enum(enum_cls, getattr(self, name), name))
        for name in BOOLEAN_FIELDS:
            object.__setattr__(self, name, _coerce_bool(getattr(self, name), name))

        hobbies = self.hobbies
        if _is_missing(hobbies) or hobbies == "":
            hobbies = ()
        elif isinstance(hobbies, str):
            hobbies = tuple(h.strip() for h in hobbies.split(",") if h.strip())
        object.__setattr__(self, "hobbies", tuple(str(h) for h in hobbies))

        for name in ("country", "city"):
            val = getattr(self, name)
            object.__setattr__(self, name, None if _is_missing(val) else str(val).strip() or None)

    @property
    def is_complete(self) -> bool:
        return all(getattr(self, name) is not None for name in REQUIRED_FOR_COMPLETENESS)

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "RiskProfile":
        """
        Build a profile from a loose mapping (API payload, CSV row).

        Accepts portal camelCase names and a nested `location` object.
        Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}

        location = raw.get("location")
        if isinstance(location, Mapping):
            for key in ("country", "city"):
                if key in location:
                    kwargs[key] = location[key]
            zone = location.get("riskZone", location.get("risk_zone"))
            if zone is not None:
                kwargs["risk_zone"] = zone

        for key, val in raw.items():
            name = _ALIASES.get(key, key)
            if name in known:
                kwargs[name] = val

        return cls(**kwargs)
