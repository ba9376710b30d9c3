# premium_engine/risk/catalog.py
"""
Risk factor catalog.

Factors are declarative rows, not code. Each row names the profile attribute
it reads and one of three rule kinds:
- bracket: an interval over a numeric attribute (age, BMI, income, credit
  score); the brackets of one attribute partition its domain, and each
  boundary belongs to exactly one side
- flag   : a boolean attribute that applies only when true (smoker, ...)
- choice : one member of an enum attribute (occupation, risk zone, ...)

Every category also carries a neutral row (multiplier exactly 1.0) which is
returned when nothing else in that category applies.

The catalog is validated when it is built, so a bad table fails at import
time instead of during a live quote.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from premium_engine.errors import CatalogIntegrityError
from premium_engine.risk.profile import (
    BOOLEAN_FIELDS,
    ENUM_FIELDS,
    NUMERIC_DOMAINS,
    HealthStatus,
    Occupation,
    RiskCategory,
    RiskProfile,
    RiskZone,
)


logger = logging.getLogger(__name__)

NEUTRAL_MULTIPLIER = 1.0


@dataclass(frozen=True)
class RiskFactorDefinition:
    category: RiskCategory
    key: str
    multiplier: float
    attribute: Optional[str] = None
    rule: Any = None
    description: str = ""

    @property
    def kind(self) -> str:
        if self.attribute is None:
            return "neutral"
        if isinstance(self.rule, pd.Interval):
            return "bracket"
        if self.rule is True:
            return "flag"
        return "choice"

    def applies_to(self, profile: RiskProfile) -> bool:
        if self.attribute is None:
            return False
        value = getattr(profile, self.attribute, None)
        if value is None:
            return False
        kind = self.kind
        if kind == "bracket":
            return value in self.rule
        if kind == "flag":
            return value is True
        return value == self.rule


def neutral_definition(category: RiskCategory) -> RiskFactorDefinition:
    return RiskFactorDefinition(
        category=category,
        key=f"{category.value}_neutral",
        multiplier=NEUTRAL_MULTIPLIER,
        description=f"No {category.value} risk data",
    )


def _brackets(
    category: RiskCategory,
    attribute: str,
    rows: Sequence[Tuple[str, float, float, str, float, str]],
) -> List[RiskFactorDefinition]:
    return [
        RiskFactorDefinition(
            category=category,
            key=key,
            multiplier=multiplier,
            attribute=attribute,
            rule=pd.Interval(float(lower), float(upper), closed=closed),
            description=description,
        )
        for key, lower, upper, closed, multiplier, description in rows
    ]


def _choices(
    category: RiskCategory,
    attribute: str,
    table: Dict[Enum, float],
    label: str,
) -> List[RiskFactorDefinition]:
    return [
        RiskFactorDefinition(
            category=category,
            key=f"{attribute}_{member.value.replace('-', '_')}",
            multiplier=multiplier,
            attribute=attribute,
            rule=member,
            description=f"{member.value.capitalize()} {label}",
        )
        for member, multiplier in table.items()
    ]


def _flag(category: RiskCategory, key: str, attribute: str, multiplier: float, description: str) -> RiskFactorDefinition:
    return RiskFactorDefinition(
        category=category,
        key=key,
        multiplier=multiplier,
        attribute=attribute,
        rule=True,
        description=description,
    )


# -----------------------------
# Rating tables
# -----------------------------
AGE_BRACKETS = [
    ("age_bracket_18_25", 18, 25, "both", 1.2, "Age 18-25"),
    ("age_bracket_26_40", 25, 40, "right", 1.0, "Age 26-40"),
    ("age_bracket_41_55", 40, 55, "right", 1.1, "Age 41-55"),
    ("age_bracket_56_65", 55, 65, "right", 1.3, "Age 56-65"),
    ("age_bracket_66_plus", 65, np.inf, "right", 1.5, "Age 66+"),
]

OCCUPATION_MULTIPLIERS = {
    Occupation.PROFESSIONAL: 0.9,
    Occupation.ADMINISTRATIVE: 1.0,
    Occupation.MANUAL: 1.2,
    Occupation.HAZARDOUS: 1.8,
    Occupation.HEALTHCARE: 1.1,
    Occupation.EDUCATION: 0.9,
    Occupation.TECHNOLOGY: 0.8,
    Occupation.FINANCE: 0.9,
    Occupation.UNEMPLOYED: 1.3,
}

BMI_BRACKETS = [
    ("bmi_underweight", 10, 18.5, "left", 1.3, "BMI below 18.5"),
    ("bmi_normal", 18.5, 25, "both", 1.0, "BMI 18.5-25"),
    ("bmi_overweight", 25, 30, "right", 1.1, "BMI above 25 up to 30"),
    ("bmi_obese", 30, np.inf, "right", 1.3, "BMI above 30"),
]

HEALTH_STATUS_MULTIPLIERS = {
    HealthStatus.EXCELLENT: 0.8,
    HealthStatus.GOOD: 1.0,
    HealthStatus.AVERAGE: 1.2,
    HealthStatus.POOR: 1.5,
}

INCOME_BRACKETS = [
    ("income_up_to_30k", 0, 30_000, "both", 1.3, "Annual income up to 30,000"),
    ("income_30k_60k", 30_000, 60_000, "right", 1.1, "Annual income 30,001-60,000"),
    ("income_60k_100k", 60_000, 100_000, "right", 1.0, "Annual income 60,001-100,000"),
    ("income_100k_200k", 100_000, 200_000, "right", 0.9, "Annual income 100,001-200,000"),
    ("income_200k_plus", 200_000, np.inf, "right", 0.8, "Annual income above 200,000"),
]

CREDIT_SCORE_BRACKETS = [
    ("credit_score_poor", 300, 580, "left", 1.5, "Credit score below 580"),
    ("credit_score_fair", 580, 670, "left", 1.2, "Credit score 580-669"),
    ("credit_score_good", 670, 740, "left", 1.0, "Credit score 670-739"),
    ("credit_score_excellent", 740, np.inf, "left", 0.9, "Credit score 740+"),
]

RISK_ZONE_MULTIPLIERS = {
    RiskZone.LOW: 0.9,
    RiskZone.MEDIUM: 1.0,
    RiskZone.HIGH: 1.3,
}


def build_default_definitions() -> List[RiskFactorDefinition]:
    defs: List[RiskFactorDefinition] = []

    defs += _brackets(RiskCategory.PERSONAL, "age", AGE_BRACKETS)
    defs += _choices(RiskCategory.PERSONAL, "occupation", OCCUPATION_MULTIPLIERS, "occupation")

    defs.append(_flag(RiskCategory.HEALTH, "smoker", "smoker", 1.8, "Smoker"))
    defs.append(_flag(RiskCategory.HEALTH, "chronic_illness", "has_chronic_illness", 1.5, "Chronic illness present"))
    defs += _brackets(RiskCategory.HEALTH, "bmi", BMI_BRACKETS)
    defs += _choices(RiskCategory.HEALTH, "health_status", HEALTH_STATUS_MULTIPLIERS, "health")

    defs.append(
        _flag(RiskCategory.LIFESTYLE, "dangerous_hobbies", "has_dangerous_hobbies", 1.4, "Participates in dangerous hobbies")
    )

    defs += _brackets(RiskCategory.FINANCIAL, "annual_income", INCOME_BRACKETS)
    defs += _brackets(RiskCategory.FINANCIAL, "credit_score", CREDIT_SCORE_BRACKETS)
    defs.append(
        _flag(RiskCategory.FINANCIAL, "bankruptcy_history", "has_bankruptcy_history", 1.3, "History of bankruptcy")
    )

    defs += _choices(RiskCategory.GEOGRAPHIC, "risk_zone", RISK_ZONE_MULTIPLIERS, "risk location")

    defs += [neutral_definition(c) for c in RiskCategory]
    return defs


# -----------------------------
# Integrity checks
# -----------------------------
def _check_brackets(attribute: str, defs: List[RiskFactorDefinition]) -> None:
    rules = sorted((d.rule for d in defs), key=lambda r: (r.left, r.right))

    for a, b in zip(rules, rules[1:]):
        if a.overlaps(b):
            raise CatalogIntegrityError(f"{attribute}: brackets overlap at {a} and {b}")
        if a.right < b.left or (a.right == b.left and not (a.closed_right or b.closed_left)):
            raise CatalogIntegrityError(f"{attribute}: gap between brackets at {float(a.right)}")

    first, last = rules[0], rules[-1]
    lo, hi = NUMERIC_DOMAINS[attribute]
    if lo is not None and (first.left > lo or (first.left == lo and not first.closed_left)):
        raise CatalogIntegrityError(f"{attribute}: brackets start at {first.left}, domain starts at {lo}")
    if hi is None:
        upper_ok = np.isinf(last.right)
    else:
        upper_ok = last.right > hi or (last.right == hi and last.closed_right)
    if not upper_ok:
        raise CatalogIntegrityError(f"{attribute}: brackets end at {last.right}, domain ends at {hi}")


def _check_choices(attribute: str, defs: List[RiskFactorDefinition]) -> None:
    counts = Counter(d.rule for d in defs)
    dupes = sorted(str(getattr(m, "value", m)) for m, n in counts.items() if n > 1)
    if dupes:
        raise CatalogIntegrityError(f"{attribute}: members mapped more than once: {dupes}")
    missing = sorted(m.value for m in ENUM_FIELDS[attribute] if m not in counts)
    if missing:
        raise CatalogIntegrityError(f"{attribute}: members without a factor: {missing}")


def validate_catalog(definitions: Sequence[RiskFactorDefinition]) -> None:
    """
    Fail fast on a malformed catalog.

    Checks: positive multipliers, unique keys, one neutral row per category,
    brackets that partition their domain, choices that cover their enum once,
    one row per boolean flag.
    """
    bad = [d.key for d in definitions if not (d.multiplier > 0 and np.isfinite(d.multiplier))]
    if bad:
        raise CatalogIntegrityError(f"Non-positive multipliers: {bad}")

    dup_keys = sorted(k for k, n in Counter(d.key for d in definitions).items() if n > 1)
    if dup_keys:
        raise CatalogIntegrityError(f"Duplicate factor keys: {dup_keys}")

    for category in RiskCategory:
        neutrals = [d for d in definitions if d.category == category and d.kind == "neutral"]
        if len(neutrals) != 1:
            raise CatalogIntegrityError(f"{category.value}: expected one neutral row, found {len(neutrals)}")
        if neutrals[0].multiplier != NEUTRAL_MULTIPLIER:
            raise CatalogIntegrityError(f"{category.value}: neutral row must have multiplier 1.0")

    by_attribute: Dict[str, List[RiskFactorDefinition]] = {}
    for d in definitions:
        if d.attribute is not None:
            by_attribute.setdefault(d.attribute, []).append(d)

    for attribute, defs in by_attribute.items():
        kinds = {d.kind for d in defs}
        if len(kinds) != 1:
            raise CatalogIntegrityError(f"{attribute}: mixed rule kinds {sorted(kinds)}")
        if len({d.category for d in defs}) != 1:
            raise CatalogIntegrityError(f"{attribute}: rows span several categories")
        kind = kinds.pop()
        if kind == "bracket":
            if attribute not in NUMERIC_DOMAINS:
                raise CatalogIntegrityError(f"{attribute}: bracket rule on a non-numeric attribute")
            _check_brackets(attribute, defs)
        elif kind == "choice":
            if attribute not in ENUM_FIELDS:
                raise CatalogIntegrityError(f"{attribute}: choice rule on a non-enum attribute")
            _check_choices(attribute, defs)
        else:
            if attribute not in BOOLEAN_FIELDS:
                raise CatalogIntegrityError(f"{attribute}: flag rule on a non-boolean attribute")
            if len(defs) != 1:
                raise CatalogIntegrityError(f"{attribute}: flag defined {len(defs)} times")


class FactorCatalog:
    """Validated, read-only set of risk factor definitions."""

    def __init__(self, definitions: Iterable[RiskFactorDefinition]) -> None:
        self._definitions: Tuple[RiskFactorDefinition, ...] = tuple(definitions)
        validate_catalog(self._definitions)
        self._by_key = {d.key: d for d in self._definitions}
        logger.debug("Factor catalog built with %d definitions", len(self._definitions))

    @property
    def definitions(self) -> Tuple[RiskFactorDefinition, ...]:
        return self._definitions

    def get(self, key: str) -> RiskFactorDefinition:
        return self._by_key[key]

    def neutral(self, category: RiskCategory) -> RiskFactorDefinition:
        return next(d for d in self._definitions if d.category == category and d.kind == "neutral")

    def for_attribute(self, attribute: str) -> List[RiskFactorDefinition]:
        return [d for d in self._definitions if d.attribute == attribute]

    def match(self, attribute: str, value: Any) -> List[RiskFactorDefinition]:
        """All definitions of one attribute that accept a raw value."""
        candidate = RiskProfile(**{attribute: value})
        return [d for d in self.for_attribute(attribute) if d.applies_to(candidate)]

    def lookup_applicable(self, profile: RiskProfile) -> List[RiskFactorDefinition]:
        """
        Definitions that apply to the profile, in category order.
        A category with no match contributes its neutral row.
        """
        applicable: List[RiskFactorDefinition] = []
        for category in RiskCategory:
            matched = [
                d for d in self._definitions
                if d.category == category and d.applies_to(profile)
            ]
            applicable.extend(matched or [self.neutral(category)])
        return applicable


DEFAULT_CATALOG = FactorCatalog(build_default_definitions())


def lookup_applicable(profile: RiskProfile, catalog: Optional[FactorCatalog] = None) -> List[RiskFactorDefinition]:
    return (catalog or DEFAULT_CATALOG).lookup_applicable(profile)
