# premium_engine/pricing/schedule.py
"""
Installment schedule for one policy year.

Due dates step by whole calendar months from the start date; each date is
computed from the start (not from the previous due date) so month-end starts
do not drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional

import pandas as pd

from premium_engine.pricing.config import PERIOD_MONTHS, PaymentFrequency, coerce_frequency
from premium_engine.pricing.quote import PremiumQuote


@dataclass(frozen=True)
class Installment:
    number: int
    frequency: PaymentFrequency
    amount: float
    due_date: date
    paid: bool = False


def premium_schedule(
    quote: PremiumQuote,
    start_date: date,
    frequency: Optional[PaymentFrequency] = None,
) -> List[Installment]:
    """Expand a quote into the installments due over twelve months."""
    freq = coerce_frequency(frequency) if frequency is not None else quote.payment_frequency
    variant = quote.frequency_variants[freq]
    months = PERIOD_MONTHS[freq]
    start = pd.Timestamp(start_date)

    return [
        Installment(
            number=i + 1,
            frequency=freq,
            amount=variant.amount,
            due_date=(start + pd.DateOffset(months=i * months)).date(),
        )
        for i in range(12 // months)
    ]


def schedule_frame(installments: List[Installment]) -> pd.DataFrame:
    """Tabular view of a schedule (one row per installment)."""
    return pd.DataFrame(
        [
            {
                "number": i.number,
                "frequency": i.frequency.value,
                "amount": i.amount,
                "due_date": i.due_date,
                "paid": i.paid,
            }
            for i in installments
        ],
        columns=["number", "frequency", "amount", "due_date", "paid"],
    )
