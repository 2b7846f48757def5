"""
Tranche Editing Arithmetic

The store replaces a transaction's installments atomically from the
engine's point of view: delete all, insert the new list, then resync the
parent commission. The persistence itself belongs to the caller; this
module only defines the numbers involved.

If the delete succeeds and the insert fails, the caller MUST re-fetch
the transaction and its tranches before showing or computing anything
else, since cached state no longer matches the store.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal

from .models import Tranche, TrancheStatus, Transaction
from .money import ZERO, floor_money, quantize_money

MIN_SPLIT = 2
MAX_SPLIT = 12
DEFAULT_SPLIT_PROBABILITY = 50


@dataclass
class TrancheReplacement:
    """What the store should hold once a replace completes."""

    transaction_id: str
    tranches: list[Tranche] = field(default_factory=list)
    previous_commission: Decimal = Decimal("0")
    resynced_commission: Decimal = Decimal("0")

    @property
    def commission_delta(self) -> Decimal:
        return self.resynced_commission - self.previous_commission


def resynced_commission(tranches: list[Tranche]) -> Decimal:
    """The parent commission after a replace: the sum of the new amounts."""
    return sum((t.amount for t in tranches), ZERO)


def tranche_gap(transaction: Transaction, tranches: list[Tranche]) -> Decimal:
    """Commission not yet covered by installments (negative when over-allocated)."""
    return transaction.net_commission - resynced_commission(tranches)


def normalize(tranche: Tranche, transaction_id: str) -> Tranche:
    """Attach to the parent and store realized installments at probability 100."""
    probability = 100 if tranche.status == TrancheStatus.REALIZED else tranche.probability
    return replace(tranche, transaction_id=transaction_id, probability=probability)


def plan_replacement(
    transaction_id: str,
    new_tranches: list[Tranche],
    previous_commission: Decimal = Decimal("0"),
) -> TrancheReplacement:
    tranches = [normalize(t, transaction_id) for t in new_tranches]
    return TrancheReplacement(
        transaction_id=transaction_id,
        tranches=tranches,
        previous_commission=previous_commission,
        resynced_commission=resynced_commission(tranches),
    )


def split_evenly(transaction: Transaction, count: int) -> list[Tranche]:
    """
    Split the commission into ``count`` monthly installments.

    Each installment gets the commission / count floored to the cent; the
    first one absorbs the remainder and is realized, the rest are forecast
    at 50%. Months run on from the transaction's own month, into the next
    year when needed.
    """
    if not MIN_SPLIT <= count <= MAX_SPLIT:
        raise ValueError(f"count must be between {MIN_SPLIT} and {MAX_SPLIT}, got: {count}")
    if transaction.id is None:
        raise ValueError("Cannot split a transaction without an id")

    per_tranche = floor_money(transaction.net_commission / count)
    remainder = quantize_money(transaction.net_commission - per_tranche * count)

    tranches = []
    for i in range(count):
        month = transaction.month + i
        year = transaction.year
        while month > 12:
            month -= 12
            year += 1

        first = i == 0
        if first:
            note = "Preliminary agreement"
        elif i == count - 1:
            note = "Notarial deed"
        else:
            note = None

        tranches.append(
            Tranche(
                transaction_id=transaction.id,
                month=month,
                year=year,
                amount=per_tranche + remainder if first else per_tranche,
                status=TrancheStatus.REALIZED if first else TrancheStatus.FORECAST,
                probability=100 if first else DEFAULT_SPLIT_PROBABILITY,
                note=note,
            )
        )
    return tranches
