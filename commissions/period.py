"""
Period Filter

Decides which transactions belong to a reporting window at all, and
derives neighbouring windows for trend comparison.
"""

from typing import Iterable

from .models import Agent, DateRange, Tranche, Transaction


def is_visible_in_range(
    transaction: Transaction,
    tranches: list[Tranche] | None,
    start_month: int,
    end_month: int,
    year: int,
) -> bool:
    """
    A transaction without tranches is visible when its own date is in
    range. A decomposed transaction is visible when any installment is,
    and its own month/year no longer matter.
    """
    date_range = DateRange(start_month, end_month, year)
    if not tranches:
        return date_range.contains(transaction.month, transaction.year)
    return any(date_range.contains(t.month, t.year) for t in tranches)


def active_agent_names(agents: Iterable[Agent]) -> set[str]:
    return {agent.name for agent in agents if agent.is_active}


def active_working_set(
    transactions: Iterable[Transaction],
    tranches_by_transaction: dict[str, list[Tranche]],
    date_range: DateRange,
    active_agents: set[str],
) -> list[Transaction]:
    """Transactions of active agents that are visible in ``date_range``."""
    working = []
    for transaction in transactions:
        if transaction.agent not in active_agents:
            continue
        tranches = tranches_by_transaction.get(transaction.id) if transaction.id else None
        if is_visible_in_range(
            transaction, tranches, date_range.start_month, date_range.end_month, date_range.year
        ):
            working.append(transaction)
    return working


def unfiltered_for_year(transactions: Iterable[Transaction], year: int) -> list[Transaction]:
    """Every transaction stored for ``year``, regardless of agent status."""
    return [t for t in transactions if t.year == year]


def previous_range(date_range: DateRange) -> DateRange:
    """
    The window of equal length immediately before ``date_range``.

    Windows never cross a year boundary, so when the previous window
    would start before January it is moved to the end of the prior year.
    """
    length = date_range.length
    start = date_range.start_month - length
    end = date_range.start_month - 1
    if start < 1:
        return DateRange(start_month=13 - length, end_month=12, year=date_range.year - 1)
    return DateRange(start_month=start, end_month=end, year=date_range.year)


def available_years(transactions: Iterable[Transaction], current_year: int) -> list[int]:
    """Years with data plus the current and next year, newest first."""
    years = {t.year for t in transactions}
    years.add(current_year)
    years.add(current_year + 1)
    return sorted(years, reverse=True)
