"""
Balance & Series Calculator

Pure derivation of the balance and the chronological balance series
from a log snapshot. Output depends only on the log's content and order.

The log is stored newest-first, so it is walked in reverse to apply
transactions in the order they happened. The balance itself does not
depend on direction; the series does.

Amounts are summed as plain floats. Accumulated rounding drift is
accepted and never corrected here.
"""

from typing import NamedTuple, Sequence

from personal_ledger.models.transaction import START_INDEX, SeriesPoint, Transaction


class LedgerTotals(NamedTuple):
    balance: float
    series: tuple[SeriesPoint, ...]


EMPTY_SERIES = (SeriesPoint(index=START_INDEX, running_balance=0.0),)


def signed_amount(transaction: Transaction) -> float:
    """+amount for CREDIT, -amount for DEBIT."""
    return transaction.signed_amount


def calculate(log: Sequence[Transaction]) -> LedgerTotals:
    """
    Derive balance and series from a newest-first log.

    An empty log yields a zero balance and a single START point, so a
    chart of the series always has an origin.
    """
    if not log:
        return LedgerTotals(balance=0.0, series=EMPTY_SERIES)

    running = 0.0
    points = []
    for position, transaction in enumerate(reversed(log)):
        running += signed_amount(transaction)
        points.append(SeriesPoint(
            index=position,
            running_balance=running,
            date=transaction.date,
        ))

    return LedgerTotals(balance=running, series=tuple(points))
