"""
Display formatting for ledger amounts.

Amounts are shown the Indian way: the last three digits form one group
and the rest are grouped in pairs (₹1,00,000.00). Negative balances put
the sign before the symbol (-₹70.00).
"""

from personal_ledger.models.transaction import Transaction, TransactionType


def group_indian(digits: str) -> str:
    """Insert Indian-style separators into a string of integer digits."""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(value: float, symbol: str = "₹", decimals: int = 2) -> str:
    """Format a balance or amount for display, e.g. ₹1,23,456.70."""
    text = f"{abs(value):.{decimals}f}"
    whole, _, fraction = text.partition(".")

    formatted = f"{symbol}{group_indian(whole)}"
    if fraction:
        formatted += f".{fraction}"

    # Values that round to zero are shown unsigned
    if value < 0 and float(text) != 0:
        return f"-{formatted}"
    return formatted


def format_plain_amount(amount: float) -> str:
    """Shortest readable form of an amount: 100 rather than 100.0."""
    if amount.is_integer():
        return str(int(amount))
    return repr(amount)


def format_signed_amount(transaction: Transaction) -> str:
    """Amount prefixed with + for credits and - for debits."""
    sign = "+" if transaction.type is TransactionType.CREDIT else "-"
    return f"{sign}{format_plain_amount(transaction.amount)}"
