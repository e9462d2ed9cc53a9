from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_DOWN
from enum import Enum
from typing import NamedTuple, Optional

AMOUNT_PRECISION = Decimal("0.0001")
MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1
# Deposits and withdrawals must stay below 10**MAX_AMOUNT_DIGITS
MAX_AMOUNT_DIGITS = 15
# Wide enough to quantize any balance reachable from 2**32 amounts under the limit
REPORT_CONTEXT = Context(prec=50)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class ProcessingResult(Enum):
    SUCCESS = "success"
    INVALID = "invalid"
    FROZEN = "frozen"
    DUPLICATE = "duplicate"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    @property
    def moves_funds(self) -> bool:
        """True for the kinds that carry an amount (deposit, withdrawal)."""
        return self.transaction_type in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


def validate(transaction: Transaction) -> Optional[Transaction]:
    """
    Return the transaction if it is fit to apply, None if it should be discarded.

    Deposits and withdrawals need a present, normal (finite, not subnormal), strictly
    positive amount below 10**MAX_AMOUNT_DIGITS.
    Disputes, resolves and chargebacks are always accepted; their amount is ignored.
    """
    if not transaction.moves_funds:
        return transaction

    amount = transaction.amount
    # is_normal() first: ordering comparisons on NaN raise InvalidOperation
    if amount is None or not amount.is_normal() or amount <= 0:
        return None
    if amount.adjusted() >= MAX_AMOUNT_DIGITS:
        return None
    return transaction


def truncate_amount(value: Decimal) -> Decimal:
    """Truncate toward zero to 4 fractional digits (96.04095 -> 96.0409)."""
    truncated = value.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN, context=REPORT_CONTEXT)
    if truncated.is_zero():
        return truncated.copy_abs()
    return truncated


class AccountSummary(NamedTuple):
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    frozen: bool


class ProcessingStats:
    """Counters of processing outcomes, one per ProcessingResult."""

    def __init__(self):
        self.counts = {result: 0 for result in ProcessingResult}

    def record(self, result: ProcessingResult) -> None:
        self.counts[result] += 1

    @property
    def processed(self) -> int:
        return sum(self.counts.values())

    @property
    def applied(self) -> int:
        return self.counts[ProcessingResult.SUCCESS]

    def __str__(self) -> str:
        skipped = ", ".join(
            f"{result.value}: {count}"
            for result, count in self.counts.items()
            if result != ProcessingResult.SUCCESS
        )
        return f"Processed: {self.processed}, Applied: {self.applied} ({skipped})"
