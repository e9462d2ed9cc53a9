import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, assert_never

from models import AccountSummary, ProcessingResult, Transaction, TransactionType, truncate_amount

logger = logging.getLogger(__name__)


@dataclass
class Account:
    """
    Balance and transaction state of a single client.

    Posted transactions are deposits and successful withdrawals not under dispute.
    Held transactions are the disputed ones; their amounts make up the held balance.
    The two maps never share a transaction id.

    Transactions passed in must already be validated and routed to this client.
    """

    client_id: int
    available: Decimal = Decimal("0")
    frozen: bool = False
    posted: Dict[int, Transaction] = field(default_factory=dict, repr=False)
    held_transactions: Dict[int, Transaction] = field(default_factory=dict, repr=False)

    @property
    def held(self) -> Decimal:
        return sum((transaction.amount for transaction in self.held_transactions.values()), Decimal("0"))

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def knows_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self.posted or transaction_id in self.held_transactions

    def deposit(self, transaction: Transaction) -> bool:
        self.available += transaction.amount
        self.posted[transaction.transaction_id] = transaction
        return True

    def withdraw(self, transaction: Transaction) -> bool:
        """Withdraw if funds allow. A failed withdrawal leaves no trace."""
        if self.available < transaction.amount:
            return False
        self.available -= transaction.amount
        self.posted[transaction.transaction_id] = transaction
        return True

    def dispute(self, transaction_id: int) -> bool:
        """
        Move a posted transaction into dispute.

        The stored amount is subtracted from available whatever the original kind,
        so disputing a withdrawal takes its amount out of available a second time.
        """
        original = self.posted.pop(transaction_id, None)
        if original is None:
            return False
        self.available -= original.amount
        self.held_transactions[transaction_id] = original
        return True

    def resolve(self, transaction_id: int) -> bool:
        original = self.held_transactions.pop(transaction_id, None)
        if original is None:
            return False
        self.available += original.amount
        self.posted[transaction_id] = original
        return True

    def chargeback(self, transaction_id: int) -> bool:
        """Forfeit a held transaction and freeze the account."""
        if self.held_transactions.pop(transaction_id, None) is None:
            return False
        self.frozen = True
        return True

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a single transaction to this account.

        Returns:
            SUCCESS: State changed
            FROZEN: Account is frozen, nothing applied
            DUPLICATE: Deposit/withdrawal reuses a tx id this account already holds
            IGNORED: Precondition failed (insufficient funds, unknown tx, wrong state)
        """
        if self.frozen:
            return ProcessingResult.FROZEN

        if transaction.moves_funds and self.knows_transaction(transaction.transaction_id):
            logger.info(f"Client {self.client_id}: tx {transaction.transaction_id} already recorded, skipping {transaction.transaction_type.value}")
            return ProcessingResult.DUPLICATE

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                applied = self.deposit(transaction)
            case TransactionType.WITHDRAWAL:
                applied = self.withdraw(transaction)
            case TransactionType.DISPUTE:
                applied = self.dispute(transaction.transaction_id)
            case TransactionType.RESOLVE:
                applied = self.resolve(transaction.transaction_id)
            case TransactionType.CHARGEBACK:
                applied = self.chargeback(transaction.transaction_id)
            case _:
                assert_never(transaction.transaction_type)

        if not applied:
            logger.debug(f"Client {self.client_id}: {transaction} had no effect")
            return ProcessingResult.IGNORED
        return ProcessingResult.SUCCESS

    def summary(self) -> AccountSummary:
        return AccountSummary(
            client_id=self.client_id,
            available=truncate_amount(self.available),
            held=truncate_amount(self.held),
            total=truncate_amount(self.total),
            frozen=self.frozen,
        )
