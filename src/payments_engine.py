import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, List, Optional

from account import Account
from account_manager import AccountManager
from models import (
    MAX_CLIENT_ID,
    MAX_TRANSACTION_ID,
    AccountSummary,
    ProcessingStats,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)


class TransactionParseError(ValueError):
    """A CSV record that cannot be turned into a Transaction."""


class PaymentsEngine:
    """
    Feeds CSV transaction records, in file order, into an AccountManager.

    Reading stops at the first malformed record; whatever was applied before it
    stays applied and can still be rendered.
    """

    def __init__(self, manager: Optional[AccountManager] = None):
        self._manager = manager if manager is not None else AccountManager()
        self._stats = ProcessingStats()

    @property
    def manager(self) -> AccountManager:
        return self._manager

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, Account]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing transactions from {filepath}")

        with open(filepath, "r", newline="") as f:
            for transaction in self._read_transactions(f):
                self.process_transaction(transaction)

        logger.info(str(self._stats))
        return self._manager.get_all_accounts()

    def process_transaction(self, transaction: Transaction) -> None:
        result = self._manager.process_transaction(transaction)
        self._stats.record(result)

    def render(self) -> List[AccountSummary]:
        return self._manager.render()

    def _read_transactions(self, f) -> Iterator[Transaction]:
        """Yield parsed transactions until the file ends or a record is malformed."""
        reader = csv.DictReader(f)
        try:
            for row in reader:
                yield self.parse_row(row)
        except (TransactionParseError, csv.Error) as e:
            logger.warning(f"Stopped reading at line {reader.line_num}: {e}")

    @staticmethod
    def parse_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
        """
        Parse CSV row into Transaction.

        Raises TransactionParseError on an unknown type, a missing or out of range
        client/tx, an unparsable amount or extra fields. An empty amount is None.
        """
        if None in row:
            raise TransactionParseError(f"Too many fields in row {row}")

        try:
            normalized = {k.strip(): (v or "").strip() for k, v in row.items()}

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str:
                amount = Decimal(amount_str)
        except (KeyError, ValueError, InvalidOperation) as e:
            raise TransactionParseError(f"Failed to parse row {row}: {e}") from e

        if not 0 <= client_id <= MAX_CLIENT_ID:
            raise TransactionParseError(f"Client id {client_id} out of range")
        if not 0 <= transaction_id <= MAX_TRANSACTION_ID:
            raise TransactionParseError(f"Transaction id {transaction_id} out of range")

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )
