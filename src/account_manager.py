import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional

from account import Account
from models import AccountSummary, ProcessingResult, Transaction, validate

logger = logging.getLogger(__name__)


class AccountManager:
    """
    Owns every client account and routes transactions to them.
    Accounts are created the first time a valid transaction names their client.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}
        # tx id -> client id of every posted deposit/withdrawal, across all accounts
        self._transaction_owners: Dict[int, int] = {}

        # Global lock protects creation of entries in _accounts and _client_locks
        # and the tx id registry. Each client lock serializes one account.
        self._global_lock = threading.Lock()
        self._client_locks: Dict[int, threading.Lock] = {}

    def get_client_lock(self, client_id: int) -> threading.Lock:
        """Get or create the lock held while a transaction for this client is applied."""
        with self._global_lock:
            if client_id not in self._client_locks:
                self._client_locks[client_id] = threading.Lock()
            return self._client_locks[client_id]

    def get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        with self._global_lock:
            if client_id not in self._accounts:
                self._accounts[client_id] = Account(client_id=client_id)
            return self._accounts[client_id]

    def get_account(self, client_id: int) -> Optional[Account]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> Dict[int, Account]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def get_client_balance(self, client_id: int) -> Decimal:
        """Available balance of a client, zero if the client has never been seen."""
        account = self._accounts.get(client_id)
        if account is None:
            return Decimal("0")
        return account.available

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Validate a transaction and apply it to its client's account.

        A frozen account drops everything, including disputes and resolves of
        transactions posted before the freeze. A deposit or withdrawal whose tx id
        was already posted by any client is rejected rather than overwriting it.
        """
        if validate(transaction) is None:
            logger.debug(f"Discarding invalid {transaction}")
            return ProcessingResult.INVALID

        with self.get_client_lock(transaction.client_id):
            account = self.get_or_create_account(transaction.client_id)

            if account.frozen:
                logger.debug(f"Client {account.client_id} is frozen, dropping {transaction}")
                return ProcessingResult.FROZEN

            if transaction.moves_funds:
                with self._global_lock:
                    owner = self._transaction_owners.get(transaction.transaction_id)
                if owner is not None:
                    logger.info(f"tx {transaction.transaction_id} already posted by client {owner}, skipping {transaction}")
                    return ProcessingResult.DUPLICATE

            result = account.process_transaction(transaction)

            if result == ProcessingResult.SUCCESS and transaction.moves_funds:
                with self._global_lock:
                    self._transaction_owners[transaction.transaction_id] = transaction.client_id

            return result

    def render(self) -> List[AccountSummary]:
        """Summaries of every known account, ascending by client id."""
        return [self._accounts[client_id].summary() for client_id in sorted(self._accounts)]
