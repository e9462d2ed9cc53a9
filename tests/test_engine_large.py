import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import AccountSummary, ProcessingResult
from payments_engine import PaymentsEngine


class TestPaymentsEngineLargeScale:
    def test_1000_accounts_6000_transactions(self, tmp_path):
        num_clients = 1000
        rows = ["type, client, tx, amount"]
        tx_id = 1

        # Per client: deposits 100, 200, 300 and withdrawals 50, 100, then a final deposit of 50
        for client_id in range(1, num_clients + 1):
            for tx_type, amount in [("deposit", 100), ("deposit", 200), ("deposit", 300),
                                    ("withdrawal", 50), ("withdrawal", 100)]:
                rows.append(f"{tx_type}, {client_id}, {tx_id}, {amount}")
                tx_id += 1

        for client_id in range(1, num_clients + 1):
            rows.append(f"deposit, {client_id}, {tx_id}, 50")
            tx_id += 1

        csv_file = tmp_path / "large_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert len(accounts) == num_clients
        assert engine.stats.applied == 6000

        expected = [
            AccountSummary(client_id, Decimal("500"), Decimal("0"), Decimal("500"), False)
            for client_id in range(1, num_clients + 1)
        ]
        assert engine.render() == expected

    def test_with_disputes_resolves_chargebacks(self, tmp_path):
        rows = ["type, client, tx, amount"]

        def deposits(clients, amounts):
            for client_id in clients:
                for offset, amount in enumerate(amounts, start=1):
                    rows.append(f"deposit, {client_id}, {client_id * 100 + offset}, {amount}")

        def references(tx_type, clients, offset):
            for client_id in clients:
                rows.append(f"{tx_type}, {client_id}, {client_id * 100 + offset},")

        # 1-10: deposits only
        deposits(range(1, 11), [100, 150, 250])

        # 11-20: deposit, dispute, resolve
        deposits(range(11, 21), [100, 150, 250])
        references("dispute", range(11, 21), 1)
        references("resolve", range(11, 21), 1)

        # 21-30: deposit, dispute, chargeback, then a deposit that must be dropped
        deposits(range(21, 31), [100, 150, 250])
        references("dispute", range(21, 31), 1)
        references("chargeback", range(21, 31), 1)
        for client_id in range(21, 31):
            rows.append(f"deposit, {client_id}, {client_id * 100 + 50}, 1000")

        # 31-40: withdrawal, then the first deposit stays disputed
        deposits(range(31, 41), [150, 250])
        for client_id in range(31, 41):
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 3}, 100")
        references("dispute", range(31, 41), 1)

        # 41-50: withdrawal is disputed
        deposits(range(41, 51), [100, 200, 300])
        for client_id in range(41, 51):
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 4}, 100")
        references("dispute", range(41, 51), 4)

        csv_file = tmp_path / "disputes_test.csv"
        csv_file.write_text('\n'.join(rows))

        engine = PaymentsEngine()
        accounts = engine.process_file(str(csv_file))

        assert engine.stats.counts[ProcessingResult.FROZEN] == 10

        for client_id, account in accounts.items():
            assert account.available + account.held == account.total, f"Client {client_id}"

        for client_id in range(1, 21):
            assert accounts[client_id].available == Decimal("500"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].frozen is False

        for client_id in range(21, 31):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("0")
            assert accounts[client_id].frozen is True

        for client_id in range(31, 41):
            assert accounts[client_id].available == Decimal("150"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("150")
            assert accounts[client_id].total == Decimal("300")
            assert accounts[client_id].frozen is False

        for client_id in range(41, 51):
            assert accounts[client_id].available == Decimal("400"), f"Client {client_id}"
            assert accounts[client_id].held == Decimal("100")
            assert accounts[client_id].total == Decimal("500")
