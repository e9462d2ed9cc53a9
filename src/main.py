import sys
import logging
from decimal import Decimal
from typing import Iterable, TextIO

from models import AccountSummary
from payments_engine import PaymentsEngine

logger = logging.getLogger(__name__)

REPORT_HEADER = ("client", "available", "held", "total", "locked")
FIELD_SEPARATOR = ", "


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def format_decimal(value: Decimal) -> str:
    """Format an already truncated amount with exactly 4 decimal places."""
    return f"{value:.4f}"


def format_summary(summary: AccountSummary) -> str:
    return FIELD_SEPARATOR.join([
        str(summary.client_id),
        format_decimal(summary.available),
        format_decimal(summary.held),
        format_decimal(summary.total),
        str(summary.frozen).lower(),
    ])


def write_report(summaries: Iterable[AccountSummary], stream: TextIO) -> None:
    print(FIELD_SEPARATOR.join(REPORT_HEADER), file=stream)
    for summary in summaries:
        print(format_summary(summary), file=stream)


def main():
    configure_logging()

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine()
    try:
        engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Cannot read {filepath}: {e}")
        sys.exit(1)

    write_report(engine.render(), sys.stdout)


if __name__ == "__main__":
    main()
