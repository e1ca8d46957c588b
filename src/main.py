import logging
import os
import sys
from typing import List, Optional

from csv_codec import write_accounts
from payments_engine import PaymentsEngine

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv

    if not args:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    if len(args) > 1:
        logger.warning(f"Extra arguments will be ignored: {' '.join(args[1:])}")

    filepath = args[0]
    if not os.path.isfile(filepath):
        print(f'File "{filepath}" not found.', file=sys.stderr)
        return 1

    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Failed to read {filepath}: {e}")
        return 1

    try:
        write_accounts(accounts, sys.stdout)
        sys.stdout.flush()
    except OSError as e:
        logger.error(f"Failed to write account output: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
