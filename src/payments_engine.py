import csv
import logging
from typing import Dict, Iterable

from csv_codec import parse_transaction_row
from errors import DecodeError, ValidationError
from models import TransactionRecord, ClientAccount, ProcessingStats
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Replays a CSV stream of transactions through the ledger, in order, one row at a time.
    Malformed rows and rejected transactions are logged and skipped; they never abort the run.
    """

    def __init__(self):
        self._processor = TransactionProcessor()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """
        Process CSV file and return final account states.
        Only OSError from opening or reading the file propagates to the caller.
        """
        logger.info(f"Processing transactions from {filepath}")

        # Undecodable bytes survive as surrogates and fail only their own row.
        with open(filepath, "r", newline="", encoding="utf-8", errors="surrogateescape") as f:
            self.process_stream(f)

        logger.info(f"Processing complete. {self._stats}")
        return self.snapshot()

    def process_stream(self, lines: Iterable[str]) -> None:
        """Read CSV lines (header first) and apply each transaction."""
        reader = csv.DictReader(lines)
        while True:
            try:
                row = next(reader)
                transaction = parse_transaction_row(row, line_number=reader.line_num)
            except StopIteration:
                break
            except csv.Error as e:
                self._record_malformed(DecodeError(reader.line_num, str(e)))
                continue
            except DecodeError as e:
                self._record_malformed(e)
                continue
            self.apply(transaction)

    def apply(self, transaction: TransactionRecord) -> bool:
        """Apply one transaction, returning False if it was rejected."""
        try:
            self._processor.process_transaction(transaction)
        except ValidationError as e:
            logger.warning(f"Rejected {transaction}: {e}")
            self._stats.record_rejection()
            return False

        self._stats.record_success()
        return True

    def _record_malformed(self, error: DecodeError) -> None:
        logger.warning(str(error))
        self._stats.record_malformed()

    def snapshot(self) -> Dict[int, ClientAccount]:
        return self._processor.snapshot()
