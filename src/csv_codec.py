import csv
from decimal import Decimal, InvalidOperation
from typing import Dict, Mapping, Optional, TextIO

from errors import DecodeError
from models import TransactionRecord, TransactionType, ClientAccount, MAX_AMOUNT_DIGITS, MAX_CLIENT_ID, MAX_TRANSACTION_ID

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def parse_transaction_row(row: Dict[Optional[str], object], line_number: Optional[int] = None) -> TransactionRecord:
    """
    Parse a csv.DictReader row into a TransactionRecord.

    Headers and values are stripped and the type is case-insensitive.
    A missing trailing amount is treated as empty.

    Raises:
        DecodeError: the row is malformed
    """
    if None in row:
        raise DecodeError(line_number, f"unexpected extra fields {row[None]}")

    try:
        normalized = {k.strip(): (v or "").strip() for k, v in row.items()}

        transaction_type = TransactionType(normalized["type"].lower())
        client_id = _parse_unsigned(normalized["client"], MAX_CLIENT_ID, "client")
        transaction_id = _parse_unsigned(normalized["tx"], MAX_TRANSACTION_ID, "tx")

        amount = None
        amount_str = normalized.get("amount", "")
        if amount_str:
            amount = _parse_amount(amount_str)
    except KeyError as e:
        raise DecodeError(line_number, f"missing column {e}") from e
    except InvalidOperation as e:
        raise DecodeError(line_number, f"invalid amount {normalized.get('amount')!r}") from e
    except ValueError as e:
        raise DecodeError(line_number, str(e)) from e

    return TransactionRecord(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _parse_amount(value: str) -> Decimal:
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"amount must be a finite number, got {value!r}")

    integer_digits = max(amount.adjusted() + 1, 0)
    decimal_places = max(-amount.as_tuple().exponent, 0)
    if integer_digits + decimal_places > MAX_AMOUNT_DIGITS:
        raise ValueError(f"amount {value!r} has more than {MAX_AMOUNT_DIGITS} digits")
    return amount


def _parse_unsigned(value: str, maximum: int, field: str) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ValueError(f"{field} must be an unsigned integer, got {value!r}")
    number = int(value)
    if number > maximum:
        raise ValueError(f"{field} {number} is out of range (max {maximum})")
    return number


def format_decimal(value: Decimal) -> str:
    """Format decimal in plain notation, keeping its scale (no exponent, no trimming)."""
    return f"{value:f}"


def write_accounts(accounts: Mapping[int, ClientAccount], stream: TextIO) -> None:
    """Write the account snapshot as CSV, one row per client ordered by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        writer.writerow([
            client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])
