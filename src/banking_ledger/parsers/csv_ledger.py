import io
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional

import pandas as pd

from banking_ledger.domain.enums import TransactionType
from banking_ledger.domain.models import Transaction, generate_id, parse_money
from banking_ledger.logging_setup import get_logger
from banking_ledger.parsers.base import LedgerFileFormatError, LedgerParser

logger = get_logger(__name__)


class CsvFormatError(LedgerFileFormatError):
    """Raised when a CSV file has no data rows or cannot be read at all."""
    pass


class CsvLedgerParser(LedgerParser):
    """
    Parser for the ledger's own CSV format.

    Layout:
    - Header row: Date,Amount,Description,Type (skipped, not checked)
    - Data rows: 2025-12-01,-89.99,Amazon Order,Withdrawal

    Fields are read by position. Type is a deposit when it says "deposit"
    in any case, anything else is a withdrawal. The amount's sign is dropped.
    Rows with a missing field, a non-numeric amount or a non-ISO date are
    skipped.
    """

    # Column names from the CSV file
    DATE_COL = "Date"
    AMOUNT_COL = "Amount"
    DESCRIPTION_COL = "Description"
    TYPE_COL = "Type"

    COLUMNS = [DATE_COL, AMOUNT_COL, DESCRIPTION_COL, TYPE_COL]

    def validate_content(self, content: str) -> None:
        """A file needs a header line plus at least one more line."""
        lines = [line for line in content.strip().splitlines() if line.strip()]
        if len(lines) < 2:
            raise CsvFormatError("Invalid CSV file")

    def parse(self, content: str) -> List[Transaction]:
        """
        Parse CSV text into new transactions, in file order.

        Each transaction gets a freshly generated id.
        """
        self.validate_content(content)

        try:
            df = pd.read_csv(
                io.StringIO(content.strip()),
                header=None,
                skiprows=1,
                names=self.COLUMNS,
                index_col=False,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                engine="python",
                # Unquoted extra commas: keep the first four fields
                on_bad_lines=lambda fields: fields[:len(self.COLUMNS)],
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise CsvFormatError(f"Invalid CSV file: {e}")

        transactions = []
        for index, row in df.iterrows():
            transaction = self._parse_row(row)
            if transaction is None:
                logger.debug("Skipping CSV row %s: %s", index + 2, row.to_dict())
                continue
            transactions.append(transaction)

        return transactions

    def _field(self, row: pd.Series, column: str) -> str:
        value = row.get(column)
        if value is None or pd.isna(value):
            return ""
        return str(value).strip()

    def _parse_row(self, row: pd.Series) -> Optional[Transaction]:
        """Parse a single row, None when the row is unusable"""
        date_str = self._field(row, self.DATE_COL)
        amount_str = self._field(row, self.AMOUNT_COL)
        description = self._field(row, self.DESCRIPTION_COL)
        type_str = self._field(row, self.TYPE_COL)

        if not (date_str and amount_str and description and type_str):
            return None

        amount = self._parse_amount(amount_str)
        if amount is None:
            return None

        try:
            txn_date = date.fromisoformat(date_str)
        except ValueError:
            return None

        if type_str.lower() == TransactionType.DEPOSIT.value:
            txn_type = TransactionType.DEPOSIT
        else:
            txn_type = TransactionType.WITHDRAWAL

        return Transaction(
            id=generate_id(),
            type=txn_type,
            amount=amount,
            description=description,
            date=txn_date,
        )

    def _parse_amount(self, amount_str: str) -> Optional[Decimal]:
        """
        Parse amount string to a positive Decimal.

        Returns:
            The absolute value in cents, or None if it isn't a usable non-zero amount
        """
        amount = parse_money(amount_str)
        if amount is None or amount == 0:
            return None

        return amount.copy_abs()

    def __repr__(self) -> str:
        return "CsvLedgerParser()"


def export_csv(transactions: Iterable[Transaction]) -> str:
    """
    Render transactions in the format CsvLedgerParser reads.

    Amounts have two decimals and are negative for withdrawals. Descriptions
    containing commas or quotes are quoted.

    Example:
        Date,Amount,Description,Type
        2025-12-02,-89.99,Amazon Order,Withdrawal
    """
    rows = [
        {
            CsvLedgerParser.DATE_COL: txn.date.isoformat(),
            CsvLedgerParser.AMOUNT_COL: f"{txn.signed_amount:.2f}",
            CsvLedgerParser.DESCRIPTION_COL: txn.description,
            CsvLedgerParser.TYPE_COL: txn.type.label,
        }
        for txn in transactions
    ]
    df = pd.DataFrame(rows, columns=CsvLedgerParser.COLUMNS)
    return df.to_csv(index=False, lineterminator="\n").rstrip("\n")
