import pytest
from datetime import date
from decimal import Decimal

from banking_ledger.domain.enums import TransactionType
from banking_ledger.parsers.csv_ledger import CsvFormatError, CsvLedgerParser, export_csv


@pytest.mark.unit
class TestCsvParserValidation:
    """Test whole-file checks"""

    @pytest.mark.parametrize("content", ["", "   \n", "Date,Amount,Description,Type", "Date,Amount,Description,Type\n\n\n"])
    def test_rejects_files_without_data_lines(self, csv_parser: CsvLedgerParser, content: str):
        with pytest.raises(CsvFormatError, match="Invalid CSV file"):
            csv_parser.parse(content)

    def test_header_is_not_checked(self, csv_parser: CsvLedgerParser):
        """The first line is skipped whatever it says"""
        result = csv_parser.parse("anything\n2025-12-01,10,Refund,Deposit")

        assert len(result) == 1


@pytest.mark.unit
class TestCsvParserRows:
    """Test row-level parsing"""

    def test_parse_valid_rows(self, csv_parser: CsvLedgerParser):
        # Arrange
        content = (
            "Date,Amount,Description,Type\n"
            "2025-12-01,3500.00,Salary,Deposit\n"
            "2025-12-02,-89.99,Amazon Order,Withdrawal\n"
        )

        # Act
        result = csv_parser.parse(content)

        # Assert
        assert len(result) == 2
        salary, order = result
        assert salary.type == TransactionType.DEPOSIT
        assert salary.amount == Decimal("3500.00")
        assert salary.date == date(2025, 12, 1)
        assert order.type == TransactionType.WITHDRAWAL
        assert order.amount == Decimal("89.99")
        assert order.description == "Amazon Order"

    def test_generates_fresh_ids(self, csv_parser: CsvLedgerParser):
        content = "h\n2025-12-01,1,A,Deposit\n2025-12-01,1,A,Deposit"

        result = csv_parser.parse(content)

        assert result[0].id != result[1].id
        assert all(t.id.startswith("txn-") for t in result)

    @pytest.mark.parametrize("type_text,expected", [
        ("deposit", TransactionType.DEPOSIT),
        ("DEPOSIT", TransactionType.DEPOSIT),
        ("Withdrawal", TransactionType.WITHDRAWAL),
        ("transfer", TransactionType.WITHDRAWAL),
    ])
    def test_type_is_deposit_only_when_it_says_so(self, csv_parser, type_text, expected):
        result = csv_parser.parse(f"h\n2025-12-01,5,Thing,{type_text}")

        assert result[0].type == expected

    def test_sign_of_amount_is_ignored(self, csv_parser: CsvLedgerParser):
        """Type decides the direction, not the sign"""
        result = csv_parser.parse("h\n2025-12-01,-25.00,Refund,Deposit")

        assert result[0].type == TransactionType.DEPOSIT
        assert result[0].amount == Decimal("25.00")

    @pytest.mark.parametrize("row", [
        "2025-12-01,abc,Coffee,Withdrawal",
        "2025-12-01,,Coffee,Withdrawal",
        "2025-12-01,5,,Withdrawal",
        "2025-12-01,5,Coffee",
        ",5,Coffee,Withdrawal",
        "01.12.2025,5,Coffee,Withdrawal",
        "2025-12-01,0,Coffee,Withdrawal",
        "2025-12-01,NaN,Coffee,Withdrawal",
        "2025-12-01,1e999999999,Coffee,Deposit",
        "2025-12-01,-1e999999999,Coffee,Withdrawal",
        "2025-12-01,1000000000000.01,Coffee,Deposit",
        "2025-12-01,0.001,Coffee,Deposit",
    ])
    def test_bad_rows_are_skipped(self, csv_parser: CsvLedgerParser, row: str):
        content = f"h\n{row}\n2025-12-02,7.50,Lunch,Withdrawal"

        result = csv_parser.parse(content)

        assert [t.description for t in result] == ["Lunch"]

    def test_quoted_description_with_comma(self, csv_parser: CsvLedgerParser):
        result = csv_parser.parse('h\n2025-12-01,12.00,"Coffee, cake",Withdrawal')

        assert result[0].description == "Coffee, cake"

    def test_extra_fields_are_ignored(self, csv_parser: CsvLedgerParser):
        result = csv_parser.parse("h\n2025-12-01,12.00,Coffee,Withdrawal,extra")

        assert len(result) == 1
        assert result[0].type == TransactionType.WITHDRAWAL

    def test_whitespace_is_trimmed(self, csv_parser: CsvLedgerParser):
        result = csv_parser.parse("h\n 2025-12-01 , 12.00 , Coffee , deposit ")

        assert result[0].description == "Coffee"
        assert result[0].type == TransactionType.DEPOSIT

    def test_parse_file(self, csv_parser: CsvLedgerParser, tmp_path):
        path = tmp_path / "ledger.csv"
        path.write_text("h\n2025-12-01,12.00,Coffee,Withdrawal\n", encoding="utf-8")

        assert len(csv_parser.parse_file(path)) == 1

    def test_parse_missing_file(self, csv_parser: CsvLedgerParser, tmp_path):
        with pytest.raises(FileNotFoundError):
            csv_parser.parse_file(tmp_path / "missing.csv")


@pytest.mark.unit
class TestCsvExport:

    def test_export_format(self, sample_transactions):
        result = export_csv(sample_transactions)

        assert result == (
            "Date,Amount,Description,Type\n"
            "2025-12-03,-40.00,Groceries,Withdrawal\n"
            "2025-12-02,250.00,Salary,Deposit\n"
            "2025-12-01,-15.50,Coffee beans,Withdrawal"
        )

    def test_export_quotes_commas(self, make_txn):
        result = export_csv([make_txn("a", "3", description="Coffee, cake")])

        assert result.splitlines()[1] == '2025-12-01,-3.00,"Coffee, cake",Withdrawal'

    def test_export_empty_ledger_is_header_only(self):
        assert export_csv([]) == "Date,Amount,Description,Type"

    def test_export_then_import_keeps_fields(self, csv_parser, sample_transactions):
        """Everything except the id survives a round trip"""
        result = csv_parser.parse(export_csv(sample_transactions))

        assert [(t.date, t.type, t.amount, t.description) for t in result] == [
            (t.date, t.type, t.amount, t.description) for t in sample_transactions
        ]


@pytest.mark.unit
def test_out_of_range_row_does_not_lose_good_rows(csv_parser: CsvLedgerParser):
    content = (
        "Date,Amount,Description,Type\n"
        "2025-12-01,10.00,Salary,Deposit\n"
        "2025-12-02,1e999999999,Huge,Deposit\n"
    )

    result = csv_parser.parse(content)

    assert [(t.description, t.amount) for t in result] == [("Salary", Decimal("10.00"))]
