from enum import Enum

class TransactionType(Enum):
    """Represents whether money is coming in or out"""
    DEPOSIT = "deposit" # in
    WITHDRAWAL = "withdrawal" # out

    @property
    def label(self) -> str:
        """Capitalized name used in CSV files and tables"""
        return self.value.capitalize()


class FilterType(Enum):
    """Transaction type selector for the ledger view"""
    ALL = "all"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"

    def matches(self, transaction_type: TransactionType) -> bool:
        return self is FilterType.ALL or self.value == transaction_type.value


class Theme(Enum):
    LIGHT = "light"
    DARK = "dark"
