from abc import ABC, abstractmethod
from pathlib import Path
from typing import List
from banking_ledger.domain.models import Transaction

class LedgerFileFormatError(ValueError):
    """Raised when a whole file is unusable (as opposed to a bad row)."""
    pass

class LedgerParser(ABC):
    """
    Abstract base class for ledger file parsers.

    Parsers turn file text into new Transaction objects with fresh ids.
    Bad rows are skipped; only a file that is unusable as a whole raises.
    """

    @abstractmethod
    def parse(self, content: str) -> List[Transaction]:
        """
        Parse file content and return a list of transactions.

        Args:
            content: Full text of the file

        Returns:
            List of Transaction objects, possibly empty

        Raises:
            LedgerFileFormatError: If the content is not a valid file
        """
        pass

    @abstractmethod
    def validate_content(self, content: str) -> None:
        """
        Validate that the content matches the expected format.

        Raises:
            LedgerFileFormatError: If the content is invalid
        """
        pass

    def parse_file(self, filepath: Path | str) -> List[Transaction]:
        """
        Read a file from disk and parse it.

        Raises:
            FileNotFoundError: If file doesn't exist
            LedgerFileFormatError: If the content is invalid
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"File does not exist on path {path}")

        return self.parse(path.read_text(encoding="utf-8"))
