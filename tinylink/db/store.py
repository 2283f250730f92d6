from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List

from tinylink.schemas.LinkRecord import LinkRecord


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LinkStore(ABC):
    """
    Record store adapter: the only component that reads or writes LinkRecords.

    Implementations must make `create` an atomic insert-if-absent and
    `increment_click` an atomic additive update. Every method is a single
    round trip to the backend.
    """

    @abstractmethod
    def create(self, code: str, url: str) -> LinkRecord:
        """Insert a new record with zero clicks. Raises Conflict if `code` exists."""

    @abstractmethod
    def get(self, code: str) -> LinkRecord:
        """Raises NotFound if there is no record for `code`."""

    @abstractmethod
    def list(self) -> List[LinkRecord]:
        """Every record, in no particular order."""

    @abstractmethod
    def delete(self, code: str) -> None:
        """Raises NotFound if there is no record for `code`."""

    @abstractmethod
    def increment_click(self, code: str) -> None:
        """Add one click and stamp lastClickedAt. Raises NotFound if absent."""

    def initialize(self) -> None:
        pass

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass
