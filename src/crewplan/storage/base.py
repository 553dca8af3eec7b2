from abc import ABC, abstractmethod
from typing import ContextManager
from sqlalchemy.orm import Session


class StorageAdapter(ABC):
    """Database backend holding teams, rosters, holidays, bookings and daily assignments."""

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    @abstractmethod
    def health_check(self) -> bool:
        pass

    @abstractmethod
    def create_tables(self) -> None:
        """Create any missing scheduling tables."""
        pass

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        """Transactional session: commit on clean exit, rollback on error."""
        pass
