from abc import ABC, abstractmethod
from typing import Generic, Iterable, TypeVar, Optional, List, Dict, Any
from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """Abstract base repository defining CRUD contracts using SQLAlchemy Session."""

    # Columns that update() may change; everything else is ignored
    updatable_fields: Iterable[str] = ()

    @abstractmethod
    def create(self, session: Session, entity: Any) -> T:
        pass

    @abstractmethod
    def get(self, session: Session, id: str) -> Optional[T]:
        pass

    def update(self, session: Session, id: str, updates: Dict[str, Any]) -> Optional[T]:
        entity = self.get(session, id)
        if not entity:
            return None

        for name in self.updatable_fields:
            if name in updates:
                setattr(entity, name, updates[name])
        session.flush()
        return entity

    def delete(self, session: Session, id: str) -> bool:
        entity = self.get(session, id)
        if not entity:
            return False
        session.delete(entity)
        session.flush()
        return True

    @abstractmethod
    def list(self, session: Session, limit: int = 100, offset: int = 0) -> List[T]:
        pass
