"""Base repository with shared get-by-ID patterns.

Subclasses specify model_class and not_found_error; the base provides
get_by_id / get_by_id_optional and chunked ID lookups.
"""

from typing import Iterable, Iterator, List, TypeVar, Generic, Optional, Type
from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import FolderHubException

ModelT = TypeVar("ModelT", bound=Base)

# Stay well below SQLite's bound-parameter limit for IN (...) clauses.
IN_CLAUSE_CHUNK = 500


def chunked(ids: Iterable[str], size: int = IN_CLAUSE_CHUNK) -> Iterator[List[str]]:
    """Yield *ids* in lists of at most *size* elements."""
    batch: List[str] = []
    for item in ids:
        batch.append(item)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., Folder)
        id_column:       Name of the primary-key column (default "id")
        not_found_error: Exception class to raise from get_by_id
    """

    model_class: Type[ModelT]
    id_column: str = "id"
    not_found_error: Type[FolderHubException]

    def __init__(self, db: Session):
        self.db = db

    def _base_query(self) -> Query:
        return self.db.query(self.model_class)

    def get_by_id(self, entity_id: str) -> ModelT:
        """Get entity by primary key. Raises not_found_error if missing."""
        entity = self.get_by_id_optional(entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_by_id_optional(self, entity_id: str) -> Optional[ModelT]:
        """Get entity by primary key, or None if not found."""
        col = getattr(self.model_class, self.id_column)
        return self._base_query().filter(col == entity_id).first()

    def get_many(self, entity_ids: Iterable[str]) -> List[ModelT]:
        """Load entities by primary key, in no particular order. Missing IDs are skipped."""
        col = getattr(self.model_class, self.id_column)
        found: List[ModelT] = []
        for batch in chunked(entity_ids):
            found.extend(self._base_query().filter(col.in_(batch)).all())
        return found

    def count_all(self) -> int:
        return self._base_query().count()
