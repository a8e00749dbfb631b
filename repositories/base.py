"""
Common data access for the repositories.

Two kinds of writes exist:
- ``create``/``update``/``delete`` commit on their own (single-row API calls)
- ``add`` only flushes, for writes that are part of a larger unit of work
  (starter meal seeding, entry swaps) whose commit belongs to the service
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType]):
    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def exists(self, entity_id: int) -> bool:
        return self.get_by_id(entity_id) is not None

    def add(self, entity: ModelType) -> ModelType:
        """Stage ``entity`` and flush so generated keys are available"""
        self.db.add(entity)
        self.db.flush()
        return entity

    def create(self, entity: ModelType) -> ModelType:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Commit pending changes on an already attached entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: int) -> bool:
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        self.db.delete(entity)
        self.db.commit()
        return True
