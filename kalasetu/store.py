# kalasetu/store.py
"""
Document-store services, one per collection.

Each service exposes the same small CRUD surface (get_all, get_by_id, create,
update, delete) over a SQLAlchemy session; products and stories add
get_by_artisan and stories add the view/like counters.
"""
import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .models import Artisan, Payment, Product, Story

logger = logging.getLogger(__name__)


class CollectionService:
    def __init__(self, model, label: str):
        self.model = model
        self.label = label

    def get_all(self, db: Session) -> List:
        return db.query(self.model).order_by(self.model.created_at.desc()).all()

    def get_by_id(self, db: Session, doc_id: str):
        return db.get(self.model, doc_id)

    def create(self, db: Session, data: dict):
        doc = self.model(**data)
        db.add(doc)
        db.commit()
        db.refresh(doc)
        logger.info("Created %s %s", self.label, doc.id)
        return doc

    def update(self, db: Session, doc_id: str, data: dict):
        doc = self.get_by_id(db, doc_id)
        if doc is None:
            return None
        for key, value in data.items():
            setattr(doc, key, value)
        db.add(doc)
        db.commit()
        db.refresh(doc)
        logger.info("Updated %s %s (%s)", self.label, doc_id, ", ".join(sorted(data)) or "no fields")
        return doc

    def delete(self, db: Session, doc_id: str) -> bool:
        doc = self.get_by_id(db, doc_id)
        if doc is None:
            return False
        db.delete(doc)
        db.commit()
        logger.info("Deleted %s %s", self.label, doc_id)
        return True

    def count(self, db: Session, *criteria) -> int:
        return db.query(func.count(self.model.id)).filter(*criteria).scalar() or 0


class ArtisanOwnedService(CollectionService):
    def get_by_artisan(self, db: Session, artisan_id: str) -> List:
        return (
            db.query(self.model)
            .filter(self.model.artisan_id == artisan_id)
            .order_by(self.model.created_at.desc())
            .all()
        )


class StoryService(ArtisanOwnedService):
    def _bump(self, db: Session, story_id: str, column) -> Optional[int]:
        story = self.get_by_id(db, story_id)
        if story is None:
            return None
        # increment in SQL, not in Python
        db.query(Story).filter(Story.id == story_id).update({column: column + 1}, synchronize_session=False)
        db.commit()
        db.refresh(story)
        return getattr(story, column.key)

    def increment_views(self, db: Session, story_id: str) -> Optional[int]:
        return self._bump(db, story_id, Story.views)

    def increment_likes(self, db: Session, story_id: str) -> Optional[int]:
        return self._bump(db, story_id, Story.likes)

    def total_views(self, db: Session) -> int:
        return db.query(func.coalesce(func.sum(Story.views), 0)).scalar() or 0


artisan_service = CollectionService(Artisan, "artisan")
product_service = ArtisanOwnedService(Product, "product")
story_service = StoryService(Story, "story")
payment_service = CollectionService(Payment, "payment")


def artisan_fields(db: Session, artisan_id: str) -> Optional[dict]:
    """Denormalised artisan fields copied onto products and stories."""
    artisan = artisan_service.get_by_id(db, artisan_id)
    if artisan is None:
        return None
    return {
        "artisan_id": artisan.id,
        "artisan_name": artisan.name,
        "craft": artisan.craft,
        "location": artisan.location,
    }
