"""Generic CRUD over identified collections.

Every identified collection goes through ``EntityRepository``, which owns
its allocator, so identifier assignment is implemented exactly once.
"""
from typing import Any, Callable, Dict, List, Optional

from campus_suite.core.errors import NotFound
from campus_suite.core.logging import get_logger
from campus_suite.services.allocator import GapFillingAllocator

logger = get_logger(__name__)

# collection name -> identifier field
COLLECTIONS: Dict[str, str] = {
    "users": "user_id",
    "loans": "loan_id",
    "loan_applications": "application_id",
    "scholarships": "scholarship_id",
    "scholarship_applications": "application_id",
    "products": "product_id",
    "orders": "order_id",
    "user_orders": "order_id",
    "banners": "banner_id",
    "notifications": "notification_id",
}

LABELS: Dict[str, str] = {
    "users": "User",
    "loans": "Loan",
    "loan_applications": "Loan application",
    "scholarships": "Scholarship",
    "scholarship_applications": "Scholarship application",
    "products": "Product",
    "orders": "Order",
    "user_orders": "Order",
    "banners": "Banner",
    "notifications": "Notification",
}


class EntityRepository:
    """CRUD for one collection of identified entities."""

    def __init__(self, store, collection: str, id_field: Optional[str] = None):
        self.store = store
        self.collection = collection
        self.id_field = id_field or COLLECTIONS[collection]
        self.label = LABELS.get(collection, collection)
        self.allocator = GapFillingAllocator(store, collection, self.id_field)

    def _not_found(self, identifier: int) -> NotFound:
        return NotFound(f"{self.label} not found", details={self.id_field: identifier})

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Persist ``payload`` under a freshly allocated identifier."""
        document = self.allocator.insert(lambda identifier: dict(payload))
        logger.info(
            f"{self.label} {document[self.id_field]} created",
            extra={"collection": self.collection, "identifier": document[self.id_field]},
        )
        return document

    def get(self, identifier: int) -> Dict[str, Any]:
        document = self.store.find(self.collection, identifier)
        if document is None:
            raise self._not_found(identifier)
        return document

    def list(self, sort_key: Optional[Callable[[Dict[str, Any]], Any]] = None, reverse: bool = False) -> List[Dict[str, Any]]:
        """All documents, in identifier order unless ``sort_key`` is given."""
        documents = self.store.find_all(self.collection)
        if sort_key is not None:
            documents.sort(key=sort_key, reverse=reverse)
        return documents

    def find_by(self, **criteria) -> List[Dict[str, Any]]:
        return [
            document for document in self.store.find_all(self.collection)
            if all(document.get(field) == value for field, value in criteria.items())
        ]

    def find_one_by(self, **criteria) -> Optional[Dict[str, Any]]:
        matches = self.find_by(**criteria)
        return matches[0] if matches else None

    def update(self, identifier: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        # The identifier itself is never rewritten
        fields = {key: value for key, value in fields.items() if key != self.id_field}
        document = self.store.update(self.collection, identifier, fields)
        if document is None:
            raise self._not_found(identifier)
        return document

    def modify(self, identifier: int, mutate: Callable[[Dict[str, Any]], None]) -> Dict[str, Any]:
        document = self.store.modify(self.collection, identifier, mutate)
        if document is None:
            raise self._not_found(identifier)
        return document

    def delete(self, identifier: int) -> Dict[str, Any]:
        document = self.store.delete(self.collection, identifier)
        if document is None:
            raise self._not_found(identifier)
        logger.info(
            f"{self.label} {identifier} deleted",
            extra={"collection": self.collection, "identifier": identifier},
        )
        return document
