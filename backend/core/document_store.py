"""
Owner-scoped document store backed by Firestore.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from core.exceptions import ForbiddenError, NotFoundError

# (field, operator, value), e.g. ("userId", "==", uid)
Filter = Tuple[str, str, Any]


class DocumentStore:
    """Thin CRUD/query layer over a Firestore client."""

    def __init__(self, client):
        self.client = client

    @staticmethod
    def _to_dict(snapshot) -> Dict[str, Any]:
        return {"id": snapshot.id, **(snapshot.to_dict() or {})}

    def create(self, collection: str, data: Dict[str, Any]) -> Dict[str, Any]:
        _, doc_ref = self.client.collection(collection).add(data)
        return {"id": doc_ref.id, **data}

    def get(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        snapshot = self.client.collection(collection).document(doc_id).get()
        if not snapshot.exists:
            return None
        return self._to_dict(snapshot)

    def update(self, collection: str, doc_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        doc_ref = self.client.collection(collection).document(doc_id)
        doc_ref.update(changes)
        return self._to_dict(doc_ref.get())

    def delete(self, collection: str, doc_id: str) -> None:
        self.client.collection(collection).document(doc_id).delete()

    def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = self.client.collection(collection)
        for field, op, value in filters:
            query = query.where(filter=FieldFilter(field, op, value))
        if order_by:
            direction = firestore.Query.DESCENDING if descending else firestore.Query.ASCENDING
            query = query.order_by(order_by, direction=direction)
        if limit:
            query = query.limit(limit)
        return [self._to_dict(snapshot) for snapshot in query.stream()]


def get_owned_document(
    store: DocumentStore,
    collection: str,
    doc_id: str,
    user_id: str,
    label: str,
) -> Dict[str, Any]:
    """
    Load a document and check that ``user_id`` owns it.

    Raises:
        NotFoundError: no such document
        ForbiddenError: the document belongs to someone else
    """
    document = store.get(collection, doc_id)
    if document is None:
        raise NotFoundError(f"The requested {label.lower()} does not exist", error=f"{label} not found")
    if document.get("userId") != user_id:
        raise ForbiddenError(f"You do not have access to this {label.lower()}", error="Access denied")
    return document
