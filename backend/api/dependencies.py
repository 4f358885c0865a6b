"""
Shared FastAPI dependencies for authenticated, store-backed routes.
"""
from typing import Optional

from fastapi import Header

from core.document_store import DocumentStore
from core.exceptions import UnauthorizedError
from core.firebase import get_firestore_client, token_verifier
from models.content_models import CallerIdentity


def get_document_store() -> DocumentStore:
    """Firestore-backed store; raises 503 when Firebase is not configured."""
    return DocumentStore(get_firestore_client())


def get_current_user(authorization: Optional[str] = Header(default=None)) -> CallerIdentity:
    """Resolve the caller from an ``Authorization: Bearer <id token>`` header."""
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Please provide a valid authorization token", error="No token provided")

    token = authorization[len("Bearer "):].strip()
    if not token:
        raise UnauthorizedError("Please provide a valid authorization token", error="No token provided")
    return token_verifier.verify(token)
