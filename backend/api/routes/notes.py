"""
Note CRUD and search routes. Every note is scoped to the authenticated caller.
"""
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_user, get_document_store
from api.models.requests import NoteCreateRequest, NoteUpdateRequest
from api.models.responses import DeleteResponse, NoteListResponse, NoteResponse, NoteSearchResponse
from core.config import NOTES_COLLECTION
from core.document_store import DocumentStore, get_owned_document
from core.exceptions import ValidationError
from models.content_models import CallerIdentity
from services.processing.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=NoteListResponse)
def list_notes(
    limit: int = Query(default=50, ge=1, le=500),
    order_by: str = Query(default="updatedAt", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query(default="desc", alias="orderDirection"),
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    notes = store.query(
        NOTES_COLLECTION,
        filters=[("userId", "==", user.uid)],
        order_by=order_by,
        descending=order_direction == "desc",
        limit=limit,
    )
    return NoteListResponse(notes=notes, count=len(notes))


@router.get("/search/query", response_model=NoteSearchResponse)
def search_notes(
    q: Optional[str] = None,
    tags: Optional[List[str]] = Query(default=None),
    category: Optional[str] = None,
    limit: int = Query(default=20, ge=1, le=500),
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    """
    Search the caller's notes.

    Tags and category are matched by the store; the free-text ``q`` is
    matched case-insensitively against title and content afterwards, so it
    only sees the first ``limit`` candidates.
    """
    if not q and not tags and not category:
        raise ValidationError(
            "Please provide a search query, tags, or category",
            error="Search query required",
        )

    filters = [("userId", "==", user.uid)]
    if tags:
        filters.append(("tags", "array_contains_any", tags))
    if category:
        filters.append(("category", "==", category))

    notes = store.query(NOTES_COLLECTION, filters=filters, limit=limit)

    if q:
        term = q.lower()
        notes = [
            note for note in notes
            if term in (note.get("title") or "").lower() or term in (note.get("content") or "").lower()
        ]

    return NoteSearchResponse(
        notes=notes,
        count=len(notes),
        searchQuery={"q": q, "tags": tags, "category": category},
    )


@router.get("/{note_id}", response_model=NoteResponse)
def get_note(
    note_id: str,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    note = get_owned_document(store, NOTES_COLLECTION, note_id, user.uid, "Note")
    return NoteResponse(note=note)


@router.post("", response_model=NoteResponse, status_code=201)
def create_note(
    body: NoteCreateRequest,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    if not body.title and not body.content:
        raise ValidationError(
            "Please provide either a title or content for the note",
            error="Title or content is required",
        )

    now = utc_now_iso()
    note = store.create(NOTES_COLLECTION, {
        "userId": user.uid,
        "title": body.title or "Untitled Note",
        "content": body.content or "",
        "tags": body.tags,
        "links": body.links,
        "category": body.category,
        "createdAt": now,
        "updatedAt": now,
        "version": 1,
    })
    logger.info(f"Created note {note['id']} for {user.uid}")
    return NoteResponse(note=note)


@router.put("/{note_id}", response_model=NoteResponse)
def update_note(
    note_id: str,
    body: NoteUpdateRequest,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    """Apply only the fields present in the body and bump the version."""
    existing = get_owned_document(store, NOTES_COLLECTION, note_id, user.uid, "Note")

    changes = body.model_dump(exclude_unset=True)
    for field in ("tags", "links"):
        if field in changes and changes[field] is None:
            changes[field] = []
    changes["updatedAt"] = utc_now_iso()
    changes["version"] = (existing.get("version") or 1) + 1

    note = store.update(NOTES_COLLECTION, note_id, changes)
    return NoteResponse(note=note)


@router.delete("/{note_id}", response_model=DeleteResponse, response_model_exclude_none=True)
def delete_note(
    note_id: str,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    get_owned_document(store, NOTES_COLLECTION, note_id, user.uid, "Note")
    store.delete(NOTES_COLLECTION, note_id)
    logger.info(f"Deleted note {note_id}")
    return DeleteResponse(message="Note deleted successfully")
