"""
Workspace CRUD routes.
"""
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_current_user, get_document_store
from api.models.requests import WorkspaceCreateRequest, WorkspaceUpdateRequest
from api.models.responses import DeleteResponse, WorkspaceListResponse, WorkspaceResponse
from core.config import WORKSPACES_COLLECTION
from core.document_store import DocumentStore, get_owned_document
from models.content_models import CallerIdentity
from services.processing.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_COLOR = "#3B82F6"
DEFAULT_ICON = "📁"


@router.get("", response_model=WorkspaceListResponse)
def list_workspaces(
    limit: int = Query(default=50, ge=1, le=500),
    order_by: str = Query(default="createdAt", alias="orderBy"),
    order_direction: Literal["asc", "desc"] = Query(default="desc", alias="orderDirection"),
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    workspaces = store.query(
        WORKSPACES_COLLECTION,
        filters=[("userId", "==", user.uid)],
        order_by=order_by,
        descending=order_direction == "desc",
        limit=limit,
    )
    return WorkspaceListResponse(workspaces=workspaces, count=len(workspaces))


@router.get("/{workspace_id}", response_model=WorkspaceResponse, response_model_exclude_none=True)
def get_workspace(
    workspace_id: str,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    workspace = get_owned_document(store, WORKSPACES_COLLECTION, workspace_id, user.uid, "Workspace")
    return WorkspaceResponse(workspace=workspace)


@router.post("", response_model=WorkspaceResponse, status_code=201)
def create_workspace(
    body: WorkspaceCreateRequest,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    now = utc_now_iso()
    workspace = store.create(WORKSPACES_COLLECTION, {
        "userId": user.uid,
        "name": body.name,
        "description": (body.description or "").strip(),
        "color": body.color or DEFAULT_COLOR,
        "icon": body.icon or DEFAULT_ICON,
        "noteCount": 0,
        "createdAt": now,
        "updatedAt": now,
    })
    logger.info(f"Created workspace {workspace['id']} for {user.uid}")
    return WorkspaceResponse(message="Workspace created successfully", workspace=workspace)


@router.put("/{workspace_id}", response_model=WorkspaceResponse)
def update_workspace(
    workspace_id: str,
    body: WorkspaceUpdateRequest,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    get_owned_document(store, WORKSPACES_COLLECTION, workspace_id, user.uid, "Workspace")

    changes = body.model_dump(exclude_unset=True)
    if "name" in changes and changes["name"] is None:
        del changes["name"]
    if "description" in changes:
        changes["description"] = (changes["description"] or "").strip()
    changes["updatedAt"] = utc_now_iso()

    workspace = store.update(WORKSPACES_COLLECTION, workspace_id, changes)
    return WorkspaceResponse(message="Workspace updated successfully", workspace=workspace)


@router.delete("/{workspace_id}", response_model=DeleteResponse)
def delete_workspace(
    workspace_id: str,
    user: CallerIdentity = Depends(get_current_user),
    store: DocumentStore = Depends(get_document_store),
):
    get_owned_document(store, WORKSPACES_COLLECTION, workspace_id, user.uid, "Workspace")
    store.delete(WORKSPACES_COLLECTION, workspace_id)
    logger.info(f"Deleted workspace {workspace_id}")
    return DeleteResponse(message="Workspace deleted successfully", workspaceId=workspace_id)
