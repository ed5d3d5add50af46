"""
Workflow Editor Controller — HTTP surface for the canvas front-end.

Each editor session is addressed by id. Mutating endpoints return the
session state plus ``changed`` so the UI can tell a no-op apart from
an edit.
"""

from __future__ import annotations

from logging import getLogger
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field

from treeflow.config import get_config
from treeflow.workflow.editor_session import (
    EditorSession,
    EditorSessionManager,
    SessionNotFoundError,
    get_session_manager,
)
from treeflow.workflow.workflow_export import export_tree_json
from treeflow.workflow.workflow_model import NodeKind, Slot

logger = getLogger(__name__)

router = APIRouter(prefix="/api/workflow-editor", tags=["workflow-editor"])


# ── Request bodies ──


class CreateSessionRequest(BaseModel):
    workflow_id: Optional[str] = Field(default=None, description="Stored workflow to open")


class InsertNodeRequest(BaseModel):
    parent_id: str
    kind: NodeKind
    slot: Optional[Slot] = Field(default=None, description="'true' or 'false' for a branch parent")


class RelabelNodeRequest(BaseModel):
    label: str


class SaveWorkflowRequest(BaseModel):
    name: Optional[str] = None
    workflow_id: Optional[str] = None


# ── Helpers ──


def _session(manager: EditorSessionManager, session_id: str) -> EditorSession:
    try:
        return manager.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")


def _state(session: EditorSession, **extra: Any) -> JSONResponse:
    # JSONResponse skips FastAPI's recursive encoder, which deep trees overflow.
    return JSONResponse(content={**session.state(), **extra})


def _result(session: EditorSession, changed: bool) -> JSONResponse:
    return _state(session, changed=changed)


# ── Sessions ──


@router.post("/sessions")
def create_session(
    payload: Optional[CreateSessionRequest] = None,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    workflow_id = payload.workflow_id if payload else None
    try:
        session = manager.create(workflow_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        logger.error(f"Stored workflow {workflow_id} is malformed: {e}")
        raise HTTPException(status_code=422, detail=f"Stored workflow is malformed: {e}")
    return _state(session)


@router.get("/sessions/{session_id}")
def get_session(
    session_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    return _state(_session(manager, session_id))


@router.delete("/sessions/{session_id}")
def close_session(
    session_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    try:
        manager.close(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail=f"Session not found: {session_id}")
    return {"success": True, "session_id": session_id}


# ── Node edits ──


@router.post("/sessions/{session_id}/nodes")
def insert_node(
    session_id: str,
    payload: InsertNodeRequest,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    session = _session(manager, session_id)
    changed = session.request_insert(payload.parent_id, payload.kind, payload.slot)
    return _result(session, changed)


@router.patch("/sessions/{session_id}/nodes/{node_id}")
def relabel_node(
    session_id: str,
    node_id: str,
    payload: RelabelNodeRequest,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    session = _session(manager, session_id)
    return _result(session, session.request_relabel(node_id, payload.label))


@router.delete("/sessions/{session_id}/nodes/{node_id}")
def delete_node(
    session_id: str,
    node_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    session = _session(manager, session_id)
    return _result(session, session.request_delete(node_id))


# ── History ──


@router.post("/sessions/{session_id}/undo")
def undo(
    session_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    session = _session(manager, session_id)
    return _result(session, session.undo())


@router.post("/sessions/{session_id}/redo")
def redo(
    session_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    session = _session(manager, session_id)
    return _result(session, session.redo())


# ── Export / persistence ──


@router.get("/sessions/{session_id}/export")
def export_session(
    session_id: str,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    tree = _session(manager, session_id).get_current_tree()
    try:
        content = export_tree_json(tree, get_config("editor").export_indent)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return Response(content=content, media_type="application/json")


@router.post("/sessions/{session_id}/save")
def save_session(
    session_id: str,
    payload: Optional[SaveWorkflowRequest] = None,
    manager: EditorSessionManager = Depends(get_session_manager),
):
    _session(manager, session_id)
    payload = payload or SaveWorkflowRequest()
    try:
        saved = manager.save(session_id, name=payload.name, workflow_id=payload.workflow_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return {
        "id": saved.id,
        "name": saved.name,
        "updated_at": saved.updated_at,
    }


@router.get("/workflows")
def list_workflows(
    manager: EditorSessionManager = Depends(get_session_manager),
):
    return [
        {"id": w.id, "name": w.name, "updated_at": w.updated_at}
        for w in manager.store.list_all()
    ]
