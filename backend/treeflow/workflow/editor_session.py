"""
Editor Session — one user's in-progress workflow edit.

Holds the current tree and its history, runs user intents through
``tree_mutations`` and commits every real change. Undo and redo only
move the history cursor.

Usage::

    session = EditorSession()
    session.request_insert("start", NodeKind.BRANCH)
    branch_id = session.get_current_tree().child.id
    session.request_insert(branch_id, NodeKind.ACTION, Slot.TRUE)
    session.undo()
    data = session.export_tree()

``EditorSessionManager`` keeps independent sessions by id for the
HTTP layer.
"""

from __future__ import annotations

import threading
import uuid
from logging import getLogger
from typing import Any, Dict, List, Optional, Union

from treeflow.config import get_config
from treeflow.workflow.tree_mutations import delete_node, insert_node, relabel_node
from treeflow.workflow.workflow_export import export_tree, tree_from_dict
from treeflow.workflow.workflow_history import WorkflowHistory
from treeflow.workflow.workflow_model import (
    NodeKind,
    SavedWorkflow,
    Slot,
    WorkflowNode,
    collect_ids,
    copy_tree,
    create_root,
    validate_root,
)
from treeflow.workflow.workflow_store import WorkflowStore, get_workflow_store

logger = getLogger(__name__)


class EditorSession:
    """Current tree + linear history for a single editor."""

    def __init__(
        self,
        initial_tree: Optional[WorkflowNode] = None,
        session_id: Optional[str] = None,
        root_label: str = "Start",
        workflow_id: Optional[str] = None,
        workflow_name: Optional[str] = None,
    ) -> None:
        """Start from ``initial_tree``, or from a fresh start node.

        Raises:
            ValueError: If ``initial_tree`` is not rooted at the start
                action node or repeats a node id.
        """
        if initial_tree is None:
            initial_tree = create_root(root_label)
        else:
            _check_tree(initial_tree)
        self._session_id = session_id or str(uuid.uuid4())[:8]
        self._history = WorkflowHistory(initial_tree)
        self._tree = self._history.current()
        self.workflow_id = workflow_id
        self.workflow_name = workflow_name

    @classmethod
    def from_saved(
        cls,
        saved: SavedWorkflow,
        session_id: Optional[str] = None,
    ) -> "EditorSession":
        """Open a stored workflow. Its tree is the first history entry.

        Raises:
            ValueError: If the stored tree is malformed.
        """
        return cls(
            initial_tree=tree_from_dict(saved.tree),
            session_id=session_id,
            workflow_id=saved.id,
            workflow_name=saved.name,
        )

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def history(self) -> WorkflowHistory:
        return self._history

    # ========================================================================
    # Queries
    # ========================================================================

    def get_current_tree(self) -> WorkflowNode:
        """A copy of the current tree; changing it does not affect the session."""
        return copy_tree(self._tree)

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def export_tree(self) -> Dict[str, Any]:
        return export_tree(self._tree)

    def state(self) -> Dict[str, Any]:
        """Snapshot for the front-end: tree plus undo/redo availability."""
        return {
            "session_id": self._session_id,
            "workflow_id": self.workflow_id,
            "workflow_name": self.workflow_name,
            "tree": self.export_tree(),
            "can_undo": self.can_undo(),
            "can_redo": self.can_redo(),
        }

    # ========================================================================
    # Intents
    # ========================================================================

    def request_insert(
        self,
        parent_id: str,
        kind: Union[NodeKind, str],
        slot: Optional[Union[Slot, str]] = None,
    ) -> bool:
        return self._apply(
            insert_node(self._tree, parent_id, kind, slot),
            f"insert {NodeKind(kind).value} under {parent_id}",
        )

    def request_delete(self, node_id: str) -> bool:
        return self._apply(delete_node(self._tree, node_id), f"delete {node_id}")

    def request_relabel(self, node_id: str, label: str) -> bool:
        return self._apply(relabel_node(self._tree, node_id, label), f"relabel {node_id}")

    def undo(self) -> bool:
        if not self._history.undo():
            return False
        self._tree = self._history.current()
        logger.debug(f"[{self._session_id}] undo → entry {self._history.cursor}")
        return True

    def redo(self) -> bool:
        if not self._history.redo():
            return False
        self._tree = self._history.current()
        logger.debug(f"[{self._session_id}] redo → entry {self._history.cursor}")
        return True

    def to_saved(
        self,
        name: Optional[str] = None,
        workflow_id: Optional[str] = None,
    ) -> SavedWorkflow:
        """Build the persisted form of the current tree.

        Reuses the id this session was opened from unless ``workflow_id``
        is given; a new id is generated when neither exists.
        """
        wid = workflow_id or self.workflow_id
        saved = SavedWorkflow(
            name=name or self.workflow_name or "Untitled Workflow",
            tree=self.export_tree(),
            **({"id": wid} if wid else {}),
        )
        self.workflow_id = saved.id
        self.workflow_name = saved.name
        return saved

    def _apply(self, new_tree: Optional[WorkflowNode], action: str) -> bool:
        if new_tree is None:
            logger.debug(f"[{self._session_id}] {action}: no-op")
            return False
        self._tree = new_tree
        self._history.commit(new_tree)
        logger.debug(f"[{self._session_id}] {action} (history {len(self._history)})")
        return True


def _check_tree(tree: WorkflowNode) -> None:
    validate_root(tree)
    ids = collect_ids(tree)
    if len(ids) != len(set(ids)):
        raise ValueError("Workflow tree repeats a node id")


# ============================================================================
# Session Manager
# ============================================================================


class SessionNotFoundError(KeyError):
    """No editor session with the given id."""


class EditorSessionManager:
    """In-process registry of independent editor sessions."""

    def __init__(self, store: Optional[WorkflowStore] = None) -> None:
        self._store = store
        self._sessions: Dict[str, EditorSession] = {}
        self._lock = threading.Lock()

    @property
    def store(self) -> WorkflowStore:
        if self._store is None:
            self._store = get_workflow_store()
        return self._store

    def create(self, workflow_id: Optional[str] = None) -> EditorSession:
        """Open a new session, empty or from a stored workflow.

        Raises:
            LookupError: If ``workflow_id`` is not in the store.
            ValueError: If the stored tree is malformed.
        """
        if workflow_id:
            saved = self.store.load(workflow_id)
            if saved is None:
                raise LookupError(f"Workflow not found: {workflow_id}")
            session = EditorSession.from_saved(saved)
        else:
            session = EditorSession(root_label=get_config("editor").root_label)

        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(
            f"[{session.session_id}] Editor session created"
            + (f" from workflow {workflow_id}" if workflow_id else "")
        )
        return session

    def get(self, session_id: str) -> EditorSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def close(self, session_id: str) -> None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        logger.info(f"[{session_id}] Editor session closed")

    def list_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def save(
        self,
        session_id: str,
        name: Optional[str] = None,
        workflow_id: Optional[str] = None,
    ) -> SavedWorkflow:
        """Persist a session's current tree to the store."""
        saved = self.get(session_id).to_saved(name=name, workflow_id=workflow_id)
        self.store.save(saved)
        return saved


# ── Singleton ──

_manager_instance: Optional[EditorSessionManager] = None


def get_session_manager() -> EditorSessionManager:
    """Return the global EditorSessionManager singleton."""
    global _manager_instance
    if _manager_instance is None:
        _manager_instance = EditorSessionManager()
    return _manager_instance
