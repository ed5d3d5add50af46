"""
Workflow Store — JSON-file persistence for saved workflows.

Each ``SavedWorkflow`` is written as one JSON file named after its
id under the configured storage directory. The tree is stored in its
exported form, so files are readable without this package.

Ids must pass ``is_valid_workflow_id``; anything else is rejected
rather than rewritten, so two ids never share a file.
"""

from __future__ import annotations

import json
from logging import getLogger
from pathlib import Path
from typing import List, Optional

from treeflow.config import get_config
from treeflow.workflow.workflow_model import SavedWorkflow, is_valid_workflow_id

logger = getLogger(__name__)

# json raises RecursionError on nesting deeper than the interpreter allows
_READ_ERRORS = (OSError, ValueError, TypeError, RecursionError)


class WorkflowStore:
    """Persist and load SavedWorkflow objects as JSON files."""

    def __init__(self, storage_dir: Optional[Path] = None) -> None:
        config = get_config("editor")
        self._dir = storage_dir or config.resolve_storage_dir()
        self._indent = config.export_indent
        self._dir.mkdir(parents=True, exist_ok=True)
        logger.info(f"WorkflowStore initialized at {self._dir}")

    @property
    def storage_dir(self) -> Path:
        return self._dir

    # ── CRUD ──

    def save(self, workflow: SavedWorkflow) -> None:
        """Save (create or update) a workflow.

        Raises:
            ValueError: If the tree nests deeper than ``json`` can encode.
        """
        workflow.touch()
        path = self._path_for(workflow.id)
        payload = workflow.model_dump(exclude={"tree"})
        payload["tree"] = workflow.tree
        try:
            text = json.dumps(payload, indent=self._indent, ensure_ascii=False)
        except RecursionError:
            raise ValueError(
                f"Workflow {workflow.id} is nested too deeply to encode as JSON"
            ) from None
        path.write_text(text, encoding="utf-8")
        logger.info(f"Workflow saved: {workflow.name} ({workflow.id})")

    def load(self, workflow_id: str) -> Optional[SavedWorkflow]:
        """Load a single workflow by ID."""
        if not is_valid_workflow_id(workflow_id):
            return None
        path = self._path_for(workflow_id)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return SavedWorkflow(**data)
        except _READ_ERRORS as e:
            logger.error(f"Failed to load workflow {workflow_id}: {e}")
            return None

    def delete(self, workflow_id: str) -> bool:
        """Delete a saved workflow."""
        if not self.exists(workflow_id):
            return False
        self._path_for(workflow_id).unlink()
        logger.info(f"Workflow deleted: {workflow_id}")
        return True

    def list_all(self) -> List[SavedWorkflow]:
        """List all saved workflows."""
        workflows: List[SavedWorkflow] = []
        for path in sorted(self._dir.glob("*.json")):
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                workflows.append(SavedWorkflow(**data))
            except _READ_ERRORS as e:
                logger.warning(f"Skipping malformed workflow file {path.name}: {e}")
        return workflows

    def exists(self, workflow_id: str) -> bool:
        return is_valid_workflow_id(workflow_id) and self._path_for(workflow_id).exists()

    # ── Internals ──

    def _path_for(self, workflow_id: str) -> Path:
        if not is_valid_workflow_id(workflow_id):
            raise ValueError(f"Invalid workflow id: {workflow_id!r}")
        return self._dir / f"{workflow_id}.json"


# ── Singleton ──

_store_instance: Optional[WorkflowStore] = None


def get_workflow_store() -> WorkflowStore:
    """Return the global WorkflowStore singleton."""
    global _store_instance
    if _store_instance is None:
        _store_instance = WorkflowStore()
    return _store_instance
