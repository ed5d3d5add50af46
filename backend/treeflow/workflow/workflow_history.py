"""
Workflow History — linear undo/redo over tree snapshots.

Each entry is an independent deep copy of the tree. Committing after
an undo drops the undone entries; there is no branching history.
"""

from __future__ import annotations

from logging import getLogger
from typing import List

from treeflow.workflow.workflow_model import WorkflowNode, copy_tree

logger = getLogger(__name__)


class WorkflowHistory:
    """Ordered snapshots with a cursor on the active one."""

    def __init__(self, initial: WorkflowNode) -> None:
        self._entries: List[WorkflowNode] = [copy_tree(initial)]
        self._cursor: int = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def entries(self) -> List[WorkflowNode]:
        """Copies of every snapshot, oldest first."""
        return [copy_tree(e) for e in self._entries]

    def __len__(self) -> int:
        return len(self._entries)

    def current(self) -> WorkflowNode:
        """A copy of the active snapshot."""
        return copy_tree(self._entries[self._cursor])

    def commit(self, tree: WorkflowNode) -> None:
        """Append ``tree`` after the cursor, discarding any redo entries."""
        dropped = len(self._entries) - self._cursor - 1
        del self._entries[self._cursor + 1:]
        self._entries.append(copy_tree(tree))
        self._cursor = len(self._entries) - 1
        if dropped:
            logger.debug(f"History commit discarded {dropped} redo entries")

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._entries) - 1

    def undo(self) -> bool:
        if not self.can_undo():
            return False
        self._cursor -= 1
        return True

    def redo(self) -> bool:
        if not self.can_redo():
            return False
        self._cursor += 1
        return True
