"""
Tree Locator — find a node by id and report where it hangs.

Parents are not stored on nodes; the locator re-derives the
parent and slot by walking the tree from the root.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from treeflow.workflow.workflow_model import Slot, WorkflowNode


@dataclass
class NodeLocation:
    """A located node, its parent, and the parent slot holding it.

    ``parent`` and ``slot`` are ``None`` for the root.
    """
    node: WorkflowNode
    parent: Optional[WorkflowNode] = None
    slot: Optional[Slot] = None


def locate(root: WorkflowNode, target_id: str) -> Optional[NodeLocation]:
    """Depth-first search for ``target_id``.

    Action nodes descend into their child; branch nodes descend into
    the true path first, then the false path. Returns ``None`` when no
    node has that id.
    """
    if root.id == target_id:
        return NodeLocation(node=root)

    # Explicit stack: chains may be deeper than the recursion limit.
    stack: List[Tuple[WorkflowNode, Slot, WorkflowNode]] = _children(root)
    while stack:
        parent, slot, node = stack.pop()
        if node.id == target_id:
            return NodeLocation(node=node, parent=parent, slot=slot)
        stack.extend(_children(node))
    return None


def _children(parent: WorkflowNode) -> List[Tuple[WorkflowNode, Slot, WorkflowNode]]:
    """Non-empty slots of ``parent``, reversed so the stack pops them in order."""
    return [
        (parent, slot, child)
        for slot, child in reversed(parent.slots())
        if child is not None
    ]
