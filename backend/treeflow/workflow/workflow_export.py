"""
Workflow Export — nested, order-preserving serialization of a tree.

Each node becomes ``{"id", "kind", "label", "children"}`` in that key
order. Action ``children`` is the next node or ``None``; Branch
``children`` is ``{"true": ..., "false": ...}``; End nodes have no
``children`` key. ``tree_from_dict`` rebuilds an identical tree.

Both directions walk the tree with an explicit stack, so chains deeper
than the interpreter's recursion limit export and load.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Set, Tuple

from treeflow.workflow.workflow_model import (
    ActionNode,
    BranchNode,
    NodeKind,
    Slot,
    WorkflowNode,
    create_node,
    validate_root,
)


def export_tree(tree: WorkflowNode) -> Dict[str, Any]:
    """Serialize a tree to nested dicts."""
    root = _export_shallow(tree)
    stack: List[Tuple[WorkflowNode, Dict[str, Any]]] = [(tree, root)]
    while stack:
        node, data = stack.pop()
        for slot, child in node.slots():
            if child is None:
                continue
            child_data = _export_shallow(child)
            if slot is Slot.NEXT:
                data["children"] = child_data
            else:
                data["children"][slot.value] = child_data
            stack.append((child, child_data))
    return root


def _export_shallow(node: WorkflowNode) -> Dict[str, Any]:
    """One node with empty child placeholders, keys already in export order."""
    data: Dict[str, Any] = {
        "id": node.id,
        "kind": node.kind,
        "label": node.label,
    }
    if isinstance(node, ActionNode):
        data["children"] = None
    elif isinstance(node, BranchNode):
        data["children"] = {"true": None, "false": None}
    return data


def export_tree_json(tree: WorkflowNode, indent: Optional[int] = 2) -> str:
    """JSON text of ``export_tree``.

    Raises:
        ValueError: If the tree nests deeper than ``json`` can encode.
    """
    try:
        return json.dumps(export_tree(tree), indent=indent, ensure_ascii=False)
    except RecursionError:
        raise ValueError("Workflow is nested too deeply to encode as JSON") from None


# ============================================================================
# Load
# ============================================================================


def tree_from_dict(data: Dict[str, Any]) -> WorkflowNode:
    """Rebuild a workflow from its exported form.

    Raises:
        ValueError: On an unknown kind, a missing or duplicate id, an
            End node with children, or a root that is not the
            ``"start"`` action node.
    """
    if not isinstance(data, dict):
        raise ValueError("Workflow export must be an object")

    seen: Set[str] = set()
    root = _node_from_dict(data, seen)
    validate_root(root)

    stack: List[Tuple[WorkflowNode, Dict[str, Any]]] = [(root, data)]
    while stack:
        node, raw = stack.pop()
        for slot, raw_child in _raw_children(node, raw):
            child = _node_from_dict(raw_child, seen)
            node.set_slot(slot, child)
            stack.append((child, raw_child))
    return root


def _raw_children(node: WorkflowNode, raw: Dict[str, Any]) -> List[Tuple[Slot, Any]]:
    """Pair each occupied slot of ``node`` with its raw child data."""
    children = raw.get("children")
    if children is None:
        return []
    if isinstance(node, ActionNode):
        return [(Slot.NEXT, children)]
    if isinstance(node, BranchNode):
        if not isinstance(children, dict):
            raise ValueError(f"Branch {node.id} children must be an object")
        return [
            (slot, children[slot.value])
            for slot in (Slot.TRUE, Slot.FALSE)
            if children.get(slot.value) is not None
        ]
    raise ValueError(f"End node {node.id} cannot have children")


def _node_from_dict(data: Any, seen: Set[str]) -> WorkflowNode:
    """Validate and build a single node; its children are attached by the caller."""
    if not isinstance(data, dict):
        raise ValueError(f"Expected a node object, got {type(data).__name__}")

    node_id = data.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise ValueError("Node is missing an id")
    if node_id in seen:
        raise ValueError(f"Duplicate node id: {node_id}")
    seen.add(node_id)

    try:
        kind = NodeKind(data.get("kind"))
    except ValueError:
        raise ValueError(f"Node {node_id} has unknown kind: {data.get('kind')!r}") from None

    return create_node(kind, str(data.get("label") or ""), node_id=node_id)
