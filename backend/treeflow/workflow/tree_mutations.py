"""
Tree Mutations — insert, delete and relabel nodes.

Every operation deep-copies the input tree, rewrites the copy and
returns it. The input is never modified, so history snapshots stay
independent. An operation that has nothing to do (unknown id, the
root as a delete target, an End node as a parent) returns ``None``.

Splice rules:

    insert  The new node goes between the parent and whatever the
            parent held at that slot. The old occupant becomes the new
            node's child (Action) or its true path (Branch). An End
            node cannot adopt anything, so inserting one drops the
            old occupant.

    delete  The deleted node's own subtree fills the hole it leaves:
            an Action promotes its child, a Branch promotes its true
            path if present, otherwise its false path. The other path
            of a Branch is discarded. An End leaves the slot empty.
"""

from __future__ import annotations

from logging import getLogger
from typing import Optional, Union

from treeflow.workflow.tree_locator import locate
from treeflow.workflow.workflow_model import (
    ROOT_ID,
    ActionNode,
    BranchNode,
    NodeIdCollisionError,
    NodeKind,
    Slot,
    WorkflowNode,
    collect_ids,
    copy_tree,
    create_node,
    default_label,
)

logger = getLogger(__name__)


# ============================================================================
# Insert
# ============================================================================


def insert_node(
    tree: WorkflowNode,
    parent_id: str,
    new_kind: Union[NodeKind, str],
    slot: Optional[Union[Slot, str]] = None,
) -> Optional[WorkflowNode]:
    """Insert a new ``new_kind`` node below ``parent_id``.

    ``slot`` selects the path of a Branch parent (``"true"`` or
    ``"false"``) and is ignored for an Action parent.

    Returns the new tree, or ``None`` if nothing was inserted.
    """
    new_kind = NodeKind(new_kind)
    new_tree = copy_tree(tree)

    found = locate(new_tree, parent_id)
    if found is None:
        logger.debug(f"insert: parent {parent_id} not found")
        return None

    parent = found.node
    if isinstance(parent, ActionNode):
        target_slot = Slot.NEXT
    elif isinstance(parent, BranchNode):
        target_slot = _branch_slot(slot)
        if target_slot is None:
            logger.debug(f"insert: branch {parent_id} needs a true/false slot, got {slot!r}")
            return None
    else:
        logger.debug(f"insert: end node {parent_id} cannot have children")
        return None

    new_node = create_node(new_kind, default_label(new_kind))
    if new_node.id in collect_ids(new_tree):
        raise NodeIdCollisionError(f"Generated node id already in use: {new_node.id}")

    old = dict(parent.slots())[target_slot]
    parent.set_slot(target_slot, new_node)
    if old is not None and new_kind != NodeKind.END:
        # Branch adopts onto its true path; false stays empty.
        adopt_slot = Slot.NEXT if new_kind == NodeKind.ACTION else Slot.TRUE
        new_node.set_slot(adopt_slot, old)

    return new_tree


def _branch_slot(slot: Optional[Union[Slot, str]]) -> Optional[Slot]:
    if slot is None:
        return None
    try:
        value = Slot(slot)
    except ValueError:
        return None
    return value if value in (Slot.TRUE, Slot.FALSE) else None


# ============================================================================
# Delete
# ============================================================================


def delete_node(tree: WorkflowNode, node_id: str) -> Optional[WorkflowNode]:
    """Remove ``node_id`` and splice its subtree into the parent slot.

    The root can never be deleted. Returns the new tree, or ``None``
    if nothing was removed.
    """
    if node_id == ROOT_ID:
        logger.debug("delete: the root node cannot be deleted")
        return None

    new_tree = copy_tree(tree)
    found = locate(new_tree, node_id)
    if found is None or found.parent is None:
        logger.debug(f"delete: node {node_id} not found")
        return None

    found.parent.set_slot(found.slot, promoted_subtree(found.node))
    return new_tree


def promoted_subtree(node: WorkflowNode) -> Optional[WorkflowNode]:
    """The subtree that takes ``node``'s place when it is deleted."""
    if isinstance(node, ActionNode):
        return node.child
    if isinstance(node, BranchNode):
        return node.on_true if node.on_true is not None else node.on_false
    return None


# ============================================================================
# Relabel
# ============================================================================


def relabel_node(
    tree: WorkflowNode,
    node_id: str,
    new_label: str,
) -> Optional[WorkflowNode]:
    """Replace a node's label verbatim. Empty labels are allowed."""
    new_tree = copy_tree(tree)
    found = locate(new_tree, node_id)
    if found is None:
        logger.debug(f"relabel: node {node_id} not found")
        return None
    found.node.label = new_label
    return new_tree
