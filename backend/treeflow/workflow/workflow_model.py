"""
Workflow Data Models — the node tree edited on the canvas.

A workflow is a single rooted tree. Each node is one of three
pydantic models discriminated by ``kind``:

    ActionNode  — one optional ``child``
    BranchNode  — two optional slots, ``on_true`` and ``on_false``
    EndNode     — terminal, no children

The root always has id ``"start"`` and is an ``ActionNode``.
"""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

ROOT_ID = "start"
DEFAULT_ROOT_LABEL = "Start"


class NodeKind(str, Enum):
    """Node type shown on the canvas."""
    ACTION = "action"
    BRANCH = "branch"
    END = "end"


class Slot(str, Enum):
    """Position of a node inside its parent."""
    NEXT = "next"     # ActionNode.child
    TRUE = "true"     # BranchNode.on_true
    FALSE = "false"   # BranchNode.on_false


class NodeIdCollisionError(RuntimeError):
    """A freshly generated id already exists in the tree."""


_DEFAULT_LABELS = {
    NodeKind.ACTION: "New Action",
    NodeKind.BRANCH: "New Branch",
    NodeKind.END: "End",
}


class ActionNode(BaseModel):
    """A workflow step followed by at most one next step."""

    id: str
    kind: Literal["action"] = "action"
    label: str = ""
    child: Optional[WorkflowNode] = None

    def slots(self) -> List[Tuple[Slot, Optional[WorkflowNode]]]:
        return [(Slot.NEXT, self.child)]

    def set_slot(self, slot: Slot, node: Optional[WorkflowNode]) -> None:
        if slot != Slot.NEXT:
            raise ValueError(f"Action node has no '{slot}' slot")
        self.child = node


class BranchNode(BaseModel):
    """A decision with a true path and a false path."""

    id: str
    kind: Literal["branch"] = "branch"
    label: str = ""
    on_true: Optional[WorkflowNode] = None
    on_false: Optional[WorkflowNode] = None

    def slots(self) -> List[Tuple[Slot, Optional[WorkflowNode]]]:
        return [(Slot.TRUE, self.on_true), (Slot.FALSE, self.on_false)]

    def set_slot(self, slot: Slot, node: Optional[WorkflowNode]) -> None:
        if slot == Slot.TRUE:
            self.on_true = node
        elif slot == Slot.FALSE:
            self.on_false = node
        else:
            raise ValueError(f"Branch node has no '{slot}' slot")


class EndNode(BaseModel):
    """Terminal step."""

    id: str
    kind: Literal["end"] = "end"
    label: str = ""

    def slots(self) -> List[Tuple[Slot, Optional[WorkflowNode]]]:
        return []

    def set_slot(self, slot: Slot, node: Optional[WorkflowNode]) -> None:
        raise ValueError("End node cannot have children")


WorkflowNode = Annotated[
    Union[ActionNode, BranchNode, EndNode],
    Field(discriminator="kind"),
]

ActionNode.model_rebuild()
BranchNode.model_rebuild()


# ============================================================================
# Construction
# ============================================================================

_id_counter = itertools.count(1)


def generate_node_id() -> str:
    """Process-unique node id: monotonic counter plus a random token."""
    return f"node_{next(_id_counter)}_{uuid.uuid4().hex[:8]}"


def default_label(kind: Union[NodeKind, str]) -> str:
    return _DEFAULT_LABELS[NodeKind(kind)]


def create_node(
    kind: Union[NodeKind, str],
    label: str,
    node_id: Optional[str] = None,
) -> WorkflowNode:
    """Create a node with empty children for its kind.

    Raises:
        ValueError: If ``kind`` is not a known node kind.
    """
    kind = NodeKind(kind)
    nid = node_id or generate_node_id()
    if kind == NodeKind.ACTION:
        return ActionNode(id=nid, label=label)
    if kind == NodeKind.BRANCH:
        return BranchNode(id=nid, label=label)
    return EndNode(id=nid, label=label)


def create_root(label: str = DEFAULT_ROOT_LABEL) -> ActionNode:
    """Create the reserved start node of a new workflow."""
    return ActionNode(id=ROOT_ID, label=label)


def validate_root(tree: WorkflowNode) -> None:
    """Raise ``ValueError`` unless ``tree`` is the reserved start action node."""
    if not isinstance(tree, ActionNode) or tree.id != ROOT_ID:
        raise ValueError(f"Root must be the '{ROOT_ID}' action node")


# ============================================================================
# Traversal
# ============================================================================
#
# Trees can be arbitrarily deep (a long chain of actions), so traversal and
# copying use an explicit stack instead of recursion.


def iter_nodes(tree: WorkflowNode) -> Iterator[WorkflowNode]:
    """Yield every node depth-first: child, then true path, then false path."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        children = [child for _, child in node.slots() if child is not None]
        stack.extend(reversed(children))


def collect_ids(tree: WorkflowNode) -> List[str]:
    return [n.id for n in iter_nodes(tree)]


def copy_tree(tree: WorkflowNode) -> WorkflowNode:
    """Deep copy of a tree; no node is shared with the original."""
    root = _copy_node(tree)
    stack = [(tree, root)]
    while stack:
        source, target = stack.pop()
        for slot, child in source.slots():
            if child is None:
                continue
            twin = _copy_node(child)
            target.set_slot(slot, twin)
            stack.append((child, twin))
    return root


def _copy_node(node: WorkflowNode) -> WorkflowNode:
    return create_node(node.kind, node.label, node_id=node.id)


# ============================================================================
# Saved workflow
# ============================================================================


def is_valid_workflow_id(workflow_id: str) -> bool:
    """Ids double as file names: letters, digits, ``-`` and ``_`` only."""
    return bool(workflow_id) and all(
        (c.isascii() and c.isalnum()) or c in "-_" for c in workflow_id
    )


class SavedWorkflow(BaseModel):
    """A named, persisted workflow.

    ``tree`` holds the exported form (see ``workflow_export``).
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = "Untitled Workflow"
    tree: Dict[str, Any]
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    updated_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    @field_validator("id")
    @classmethod
    def _check_id(cls, value: str) -> str:
        if not is_valid_workflow_id(value):
            raise ValueError(f"Invalid workflow id: {value!r}")
        return value

    def touch(self) -> None:
        """Update the ``updated_at`` timestamp."""
        self.updated_at = datetime.now(timezone.utc).isoformat()
