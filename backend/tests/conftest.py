from __future__ import annotations

import pytest

from treeflow.workflow.editor_session import EditorSessionManager
from treeflow.workflow.workflow_model import (
    ActionNode,
    BranchNode,
    EndNode,
    NodeKind,
    Slot,
    create_node,
    create_root,
)
from treeflow.workflow.workflow_store import WorkflowStore


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep editor config and storage away from the real environment."""
    for var in (
        "WORKFLOW_ROOT_LABEL",
        "WORKFLOW_EXPORT_INDENT",
        "WORKFLOW_LOG_LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("WORKFLOW_STORAGE_DIR", str(tmp_path / "workflows"))


@pytest.fixture
def store(tmp_path) -> WorkflowStore:
    return WorkflowStore(storage_dir=tmp_path / "store")


@pytest.fixture
def manager(store) -> EditorSessionManager:
    return EditorSessionManager(store=store)


@pytest.fixture
def sample_tree() -> ActionNode:
    """start → check (branch) ─ true: notify → done(end)
                               └ false: retry
    """
    return ActionNode(
        id="start",
        label="Start",
        child=BranchNode(
            id="check",
            label="Approved?",
            on_true=ActionNode(
                id="notify",
                label="Notify",
                child=EndNode(id="done", label="Done"),
            ),
            on_false=ActionNode(id="retry", label="Retry"),
        ),
    )


def build_chain(length: int) -> ActionNode:
    """start → step_1 → … → step_<length>, all actions.

    Built slot by slot; nested constructors would recurse per level.
    """
    root = create_root()
    node = root
    for i in range(1, length + 1):
        child = create_node(NodeKind.ACTION, f"Step {i}", node_id=f"step_{i}")
        node.set_slot(Slot.NEXT, child)
        node = child
    return root


@pytest.fixture
def long_chain() -> ActionNode:
    return build_chain(1500)


@pytest.fixture
def make_chain():
    return build_chain
