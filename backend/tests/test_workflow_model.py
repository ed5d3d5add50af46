from __future__ import annotations

import pytest

from treeflow.workflow.workflow_model import (
    ROOT_ID,
    ActionNode,
    BranchNode,
    EndNode,
    NodeKind,
    Slot,
    collect_ids,
    copy_tree,
    create_node,
    create_root,
    default_label,
    generate_node_id,
    is_valid_workflow_id,
    iter_nodes,
    validate_root,
)


class TestCreateNode:

    def test_action_starts_without_child(self):
        node = create_node(NodeKind.ACTION, "Send email")
        assert isinstance(node, ActionNode)
        assert node.kind == "action"
        assert node.label == "Send email"
        assert node.child is None

    def test_branch_starts_with_empty_slots(self):
        node = create_node("branch", "Approved?")
        assert isinstance(node, BranchNode)
        assert node.on_true is None
        assert node.on_false is None

    def test_end_has_no_children(self):
        node = create_node(NodeKind.END, "End")
        assert isinstance(node, EndNode)
        assert node.slots() == []
        assert not hasattr(node, "child")

    def test_explicit_id_is_kept(self):
        assert create_node(NodeKind.ACTION, "x", node_id="abc").id == "abc"

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            create_node("loop", "nope")

    def test_generated_ids_are_unique(self):
        ids = {create_node(NodeKind.ACTION, "a").id for _ in range(500)}
        assert len(ids) == 500

    def test_generated_id_shape(self):
        assert generate_node_id().startswith("node_")


def test_create_root():
    root = create_root()
    assert root.id == ROOT_ID
    assert root.kind == "action"
    assert root.label == "Start"
    assert root.child is None


@pytest.mark.parametrize(
    "kind,expected",
    [
        (NodeKind.ACTION, "New Action"),
        (NodeKind.BRANCH, "New Branch"),
        (NodeKind.END, "End"),
        ("branch", "New Branch"),
    ],
)
def test_default_label(kind, expected):
    assert default_label(kind) == expected


class TestSlots:

    def test_end_refuses_children(self):
        with pytest.raises(ValueError):
            EndNode(id="e").set_slot(Slot.NEXT, EndNode(id="x"))

    def test_action_has_only_next_slot(self):
        with pytest.raises(ValueError):
            ActionNode(id="a").set_slot(Slot.TRUE, None)

    def test_branch_has_no_next_slot(self):
        with pytest.raises(ValueError):
            BranchNode(id="b").set_slot(Slot.NEXT, None)

    def test_branch_slots_order(self):
        t, f = EndNode(id="t"), EndNode(id="f")
        node = BranchNode(id="b", on_true=t, on_false=f)
        assert [s for s, _ in node.slots()] == [Slot.TRUE, Slot.FALSE]


def test_nested_dict_validates_into_variants():
    root = ActionNode.model_validate({
        "id": "start",
        "child": {
            "id": "b",
            "kind": "branch",
            "on_true": {"id": "e", "kind": "end", "label": "Stop"},
        },
    })
    assert isinstance(root.child, BranchNode)
    assert isinstance(root.child.on_true, EndNode)
    assert root.child.on_false is None


def test_iter_nodes_visits_true_before_false(sample_tree):
    assert [n.id for n in iter_nodes(sample_tree)] == [
        "start", "check", "notify", "done", "retry",
    ]
    assert collect_ids(sample_tree) == ["start", "check", "notify", "done", "retry"]


def test_copy_tree_shares_no_nodes(sample_tree):
    twin = copy_tree(sample_tree)
    assert twin.model_dump() == sample_tree.model_dump()

    originals = {id(n) for n in iter_nodes(sample_tree)}
    assert not originals & {id(n) for n in iter_nodes(twin)}

    twin.child.on_true.label = "changed"
    assert sample_tree.child.on_true.label == "Notify"


def test_copy_tree_handles_long_chain(long_chain):
    twin = copy_tree(long_chain)
    assert collect_ids(twin) == collect_ids(long_chain)
    assert twin.child is not long_chain.child


@pytest.mark.parametrize(
    "tree",
    [
        EndNode(id=ROOT_ID),
        BranchNode(id=ROOT_ID),
        ActionNode(id="x"),
    ],
)
def test_validate_root_rejects(tree):
    with pytest.raises(ValueError):
        validate_root(tree)


def test_validate_root_accepts_start(sample_tree):
    validate_root(sample_tree)
    validate_root(create_root("Begin"))


@pytest.mark.parametrize(
    ("workflow_id", "valid"),
    [
        ("3f2a-b_9", True),
        ("ab", True),
        ("a.b", False),
        ("../evil", False),
        ("", False),
        ("café", False),
    ],
)
def test_workflow_id_rule(workflow_id, valid):
    assert is_valid_workflow_id(workflow_id) is valid
