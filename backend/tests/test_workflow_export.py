from __future__ import annotations

import json

import pytest

from treeflow.workflow.workflow_export import (
    export_tree,
    export_tree_json,
    tree_from_dict,
)
from treeflow.workflow.workflow_model import (
    NodeKind,
    Slot,
    collect_ids,
    create_node,
    create_root,
)


def test_export_shape_and_key_order(sample_tree):
    data = export_tree(sample_tree)
    assert list(data) == ["id", "kind", "label", "children"]
    assert data["kind"] == "action"

    branch = data["children"]
    assert branch["id"] == "check"
    assert list(branch["children"]) == ["true", "false"]
    assert branch["children"]["false"] == {
        "id": "retry", "kind": "action", "label": "Retry", "children": None,
    }

    end = branch["children"]["true"]["children"]
    assert end == {"id": "done", "kind": "end", "label": "Done"}


def test_empty_root_export():
    assert export_tree(create_root()) == {
        "id": "start", "kind": "action", "label": "Start", "children": None,
    }


def test_export_json_is_plain_json(sample_tree):
    text = export_tree_json(sample_tree, indent=None)
    assert json.loads(text) == export_tree(sample_tree)
    assert text.startswith('{"id": "start", "kind": "action"')


def test_load_rebuilds_identical_tree(sample_tree):
    rebuilt = tree_from_dict(export_tree(sample_tree))
    assert rebuilt.model_dump() == sample_tree.model_dump()


def test_load_accepts_empty_branch_children():
    tree = tree_from_dict({
        "id": "start", "kind": "action", "label": "Start",
        "children": {"id": "b", "kind": "branch", "label": "?"},
    })
    assert tree.child.on_true is None
    assert tree.child.on_false is None


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"id": "other", "kind": "action", "label": "x"},
        {"id": "start", "kind": "branch", "label": "x"},
        {"id": "start", "kind": "action", "children": {"kind": "end"}},
        {"id": "start", "kind": "action", "children": {"id": "a", "kind": "loop"}},
        {"id": "start", "kind": "action",
         "children": {"id": "e", "kind": "end", "children": {"id": "x", "kind": "end"}}},
        {"id": "start", "kind": "action",
         "children": {"id": "b", "kind": "branch", "children": ["x"]}},
        {"id": "start", "kind": "action",
         "children": {"id": "b", "kind": "branch",
                      "children": {"true": {"id": "d", "kind": "end"},
                                   "false": {"id": "d", "kind": "end"}}}},
        {"id": "start", "kind": "action", "children": {"id": "start", "kind": "end"}},
    ],
)
def test_load_rejects_malformed(data):
    with pytest.raises(ValueError):
        tree_from_dict(data)


def test_long_chain_exports_and_loads(long_chain):
    data = export_tree(long_chain)

    node, depth = data, 0
    while node["children"] is not None:
        node, depth = node["children"], depth + 1
    assert depth == 1500
    assert node == {"id": "step_1500", "kind": "action", "label": "Step 1500", "children": None}

    assert collect_ids(tree_from_dict(data)) == collect_ids(long_chain)


def test_deep_false_path_keeps_slot_order():
    root = create_root()
    parent, slot = root, Slot.NEXT
    for i in range(1200):
        branch = create_node(NodeKind.BRANCH, f"Check {i}", node_id=f"b{i}")
        branch.set_slot(Slot.TRUE, create_node(NodeKind.END, "Done", node_id=f"e{i}"))
        parent.set_slot(slot, branch)
        parent, slot = branch, Slot.FALSE

    data = export_tree(root)
    node = data["children"]
    for _ in range(1199):
        assert list(node["children"]) == ["true", "false"]
        node = node["children"]["false"]
    assert node["id"] == "b1199"
    assert node["children"] == {
        "true": {"id": "e1199", "kind": "end", "label": "Done"},
        "false": None,
    }

    rebuilt = tree_from_dict(data)
    assert collect_ids(rebuilt) == collect_ids(root)
    assert collect_ids(rebuilt)[:4] == ["start", "b0", "e0", "b1"]


def test_json_text_of_too_deep_tree_is_a_value_error(make_chain):
    with pytest.raises(ValueError, match="too deeply"):
        export_tree_json(make_chain(100_000), indent=2)
