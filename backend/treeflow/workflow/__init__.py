"""
Workflow Engine — tree model, mutations and history for the visual
workflow builder.

Architecture:
    workflow_model    — Action / Branch / End node models, id generation
    tree_locator      — find a node and its parent slot
    tree_mutations    — insert, delete, relabel (copy-on-write)
    workflow_history  — linear undo/redo over snapshots
    editor_session    — per-user session + session manager
    workflow_export   — nested dict export and load
    workflow_store    — JSON-file persistence for saved workflows
"""

from treeflow.workflow.workflow_model import (
    ROOT_ID,
    ActionNode,
    BranchNode,
    EndNode,
    NodeIdCollisionError,
    NodeKind,
    SavedWorkflow,
    Slot,
    WorkflowNode,
    collect_ids,
    copy_tree,
    create_node,
    create_root,
    default_label,
    is_valid_workflow_id,
    iter_nodes,
    validate_root,
)
from treeflow.workflow.tree_locator import NodeLocation, locate
from treeflow.workflow.tree_mutations import (
    delete_node,
    insert_node,
    promoted_subtree,
    relabel_node,
)
from treeflow.workflow.workflow_history import WorkflowHistory
from treeflow.workflow.workflow_export import (
    export_tree,
    export_tree_json,
    tree_from_dict,
)
from treeflow.workflow.workflow_store import WorkflowStore, get_workflow_store
from treeflow.workflow.editor_session import (
    EditorSession,
    EditorSessionManager,
    SessionNotFoundError,
    get_session_manager,
)

__all__ = [
    "ROOT_ID",
    "ActionNode",
    "BranchNode",
    "EndNode",
    "NodeIdCollisionError",
    "NodeKind",
    "SavedWorkflow",
    "Slot",
    "WorkflowNode",
    "collect_ids",
    "copy_tree",
    "create_node",
    "create_root",
    "default_label",
    "is_valid_workflow_id",
    "iter_nodes",
    "validate_root",
    "NodeLocation",
    "locate",
    "delete_node",
    "insert_node",
    "promoted_subtree",
    "relabel_node",
    "WorkflowHistory",
    "export_tree",
    "export_tree_json",
    "tree_from_dict",
    "WorkflowStore",
    "get_workflow_store",
    "EditorSession",
    "EditorSessionManager",
    "SessionNotFoundError",
    "get_session_manager",
]
