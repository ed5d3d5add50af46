from treeflow.controller.workflow_editor_controller import router as workflow_editor_router

__all__ = ["workflow_editor_router"]
