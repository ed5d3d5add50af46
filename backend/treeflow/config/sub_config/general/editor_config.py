"""
Workflow Editor Configuration.

Controls where saved workflows live, the root node label,
export formatting, and the log level.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from treeflow.config.base import BaseConfig, ConfigField, FieldType, register_config
from treeflow.config.sub_config.general.env_utils import env_sync, read_env_defaults

_DEFAULT_STORAGE_DIR = Path(__file__).resolve().parents[4] / "workflows"

LOG_LEVEL_OPTIONS = [
    {"value": "DEBUG", "label": "Debug"},
    {"value": "INFO", "label": "Info"},
    {"value": "WARNING", "label": "Warning"},
    {"value": "ERROR", "label": "Error"},
]


@register_config
@dataclass
class EditorConfig(BaseConfig):
    """Workflow editor settings."""

    storage_dir: str = ""
    root_label: str = "Start"
    export_indent: int = 2
    log_level: str = "INFO"

    _ENV_MAP = {
        "storage_dir": "WORKFLOW_STORAGE_DIR",
        "root_label": "WORKFLOW_ROOT_LABEL",
        "export_indent": "WORKFLOW_EXPORT_INDENT",
        "log_level": "WORKFLOW_LOG_LEVEL",
    }

    @classmethod
    def get_default_instance(cls) -> "EditorConfig":
        defaults = read_env_defaults(cls._ENV_MAP, cls.__dataclass_fields__)
        return cls(**defaults)

    @classmethod
    def get_config_name(cls) -> str:
        return "editor"

    @classmethod
    def get_display_name(cls) -> str:
        return "Workflow Editor"

    @classmethod
    def get_description(cls) -> str:
        return "Storage location, root label, export format and logging for the workflow editor."

    @classmethod
    def get_icon(cls) -> str:
        return "workflow"

    @classmethod
    def get_i18n(cls) -> Dict[str, Dict[str, Any]]:
        return {
            "ko": {
                "display_name": "워크플로우 편집기",
                "description": "워크플로우 저장 위치, 루트 라벨, 내보내기 형식 및 로그 설정.",
                "groups": {
                    "storage": "저장소",
                    "editor": "편집기",
                },
                "fields": {
                    "storage_dir": {
                        "label": "저장 디렉터리",
                        "description": "저장된 워크플로우 JSON 파일 위치",
                    },
                    "root_label": {
                        "label": "루트 라벨",
                        "description": "새 워크플로우 시작 노드의 라벨",
                    },
                    "export_indent": {
                        "label": "내보내기 들여쓰기",
                        "description": "JSON 내보내기 들여쓰기 칸 수",
                    },
                    "log_level": {
                        "label": "로그 레벨",
                        "description": "편집기 로그 출력 수준",
                    },
                },
            }
        }

    @classmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        return [
            ConfigField(
                name="storage_dir",
                field_type=FieldType.PATH,
                label="Storage Directory",
                description="Directory holding saved workflow JSON files",
                placeholder=str(_DEFAULT_STORAGE_DIR),
                group="storage",
                apply_change=env_sync("WORKFLOW_STORAGE_DIR"),
            ),
            ConfigField(
                name="root_label",
                field_type=FieldType.STRING,
                label="Root Label",
                description="Label of the start node in new workflows",
                default="Start",
                group="editor",
                apply_change=env_sync("WORKFLOW_ROOT_LABEL"),
            ),
            ConfigField(
                name="export_indent",
                field_type=FieldType.NUMBER,
                label="Export Indent",
                description="Indentation used for JSON export",
                default=2,
                min_value=0,
                max_value=8,
                group="editor",
                apply_change=env_sync("WORKFLOW_EXPORT_INDENT"),
            ),
            ConfigField(
                name="log_level",
                field_type=FieldType.SELECT,
                label="Log Level",
                description="Minimum level for editor log output",
                default="INFO",
                options=LOG_LEVEL_OPTIONS,
                group="editor",
                apply_change=env_sync("WORKFLOW_LOG_LEVEL"),
            ),
        ]

    def resolve_storage_dir(self) -> Path:
        """Return the configured storage directory or the default one."""
        return Path(self.storage_dir) if self.storage_dir else _DEFAULT_STORAGE_DIR
