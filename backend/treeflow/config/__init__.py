"""
Configuration Package.

Importing this package registers every built-in config.
"""

from treeflow.config.base import (
    BaseConfig,
    ConfigField,
    FieldType,
    get_config,
    get_config_class,
    list_configs,
    register_config,
)
from treeflow.config.sub_config.general.editor_config import EditorConfig

__all__ = [
    "BaseConfig",
    "ConfigField",
    "FieldType",
    "get_config",
    "get_config_class",
    "list_configs",
    "register_config",
    "EditorConfig",
]
