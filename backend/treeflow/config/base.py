"""
Config Base — dataclass-backed settings with field metadata.

Every concrete config is a ``@dataclass`` subclass of ``BaseConfig``
decorated with ``@register_config``. The class methods describe the
config for a settings UI; the instance carries the values.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from enum import Enum
from logging import getLogger
from typing import Any, Callable, Dict, List, Optional, Type

logger = getLogger(__name__)


class FieldType(str, Enum):
    """Input widget type for a config field."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    SELECT = "select"
    PASSWORD = "password"
    TEXTAREA = "textarea"
    PATH = "path"


@dataclass
class ConfigField:
    """Metadata describing one editable config field."""
    name: str
    field_type: FieldType
    label: str
    description: str = ""
    required: bool = False
    default: Any = None
    placeholder: str = ""
    options: Optional[List[Dict[str, Any]]] = None
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    group: str = "general"
    secure: bool = False
    apply_change: Optional[Callable[[Any, Any], None]] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for the frontend (``apply_change`` is not exposed)."""
        return {
            "name": self.name,
            "type": self.field_type.value,
            "label": self.label,
            "description": self.description,
            "required": self.required,
            "default": self.default,
            "placeholder": self.placeholder,
            "options": self.options,
            "min": self.min_value,
            "max": self.max_value,
            "group": self.group,
            "secure": self.secure,
        }


class BaseConfig(ABC):
    """Base class for all registered configs."""

    @classmethod
    def get_default_instance(cls) -> "BaseConfig":
        return cls()

    @classmethod
    @abstractmethod
    def get_config_name(cls) -> str:
        ...

    @classmethod
    @abstractmethod
    def get_display_name(cls) -> str:
        ...

    @classmethod
    def get_description(cls) -> str:
        return ""

    @classmethod
    def get_category(cls) -> str:
        return "general"

    @classmethod
    def get_icon(cls) -> str:
        return "settings"

    @classmethod
    def get_i18n(cls) -> Dict[str, Dict[str, Any]]:
        return {}

    @classmethod
    @abstractmethod
    def get_fields_metadata(cls) -> List[ConfigField]:
        ...

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def update(self, name: str, value: Any) -> None:
        """Set a field and run its ``apply_change`` hook, if any."""
        fields = {f.name: f for f in self.get_fields_metadata()}
        if name not in fields:
            raise ValueError(f"Unknown field for config '{self.get_config_name()}': {name}")
        old_value = getattr(self, name)
        setattr(self, name, value)
        hook = fields[name].apply_change
        if hook is not None:
            hook(old_value, value)
        logger.info(f"Config '{self.get_config_name()}' field '{name}' updated")


# ── Registry ──

_CONFIG_REGISTRY: Dict[str, Type[BaseConfig]] = {}


def register_config(cls: Type[BaseConfig]) -> Type[BaseConfig]:
    """Class decorator: register a config under ``get_config_name()``."""
    _CONFIG_REGISTRY[cls.get_config_name()] = cls
    return cls


def get_config_class(name: str) -> Type[BaseConfig]:
    try:
        return _CONFIG_REGISTRY[name]
    except KeyError:
        raise ValueError(f"Unknown config: {name}") from None


def get_config(name: str) -> BaseConfig:
    """Return a fresh default instance of the named config."""
    return get_config_class(name).get_default_instance()


def list_configs() -> List[Type[BaseConfig]]:
    return list(_CONFIG_REGISTRY.values())
