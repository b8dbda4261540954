"""Configuration sources: JSON files and prefixed environment variables."""

from __future__ import annotations

import abc
import copy
import json
import logging
import math
import os
import re
from collections.abc import Mapping
from os import PathLike
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_ENV_PREFIX = "WORK_RECORD_"

COMMON_ENV_KEYS = (
    "ENVIRONMENT",
    "SERVER_PORT",
    "SERVER_HOST",
    "DATABASE_PATH",
    "LOGGING_LEVEL",
    "UPLOAD_BASE_DIR",
    "MAX_FILE_SIZE",
)

_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

_C_SPACE = r"[ \t\n\r\f\v]*"
_INT_PREFIX = re.compile(_C_SPACE + r"([+-]?\d+)")
_FLOAT_PREFIX = re.compile(
    _C_SPACE
    + r"([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_TRUE_WORDS = frozenset({"true", "1", "yes"})
_FALSE_WORDS = frozenset({"false", "0", "no"})


class ConfigError(Exception):
    """A configuration source could not be loaded or saved."""


def _split_key(key: str, separator: str) -> list[str]:
    return [part for part in key.split(separator) if part]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON constant: {name}")


class ConfigProvider(abc.ABC):
    """A source of configuration values addressed by dotted keys."""

    @abc.abstractmethod
    def load(self) -> None:
        """Read the configuration; raise ConfigError on failure."""

    @abc.abstractmethod
    def save(self) -> None:
        """Write the configuration back; raise ConfigError on failure."""

    @abc.abstractmethod
    def get_config(self) -> Any:
        """Return the whole configuration as JSON-like data."""

    @abc.abstractmethod
    def get_string(self, key: str, default: str = "") -> str:
        """Return the value for key as text."""

    @abc.abstractmethod
    def get_int(self, key: str, default: int = 0) -> int:
        """Return the value for key as an integer."""

    @abc.abstractmethod
    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return the value for key as a boolean."""

    @abc.abstractmethod
    def get_double(self, key: str, default: float = 0.0) -> float:
        """Return the value for key as a float."""

    @abc.abstractmethod
    def get_object(self, key: str) -> Any:
        """Return the raw JSON-like value for key."""

    @abc.abstractmethod
    def get_string_array(self, key: str) -> list[str]:
        """Return the value for key as a list of strings."""


class JsonConfigProvider(ConfigProvider):
    """Configuration read from a JSON file; keys are dotted paths into it."""

    def __init__(self, config_path: str | PathLike[str]) -> None:
        self.config_path = Path(config_path)
        self._config: Any = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        """Whether the last load succeeded."""
        return self._loaded

    def load(self) -> None:
        """Read the file; a missing file yields an empty configuration."""
        try:
            raw = self.config_path.read_bytes()
        except OSError:
            logger.warning("配置文件不存在或无法打开: %s", self.config_path)
            self._config = {}
            self._loaded = True
            return
        try:
            self._config = json.loads(raw, parse_constant=_reject_constant)
        except ValueError as exc:
            logger.error("加载配置文件失败: %s - %s", self.config_path, exc)
            self._config = {}
            self._loaded = False
            raise ConfigError(f"加载配置文件失败: {self.config_path}: {exc}") from exc
        self._loaded = True
        logger.info("成功加载配置文件: %s", self.config_path)

    def save(self) -> None:
        """Write the configuration to the file, indented by two spaces."""
        text = json.dumps(self._config, indent=2, ensure_ascii=False)
        try:
            self.config_path.write_text(text, encoding="utf-8")
        except OSError as exc:
            logger.error("保存配置文件失败: %s - %s", self.config_path, exc)
            raise ConfigError(f"无法保存配置文件: {self.config_path}: {exc}") from exc
        logger.info("成功保存配置文件: %s", self.config_path)

    def get_config(self) -> Any:
        return copy.deepcopy(self._config)

    def _value(self, key: str) -> Any:
        current = self._config
        for part in _split_key(key, "."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                return None
        return current

    def get_string(self, key: str, default: str = "") -> str:
        if not self._loaded:
            return default
        value = self._value(key)
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return f"{value:f}"
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        if not self._loaded:
            return default
        value = self._value(key)
        return int(value) if _is_number(value) else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        if not self._loaded:
            return default
        value = self._value(key)
        return value if isinstance(value, bool) else default

    def get_double(self, key: str, default: float = 0.0) -> float:
        if not self._loaded:
            return default
        value = self._value(key)
        return float(value) if _is_number(value) else default

    def get_object(self, key: str) -> Any:
        if not self._loaded:
            return {}
        return copy.deepcopy(self._value(key))

    def get_string_array(self, key: str) -> list[str]:
        if not self._loaded:
            return []
        value = self._value(key)
        if isinstance(value, list):
            return [item for item in value if isinstance(item, str)]
        return []


class EnvConfigProvider(ConfigProvider):
    """Configuration from a fixed set of prefixed environment variables.

    The key ``server.port`` is looked up as ``SERVER_PORT``, read from the
    variable ``<prefix>SERVER_PORT``.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_ENV_PREFIX,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self.prefix = prefix
        self._environ = environ
        self._values: dict[str, str] = {}

    def load(self) -> None:
        environ = os.environ if self._environ is None else self._environ
        values: dict[str, str] = {}
        for key in COMMON_ENV_KEYS:
            env_key = self.prefix + key
            if env_key in environ:
                values[key] = environ[env_key]
                logger.debug("加载环境变量: %s = %s", env_key, values[key])
        self._values = values
        logger.info("成功加载环境变量配置，共 %d 个配置项", len(values))

    def save(self) -> None:
        logger.warning("环境变量配置不支持保存操作")
        raise ConfigError("环境变量配置不支持保存操作")

    def get_config(self) -> dict[str, Any]:
        """Nest the loaded variables by splitting their names on underscores."""
        config: dict[str, Any] = {}
        for key in sorted(self._values):
            parts = _split_key(key, "_")
            if not parts:
                continue
            current = config
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._values[key]
        return config

    @staticmethod
    def _env_key(key: str) -> str:
        return key.replace(".", "_").upper()

    def get_string(self, key: str, default: str = "") -> str:
        return self._values.get(self._env_key(key), default)

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get_string(key)
        if value:
            match = _INT_PREFIX.match(value)
            if match and _INT_MIN <= int(match.group(1)) <= _INT_MAX:
                return int(match.group(1))
            logger.warning("环境变量 %s 的值 '%s' 无法转换为整数", key, value)
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get_string(key).lower()
        if value in _TRUE_WORDS:
            return True
        if value in _FALSE_WORDS:
            return False
        return default

    def get_double(self, key: str, default: float = 0.0) -> float:
        value = self.get_string(key)
        if value:
            match = _FLOAT_PREFIX.match(value)
            if match:
                text = match.group(1)
                number = float(text)
                if not (math.isinf(number) and "inf" not in text.lower()):
                    return number
            logger.warning("环境变量 %s 的值 '%s' 无法转换为浮点数", key, value)
        return default

    def get_object(self, key: str) -> dict[str, Any]:
        """Environment variables hold no nested objects; always empty."""
        return {}

    def get_string_array(self, key: str) -> list[str]:
        """Split a comma-separated value, trimming blanks and dropping empty items."""
        value = self.get_string(key)
        return [item.strip(" \t") for item in value.split(",") if item.strip(" \t")]