"""Layered configuration lookup and start-up initialisation."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from os import PathLike
from pathlib import Path
from typing import Any

from work_record.config_providers import (
    DEFAULT_ENV_PREFIX,
    ConfigError,
    ConfigProvider,
    EnvConfigProvider,
    JsonConfigProvider,
)

logger = logging.getLogger(__name__)

REQUIRED_KEYS = ("server.port", "server.host", "database.path", "upload.base_dir")

Listener = Callable[[str], Any]


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (dict, list)) and not value)


class ConfigManager:
    """Looks keys up in its providers in the order they were added; the first hit wins."""

    _instance: ConfigManager | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._providers: list[ConfigProvider] = []
        self._listeners: list[Listener] = []
        self._lock = threading.RLock()

    @classmethod
    def get_instance(cls) -> ConfigManager:
        """Return the process-wide manager, creating it on first use."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
            return cls._instance

    def add_provider(self, provider: ConfigProvider) -> None:
        with self._lock:
            self._providers.append(provider)

    def clear_providers(self) -> None:
        with self._lock:
            self._providers.clear()

    def get_string(self, key: str, default: str = "") -> str:
        with self._lock:
            for provider in self._providers:
                value = provider.get_string(key)
                if value:
                    return value
        return default

    def get_int(self, key: str, default: int = 0) -> int:
        with self._lock:
            for provider in self._providers:
                value = provider.get_int(key)
                if value != 0 or provider.get_string(key) == "0":
                    return value
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        with self._lock:
            for provider in self._providers:
                value = provider.get_bool(key)
                if value != default or provider.get_string(key) == "true":
                    return value
        return default

    def get_double(self, key: str, default: float = 0.0) -> float:
        with self._lock:
            for provider in self._providers:
                value = provider.get_double(key)
                if value != 0.0 or provider.get_string(key) == "0":
                    return value
        return default

    def get_object(self, key: str) -> Any:
        with self._lock:
            for provider in self._providers:
                value = provider.get_object(key)
                if not _is_empty(value):
                    return value
        return {}

    def get_string_array(self, key: str) -> list[str]:
        with self._lock:
            for provider in self._providers:
                value = provider.get_string_array(key)
                if value:
                    return value
        return []

    def validation_errors(self) -> list[str]:
        """Describe what makes the current configuration unusable."""
        errors = [f"缺少必需配置项 {key}" for key in REQUIRED_KEYS if not self.get_string(key)]
        if errors:
            return errors
        port = self.get_int("server.port")
        if not 0 < port <= 65535:
            errors.append(f"端口号无效 {port}")
        max_file_size = self.get_int("upload.max_file_size")
        if max_file_size <= 0:
            errors.append(f"最大文件大小无效 {max_file_size}")
        return errors

    def validate(self) -> bool:
        """Whether required keys are present and the port and upload size are sane."""
        errors = self.validation_errors()
        for error in errors:
            logger.error("配置验证失败: %s", error)
        if errors:
            return False
        logger.info("配置验证通过")
        return True

    def reload(self) -> None:
        """Reload every provider, then tell the change listeners."""
        with self._lock:
            for provider in self._providers:
                try:
                    provider.load()
                except ConfigError:
                    logger.error("配置重载失败")
                    raise
            listeners = list(self._listeners)
        logger.info("配置重载成功")
        for listener in listeners:
            try:
                listener("reload")
            except Exception as exc:  # noqa: BLE001 - one bad listener must not stop the rest
                logger.error("配置变更监听器执行失败: %s", exc)

    def add_change_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def remove_change_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners = [item for item in self._listeners if item != listener]


@dataclass
class _InitState:
    environment: str = "development"
    config_dir: str = "config"


_state = _InitState()


def _add_json_provider(
    manager: ConfigManager, path: Path, kind: str, missing_level: int
) -> None:
    if not path.exists():
        logger.log(missing_level, "%s配置文件不存在: %s", kind, path)
        return
    provider = JsonConfigProvider(path)
    try:
        provider.load()
    except ConfigError:
        logger.warning("%s配置文件加载失败: %s", kind, path)
        return
    manager.add_provider(provider)
    logger.info("加载%s配置文件: %s", kind, path)


def initialize(
    config_dir: str | PathLike[str], environment: str = "development"
) -> ConfigManager:
    """Set up the shared manager from app.json, <environment>.json and the environment.

    Raises ConfigError if the resulting configuration does not validate.
    """
    _state.environment = environment
    _state.config_dir = str(config_dir)

    manager = ConfigManager.get_instance()
    manager.clear_providers()

    directory = Path(config_dir)
    _add_json_provider(manager, directory / "app.json", "主", logging.WARNING)
    _add_json_provider(manager, directory / f"{environment}.json", "环境", logging.INFO)

    env_provider = EnvConfigProvider(DEFAULT_ENV_PREFIX)
    try:
        env_provider.load()
    except ConfigError:
        logger.warning("环境变量配置加载失败，继续使用默认配置")
    manager.add_provider(env_provider)

    logger.info("开始验证配置...")
    if not manager.validate():
        logger.error("配置验证失败")
        raise ConfigError("配置验证失败")
    logger.info("配置系统初始化成功，环境: %s", environment)
    return manager


def get_environment() -> str:
    """The environment name given to the last initialize call."""
    return _state.environment


def get_config_dir() -> str:
    """The configuration directory given to the last initialize call."""
    return _state.config_dir