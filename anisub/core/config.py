"""
Configuration module.

Contains Pydantic-based configuration classes and the settings store that
broadcasts saved settings to subscribers.
"""

import json
import logging
import os
import threading
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_EPISODE_REGEX = r'\[(\d{2})\]'
DEFAULT_MODEL_URL = 'http://localhost:11434/v1/chat/completions'
DEFAULT_MODEL_NAME = 'qwen/qwen3-vl-8b'

APP_DIR_NAME = 'anime-renamer-tauri'
SETTINGS_FILE_NAME = 'settings.json'


class LLMConfig(BaseModel):
    """LLM 调用配置"""

    timeout: int = Field(default=300, ge=10, le=1800)  # 请求超时（秒）
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)
    batch_temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(default=4096, ge=1)
    api_key: Optional[str] = None  # 远程服务需要时填写
    # 逐个识别时两次请求之间的最小间隔（秒）
    request_delay: float = Field(default=0.5, ge=0.0, le=60.0)


class BangumiConfig(BaseModel):
    """Bangumi 元数据服务配置"""

    base_url: str = 'https://api.bgm.tv'
    timeout: int = Field(default=10, ge=1, le=120)
    search_limit: int = Field(default=10, ge=1, le=50)


class AppConfig(BaseSettings):
    """主应用配置"""

    episode_regex: str = DEFAULT_EPISODE_REGEX
    model_url: str = DEFAULT_MODEL_URL
    model_name: str = DEFAULT_MODEL_NAME

    llm: LLMConfig = Field(default_factory=LLMConfig)
    bangumi: BangumiConfig = Field(default_factory=BangumiConfig)

    model_config = ConfigDict(
        env_prefix='ANISUB_',
        env_nested_delimiter='__',
        protected_namespaces=()
    )

    def get(self, key: str, default=None):
        """获取配置值，支持点分隔的嵌套键"""
        value = self
        for k in key.split('.'):
            if not hasattr(value, k):
                return default
            value = getattr(value, k)
        return value

    def set(self, key: str, value) -> bool:
        """设置配置值，支持点分隔的嵌套键"""
        keys = key.split('.')
        obj = self
        for k in keys[:-1]:
            if not hasattr(obj, k):
                return False
            obj = getattr(obj, k)
        if not hasattr(obj, keys[-1]):
            return False
        setattr(obj, keys[-1], value)
        return True

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> 'AppConfig':
        """
        Load configuration from disk.

        Falls back to a legacy ``settings.json`` in the working directory and
        finally to defaults. Missing files are not created on load.
        """
        path = Path(config_path) if config_path else resolve_config_path()
        if not path.exists():
            legacy = Path.cwd() / SETTINGS_FILE_NAME
            if config_path is None and legacy.exists():
                path = legacy
            else:
                return cls()

        with open(path, 'r', encoding='utf-8') as f:
            config_data = json.load(f)
        if not isinstance(config_data, dict):
            raise ValueError(f'设置文件必须是 JSON 对象: {path}')
        return cls(**config_data)

    def save(self, config_path: Optional[str] = None) -> None:
        """保存配置"""
        path = Path(config_path) if config_path else resolve_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(self.model_dump_json(indent=2))


def resolve_config_path() -> Path:
    """
    Return the settings file path.

    ``CONFIG_PATH`` wins; otherwise the per-user configuration directory is
    used (``%APPDATA%`` on Windows, ``$XDG_CONFIG_HOME`` or ``~/.config``
    elsewhere).
    """
    env_path = os.getenv('CONFIG_PATH')
    if env_path:
        return Path(env_path)

    if os.name == 'nt' and os.getenv('APPDATA'):
        base = Path(os.environ['APPDATA'])
    else:
        base = Path(os.getenv('XDG_CONFIG_HOME') or Path.home() / '.config')
    return base / APP_DIR_NAME / SETTINGS_FILE_NAME


SettingsListener = Callable[[AppConfig], None]


class SettingsStore:
    """
    Process-wide settings holder.

    Loads once on first access, changes only through ``save`` and notifies
    subscribers synchronously with the saved settings.
    """

    def __init__(self, config_path: Optional[str] = None):
        self._config_path = config_path
        self._current: Optional[AppConfig] = None
        self._listeners: List[SettingsListener] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> AppConfig:
        """Return the active settings, loading them on first use."""
        if self._current is None:
            self._current = self.load()
        return self._current

    def load(self) -> AppConfig:
        """Load settings from disk, falling back to defaults on bad files."""
        try:
            loaded = AppConfig.load(self._config_path)
        except (OSError, ValueError) as e:
            logger.warning(f'⚠️ 读取设置失败，使用默认设置: {e}')
            loaded = AppConfig()
        self._current = loaded
        return loaded

    def save(self, settings: AppConfig) -> bool:
        """
        Persist settings and broadcast them.

        Returns:
            True when the file was written, False otherwise.
        """
        try:
            settings.save(self._config_path)
        except OSError as e:
            logger.error(f'❌ 保存设置失败: {e}')
            return False

        self._current = settings
        logger.info('✅ 设置已保存')

        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(settings)
            except Exception as e:
                logger.error(f'❌ 设置订阅者处理失败: {e}', exc_info=True)
        return True

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """
        Register a callback invoked after every successful save.

        Returns:
            A callable that removes the subscription.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe


# 全局设置实例
settings_store = SettingsStore()
