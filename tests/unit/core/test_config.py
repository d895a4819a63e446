"""
Tests for configuration loading and the settings store.
"""

import json
import os

import pytest

from anisub.core.config import (
    DEFAULT_EPISODE_REGEX,
    DEFAULT_MODEL_NAME,
    AppConfig,
    SettingsStore,
    resolve_config_path,
)


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()
        assert config.episode_regex == DEFAULT_EPISODE_REGEX
        assert config.model_name == DEFAULT_MODEL_NAME
        assert config.llm.timeout == 300
        assert config.bangumi.base_url == 'https://api.bgm.tv'

    def test_nested_get_and_set(self):
        config = AppConfig()
        assert config.get('llm.request_delay') == 0.5
        assert config.get('llm.missing', 'fallback') == 'fallback'
        assert config.set('bangumi.search_limit', 20) is True
        assert config.bangumi.search_limit == 20
        assert config.set('nope.key', 1) is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv('ANISUB_MODEL_NAME', 'llama3')
        monkeypatch.setenv('ANISUB_LLM__TIMEOUT', '60')

        config = AppConfig()

        assert config.model_name == 'llama3'
        assert config.llm.timeout == 60

    def test_missing_file_gives_defaults(self, tmp_path):
        config = AppConfig.load(str(tmp_path / 'none.json'))
        assert config.episode_regex == DEFAULT_EPISODE_REGEX
        assert not (tmp_path / 'none.json').exists()

    def test_config_path_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv('CONFIG_PATH', str(tmp_path / 'custom.json'))
        assert resolve_config_path() == tmp_path / 'custom.json'

    @pytest.mark.skipif(os.name == 'nt', reason='uses APPDATA on Windows')
    def test_xdg_config_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv('CONFIG_PATH', raising=False)
        monkeypatch.setenv('XDG_CONFIG_HOME', str(tmp_path))
        assert resolve_config_path() == tmp_path / 'anime-renamer-tauri' / 'settings.json'


class TestSettingsStore:
    """Tests for SettingsStore."""

    def test_save_then_load(self, settings_store, settings_path):
        updated = settings_store.current.model_copy(update={'episode_regex': r'E(\d+)'})

        assert settings_store.save(updated) is True

        on_disk = json.loads(settings_path.read_text(encoding='utf-8'))
        assert on_disk['episode_regex'] == r'E(\d+)'
        assert SettingsStore(str(settings_path)).current.episode_regex == r'E(\d+)'

    def test_subscribers_receive_saved_settings(self, settings_store):
        received = []
        settings_store.subscribe(received.append)
        updated = settings_store.current.model_copy(update={'model_name': 'tiny'})

        settings_store.save(updated)

        assert received == [updated]
        assert settings_store.current is updated

    def test_unsubscribe_stops_notifications(self, settings_store):
        received = []
        unsubscribe = settings_store.subscribe(received.append)
        unsubscribe()
        unsubscribe()

        settings_store.save(settings_store.current)

        assert received == []

    def test_bad_file_falls_back_to_defaults(self, settings_path):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text('{not json', encoding='utf-8')

        store = SettingsStore(str(settings_path))

        assert store.current.episode_regex == DEFAULT_EPISODE_REGEX

    @pytest.mark.parametrize('content', ['null', '[]', '"x"', '42'])
    def test_non_object_file_falls_back_to_defaults(self, settings_path, content):
        settings_path.parent.mkdir(parents=True)
        settings_path.write_text(content, encoding='utf-8')

        store = SettingsStore(str(settings_path))

        assert store.current.episode_regex == DEFAULT_EPISODE_REGEX
        assert store.current.model_name == DEFAULT_MODEL_NAME

    def test_failing_subscriber_does_not_block_others(self, settings_store, settings_path):
        received = []

        def broken(_settings):
            raise RuntimeError('listener broke')

        settings_store.subscribe(broken)
        settings_store.subscribe(received.append)
        updated = settings_store.current.model_copy(update={'model_name': 'tiny'})

        assert settings_store.save(updated) is True

        assert received == [updated]
        assert json.loads(settings_path.read_text(encoding='utf-8'))['model_name'] == 'tiny'

    def test_failed_save_keeps_current(self, tmp_path):
        blocker = tmp_path / 'file'
        blocker.write_text('x')
        store = SettingsStore(str(blocker / 'settings.json'))
        received = []
        store.subscribe(received.append)
        before = store.current

        assert store.save(before.model_copy(update={'model_name': 'x'})) is False

        assert store.current is before
        assert received == []
