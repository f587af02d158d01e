"""
test_settings.py
翻訳エンジンの設定のテスト
"""
import json
import os
from pathlib import Path

import pytest

from uilang.error_handling import ConfigurationError
from uilang.settings import DEFAULT_EXTENSION, TranslationEngineSettings


@pytest.mark.unit
class TestTranslationEngineSettings:
    """TranslationEngineSettingsの単体テスト"""

    def test_defaults(self):
        settings = TranslationEngineSettings(development_mode=False)
        assert settings.encryption_enabled is False
        assert settings.extension == DEFAULT_EXTENSION == ".uiLanguage"
        assert settings.secret is None
        assert settings.auto_populate_missing_tags is False
        assert settings.initial_language is None

    def test_auto_populate_follows_development_mode(self):
        """自動追加は未指定なら開発モードに従う"""
        assert TranslationEngineSettings(development_mode=True).auto_populate_missing_tags is True
        explicit = TranslationEngineSettings(development_mode=True, auto_populate_missing_tags=False)
        assert explicit.auto_populate_missing_tags is False

    def test_development_mode_from_environment(self, monkeypatch):
        """開発モードはDEBUG_MODE環境変数から決まる"""
        monkeypatch.setenv("DEBUG_MODE", "1")
        assert TranslationEngineSettings().development_mode is True
        monkeypatch.setenv("DEBUG_MODE", "0")
        assert TranslationEngineSettings().development_mode is False

    def test_secret_from_environment(self, monkeypatch):
        monkeypatch.setenv("UILANG_SECRET", "from env")
        assert TranslationEngineSettings().secret == "from env"
        assert TranslationEngineSettings(secret="explicit").secret == "explicit"

    def test_folder_path(self, tmp_path):
        """相対フォルダはbase_path基準、絶対フォルダはそのまま"""
        relative = TranslationEngineSettings(base_path=str(tmp_path))
        assert relative.folder_path == tmp_path / "Config" / "UILanguages"

        absolute = TranslationEngineSettings(folder=str(tmp_path / "langs"), base_path="/elsewhere")
        assert absolute.folder_path == tmp_path / "langs"

    def test_folder_path_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert TranslationEngineSettings(folder="langs").folder_path == Path(os.getcwd()) / "langs"

    @pytest.mark.parametrize("overrides", [
        {"extension": ""},
        {"extension": "uiLanguage"},
        {"folder": ""},
        {"encryption_enabled": True},
        {"encryption_enabled": True, "secret": ""},
    ])
    def test_validate_rejects_invalid_values(self, overrides):
        with pytest.raises(ConfigurationError):
            TranslationEngineSettings(**overrides).validate()

    def test_validate_accepts_encryption_with_secret(self):
        TranslationEngineSettings(encryption_enabled=True, secret="s").validate()

    def test_from_dict_ignores_unknown_keys(self):
        settings = TranslationEngineSettings.from_dict({
            "encryption_enabled": True,
            "secret": "s",
            "theme": "dark",
        })
        assert settings.encryption_enabled is True
        assert not hasattr(settings, "theme")

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "uilang.json"
        path.write_text(json.dumps({"extension": ".lang", "initial_language": "French"}), encoding="utf-8")

        settings = TranslationEngineSettings.load(path)
        assert settings.extension == ".lang"
        assert settings.initial_language == "French"

    @pytest.mark.parametrize("content", [None, "{broken", "[1, 2]"])
    def test_load_falls_back_to_defaults(self, tmp_path, content):
        """ファイルが無い、または読み込めない場合はデフォルト設定"""
        path = tmp_path / "uilang.json"
        if content is not None:
            path.write_text(content, encoding="utf-8")

        settings = TranslationEngineSettings.load(path)
        assert settings.extension == DEFAULT_EXTENSION
        assert settings.encryption_enabled is False
