"""翻訳エンジンの設定"""
import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, Optional, Union

from uilang.debug_control import is_development_mode
from uilang.error_handling import ConfigurationError
from uilang.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_EXTENSION = ".uiLanguage"
DEFAULT_FOLDER = os.path.join("Config", "UILanguages")
SECRET_ENV_VAR = "UILANG_SECRET"


@dataclass
class TranslationEngineSettings:
    """setup時に読み込まれる設定

    Attributes:
        secret: 暗号化に使うシークレット（未指定なら環境変数UILANG_SECRET）
        encryption_enabled: 言語ファイルを暗号化して保存するかどうか
        extension: 言語ファイルの拡張子
        folder: 言語ファイルのフォルダ（相対パスはbase_path基準）
        base_path: 相対フォルダの基準ディレクトリ（未指定ならカレントディレクトリ）
        auto_populate_missing_tags: 未登録タグを自動追加して保存するかどうか
            （未指定なら開発モードかどうかで決まる）
        initial_language: setup直後に切り替える言語
    """

    secret: Optional[str] = None
    encryption_enabled: bool = False
    extension: str = DEFAULT_EXTENSION
    folder: str = DEFAULT_FOLDER
    base_path: Optional[str] = None
    auto_populate_missing_tags: Optional[bool] = None
    initial_language: Optional[str] = None
    development_mode: bool = field(default_factory=is_development_mode)

    def __post_init__(self):
        if self.secret is None:
            self.secret = os.environ.get(SECRET_ENV_VAR)
        if self.auto_populate_missing_tags is None:
            self.auto_populate_missing_tags = self.development_mode

    @property
    def folder_path(self) -> Path:
        """言語ファイルフォルダの絶対パス"""
        folder = Path(self.folder)
        if folder.is_absolute():
            return folder
        return Path(self.base_path or os.getcwd()) / folder

    def validate(self) -> None:
        """
        設定値を検証する

        Raises:
            ConfigurationError: 設定値が不正
        """
        if not self.extension or not self.extension.startswith("."):
            raise ConfigurationError(f"Invalid language file extension: {self.extension!r}")
        if not self.folder:
            raise ConfigurationError("Language folder must not be empty")
        if self.encryption_enabled and not self.secret:
            raise ConfigurationError(
                f"Encryption is enabled but no secret was given (set '{SECRET_ENV_VAR}' or 'secret')"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TranslationEngineSettings':
        """辞書から設定を作成する（未知のキーは無視）"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown settings: {sorted(unknown)}")
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def load(cls, settings_file: Union[str, Path]) -> 'TranslationEngineSettings':
        """
        設定ファイルから設定を読み込む

        ファイルが無い、または読み込めない場合はデフォルト設定を使用する。
        """
        loaded: Dict[str, Any] = {}
        if os.path.exists(settings_file):
            try:
                with open(settings_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
                if not isinstance(loaded, dict):
                    logger.warning(f"Settings file {settings_file} does not contain an object, using defaults")
                    loaded = {}
            except (json.JSONDecodeError, OSError) as e:
                logger.warning(f"Failed to read settings file {settings_file}: {e}, using defaults")
                loaded = {}
        return cls.from_dict(loaded)
