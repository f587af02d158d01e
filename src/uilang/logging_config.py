"""
ロギング設定モジュール

uilangパッケージ全体で使用するロギング設定を管理します。
環境変数DEBUG_MODEと連携し、適切なログレベルを設定します。
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Optional

from uilang.debug_control import get_debug_control

PACKAGE_LOGGER_NAME = "uilang"


class UILangLogger:
    """uilang用のロガー設定クラス"""

    _instance: Optional['UILangLogger'] = None
    _loggers: dict = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._initialized = True
        self.debug_control = get_debug_control()
        self._console_handler: Optional[logging.Handler] = None
        self._setup_logging()

    def _setup_logging(self):
        """ロギングの初期設定"""
        package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
        package_logger.setLevel(logging.DEBUG)

        # 再設定時にハンドラーが重複しないようにする
        for handler in list(package_logger.handlers):
            if getattr(handler, "_uilang_handler", False):
                package_logger.removeHandler(handler)

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        simple_formatter = logging.Formatter(
            '%(levelname)s - %(message)s'
        )

        # コンソールハンドラー
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self._get_console_log_level())
        console_handler.setFormatter(simple_formatter)
        console_handler._uilang_handler = True
        package_logger.addHandler(console_handler)
        self._console_handler = console_handler

        # ファイルハンドラー（デバッグモード時のみ）
        if self.debug_control.is_debug_mode():
            log_dir = Path(os.environ.get("UILANG_LOG_DIR", "logs"))
            log_dir.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_dir / "uilang.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            file_handler._uilang_handler = True
            package_logger.addHandler(file_handler)

    def _get_console_log_level(self) -> int:
        """コンソール出力のログレベルを決定"""
        debug_mode = self.debug_control.get_debug_mode()

        if debug_mode == 0:  # 本番モード
            return logging.WARNING
        elif debug_mode == 1:  # 通常デバッグ
            return logging.INFO
        else:  # 詳細デバッグ
            return logging.DEBUG

    def get_logger(self, name: str) -> logging.Logger:
        """モジュール用のロガーを取得"""
        if name not in self._loggers:
            self._loggers[name] = logging.getLogger(name)
        return self._loggers[name]

    def update_log_level(self):
        """DEBUG_MODEの変更に応じてログレベルを更新"""
        self.debug_control = get_debug_control()
        if self._console_handler is not None:
            self._console_handler.setLevel(self._get_console_log_level())


def _get_config() -> UILangLogger:
    return UILangLogger()


def get_logger(name: str) -> logging.Logger:
    """
    モジュール用のロガーを取得

    Args:
        name: モジュール名（通常は__name__を使用）

    Returns:
        設定済みのロガーインスタンス
    """
    return _get_config().get_logger(name)


def update_log_levels():
    """環境変数の変更に応じてログレベルを更新"""
    _get_config().update_log_level()
