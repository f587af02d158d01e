"""
debug_control.py
開発モード／本番モードの判定

環境変数DEBUG_MODEに基づいて動作モードを決定する。
開発モードでは未登録タグの自動追加や言語ファイルの自動修復を行い、
本番モードでは言語ファイルを一切書き換えない。
"""
import os
from typing import Optional


class DebugControl:
    """
    動作モード制御クラス

    環境変数DEBUG_MODEの値に基づいてモードを決定:
    - None/False/"0"/"false": 本番モード
    - "1"/"true"/"True": 開発モード
    - "2"/"verbose": 詳細モード（開発モード＋全デバッグログ）
    """

    _instance: Optional['DebugControl'] = None
    _debug_mode: Optional[str] = None

    def __new__(cls):
        """シングルトンパターンで実装"""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        else:
            # 環境変数が変更された場合は再初期化
            current_mode = os.environ.get("DEBUG_MODE", "0").lower()
            if cls._instance._raw_mode != current_mode:
                cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        """環境変数から設定を読み込み"""
        self._raw_mode = os.environ.get("DEBUG_MODE", "0").lower()

        if self._raw_mode in ["true", "1", "yes", "on"]:
            self._debug_mode = "1"
        elif self._raw_mode in ["verbose", "2", "debug"]:
            self._debug_mode = "2"
        else:
            self._debug_mode = "0"

    def get_debug_mode(self) -> int:
        """デバッグモードレベルを数値で取得"""
        return int(self._debug_mode)

    def is_debug_mode(self) -> bool:
        """開発モードかどうか（DEBUG_MODE>=1）"""
        return int(self._debug_mode) >= 1

    @classmethod
    def get_instance(cls) -> 'DebugControl':
        """インスタンスを取得（環境変数の変更を反映する）"""
        return cls()


def get_debug_control() -> DebugControl:
    """デバッグ制御インスタンスを取得"""
    return DebugControl.get_instance()


def is_development_mode() -> bool:
    """開発モードで動作しているかどうか"""
    return get_debug_control().is_debug_mode()
