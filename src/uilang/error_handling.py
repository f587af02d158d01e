"""
error_handling.py
エラー処理モジュール

uilangのエラー分類と、境界でのエラー処理をまとめて扱います。
ファイル・暗号レベルの失敗はResourceFileの境界で記録され、
呼び出し元には None / False として返されます。
初期化前の利用など、プログラミング上の誤りだけが例外として伝播します。
"""
import functools
import json
import time
import traceback
from enum import Enum, auto
from typing import Dict, Any, Optional, Callable, List, Type

from uilang.logging_config import get_logger

logger = get_logger(__name__)


class ErrorSeverity(Enum):
    """エラーの重大度を表す列挙型"""
    DEBUG = auto()      # 開発者向けデバッグ情報
    INFO = auto()       # 情報提供的なエラー
    WARNING = auto()    # 警告（操作は継続可能）
    ERROR = auto()      # エラー（操作は中断されるが、アプリは継続可能）
    CRITICAL = auto()   # 致命的なエラー（呼び出し元の誤り）


class ErrorCategory(Enum):
    """エラーのカテゴリを表す列挙型"""
    FILE_IO = auto()          # ファイル読み込み・書き込み関連
    DATA_PROCESSING = auto()  # シリアライズ関連
    CRYPTO = auto()           # 暗号化・復号関連
    VALIDATION = auto()       # 入力値の検証
    CONFIGURATION = auto()    # 設定関連
    LIFECYCLE = auto()        # 初期化順序関連
    OTHER = auto()            # その他


class AppError(Exception):
    """uilang固有のエラーの基底クラス

    基本的な例外情報に加えて、エラーの重大度、カテゴリ、
    コンテキスト情報を保持します。
    """

    default_severity = ErrorSeverity.ERROR
    default_category = ErrorCategory.OTHER

    def __init__(
        self,
        message: str,
        severity: Optional[ErrorSeverity] = None,
        category: Optional[ErrorCategory] = None,
        original_exception: Optional[Exception] = None,
        context: Dict[str, Any] = None
    ):
        """AppErrorを初期化します。

        Args:
            message (str): エラーメッセージ
            severity (ErrorSeverity, optional): エラーの重大度
            category (ErrorCategory, optional): エラーのカテゴリ
            original_exception (Exception, optional): 元の例外
            context (Dict[str, Any], optional): 追加のコンテキスト情報
        """
        super().__init__(message)
        self.message = message
        self.severity = severity or self.default_severity
        self.category = category or self.default_category
        self.original_exception = original_exception
        self.context = context or {}
        self.timestamp = time.time()
        self.traceback = (
            "".join(traceback.format_exception(original_exception))
            if original_exception else None
        )

    def __str__(self) -> str:
        """エラーの文字列表現を返します。"""
        return f"{self.severity.name} [{self.category.name}]: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """エラー情報を辞書として返します。"""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "severity": self.severity.name,
            "category": self.category.name,
            "original_exception": str(self.original_exception) if self.original_exception else None,
            "context": self.context,
            "timestamp": self.timestamp,
            "traceback": self.traceback
        }

    @classmethod
    def from_exception(
        cls,
        exception: Exception,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None,
        context: Dict[str, Any] = None
    ) -> 'AppError':
        """通常の例外からAppErrorを作成します。

        Args:
            exception (Exception): 元の例外
            category (ErrorCategory, optional): エラーのカテゴリ
            severity (ErrorSeverity, optional): エラーの重大度
            context (Dict[str, Any], optional): 追加のコンテキスト情報

        Returns:
            AppError: 作成されたインスタンス
        """
        # 例外の型に基づいてカテゴリを推測
        if category is None:
            if isinstance(exception, AppError):
                category = exception.category
            elif isinstance(exception, OSError):
                category = ErrorCategory.FILE_IO
            elif isinstance(exception, (json.JSONDecodeError, UnicodeDecodeError, TypeError, ValueError)):
                category = ErrorCategory.DATA_PROCESSING

        return cls(
            message=str(exception) or type(exception).__name__,
            severity=severity,
            category=category,
            original_exception=exception,
            context=context
        )


class SaveFailure(AppError):
    """言語ファイルの保存に失敗した（記録のみ、処理は継続）"""
    default_severity = ErrorSeverity.WARNING
    default_category = ErrorCategory.FILE_IO


class LoadFailure(AppError):
    """言語ファイルを読み込めなかった（結果は「利用不可」）"""
    default_severity = ErrorSeverity.WARNING
    default_category = ErrorCategory.FILE_IO


class DecryptionError(LoadFailure):
    """暗号文が導出した鍵・IVで正しく復号できなかった"""
    default_category = ErrorCategory.CRYPTO


class CodecError(AppError):
    """シリアライズ・デシリアライズの失敗"""
    default_severity = ErrorSeverity.WARNING
    default_category = ErrorCategory.DATA_PROCESSING


class UnknownLanguageError(AppError):
    """カタログに存在しない言語への切り替え要求"""
    default_severity = ErrorSeverity.INFO
    default_category = ErrorCategory.VALIDATION


class NotInitializedError(AppError):
    """setup前にエンジンが使用された"""
    default_severity = ErrorSeverity.CRITICAL
    default_category = ErrorCategory.LIFECYCLE


class ConfigurationError(AppError):
    """設定値が不正"""
    default_severity = ErrorSeverity.CRITICAL
    default_category = ErrorCategory.CONFIGURATION


class ErrorHandler:
    """エラー処理を一元管理するクラス

    記録されたエラーの履歴とカテゴリ別の件数を保持し、
    重大度に応じたログ出力とイベントハブへの通知を行います。
    """

    def __init__(self, event_hub=None, max_history_size: int = 100):
        """ErrorHandlerを初期化します。

        Args:
            event_hub (EventHub, optional): APP_ERRORの通知先
            max_history_size (int): 保持する履歴の最大件数
        """
        self.event_hub = event_hub
        self.error_history: List[AppError] = []
        self.max_history_size = max_history_size
        self.error_counts: Dict[ErrorCategory, int] = {category: 0 for category in ErrorCategory}

    def handle_error(
        self,
        error: Exception,
        context: Dict[str, Any] = None,
        category: Optional[ErrorCategory] = None,
        severity: Optional[ErrorSeverity] = None
    ) -> AppError:
        """エラーを記録します。

        Args:
            error (Exception): 処理するエラー
            context (Dict[str, Any], optional): 追加のコンテキスト情報
            category (ErrorCategory, optional): 通常の例外の場合のカテゴリ
            severity (ErrorSeverity, optional): 通常の例外の場合の重大度

        Returns:
            AppError: 記録されたAppErrorインスタンス
        """
        if not isinstance(error, AppError):
            app_error = AppError.from_exception(error, category=category, severity=severity, context=context)
        else:
            app_error = error
            if context:
                app_error.context.update(context)

        self.error_counts[app_error.category] = self.error_counts.get(app_error.category, 0) + 1

        self.error_history.append(app_error)
        if len(self.error_history) > self.max_history_size:
            self.error_history.pop(0)

        self._log_error(app_error)
        self._publish_error_event(app_error)

        return app_error

    def _log_error(self, error: AppError):
        """エラーをログに記録します。"""
        log_level = {
            ErrorSeverity.DEBUG: 10,
            ErrorSeverity.INFO: 20,
            ErrorSeverity.WARNING: 30,
            ErrorSeverity.ERROR: 40,
            ErrorSeverity.CRITICAL: 50,
        }.get(error.severity, 40)

        logger.log(log_level, f"{type(error).__name__} [{error.category.name}]: {error.message}")

        if error.traceback and log_level >= 40:
            logger.log(log_level, f"Details:\n{error.traceback}")

        if error.context:
            context_str = json.dumps(error.context, ensure_ascii=False, default=str)
            logger.debug(f"Context: {context_str}")

    def _publish_error_event(self, error: AppError):
        """エラーイベントを発行します。"""
        if not self.event_hub:
            return

        from uilang.event_hub import EventType, EventPriority

        priority = {
            ErrorSeverity.DEBUG: EventPriority.LOW,
            ErrorSeverity.INFO: EventPriority.LOW,
            ErrorSeverity.WARNING: EventPriority.NORMAL,
            ErrorSeverity.ERROR: EventPriority.HIGH,
            ErrorSeverity.CRITICAL: EventPriority.HIGHEST,
        }.get(error.severity, EventPriority.NORMAL)

        self.event_hub.publish(
            EventType.APP_ERROR,
            data=error.to_dict(),
            source="error_handler",
            priority=priority,
        )

    def last_error(self) -> Optional[AppError]:
        """最後に記録されたエラーを返します。"""
        return self.error_history[-1] if self.error_history else None

    def clear_error_history(self):
        """エラー履歴をクリアします。"""
        self.error_history.clear()
        self.error_counts = {category: 0 for category in ErrorCategory}


def with_error_handling(
    error_class: Type[AppError] = AppError,
    fallback: Any = None,
    severity: Optional[ErrorSeverity] = None,
):
    """境界メソッドの例外を記録してフォールバック値を返すデコレータ

    第一引数（self）の error_handler 属性に記録を委ねます。
    error_class のサブクラスとして送出された例外はそのまま記録し、
    それ以外の例外は error_class に包んで記録します。

    Args:
        error_class (Type[AppError]): 記録するエラーの型
        fallback (Any): 例外発生時の戻り値
        severity (ErrorSeverity, optional): 重大度の上書き

    Returns:
        Callable: デコレータ関数
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                context = {
                    "function": func.__name__,
                    "args": [str(arg) for arg in args[1:]],
                }
                if isinstance(e, error_class):
                    app_error = e
                    if severity:
                        app_error.severity = severity
                else:
                    app_error = error_class.from_exception(e, severity=severity)

                self_arg = args[0] if args else None
                error_handler = getattr(self_arg, "error_handler", None)
                if error_handler is not None:
                    error_handler.handle_error(app_error, context=context)
                else:
                    logger.warning(f"{type(app_error).__name__} in {func.__name__}: {app_error.message}")
                return fallback

        return wrapper
    return decorator
