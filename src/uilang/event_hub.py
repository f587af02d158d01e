"""
event_hub.py
uilangのイベントハブ

翻訳エンジンとホストアプリケーション（UIのデータバインディング）を
疎結合に接続するためのPubSubパターンを実装する。
配信はすべて呼び出し元スレッド上で同期的に行う。
"""
from typing import Dict, List, Any, Callable, Optional
from enum import Enum, auto
from collections import defaultdict
import time

from uilang.logging_config import get_logger

logger = get_logger(__name__)


class EventType(Enum):
    """イベントタイプの定義"""
    PROPERTY_CHANGED = auto()     # エンジンのプロパティが変更された
    LANGUAGE_CHANGED = auto()     # 言語が切り替わった
    LANGUAGE_ADDED = auto()       # 言語が追加された
    APP_ERROR = auto()            # エラーが記録された


class EventPriority(Enum):
    """イベント優先度の定義"""
    LOW = 0
    NORMAL = 1
    HIGH = 2
    HIGHEST = 3


class Event:
    """イベントクラス"""
    def __init__(
        self,
        event_type: EventType,
        data: Optional[Any] = None,
        source: Optional[str] = None,
        priority: EventPriority = EventPriority.NORMAL
    ):
        """
        イベントを初期化します。

        Args:
            event_type (EventType): イベントの種類
            data (Any, optional): イベントに関連するデータ
            source (str, optional): イベント発生元の識別子
            priority (EventPriority, optional): イベントの優先度
        """
        self.event_type = event_type
        self.data = data
        self.source = source
        self.priority = priority
        self.timestamp = time.time()

    def __repr__(self) -> str:
        return f"Event({self.event_type.name}, source={self.source!r}, data={self.data!r})"


class EventHub:
    """
    イベントハブクラス

    発行されたイベントを、そのイベントにサブスクライブしている
    コールバックへ登録順に配信します。
    """

    def __init__(self):
        """EventHubを初期化します。"""
        self._subscribers: Dict[EventType, List[Callable[[Event], None]]] = defaultdict(list)

    def subscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """
        指定されたイベントタイプにコールバック関数をサブスクライブします。

        Args:
            event_type (EventType): サブスクライブするイベントタイプ
            callback (Callable): イベント発生時に呼び出されるコールバック関数
        """
        if callback not in self._subscribers[event_type]:
            self._subscribers[event_type].append(callback)

    def unsubscribe(self, event_type: EventType, callback: Callable[[Event], None]) -> None:
        """
        指定されたイベントタイプからコールバック関数のサブスクリプションを解除します。

        Args:
            event_type (EventType): サブスクリプションを解除するイベントタイプ
            callback (Callable): 解除するコールバック関数
        """
        if event_type in self._subscribers and callback in self._subscribers[event_type]:
            self._subscribers[event_type].remove(callback)

            if not self._subscribers[event_type]:
                del self._subscribers[event_type]

    def publish(
        self,
        event_type: EventType,
        data: Optional[Any] = None,
        source: Optional[str] = None,
        priority: EventPriority = EventPriority.NORMAL
    ) -> None:
        """
        イベントを配信します。

        Args:
            event_type (EventType): 配信するイベントタイプ
            data (Any, optional): イベントに関連するデータ
            source (str, optional): イベント発生元の識別子
            priority (EventPriority, optional): イベントの優先度
        """
        event = Event(event_type, data, source, priority)

        self._dispatch_event(event)

    def _dispatch_event(self, event: Event) -> None:
        """
        イベントをサブスクライバーに配信します。

        Args:
            event (Event): 配信するイベント
        """
        if event.event_type not in self._subscribers:
            return

        # 配信中の購読解除に備えてコピーを走査する
        for callback in list(self._subscribers[event.event_type]):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"EventHub: error in subscriber callback for {event.event_type.name}: {e}")
                if event.event_type != EventType.APP_ERROR:  # 無限ループ防止
                    self.publish(
                        EventType.APP_ERROR,
                        {"error": str(e), "original_event": event.event_type.name},
                        "event_hub",
                        EventPriority.HIGH,
                    )
