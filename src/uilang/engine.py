"""
翻訳エンジンモジュール

言語カタログ・翻訳ストア・UIバインディングをまとめ、
ホストアプリケーションに言語の切り替えと翻訳の取得を提供します。

ホストは起動時にエンジンを1つ作成して setup() を呼び、必要な場所へ渡します。
モジュールレベルの setup() / t() は、既定のエンジンを使うための近道です。
"""

from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional, Union

from uilang.codec import JsonCodec
from uilang.crypto_box import CryptoBox
from uilang.error_handling import ErrorHandler, NotInitializedError
from uilang.event_hub import Event, EventHub, EventType
from uilang.language_catalog import LanguageCatalog
from uilang.logging_config import get_logger
from uilang.resource_file import ResourceFile
from uilang.settings import TranslationEngineSettings
from uilang.translation_set import Lookup
from uilang.translation_store import TranslationStore
from uilang.ui_binding import NodeTree, Surface, UIBindingAdapter

logger = get_logger(__name__)

CURRENT_LANGUAGE_PROPERTY = "current_language"


class TranslationEngine:
    """翻訳エンジン

    setup() を呼ぶまでは、どの操作も NotInitializedError を送出します。
    """

    def __init__(self, event_hub: Optional[EventHub] = None):
        """
        Args:
            event_hub: 変更通知の配信先（省略時は専用のハブを作成）
        """
        self.event_hub = event_hub or EventHub()
        self.error_handler = ErrorHandler(self.event_hub)
        self.settings: Optional[TranslationEngineSettings] = None
        self._catalog: Optional[LanguageCatalog] = None
        self._store: Optional[TranslationStore] = None
        self._adapter: Optional[UIBindingAdapter] = None

    def setup(
        self,
        settings: Optional[TranslationEngineSettings] = None,
        surfaces: Iterable[Surface] = (),
        node_tree: Optional[NodeTree] = None
    ) -> 'TranslationEngine':
        """
        設定に従ってエンジンを初期化します。

        Englishの言語ファイルが無い場合は surfaces から既定のタグを収集して作成します。

        Args:
            settings: エンジンの設定（省略時はデフォルト）
            surfaces: 翻訳対象のルートノード、またはルートノードを返す関数
            node_tree: ノードツリーの走査方法（省略時はfletのコントロールツリー）

        Returns:
            TranslationEngine: 自分自身

        Raises:
            ConfigurationError: 設定値が不正
        """
        settings = settings or TranslationEngineSettings()
        settings.validate()
        # 再setup時は以前のエラー履歴を持ち越さない
        self.error_handler.clear_error_history()

        if node_tree is None:
            from uilang.flet_nodes import FletNodeTree
            node_tree = FletNodeTree()

        crypto_box = CryptoBox(settings.secret) if settings.encryption_enabled else None
        resource_file = ResourceFile(JsonCodec(), crypto_box, self.error_handler)
        catalog = LanguageCatalog(
            settings.folder_path,
            settings.extension,
            resource_file,
            development_mode=settings.development_mode,
        )
        store = TranslationStore(catalog, settings.auto_populate_missing_tags, self.error_handler)
        adapter = UIBindingAdapter(node_tree, store, settings.auto_populate_missing_tags)

        surfaces = list(surfaces)
        catalog.initialize(lambda: adapter.harvest_defaults(surfaces))

        self.settings = settings
        self._catalog, self._store, self._adapter = catalog, store, adapter
        logger.info(
            f"Translation engine ready: folder={settings.folder_path}, "
            f"encryption={settings.encryption_enabled}, auto_populate={settings.auto_populate_missing_tags}"
        )

        if settings.initial_language:
            self.set_language(settings.initial_language)
        return self

    @property
    def is_initialized(self) -> bool:
        return self._store is not None

    def _require_setup(self) -> TranslationStore:
        if self._store is None:
            raise NotInitializedError("TranslationEngine.setup() must be called before use")
        return self._store

    @property
    def catalog(self) -> LanguageCatalog:
        self._require_setup()
        return self._catalog

    @property
    def store(self) -> TranslationStore:
        return self._require_setup()

    @property
    def adapter(self) -> UIBindingAdapter:
        self._require_setup()
        return self._adapter

    @property
    def language_list(self) -> List[str]:
        """利用可能な言語名の一覧"""
        return self.catalog.known_languages

    @property
    def current_language(self) -> Optional[str]:
        """現在の言語（取得しても通知は発生しない）"""
        return self._require_setup().current_language

    @current_language.setter
    def current_language(self, name: Optional[str]) -> None:
        self.set_language(name)

    def set_language(self, name: Optional[str]) -> bool:
        """
        言語を切り替えます。

        実際に切り替わった場合だけ PROPERTY_CHANGED と LANGUAGE_CHANGED を発行します。

        Returns:
            bool: 切り替わったかどうか
        """
        store = self._require_setup()
        if not store.switch_language(name):
            return False
        self.event_hub.publish(
            EventType.PROPERTY_CHANGED,
            {"property_name": CURRENT_LANGUAGE_PROPERTY},
            source="translation_engine",
        )
        self.event_hub.publish(
            EventType.LANGUAGE_CHANGED,
            {"language": name},
            source="translation_engine",
        )
        return True

    def translate(self, tag: str, fallback: Optional[str] = None) -> Optional[str]:
        """
        タグに対応するテキストを取得します。

        Args:
            tag: 翻訳タグ（ドット記法など任意の文字列）
            fallback: 翻訳が無い場合に返すテキスト

        Returns:
            翻訳されたテキスト（登録済みの値がNoneや空文字列ならその値）
        """
        return self._require_setup().lookup(tag, fallback)

    t = translate

    def lookup_entry(self, tag: str) -> Lookup:
        """タグが未登録か、値がNoneで登録済みかを区別して返します。"""
        return self._require_setup().entry(tag)

    def apply_to(self, root: Any) -> int:
        """
        現在の言語をUIツリーへ適用します。

        Returns:
            int: 書き換えたノードの数
        """
        self._require_setup()
        return self._adapter.apply(root)

    def add_language(self, name: str, based_on: Optional[str] = "English") -> bool:
        """既存の言語のタグをコピーして新しい言語を追加します。"""
        if not self.catalog.add_language(name, based_on=based_on):
            return False
        self.event_hub.publish(EventType.LANGUAGE_ADDED, {"language": name}, source="translation_engine")
        return True

    def export_language(self, name: str, path: Union[str, Path]) -> bool:
        """
        言語ファイルを平文のJSONとして書き出します（翻訳作業用）。

        Returns:
            bool: 書き出せたかどうか
        """
        catalog = self.catalog
        if not catalog.contains(name):
            return False
        translation_set = catalog.resource_file.load(catalog.path_for(name))
        if translation_set is None:
            return False
        return catalog.resource_file.save_plaintext(translation_set, path)

    def subscribe_property_changed(self, callback: Callable[[str], None]) -> Callable[[Event], None]:
        """
        プロパティ変更通知を購読します。

        Args:
            callback: 変更されたプロパティ名を受け取る関数

        Returns:
            購読解除に使うハンドラー
        """
        def handler(event: Event) -> None:
            callback(event.data["property_name"])

        self.event_hub.subscribe(EventType.PROPERTY_CHANGED, handler)
        return handler


# 既定のエンジン（setup() で作成される）
_default_engine: Optional[TranslationEngine] = None


def setup(
    settings: Optional[TranslationEngineSettings] = None,
    surfaces: Iterable[Surface] = (),
    node_tree: Optional[NodeTree] = None,
    event_hub: Optional[EventHub] = None
) -> TranslationEngine:
    """既定のエンジンを作成して初期化する"""
    global _default_engine
    _default_engine = TranslationEngine(event_hub).setup(settings, surfaces, node_tree)
    return _default_engine


def get_engine() -> TranslationEngine:
    """既定のエンジンを取得する"""
    if _default_engine is None:
        raise NotInitializedError("uilang.setup() must be called before use")
    return _default_engine


def reset() -> None:
    """既定のエンジンを破棄する"""
    global _default_engine
    _default_engine = None


def t(tag: str, fallback: Optional[str] = None) -> Optional[str]:
    """翻訳を取得するショートカット関数"""
    return get_engine().translate(tag, fallback)


def set_language(name: Optional[str]) -> bool:
    """言語を設定"""
    return get_engine().set_language(name)


def get_language() -> Optional[str]:
    """現在の言語を取得"""
    return get_engine().current_language


def apply_language(root: Any) -> int:
    """現在の言語をUIツリーへ適用"""
    return get_engine().apply_to(root)
