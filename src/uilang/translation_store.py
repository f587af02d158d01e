"""
translation_store.py
アクティブな言語の翻訳データ

現在の言語のTranslationSetをメモリ上に保持し、タグの検索と
未登録タグの自動追加（開発時）、言語の切り替えを担当する。
言語の切り替えは読み込みに成功した場合にだけ反映される。
"""
from typing import Dict, Optional

from uilang.error_handling import ErrorHandler, UnknownLanguageError
from uilang.language_catalog import LanguageCatalog
from uilang.logging_config import get_logger
from uilang.translation_set import Lookup, TranslationSet

logger = get_logger(__name__)


class TranslationStore:
    """現在の言語の翻訳データを保持するストア"""

    def __init__(
        self,
        catalog: LanguageCatalog,
        auto_populate_missing_tags: bool = False,
        error_handler: Optional[ErrorHandler] = None
    ):
        """
        Args:
            catalog: 言語ファイルのカタログ
            auto_populate_missing_tags: 未登録タグを追加して保存するかどうか
            error_handler: 不明な言語などを記録するハンドラー
        """
        self.catalog = catalog
        self.auto_populate_missing_tags = auto_populate_missing_tags
        self.error_handler = error_handler
        self.current_language: Optional[str] = None
        self.active_set: Optional[TranslationSet] = None

    def switch_language(self, name: Optional[str]) -> bool:
        """
        言語を切り替える

        現在と同じ言語、None、カタログに無い言語の場合は何もしない。
        読み込みに失敗した場合も現在の言語のまま False を返す。

        Returns:
            言語が切り替わったかどうか
        """
        if name is None or name == self.current_language:
            return False

        if not self.catalog.contains(name):
            if self.error_handler is not None:
                self.error_handler.handle_error(
                    UnknownLanguageError(f"Unknown language: {name}", context={"language": name})
                )
            else:
                logger.info(f"Unknown language: {name}")
            return False

        loaded = self.catalog.resource_file.load(self.catalog.path_for(name))
        if loaded is None:
            logger.warning(f"Could not load language '{name}', keeping '{self.current_language}'")
            return False

        # 名前とデータは同時に差し替える
        self.active_set, self.current_language = loaded, name
        logger.info(f"Language changed to: {name}")
        return True

    def entry(self, tag: str) -> Lookup:
        """タグを検索する（データは変更しない）"""
        if self.active_set is None:
            return Lookup(False, None)
        return self.active_set.get_entry(tag)

    def lookup(self, tag: str, fallback_text: Optional[str]) -> Optional[str]:
        """
        タグに対応するテキストを返す

        タグが登録済みなら、値が空文字列やNoneでもその値を返す。
        未登録なら fallback_text を返し、自動追加が有効な場合は
        {tag: fallback_text} を追加してすぐに保存する。

        Args:
            tag: 翻訳タグ
            fallback_text: 未登録時に返すテキスト

        Returns:
            表示するテキスト
        """
        if self.active_set is None:
            return fallback_text

        found, text = self.active_set.get_entry(tag)
        if found:
            return text

        if self.auto_populate_missing_tags:
            self.active_set.entries[tag] = fallback_text
            logger.debug(f"Recorded missing tag '{tag}' into '{self.current_language}'")
            self.save()
        return fallback_text

    def merge_missing(self, mapping: Dict[str, Optional[str]]) -> int:
        """
        未登録のタグを追加し、追加があれば保存する

        Returns:
            追加したタグの数
        """
        if self.active_set is None:
            return 0
        added = self.active_set.add_missing(mapping)
        if added:
            self.save()
        return added

    def save(self) -> bool:
        """現在の翻訳データを現在の言語のファイルへ保存する"""
        if self.active_set is None or self.current_language is None:
            return False
        return self.catalog.resource_file.save(self.active_set, self.catalog.path_for(self.current_language))
