"""
translation_set.py
1言語分の翻訳データ

言語名と「タグ → 表示テキスト」の辞書を保持する。
表示テキストは None（未設定）や空文字列（意図的な空表示）も取りうる。
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Any, NamedTuple


class Lookup(NamedTuple):
    """タグ検索の結果（タグが存在しない場合と値がNoneの場合を区別する）"""
    found: bool
    text: Optional[str]


@dataclass
class TranslationSet:
    """1言語分のタグ → テキストの対応表"""

    language_name: str
    entries: Dict[str, Optional[str]] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.language_name, str) or not self.language_name:
            raise ValueError("language_name must be a non-empty string")

    def __contains__(self, tag: str) -> bool:
        return tag in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get_entry(self, tag: str) -> Lookup:
        if tag in self.entries:
            return Lookup(True, self.entries[tag])
        return Lookup(False, None)

    def add_missing(self, mapping: Dict[str, Optional[str]]) -> int:
        """
        未登録のタグだけを追加する

        Args:
            mapping: 追加候補のタグ → テキスト

        Returns:
            追加したタグの数
        """
        added = 0
        for tag, text in mapping.items():
            if tag not in self.entries:
                self.entries[tag] = text
                added += 1
        return added

    def to_dict(self) -> Dict[str, Any]:
        return {"languageName": self.language_name, "entries": dict(self.entries)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TranslationSet':
        """
        辞書から復元する

        Raises:
            ValueError: 必須フィールドの欠落や型の不一致
        """
        language_name = data.get("languageName")
        entries = data.get("entries", {})
        if entries is None:
            entries = {}
        if not isinstance(entries, dict):
            raise ValueError("'entries' must be an object")
        for tag, text in entries.items():
            if text is not None and not isinstance(text, str):
                raise ValueError(f"entry '{tag}' must be a string or null")
        return cls(language_name, dict(entries))
