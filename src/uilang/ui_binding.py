"""
ui_binding.py
UIノードと翻訳データの結び付け

UIツリーの走査そのものは NodeTree（外部のUIツールキットごとの実装）に任せ、
ここではタグを読み取って
- 既定テキストの収集（ディスカバリーパス）
- 翻訳テキストの書き込み（適用パス）
を行う。
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from uilang.logging_config import get_logger

logger = get_logger(__name__)


class NodeRole(Enum):
    """テキストを保持するフィールドの種類"""
    CONTENT = "content"   # 本文・ラベル
    HEADER = "header"     # タブやグループの見出し


class NodeKind(Enum):
    """翻訳対象となるノードの種類（定義順に走査する）"""
    CHECKBOX = "checkbox"
    LABEL = "label"
    TAB_ITEM = "tab_item"
    BUTTON = "button"
    GROUP_BOX = "group_box"
    TEXT_BLOCK = "text_block"
    TEXT_BOX = "text_box"

    @property
    def role(self) -> NodeRole:
        if self in (NodeKind.TAB_ITEM, NodeKind.GROUP_BOX):
            return NodeRole.HEADER
        return NodeRole.CONTENT


class NodeTree(ABC):
    """UIツールキットのノードツリーへのアクセス手段"""

    @abstractmethod
    def descendants(self, root: Any, kind: NodeKind) -> Iterable[Any]:
        """root配下（root自身を含まない）の指定種類のノードを文書順に返す"""

    @abstractmethod
    def get_tag(self, node: Any) -> Optional[str]:
        """ノードのタグ（文字列以外はNone）"""

    @abstractmethod
    def get_text(self, node: Any, role: NodeRole) -> Optional[str]:
        """ノードの本文または見出し"""

    @abstractmethod
    def set_text(self, node: Any, role: NodeRole, text: Optional[str]) -> None:
        """ノードの本文または見出しを書き換える"""

    def refresh(self, root: Any) -> None:
        """適用パスの後に呼ばれる（必要ならUIを再描画する）"""


@dataclass
class LabeledNode:
    """UIツールキットを持たないホストやテスト向けの汎用ノード"""
    kind: Optional[NodeKind] = None
    tag: Optional[str] = None
    text: Optional[str] = None
    header: Optional[str] = None
    children: List['LabeledNode'] = field(default_factory=list)

    def add(self, *children: 'LabeledNode') -> 'LabeledNode':
        self.children.extend(children)
        return self


class LabeledNodeTree(NodeTree):
    """LabeledNode用のNodeTree実装"""

    def descendants(self, root: LabeledNode, kind: NodeKind) -> Iterable[LabeledNode]:
        for child in root.children:
            if child.kind is kind:
                yield child
            yield from self.descendants(child, kind)

    def get_tag(self, node: LabeledNode) -> Optional[str]:
        return node.tag if isinstance(node.tag, str) else None

    def get_text(self, node: LabeledNode, role: NodeRole) -> Optional[str]:
        return node.header if role is NodeRole.HEADER else node.text

    def set_text(self, node: LabeledNode, role: NodeRole, text: Optional[str]) -> None:
        if role is NodeRole.HEADER:
            node.header = text
        else:
            node.text = text


Surface = Union[Any, Callable[[], Any]]


class UIBindingAdapter:
    """
    UIノードのタグと翻訳データを結び付けるアダプター

    ディスカバリーパスでは最初に見つかったタグのテキストを既定値として採用し、
    適用パスではアクティブな翻訳データにあるタグのノードだけを書き換える。
    """

    def __init__(self, tree: NodeTree, store=None, auto_populate: bool = False):
        """
        Args:
            tree: ノードツリーへのアクセス手段
            store: TranslationStore（適用パスに必要）
            auto_populate: 適用後に未登録タグを翻訳データへ追加するかどうか
        """
        self.tree = tree
        self.store = store
        self.auto_populate = auto_populate

    def _tagged_nodes(self, root: Any):
        for kind in NodeKind:
            for node in self.tree.descendants(root, kind):
                tag = self.tree.get_tag(node)
                if tag:
                    yield kind, node, tag

    def harvest_defaults(self, roots: Iterable[Surface]) -> Dict[str, Optional[str]]:
        """
        ノードフォレストからタグ → 既定テキストを収集する

        同じタグが複数ある場合は最初に見つかったものを採用する。
        呼び出し可能なサーフェスは、呼び出して得たルートを走査する。
        """
        tags: Dict[str, Optional[str]] = {}
        for surface in roots:
            root = surface() if callable(surface) else surface
            for kind, node, tag in self._tagged_nodes(root):
                if tag not in tags:
                    tags[tag] = self.tree.get_text(node, kind.role)
        logger.debug(f"Harvested {len(tags)} tags")
        return tags

    def apply(self, root: Any) -> int:
        """
        アクティブな翻訳データをroot配下のノードへ書き込む

        Returns:
            書き換えたノードの数（翻訳データが無い場合は0）
        """
        if self.store is None or self.store.active_set is None:
            return 0

        entries = self.store.active_set.entries
        updated = 0
        for kind, node, tag in self._tagged_nodes(root):
            if tag in entries:
                self.tree.set_text(node, kind.role, entries[tag])
                updated += 1

        if self.auto_populate:
            added = self.store.merge_missing(self.harvest_defaults([root]))
            if added:
                logger.info(f"Recorded {added} new tags into '{self.store.current_language}'")

        self.tree.refresh(root)
        logger.debug(f"Applied '{self.store.current_language}' to {updated} nodes")
        return updated
