"""
flet_nodes.py
fletのコントロールツリー用NodeTree

コントロールの data 属性に文字列を設定すると、それがタグとして扱われる。

    ft.ElevatedButton(text="Save", data="button.save")

種類の判定はクラス名（継承元を含む）で行うため、
アプリ側でコントロールを継承したクラスもそのまま対象になる。
ボタンとタブのテキストは text 属性で扱う（flet 0.70 未満のAPI）。
"""
from typing import Any, Dict, Iterable, Optional, Tuple

import flet as ft

from uilang.logging_config import get_logger
from uilang.ui_binding import NodeKind, NodeRole, NodeTree

logger = get_logger(__name__)

# クラス名 → (種類, テキストを保持する属性名)
KIND_BY_CLASS: Dict[str, Tuple[NodeKind, str]] = {
    "Checkbox": (NodeKind.CHECKBOX, "label"),
    "Switch": (NodeKind.CHECKBOX, "label"),
    "Radio": (NodeKind.CHECKBOX, "label"),
    "Dropdown": (NodeKind.LABEL, "label"),
    "Tab": (NodeKind.TAB_ITEM, "text"),
    "ElevatedButton": (NodeKind.BUTTON, "text"),
    "TextButton": (NodeKind.BUTTON, "text"),
    "OutlinedButton": (NodeKind.BUTTON, "text"),
    "FilledButton": (NodeKind.BUTTON, "text"),
    "FilledTonalButton": (NodeKind.BUTTON, "text"),
    "NavigationRailDestination": (NodeKind.GROUP_BOX, "label"),
    "NavigationBarDestination": (NodeKind.GROUP_BOX, "label"),
    "Text": (NodeKind.TEXT_BLOCK, "value"),
    "TextField": (NodeKind.TEXT_BOX, "value"),
}

# 子コントロールを保持しうる属性（値がコントロールの場合だけ辿る）
CHILD_ATTRIBUTES = (
    "controls", "content", "tabs", "destinations", "actions",
    "leading", "title", "subtitle", "trailing", "label",
)

CONTROL_BASE_NAMES = ("Control", "BaseControl")


def _is_control(obj: Any) -> bool:
    return any(cls.__name__ in CONTROL_BASE_NAMES for cls in type(obj).__mro__)


def classify(control: Any) -> Optional[Tuple[NodeKind, str]]:
    """コントロールの種類とテキスト属性を返す（対象外なら None）"""
    for cls in type(control).__mro__:
        mapping = KIND_BY_CLASS.get(cls.__name__)
        if mapping:
            return mapping
    return None


class FletNodeTree(NodeTree):
    """fletコントロールを走査するNodeTree"""

    def children(self, control: ft.Control) -> Iterable[ft.Control]:
        for attr in CHILD_ATTRIBUTES:
            value = getattr(control, attr, None)
            if value is None:
                continue
            if isinstance(value, (list, tuple)):
                for item in value:
                    if _is_control(item):
                        yield item
            elif _is_control(value):
                yield value

    def descendants(self, root: ft.Control, kind: NodeKind) -> Iterable[ft.Control]:
        for child in self.children(root):
            mapping = classify(child)
            if mapping and mapping[0] is kind:
                yield child
            yield from self.descendants(child, kind)

    def get_tag(self, node: ft.Control) -> Optional[str]:
        tag = getattr(node, "data", None)
        return tag if isinstance(tag, str) else None

    def get_text(self, node: ft.Control, role: NodeRole) -> Optional[str]:
        mapping = classify(node)
        if mapping is None:
            return None
        value = getattr(node, mapping[1], None)
        return value if isinstance(value, str) else None

    def set_text(self, node: ft.Control, role: NodeRole, text: Optional[str]) -> None:
        mapping = classify(node)
        if mapping is None:
            return
        setattr(node, mapping[1], text)

    def refresh(self, root: ft.Control) -> None:
        """ページに追加済みのコントロールだけを再描画する"""
        try:
            page = root.page
        except (AttributeError, RuntimeError):
            # ページ未追加のコントロール
            page = None
        if page is not None:
            root.update()
