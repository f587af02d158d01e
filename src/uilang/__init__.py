"""
uilang

UIの文字列リソースを言語ファイルで管理し、実行時に切り替える翻訳エンジン
"""

from uilang.engine import (
    TranslationEngine, setup, get_engine, reset, t, set_language, get_language, apply_language
)
from uilang.error_handling import (
    AppError, SaveFailure, LoadFailure, DecryptionError, CodecError,
    UnknownLanguageError, NotInitializedError, ConfigurationError
)
from uilang.event_hub import EventHub, EventType, Event
from uilang.settings import TranslationEngineSettings
from uilang.translation_set import TranslationSet, Lookup
from uilang.ui_binding import LabeledNode, LabeledNodeTree, NodeKind, NodeRole, NodeTree

__all__ = [
    'TranslationEngine', 'setup', 'get_engine', 'reset', 't', 'set_language', 'get_language', 'apply_language',
    'AppError', 'SaveFailure', 'LoadFailure', 'DecryptionError', 'CodecError',
    'UnknownLanguageError', 'NotInitializedError', 'ConfigurationError',
    'EventHub', 'EventType', 'Event',
    'TranslationEngineSettings',
    'TranslationSet', 'Lookup',
    'LabeledNode', 'LabeledNodeTree', 'NodeKind', 'NodeRole', 'NodeTree',
]
