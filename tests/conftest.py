"""
テスト用の共通フィクスチャと設定を提供するモジュール。
"""
import pytest

from uilang import engine as engine_module
from uilang.error_handling import ErrorHandler
from uilang.event_hub import EventHub
from uilang.language_catalog import LanguageCatalog
from uilang.resource_file import ResourceFile
from uilang.crypto_box import CryptoBox
from uilang.settings import TranslationEngineSettings
from uilang.translation_set import TranslationSet
from uilang.translation_store import TranslationStore
from uilang.ui_binding import LabeledNode, LabeledNodeTree, NodeKind

EXTENSION = ".uiLanguage"
SECRET = "correct horse battery staple"


@pytest.fixture(autouse=True)
def reset_default_engine():
    """モジュールレベルの既定エンジンをテストごとに破棄する"""
    engine_module.reset()
    yield
    engine_module.reset()


@pytest.fixture(autouse=True)
def clear_secret_env(monkeypatch):
    """環境変数のシークレットがテストに影響しないようにする"""
    monkeypatch.delenv("UILANG_SECRET", raising=False)


@pytest.fixture
def language_folder(tmp_path):
    """言語ファイルのフォルダ（まだ作成されていない）"""
    return tmp_path / "Config" / "UILanguages"


@pytest.fixture
def make_settings(tmp_path):
    """
    テスト用の設定を作成する関数を返す。
    DEBUG_MODEに依存しないよう、モードは常に明示する。
    """
    def _make(**overrides):
        values = {
            "base_path": str(tmp_path),
            "development_mode": False,
            "auto_populate_missing_tags": False,
        }
        values.update(overrides)
        return TranslationEngineSettings(**values)
    return _make


@pytest.fixture
def event_hub():
    return EventHub()


@pytest.fixture
def error_handler(event_hub):
    return ErrorHandler(event_hub)


@pytest.fixture
def resource_file(error_handler):
    """平文で保存するResourceFile"""
    return ResourceFile(error_handler=error_handler)


@pytest.fixture
def encrypted_resource_file(error_handler):
    """暗号化して保存するResourceFile"""
    return ResourceFile(crypto_box=CryptoBox(SECRET), error_handler=error_handler)


@pytest.fixture
def write_language(language_folder):
    """言語ファイルを書き込むヘルパー"""
    def _write(resource_file, name, entries):
        language_folder.mkdir(parents=True, exist_ok=True)
        path = language_folder / f"{name}{EXTENSION}"
        assert resource_file.save(TranslationSet(name, dict(entries)), path)
        return path
    return _write


@pytest.fixture
def make_store(language_folder, resource_file, error_handler):
    """
    初期化済みのカタログとストアを作成する関数を返す。
    """
    def _make(auto_populate=False, development_mode=False, defaults=None, file=None):
        catalog = LanguageCatalog(
            language_folder, EXTENSION, file or resource_file, development_mode=development_mode
        )
        catalog.initialize(lambda: dict(defaults or {}))
        return TranslationStore(catalog, auto_populate, error_handler)
    return _make


@pytest.fixture
def node_tree():
    return LabeledNodeTree()


@pytest.fixture
def main_window():
    """
    テスト用のメインウィンドウ相当のノードツリーを返す。
    "greeting.title" は重複しており、最初のラベルのテキストが既定値になる。
    """
    return LabeledNode(children=[
        LabeledNode(kind=NodeKind.LABEL, tag="greeting.title", text="Hello"),
        LabeledNode(kind=NodeKind.BUTTON, tag="button.save", text="Save"),
        LabeledNode(kind=NodeKind.TAB_ITEM, tag="tab.general", header="General", children=[
            LabeledNode(kind=NodeKind.CHECKBOX, tag="checkbox.auto_save", text="Auto save"),
            LabeledNode(kind=NodeKind.LABEL, tag="greeting.title", text="Hello again"),
            LabeledNode(kind=NodeKind.TEXT_BOX, tag=None, text="untagged"),
        ]),
        LabeledNode(kind=NodeKind.GROUP_BOX, tag="group.advanced", header="Advanced", children=[
            LabeledNode(kind=NodeKind.TEXT_BLOCK, tag="text.hint", text="Pick a value"),
            LabeledNode(kind=NodeKind.TEXT_BLOCK, tag="", text="empty tag"),
        ]),
    ])


@pytest.fixture
def settings_window():
    """2つ目のサーフェス（main_windowと重複するタグを含む）"""
    return LabeledNode(children=[
        LabeledNode(kind=NodeKind.LABEL, tag="greeting.title", text="Welcome"),
        LabeledNode(kind=NodeKind.BUTTON, tag="button.cancel", text="Cancel"),
    ])
