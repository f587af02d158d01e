"""
test_resource_file.py
言語ファイルの読み書きのテスト
"""
import json

import pytest

from uilang.crypto_box import CryptoBox
from uilang.error_handling import LoadFailure, SaveFailure
from uilang.resource_file import ResourceFile
from uilang.translation_set import TranslationSet


@pytest.fixture
def french():
    return TranslationSet("French", {
        "greeting.title": "Bonjour",
        "button.save": "Enregistrer",
        "label.blank": "",
        "label.unset": None,
    })


@pytest.mark.unit
class TestPlaintextResourceFile:
    """平文の言語ファイル"""

    def test_round_trip_preserves_entries(self, resource_file, french, tmp_path):
        """保存して読み込むと空文字列やNoneも含めて元に戻る"""
        path = tmp_path / "French.uiLanguage"
        assert resource_file.save(french, path) is True

        loaded = resource_file.load(path)
        assert loaded.language_name == "French"
        assert loaded.entries == french.entries

    def test_file_is_indented_json_with_type(self, resource_file, french, tmp_path):
        """平文はインデント付きJSONで$typeを含む"""
        path = tmp_path / "French.uiLanguage"
        resource_file.save(french, path)

        text = path.read_text(encoding="utf-8")
        payload = json.loads(text)
        assert payload["$type"] == "TranslationSet"
        assert payload["languageName"] == "French"
        assert payload["entries"]["label.unset"] is None
        assert text.startswith("{\n")

    def test_save_creates_parent_directories(self, resource_file, french, tmp_path):
        """親ディレクトリが無ければ作成する"""
        path = tmp_path / "deep" / "nested" / "French.uiLanguage"
        assert resource_file.save(french, path)
        assert path.is_file()

    def test_save_leaves_no_temporary_files(self, resource_file, french, tmp_path):
        """保存後に一時ファイルが残らない"""
        resource_file.save(french, tmp_path / "French.uiLanguage")
        assert [p.name for p in tmp_path.iterdir()] == ["French.uiLanguage"]

    def test_missing_file_is_absent_without_error(self, resource_file, error_handler, tmp_path):
        """存在しないファイルはNoneで、エラーは記録しない"""
        assert resource_file.load(tmp_path / "Missing.uiLanguage") is None
        assert error_handler.error_history == []

    def test_malformed_file_is_absent(self, resource_file, error_handler, tmp_path):
        """壊れたファイルはNoneになり、LoadFailureが記録される"""
        path = tmp_path / "Broken.uiLanguage"
        path.write_text('{"languageName": "Broken", "entries": ', encoding="utf-8")

        assert resource_file.load(path) is None
        assert isinstance(error_handler.last_error(), LoadFailure)

    def test_save_failure_is_reported_not_raised(self, resource_file, error_handler, french, tmp_path):
        """保存に失敗してもFalseを返し、SaveFailureを記録する"""
        blocker = tmp_path / "not_a_directory"
        blocker.write_text("x", encoding="utf-8")

        assert resource_file.save(french, blocker / "French.uiLanguage") is False
        assert isinstance(error_handler.last_error(), SaveFailure)

    def test_failed_save_keeps_previous_file(self, resource_file, error_handler, french, tmp_path, monkeypatch):
        """書き込みに失敗しても以前のファイルの内容は変わらない"""
        path = tmp_path / "French.uiLanguage"
        resource_file.save(french, path)
        before = path.read_bytes()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("uilang.resource_file.os.replace", failing_replace)
        changed = TranslationSet("French", {"greeting.title": "Salut"})

        assert resource_file.save(changed, path) is False
        assert path.read_bytes() == before
        assert [p.name for p in tmp_path.iterdir()] == ["French.uiLanguage"]
        assert isinstance(error_handler.last_error(), SaveFailure)

    def test_quarantine_moves_file(self, resource_file, tmp_path):
        """隔離するとquarantineフォルダへ移動する"""
        path = tmp_path / "Broken.uiLanguage"
        path.write_text("garbage", encoding="utf-8")

        target = resource_file.quarantine(path)
        assert not path.exists()
        assert target == tmp_path / "quarantine" / "Broken.uiLanguage"
        assert target.read_text(encoding="utf-8") == "garbage"

    def test_quarantine_does_not_overwrite(self, resource_file, tmp_path):
        """同名のファイルが隔離済みなら別名で移動する"""
        for content in ("first", "second"):
            path = tmp_path / "Broken.uiLanguage"
            path.write_text(content, encoding="utf-8")
            resource_file.quarantine(path)

        quarantined = sorted(p.name for p in (tmp_path / "quarantine").iterdir())
        assert quarantined == ["Broken.uiLanguage", "Broken.uiLanguage.1"]


@pytest.mark.unit
class TestEncryptedResourceFile:
    """暗号化された言語ファイル"""

    def test_round_trip(self, encrypted_resource_file, french, tmp_path):
        """暗号化して保存したファイルを同じシークレットで読み込める"""
        path = tmp_path / "French.uiLanguage"
        assert encrypted_resource_file.save(french, path)

        loaded = encrypted_resource_file.load(path)
        assert loaded.entries == french.entries

    def test_content_is_opaque(self, encrypted_resource_file, french, tmp_path):
        """暗号化されたファイルからは内容が読み取れない"""
        path = tmp_path / "French.uiLanguage"
        encrypted_resource_file.save(french, path)

        raw = path.read_bytes()
        assert b"Bonjour" not in raw
        assert b"languageName" not in raw
        assert len(raw) % 16 == 0

    def test_different_secrets_produce_different_files(self, french, tmp_path):
        """シークレットが違えば暗号文も違う"""
        first = tmp_path / "a.uiLanguage"
        second = tmp_path / "b.uiLanguage"
        ResourceFile(crypto_box=CryptoBox("secret number one")).save(french, first)
        ResourceFile(crypto_box=CryptoBox("secret number two")).save(french, second)

        assert first.read_bytes() != second.read_bytes()

    def test_wrong_secret_is_absent(self, encrypted_resource_file, french, error_handler, tmp_path):
        """違うシークレットでは読み込めずNoneになる"""
        path = tmp_path / "French.uiLanguage"
        encrypted_resource_file.save(french, path)

        other = ResourceFile(crypto_box=CryptoBox("a different secret"), error_handler=error_handler)
        assert other.load(path) is None
        assert isinstance(error_handler.last_error(), LoadFailure)

    def test_plaintext_file_is_not_readable_as_encrypted(self, resource_file, encrypted_resource_file, french, tmp_path):
        """平文のファイルは暗号化モードでは読み込めない"""
        path = tmp_path / "French.uiLanguage"
        resource_file.save(french, path)
        assert encrypted_resource_file.load(path) is None

    def test_load_plaintext_detects_unencrypted(self, resource_file, encrypted_resource_file, french, error_handler, tmp_path):
        """平文の検出は暗号化ファイルに対してNoneを返し、エラーは記録しない"""
        plain = tmp_path / "plain.json"
        secret = tmp_path / "secret.uiLanguage"
        resource_file.save(french, plain)
        encrypted_resource_file.save(french, secret)
        error_handler.clear_error_history()

        assert encrypted_resource_file.load_plaintext(plain).entries == french.entries
        assert encrypted_resource_file.load_plaintext(secret) is None
        assert error_handler.error_history == []

    def test_save_plaintext_ignores_encryption(self, encrypted_resource_file, french, tmp_path):
        """save_plaintextは暗号化設定に関係なく平文で保存する"""
        path = tmp_path / "export.json"
        assert encrypted_resource_file.save_plaintext(french, path)
        assert json.loads(path.read_text(encoding="utf-8"))["entries"]["greeting.title"] == "Bonjour"
