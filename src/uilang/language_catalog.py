"""
language_catalog.py
言語ファイルのカタログ

言語フォルダを走査して読み込み可能な言語ファイルの一覧を管理し、
既定言語（English）のファイルが必ず存在するようにする。

暗号化が有効な場合のフォルダの扱い:
- 正規のパス（<言語名><拡張子>）にある平文の言語ファイルは、
  モードに関係なくその場で暗号化する。
- それ以外の場所にある平文ファイルは、開発モードでは暗号化して
  正規のパスへ書き出し（元のファイルは残す）、本番モードでは削除する。
- 拡張子が一致するのに読み込めないファイルは quarantine/ へ移動し、
  言語一覧には加えない。
"""
from pathlib import Path
from typing import Callable, Dict, List, Optional

from uilang.logging_config import get_logger
from uilang.resource_file import ResourceFile
from uilang.translation_set import TranslationSet

logger = get_logger(__name__)

BASELINE_LANGUAGE = "English"

DefaultEntries = Callable[[], Dict[str, Optional[str]]]


class LanguageCatalog:
    """言語フォルダ内の言語ファイルの一覧を管理するクラス"""

    def __init__(
        self,
        folder: Path,
        extension: str,
        resource_file: ResourceFile,
        development_mode: bool = False
    ):
        """
        Args:
            folder: 言語ファイルのフォルダ
            extension: 言語ファイルの拡張子（"."を含む）
            resource_file: 読み書きに使うResourceFile
            development_mode: 未保護ファイルを削除せず暗号化し直すかどうか
        """
        self.folder = Path(folder)
        self.extension = extension
        self.resource_file = resource_file
        self.development_mode = development_mode
        self._languages: List[str] = []

    @property
    def known_languages(self) -> List[str]:
        return list(self._languages)

    def contains(self, name: Optional[str]) -> bool:
        return name in self._languages

    def path_for(self, name: str) -> Path:
        return self.folder / f"{name}{self.extension}"

    def initialize(self, default_entries: Optional[DefaultEntries] = None) -> List[str]:
        """
        フォルダを走査して言語一覧を作成する

        Englishが無い場合は default_entries() で得たタグから作成して保存する。

        Args:
            default_entries: 既定のタグ → テキストを返す関数（Englishが無い場合だけ呼ばれる）

        Returns:
            言語名の一覧
        """
        self.folder.mkdir(parents=True, exist_ok=True)
        self.reload()

        if BASELINE_LANGUAGE not in self._languages:
            entries = default_entries() if default_entries else {}
            baseline = TranslationSet(BASELINE_LANGUAGE, dict(entries))
            if self.resource_file.save(baseline, self.path_for(BASELINE_LANGUAGE)):
                self._languages.append(BASELINE_LANGUAGE)
                self._languages.sort()
                logger.info(f"Created baseline language file with {len(baseline)} tags")
            else:
                logger.error(f"Could not create baseline language file in {self.folder}")

        logger.info(f"Known languages: {self._languages}")
        return self.known_languages

    def reload(self) -> List[str]:
        """フォルダを再走査する（Englishの作成は行わない）"""
        self._languages = []
        if not self.folder.is_dir():
            return self.known_languages

        if self.resource_file.encrypted:
            for path in self._files():
                plain = self.resource_file.load_plaintext(path)
                if plain is not None:
                    self._migrate_unprotected(path, plain)

        for path in self._files():
            if not path.name.endswith(self.extension):
                continue
            name = path.name[:-len(self.extension)]
            if not name:
                continue
            if self.resource_file.load(path) is None:
                self.resource_file.quarantine(path)
                continue
            self._languages.append(name)
        self._languages.sort()
        return self.known_languages

    def _files(self) -> List[Path]:
        return sorted(
            p for p in self.folder.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def _migrate_unprotected(self, path: Path, translation_set: TranslationSet) -> None:
        """暗号化が有効なフォルダで見つかった平文の言語ファイルを処理する"""
        stem = path.name[:-len(path.suffix)] if path.suffix else path.name
        protected_path = self.folder / f"{stem}{self.extension}"

        # 正規のパスにある平文ファイルはモードに関係なくその場で暗号化する
        if protected_path == path:
            if self.resource_file.save(translation_set, protected_path):
                logger.info(f"Encrypted unprotected language file {path} in place")
            return

        if not self.development_mode:
            logger.warning(f"Removing unprotected language file {path}")
            self.resource_file.delete(path)
            return

        if not protected_path.exists():
            if self.resource_file.save(translation_set, protected_path):
                logger.info(f"Encrypted unprotected language file {path} -> {protected_path}")
        else:
            logger.debug(f"Unprotected file {path} left as-is, {protected_path} already exists")

    def add_language(
        self,
        name: str,
        entries: Optional[Dict[str, Optional[str]]] = None,
        based_on: Optional[str] = BASELINE_LANGUAGE
    ) -> bool:
        """
        新しい言語ファイルを作成する

        entries を省略した場合は based_on の言語のタグをコピーする。

        Returns:
            作成できたかどうか（既に存在する場合は False）
        """
        if not name or name in self._languages or self.path_for(name).exists():
            logger.warning(f"Language '{name}' already exists or has an invalid name")
            return False

        if entries is None:
            entries = {}
            if based_on and self.contains(based_on):
                source = self.resource_file.load(self.path_for(based_on))
                if source is not None:
                    entries = dict(source.entries)

        if not self.resource_file.save(TranslationSet(name, dict(entries)), self.path_for(name)):
            return False
        self._languages.append(name)
        self._languages.sort()
        logger.info(f"Added language '{name}' with {len(entries)} tags")
        return True
