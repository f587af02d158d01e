"""
resource_file.py
言語ファイルの読み書き

1言語分のTranslationSetをコーデックでシリアライズし、
暗号化が有効な場合はCryptoBoxで暗号化してから書き込む。
失敗はすべてこの境界で記録され、呼び出し元には False / None が返る。
"""
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional, Union

from uilang.codec import JsonCodec
from uilang.crypto_box import CryptoBox
from uilang.error_handling import (
    CodecError, ErrorHandler, LoadFailure, SaveFailure, with_error_handling
)
from uilang.logging_config import get_logger
from uilang.translation_set import TranslationSet

logger = get_logger(__name__)

PathLike = Union[str, Path]

QUARANTINE_FOLDER = "quarantine"


class ResourceFile:
    """TranslationSetのディスク表現を扱うクラス"""

    def __init__(
        self,
        codec: Optional[JsonCodec] = None,
        crypto_box: Optional[CryptoBox] = None,
        error_handler: Optional[ErrorHandler] = None
    ):
        """
        Args:
            codec: シリアライズに使うコーデック
            crypto_box: 暗号化ボックス（Noneなら平文で保存する）
            error_handler: 失敗を記録するハンドラー
        """
        self.codec = codec or JsonCodec()
        self.crypto_box = crypto_box
        self.error_handler = error_handler

    @property
    def encrypted(self) -> bool:
        return self.crypto_box is not None

    @with_error_handling(SaveFailure, fallback=False)
    def save(self, translation_set: TranslationSet, path: PathLike) -> bool:
        """
        言語ファイルを保存する

        暗号化が有効なら暗号文を、無効ならインデント付きJSONを書き込む。
        書き込みは一時ファイル経由で行うため、失敗しても既存のファイルは残る。

        Returns:
            保存できたかどうか
        """
        data = self.codec.serialize(translation_set)
        if self.crypto_box is not None:
            data = self.crypto_box.encrypt(data)
        self._write_atomic(Path(path), data)
        logger.debug(f"Saved '{translation_set.language_name}' to {path} (encrypted={self.encrypted})")
        return True

    @with_error_handling(SaveFailure, fallback=False)
    def save_plaintext(self, translation_set: TranslationSet, path: PathLike) -> bool:
        """暗号化の設定に関係なく平文のJSONで保存する"""
        self._write_atomic(Path(path), self.codec.serialize(translation_set))
        logger.debug(f"Saved plaintext '{translation_set.language_name}' to {path}")
        return True

    def load(self, path: PathLike) -> Optional[TranslationSet]:
        """
        言語ファイルを読み込む

        ファイルが無い場合や、復号・解析に失敗した場合は None を返す。
        """
        path = Path(path)
        if not path.is_file():
            logger.debug(f"Language file not found: {path}")
            return None
        return self._read(path)

    @with_error_handling(LoadFailure, fallback=None)
    def _read(self, path: Path) -> TranslationSet:
        data = path.read_bytes()
        if self.crypto_box is not None:
            data = self.crypto_box.decrypt(data)
        return self.codec.deserialize(data, TranslationSet)

    def load_plaintext(self, path: PathLike) -> Optional[TranslationSet]:
        """
        暗号化の設定に関係なく平文として読み込みを試みる

        暗号化されていない言語ファイルの検出に使うため、失敗は記録しない。
        """
        try:
            return self.codec.deserialize(Path(path).read_bytes(), TranslationSet)
        except (OSError, CodecError) as e:
            logger.debug(f"{path} is not a plaintext language file: {e}")
            return None

    @with_error_handling(SaveFailure, fallback=False)
    def delete(self, path: PathLike) -> bool:
        Path(path).unlink()
        logger.info(f"Deleted {path}")
        return True

    @with_error_handling(SaveFailure, fallback=None)
    def quarantine(self, path: PathLike) -> Optional[Path]:
        """
        読み込めないファイルを隔離フォルダへ移動する

        Returns:
            移動先のパス（失敗時は None）
        """
        path = Path(path)
        target_dir = path.parent / QUARANTINE_FOLDER
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / path.name
        counter = 1
        while target.exists():
            target = target_dir / f"{path.name}.{counter}"
            counter += 1
        shutil.move(str(path), str(target))
        logger.warning(f"Quarantined unreadable language file {path} -> {target}")
        return target

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
