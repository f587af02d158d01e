"""
codec.py
言語ファイル用のJSONコーデック

オブジェクトをインデント付きJSONに変換し、"$type" フィールドで型を判別する。
同じコーデックを他の型の保存にも使い回せるよう、型はレジストリで管理する。
"""
import json
from typing import Dict, Any, Type, TypeVar

from uilang.error_handling import CodecError
from uilang.translation_set import TranslationSet

T = TypeVar("T")

TYPE_FIELD = "$type"


class JsonCodec:
    """"$type" 判別子付きのJSONシリアライザ"""

    def __init__(self, indent: int = 2):
        self.indent = indent
        self._types: Dict[str, Type] = {}
        self.register(TranslationSet)

    def register(self, cls: Type, type_name: str = None) -> None:
        """to_dict / from_dict を持つ型を登録する"""
        if not hasattr(cls, "to_dict") or not hasattr(cls, "from_dict"):
            raise TypeError(f"{cls.__name__} must define to_dict() and from_dict()")
        self._types[type_name or cls.__name__] = cls

    def type_name_of(self, cls: Type) -> str:
        for name, registered in self._types.items():
            if registered is cls:
                return name
        raise CodecError(f"Type {cls.__name__} is not registered")

    def serialize(self, obj: Any) -> bytes:
        """
        オブジェクトをUTF-8のJSONバイト列に変換する

        Raises:
            CodecError: 未登録の型や変換できない値
        """
        payload = {TYPE_FIELD: self.type_name_of(type(obj))}
        payload.update(obj.to_dict())
        try:
            text = json.dumps(payload, indent=self.indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Failed to serialize {type(obj).__name__}: {e}", original_exception=e)
        return text.encode("utf-8")

    def deserialize(self, data: bytes, expected_type: Type[T]) -> T:
        """
        JSONバイト列から expected_type のオブジェクトを復元する

        "$type" が無いデータは expected_type として扱う。

        Raises:
            CodecError: JSONが不正、型が一致しない、内容が不正
        """
        try:
            payload = json.loads(data.decode("utf-8-sig"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CodecError(f"Malformed JSON: {e}", original_exception=e)

        if not isinstance(payload, dict):
            raise CodecError(f"Expected a JSON object, got {type(payload).__name__}")

        expected_name = self.type_name_of(expected_type)
        type_name = payload.pop(TYPE_FIELD, None)
        if type_name is not None:
            # 型名の後ろに名前空間などが付いていても先頭の型名で判定する
            short_name = str(type_name).split(",")[0].rsplit(".", 1)[-1]
            if short_name != expected_name:
                raise CodecError(f"Type mismatch: expected {expected_name}, found {type_name}")

        try:
            return expected_type.from_dict(payload)
        except (TypeError, ValueError, KeyError) as e:
            raise CodecError(f"Invalid {expected_name} payload: {e}", original_exception=e)
