"""Key/value codecs for durable storage.

Durable adapters store bytes. A codec turns the Python keys and values held
in the mirror into bytes and back:

- text codecs (any name Python's codec registry knows, e.g. "utf-8"): str
- "json": any JSON-serialisable value, stored as UTF-8 JSON
- "binary": bytes passthrough
"""

from __future__ import annotations

import codecs
import json
from typing import Any, Protocol

from mapdb.shared.errors import EncodingError

JSON = "json"
BINARY = "binary"


class Codec(Protocol):
    """Bidirectional bytes conversion for one encoding name."""

    name: str

    def encode(self, obj: Any) -> bytes: ...

    def decode(self, raw: bytes) -> Any: ...


class TextCodec:
    def __init__(self, name: str) -> None:
        self.name = codecs.lookup(name).name

    def encode(self, obj: Any) -> bytes:
        if not isinstance(obj, str):
            msg = f"expected str, got {type(obj).__name__}"
            raise EncodingError(self.name, msg)
        try:
            return obj.encode(self.name)
        except UnicodeEncodeError as exc:
            raise EncodingError(self.name, str(exc)) from exc

    def decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.name)
        except UnicodeDecodeError as exc:
            raise EncodingError(self.name, str(exc)) from exc


class JsonCodec:
    name = JSON

    def encode(self, obj: Any) -> bytes:
        try:
            return json.dumps(obj, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise EncodingError(self.name, str(exc)) from exc

    def decode(self, raw: bytes) -> Any:
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise EncodingError(self.name, str(exc)) from exc


class BinaryCodec:
    name = BINARY

    def encode(self, obj: Any) -> bytes:
        if not isinstance(obj, (bytes, bytearray, memoryview)):
            msg = f"expected bytes, got {type(obj).__name__}"
            raise EncodingError(self.name, msg)
        return bytes(obj)

    def decode(self, raw: bytes) -> bytes:
        return bytes(raw)


class KeyValueCodec:
    """Key codec and value codec pair used by one durable store."""

    def __init__(self, key_encoding: str = "utf-8", value_encoding: str = "utf-8") -> None:
        self.key_codec = get_codec(key_encoding)
        self.value_codec = get_codec(value_encoding)

    def encode_key(self, key: Any) -> bytes:
        try:
            return self.key_codec.encode(key)
        except EncodingError as exc:
            exc.key = key
            raise

    def decode_key(self, raw: bytes) -> Any:
        return self.key_codec.decode(raw)

    def encode_value(self, value: Any, *, key: Any = None) -> bytes:
        try:
            return self.value_codec.encode(value)
        except EncodingError as exc:
            exc.key = key
            raise

    def decode_value(self, raw: bytes) -> Any:
        return self.value_codec.decode(raw)


def get_codec(name: str) -> Codec:
    """Resolve an encoding name to a codec.

    Raises:
        ValueError: If the name is neither "json", "binary" nor a known text codec.
    """
    normalized = name.strip().lower()
    if normalized == JSON:
        return JsonCodec()
    if normalized == BINARY:
        return BinaryCodec()
    try:
        return TextCodec(normalized)
    except LookupError:
        msg = f"unknown encoding: {name!r}"
        raise ValueError(msg) from None
