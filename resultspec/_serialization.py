"""JSON encoding and decoding backed by msgspec."""

from typing import Any, Literal, overload

import msgspec

__all__ = ("decode_json", "encode_json")


def _default_enc_hook(value: Any) -> Any:
    """Fallback for objects msgspec cannot encode natively."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return str(value)


_encoder = msgspec.json.Encoder(enc_hook=_default_enc_hook)
_decoder = msgspec.json.Decoder()


@overload
def encode_json(data: Any, *, as_bytes: Literal[False] = ...) -> str: ...


@overload
def encode_json(data: Any, *, as_bytes: Literal[True]) -> bytes: ...


def encode_json(data: Any, *, as_bytes: bool = False) -> "str | bytes":
    encoded = _encoder.encode(data)
    if as_bytes:
        return encoded
    return encoded.decode("utf-8")


def decode_json(data: "str | bytes", *, decode_bytes: bool = True) -> Any:
    if isinstance(data, bytes) and not decode_bytes:
        return data
    return _decoder.decode(data)
