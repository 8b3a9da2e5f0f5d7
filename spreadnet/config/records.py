"""Decoder for compiled configuration record streams.

A stream is a sequence of big-endian records, each an ``int32`` tag followed by
a tag specific payload, and ends with tag ``0``. Strings are an ``int32``
length followed by that many UTF-16-BE code units; integer arrays an ``int32``
count followed by the values. Unknown tags carry no payload and are skipped.
"""

from __future__ import annotations

import struct
from typing import Any, Dict, Mapping, Optional, Tuple

from ..errors import ConfigError

END = 0

# tag -> (field name or None when the value is discarded, payload kind)
TAGS: Mapping[int, Tuple[Optional[str], Optional[str]]] = {
    1: (None, None),
    2: (None, "int"),
    3: (None, "int"),
    4: ("population", "int"),
    5: ("train", "bool"),
    6: ("min_random", "double"),
    7: ("max_random", "double"),
    8: ("error_threshold", "double"),
    9: ("max_iterations", "int"),
    10: ("print_weights", "bool"),
    11: ("print_truth_table", "bool"),
    12: ("run_after_train", "bool"),
    13: ("save_weights", "bool"),
    14: ("activation", "str"),
    15: ("num_cases", "int"),
    16: ("learning_rate", "double"),
    17: ("layer_sizes", "intarr"),
    18: ("keep_alive", "int"),
    19: (None, None),
    20: ("weights_file", "str"),
    21: ("output_weights_file", "str"),
    22: (None, None),
    23: ("outputs_file", "str"),
    24: ("inputs_file", "str"),
    25: ("save_interval", "int"),
    26: ("distinct_files", "bool"),
}


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def _take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ConfigError(
                f"configuration stream ended inside a record at byte {self._pos}"
            )
        chunk = self._data[self._pos : end]
        self._pos = end
        return chunk

    def read_int(self) -> int:
        return struct.unpack(">i", self._take(4))[0]

    def read_double(self) -> float:
        return struct.unpack(">d", self._take(8))[0]

    def read_bool(self) -> bool:
        return self.read_int() == 1

    def read_str(self) -> str:
        length = self.read_int()
        if length < 0:
            raise ConfigError(f"negative string length {length} in configuration stream")
        return self._take(2 * length).decode("utf-16-be")

    def read_intarr(self) -> list:
        count = self.read_int()
        if count < 0:
            raise ConfigError(f"negative array length {count} in configuration stream")
        return list(struct.unpack(f">{count}i", self._take(4 * count)))

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._data)


def decode_records(data: bytes) -> Dict[str, Any]:
    """Return ``{field: value}`` for every recognised record in ``data``."""

    reader = _Reader(data)
    values: Dict[str, Any] = {}
    while True:
        if reader.exhausted:
            raise ConfigError("configuration stream is missing its end tag")
        tag = reader.read_int()
        if tag == END:
            return values
        field, kind = TAGS.get(tag, (None, None))
        if kind is None:
            continue
        value = getattr(reader, f"read_{kind}")()
        if field is not None:
            values[field] = value


_FIELD_TAGS = {name: (tag, kind) for tag, (name, kind) in TAGS.items() if name}


def encode_records(values: Mapping[str, Any]) -> bytes:
    """Encode ``{field: value}`` as a record stream ending with the end tag."""

    out = bytearray()
    for name, value in values.items():
        try:
            tag, kind = _FIELD_TAGS[name]
        except KeyError as exc:
            raise ConfigError(f"no record tag for configuration field {name!r}") from exc
        out += struct.pack(">i", tag)
        if kind == "int":
            out += struct.pack(">i", int(value))
        elif kind == "bool":
            out += struct.pack(">i", 1 if value else 0)
        elif kind == "double":
            out += struct.pack(">d", float(value))
        elif kind == "str":
            encoded = value.encode("utf-16-be")
            out += struct.pack(">i", len(encoded) // 2) + encoded
        else:
            out += struct.pack(f">{len(value) + 1}i", len(value), *value)
    out += struct.pack(">i", END)
    return bytes(out)


__all__ = ["END", "TAGS", "decode_records", "encode_records"]
