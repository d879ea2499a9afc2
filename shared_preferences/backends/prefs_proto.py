"""Minimal protobuf encoder/decoder for:

message PreferencesData {
  map<string, Value> entries = 1;
}

message Value {
  oneof kind {
    string string_value = 1;
    sint32 int_value = 2;
    sint64 long_value = 3;
    double float_value = 4;
    bool bool_value = 5;
    StringSet string_set_value = 6;
  }
}

message StringSet {
  repeated string values = 1;
}

The map is wire-level equivalent to a repeated EntriesEntry {key = 1; value = 2}.
"""
from __future__ import annotations

import struct
from typing import Dict, List, Optional, Tuple

from shared_preferences.common.values import Entry, PreferenceValue, ValueType

WIRE_TYPE_VARINT = 0
WIRE_TYPE_64BIT = 1
WIRE_TYPE_LENGTH_DELIMITED = 2
WIRE_TYPE_32BIT = 5

MAX_VARINT_BYTES = 10

_FIELD_BY_TYPE = {
    ValueType.STRING: 1,
    ValueType.INT: 2,
    ValueType.LONG: 3,
    ValueType.FLOAT: 4,
    ValueType.BOOLEAN: 5,
    ValueType.STRING_SET: 6,
}
_TYPE_BY_FIELD = {field: value_type for value_type, field in _FIELD_BY_TYPE.items()}


def _encode_varint(value: int) -> bytes:
    v = value & 0xFFFFFFFFFFFFFFFF
    out = bytearray()
    while v >= 0x80:
        out.append((v & 0x7F) | 0x80)
        v >>= 7
    out.append(v)
    return bytes(out)


def _decode_varint(buf: bytes, offset: int) -> tuple:
    """Decode a varint from buf at offset. Returns (value, next_offset)."""
    result = 0
    shift = 0
    pos = offset
    bytes_read = 0
    while pos < len(buf):
        if bytes_read >= MAX_VARINT_BYTES:
            raise ValueError("Varint too long (> 10 bytes)")
        b = buf[pos]
        pos += 1
        bytes_read += 1
        result |= (b & 0x7F) << shift
        if not (b & 0x80):
            return result & 0xFFFFFFFFFFFFFFFF, pos
        shift += 7
    raise ValueError("Unexpected end of buffer while decoding varint")


def _zigzag_encode(value: int) -> int:
    return (value << 1) ^ (value >> 63)


def _zigzag_decode(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def _skip_field(buf: bytes, offset: int, wire_type: int, limit: int) -> int:
    """Skip a field based on wire type. Returns new offset."""
    if wire_type == WIRE_TYPE_VARINT:
        _, offset = _decode_varint(buf, offset)
        return offset
    elif wire_type == WIRE_TYPE_64BIT:
        if offset + 8 > limit:
            raise ValueError("Unexpected end of buffer skipping 64-bit field")
        return offset + 8
    elif wire_type == WIRE_TYPE_LENGTH_DELIMITED:
        skip_len, offset = _decode_varint(buf, offset)
        if offset + skip_len > limit:
            raise ValueError("Length-delimited field exceeds buffer")
        return offset + skip_len
    elif wire_type == WIRE_TYPE_32BIT:
        if offset + 4 > limit:
            raise ValueError("Unexpected end of buffer skipping 32-bit field")
        return offset + 4
    else:
        raise ValueError(f"Unknown wire type {wire_type}")


def _tag(field_number: int, wire_type: int) -> bytes:
    return _encode_varint((field_number << 3) | wire_type)


def _encode_bytes_field(field_number: int, data: bytes) -> bytes:
    return _tag(field_number, WIRE_TYPE_LENGTH_DELIMITED) + _encode_varint(len(data)) + data


def _encode_string_field(field_number: int, value: str) -> bytes:
    return _encode_bytes_field(field_number, value.encode("utf-8"))


def _encode_value(value_type: ValueType, value: PreferenceValue) -> bytes:
    field = _FIELD_BY_TYPE[value_type]
    if value_type is ValueType.STRING:
        return _encode_string_field(field, value)
    if value_type in (ValueType.INT, ValueType.LONG):
        return _tag(field, WIRE_TYPE_VARINT) + _encode_varint(_zigzag_encode(value))
    if value_type is ValueType.FLOAT:
        return _tag(field, WIRE_TYPE_64BIT) + struct.pack("<d", value)
    if value_type is ValueType.BOOLEAN:
        return _tag(field, WIRE_TYPE_VARINT) + _encode_varint(1 if value else 0)
    # Sorted so the same set always encodes to the same bytes
    members = b"".join(_encode_string_field(1, s) for s in sorted(value))
    return _encode_bytes_field(field, members)


def encode_preferences_data(data: Dict[str, Entry]) -> bytes:
    """Encode typed entries as PreferencesData protobuf bytes."""
    chunks: list[bytes] = []
    for key, (value_type, value) in data.items():
        entry = _encode_string_field(1, key) + _encode_bytes_field(
            2, _encode_value(value_type, value)
        )
        chunks.append(_encode_bytes_field(1, entry))
    return b"".join(chunks)


def _read_length(buf: bytes, offset: int, limit: int) -> Tuple[int, int]:
    size, offset = _decode_varint(buf, offset)
    if offset + size > limit:
        raise ValueError(f"Length {size} exceeds message boundary (offset={offset}, end={limit})")
    return offset, offset + size


def _decode_string_set(buf: bytes, offset: int, end: int) -> frozenset:
    members: List[str] = []
    while offset < end:
        tag_val, offset = _decode_varint(buf, offset)
        if tag_val >> 3 != 1 or tag_val & 0x07 != WIRE_TYPE_LENGTH_DELIMITED:
            offset = _skip_field(buf, offset, tag_val & 0x07, end)
            continue
        start, offset = _read_length(buf, offset, end)
        members.append(buf[start:offset].decode("utf-8"))
    return frozenset(members)


def _decode_value(buf: bytes, offset: int, end: int) -> Optional[Entry]:
    entry: Optional[Entry] = None
    while offset < end:
        tag_val, offset = _decode_varint(buf, offset)
        field_number = tag_val >> 3
        wire_type = tag_val & 0x07
        value_type = _TYPE_BY_FIELD.get(field_number)

        if value_type in (ValueType.INT, ValueType.LONG, ValueType.BOOLEAN) and wire_type == WIRE_TYPE_VARINT:
            raw, offset = _decode_varint(buf, offset)
            if value_type is ValueType.BOOLEAN:
                entry = (value_type, raw != 0)
            else:
                value = _zigzag_decode(raw)
                if value_type is ValueType.INT:
                    # sint32 readers keep the low 32 bits
                    value = (value + 2**31) % 2**32 - 2**31
                entry = (value_type, value)
        elif value_type is ValueType.FLOAT and wire_type == WIRE_TYPE_64BIT:
            if offset + 8 > end:
                raise ValueError("Unexpected end of buffer reading double")
            entry = (value_type, struct.unpack("<d", buf[offset : offset + 8])[0])
            offset += 8
        elif value_type is ValueType.STRING and wire_type == WIRE_TYPE_LENGTH_DELIMITED:
            start, offset = _read_length(buf, offset, end)
            entry = (value_type, buf[start:offset].decode("utf-8"))
        elif value_type is ValueType.STRING_SET and wire_type == WIRE_TYPE_LENGTH_DELIMITED:
            start, offset = _read_length(buf, offset, end)
            entry = (value_type, _decode_string_set(buf, start, offset))
        else:
            offset = _skip_field(buf, offset, wire_type, end)
    return entry


def decode_preferences_data(buf: bytes) -> Dict[str, Entry]:
    """Decode PreferencesData protobuf bytes into typed entries."""
    result: Dict[str, Entry] = {}
    offset = 0
    length = len(buf)

    while offset < length:
        tag_val, offset = _decode_varint(buf, offset)
        field_number = tag_val >> 3
        wire_type = tag_val & 0x07

        if field_number != 1 or wire_type != WIRE_TYPE_LENGTH_DELIMITED:
            offset = _skip_field(buf, offset, wire_type, length)
            continue

        offset, end = _read_length(buf, offset, length)

        key: str | None = None
        entry: Entry | None = None
        while offset < end:
            inner_tag, offset = _decode_varint(buf, offset)
            inner_field = inner_tag >> 3
            inner_wire = inner_tag & 0x07

            if inner_wire != WIRE_TYPE_LENGTH_DELIMITED:
                offset = _skip_field(buf, offset, inner_wire, end)
                continue

            start, offset = _read_length(buf, offset, end)
            if inner_field == 1:
                key = buf[start:offset].decode("utf-8")
            elif inner_field == 2:
                entry = _decode_value(buf, start, offset)

        if key is not None and entry is not None:
            result[key] = entry

    return result
