"""Binary encoding of the XSETTINGS property (_XSETTINGS_SETTINGS)."""

from __future__ import annotations

import json
import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence, Tuple, Union

SETTING_PROP_SCREEN = "_XSETTINGS_S0"
SETTING_PROP_SETTINGS = "_XSETTINGS_SETTINGS"

XS_DATA_ORDER = 0
XS_DATA_SERIAL = 0
XS_DATA_FORMAT = 8

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"
_UINT32_MOD = 1 << 32

Color = Tuple[int, int, int, int]
Value = Union[int, str, Color]


class SettingType(IntEnum):
    """Type tag of one XSETTINGS entry."""

    INTEGER = 0
    STRING = 1
    COLOR = 2


def pad(n: int) -> int:
    """Number of bytes needed to pad ``n`` up to a multiple of four."""
    return -n & 3


def _encode(text: str) -> bytes:
    return text.encode(_ENCODING, _ERRORS)


def _normalize_value(setting_type: SettingType, value) -> Value:
    if setting_type is SettingType.INTEGER:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"integer setting needs an int, got {type(value).__name__}")
        if not -(1 << 31) <= value < (1 << 31):
            raise ValueError(f"integer value {value} out of int32 range")
        return value
    if setting_type is SettingType.STRING:
        if not isinstance(value, str):
            raise TypeError(f"string setting needs a str, got {type(value).__name__}")
        return value
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise TypeError("color setting needs a sequence of four integers")
    color = tuple(value)
    if len(color) != 4:
        raise ValueError("color value must have exactly four components")
    for component in color:
        if not isinstance(component, int) or isinstance(component, bool):
            raise TypeError("color components must be integers")
        if not 0 <= component <= 0xFFFF:
            raise ValueError(f"color component {component} out of uint16 range")
    return color  # type: ignore[return-value]


@dataclass
class XSItem:
    """One named setting with its value and last-change serial."""

    setting_type: SettingType
    name: str
    value: Value
    last_change_serial: int = 0

    def __post_init__(self) -> None:
        self.setting_type = SettingType(self.setting_type)
        self.value = _normalize_value(self.setting_type, self.value)

    @property
    def name_len(self) -> int:
        return len(_encode(self.name))

    def change_value(self, value) -> None:
        """Replace the value; it must match the item's setting type."""
        new_value = _normalize_value(self.setting_type, value)
        if new_value != self.value:
            self.value = new_value


@dataclass
class XSData:
    """The whole settings blob: byte order, serial and items."""

    byte_order: int = XS_DATA_ORDER
    serial: int = XS_DATA_SERIAL
    items: list = field(default_factory=list)

    @property
    def num_settings(self) -> int:
        return len(self.items)

    def get_item(self, prop: str) -> Optional[XSItem]:
        """First item named ``prop``, or None."""
        return next((item for item in self.items if item.name == prop), None)

    def modify_property(self, prop: str, value) -> int:
        """Set the value of every item named ``prop``, bumping its serial.

        Returns the number of items changed.
        """
        changed = 0
        for item in self.items:
            if item.name == prop:
                item.last_change_serial = (item.last_change_serial + 1) % _UINT32_MOD
                item.change_value(value)
                changed += 1
        return changed

    def list_props(self) -> str:
        """Names of all items as a bracketed, comma separated quoted list."""
        return "[" + ",".join(json.dumps(item.name) for item in self.items) + "]"


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(bytes(data))
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ValueError(
                f"truncated settings data: need {size} bytes at offset {self._pos}"
            )
        chunk = self._data[self._pos:end].tobytes()
        self._pos = end
        return chunk

    def unpack(self, fmt: str):
        return struct.unpack(fmt, self.take(struct.calcsize(fmt)))

    def string(self, length: int) -> str:
        text = self.take(length).decode(_ENCODING, _ERRORS)
        self.take(pad(length))
        return text


def _read_item(reader: _Reader) -> XSItem:
    raw_type, name_len = reader.unpack("<BxH")
    try:
        setting_type = SettingType(raw_type)
    except ValueError:
        raise ValueError(f"unknown setting type {raw_type}") from None
    name = reader.string(name_len)
    (serial,) = reader.unpack("<I")
    if setting_type is SettingType.INTEGER:
        (value,) = reader.unpack("<i")
    elif setting_type is SettingType.STRING:
        (length,) = reader.unpack("<I")
        value = reader.string(length)
    else:
        value = reader.unpack("<4H")
    return XSItem(setting_type, name, value, serial)


def unmarshal_setting_data(data: bytes) -> XSData:
    """Decode an XSETTINGS property value; empty data gives an empty blob."""
    if not data:
        return XSData()
    reader = _Reader(data)
    byte_order, serial, count = reader.unpack("<B3xII")
    items = [_read_item(reader) for _ in range(count)]
    return XSData(byte_order=byte_order, serial=serial, items=items)


def _write_item(out: bytearray, item: XSItem) -> None:
    name = _encode(item.name)
    out += struct.pack("<BxH", item.setting_type, len(name))
    out += name + bytes(pad(len(name)))
    out += struct.pack("<I", item.last_change_serial % _UINT32_MOD)
    if item.setting_type is SettingType.INTEGER:
        out += struct.pack("<i", item.value)
    elif item.setting_type is SettingType.STRING:
        text = _encode(item.value)  # type: ignore[arg-type]
        out += struct.pack("<I", len(text)) + text + bytes(pad(len(text)))
    else:
        out += struct.pack("<4H", *item.value)  # type: ignore[misc]


def marshal_setting_data(info: XSData) -> bytes:
    """Encode a settings blob into the XSETTINGS property format."""
    out = bytearray()
    try:
        out += struct.pack(
            "<B3xII", info.byte_order, info.serial % _UINT32_MOD, info.num_settings
        )
        for item in info.items:
            _write_item(out, item)
    except struct.error as exc:
        raise ValueError(f"cannot encode settings data: {exc}") from exc
    return bytes(out)


def new_item_integer(prop: str, value: int) -> XSItem:
    """A fresh integer item with last-change serial 1."""
    return XSItem(SettingType.INTEGER, prop, value, 1)


def new_item_string(prop: str, value: str) -> XSItem:
    """A fresh string item with last-change serial 1."""
    return XSItem(SettingType.STRING, prop, value, 1)


def new_item_color(prop: str, value: Sequence[int]) -> XSItem:
    """A fresh color item (red, green, blue, alpha) with last-change serial 1."""
    return XSItem(SettingType.COLOR, prop, value, 1)