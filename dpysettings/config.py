"""Typed key/value settings store with change notification."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Mapping, Union

logger = logging.getLogger(__name__)

ConfigValue = Union[bool, int, float, str]

_INT32_MIN = -(1 << 31)
_INT32_MAX = (1 << 31) - 1


def _kind(value: object) -> str:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    raise TypeError(f"unsupported config value type {type(value).__name__}")


class KeyValueConfig:
    """A fixed set of typed keys; unknown keys give neutral defaults.

    Getters return ``""``, ``-1``, ``False`` or ``-1.0`` when a key is unknown
    or holds another type. Setters return False for unknown keys or a type
    that does not match the key.
    """

    def __init__(self, values: Mapping[str, ConfigValue]) -> None:
        self._values: Dict[str, ConfigValue] = {}
        for key, value in values.items():
            _kind(value)
            self._values[key] = value
        self._callbacks: List[Callable[[str], None]] = []

    def list_keys(self) -> List[str]:
        """All keys known to this store, in definition order."""
        return list(self._values)

    def _has_key(self, key: str) -> bool:
        if key not in self._values:
            logger.warning("key %s not found in config", key)
            return False
        return True

    def get_string(self, key: str) -> str:
        if not self._has_key(key):
            return ""
        value = self._values[key]
        if _kind(value) != "str":
            logger.warning("key %s type is not string", key)
            return ""
        return value  # type: ignore[return-value]

    def get_int(self, key: str) -> int:
        if not self._has_key(key):
            return -1
        value = self._values[key]
        if _kind(value) != "int":
            logger.warning("key %s type is not int", key)
            return -1
        return value  # type: ignore[return-value]

    def get_boolean(self, key: str) -> bool:
        if not self._has_key(key):
            return False
        value = self._values[key]
        if _kind(value) != "bool":
            logger.warning("key %s type is not bool", key)
            return False
        return value  # type: ignore[return-value]

    def get_double(self, key: str) -> float:
        if not self._has_key(key):
            return -1.0
        value = self._values[key]
        if _kind(value) not in ("float", "int"):
            logger.warning("key %s type is not double", key)
            return -1.0
        return float(value)

    def _set(self, key: str, value: ConfigValue, kinds: tuple) -> bool:
        if not self._has_key(key):
            return False
        if _kind(self._values[key]) not in kinds:
            logger.warning("key %s does not hold a %s value", key, kinds[0])
            return False
        self._values[key] = value
        for callback in list(self._callbacks):
            callback(key)
        return True

    def set_string(self, key: str, value: str) -> bool:
        if not isinstance(value, str):
            raise TypeError("value must be a str")
        return self._set(key, value, ("str",))

    def set_int(self, key: str, value: int) -> bool:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("value must be an int")
        if not _INT32_MIN <= value <= _INT32_MAX:
            raise ValueError(f"value {value} out of int32 range")
        return self._set(key, value, ("int",))

    def set_boolean(self, key: str, value: bool) -> bool:
        if not isinstance(value, bool):
            raise TypeError("value must be a bool")
        return self._set(key, value, ("bool",))

    def set_double(self, key: str, value: float) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError("value must be a float")
        return self._set(key, float(value), ("float", "int"))

    def handle_config_changed(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(key)`` after every successful set."""
        self._callbacks.append(callback)