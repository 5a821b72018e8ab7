"""Reading, updating and writing X resource database text."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

_SEPARATOR = ":\t"


@dataclass
class XResource:
    """One ``key:<TAB>value`` resource line."""

    key: str
    value: str


def marshal_xresources(infos: Iterable[XResource]) -> str:
    return "".join(f"{info.key}{_SEPARATOR}{info.value}\n" for info in infos)


def unmarshal_xresources(data: str) -> List[XResource]:
    """Parse resource text; lines not of the form ``key:<TAB>value`` are skipped."""
    infos = []
    for line in data.split("\n"):
        if not line:
            continue
        parts = line.split(_SEPARATOR)
        if len(parts) != 2:
            logger.debug("skipping resource line %r", line)
            continue
        infos.append(XResource(parts[0], parts[1]))
    return infos


def get_property(infos: Iterable[XResource], key: str) -> Optional[XResource]:
    return next((info for info in infos if info.key == key), None)


def update_property(infos: List[XResource], key: str, value: str) -> List[XResource]:
    """Set ``key`` to ``value`` in place, appending it when missing."""
    info = get_property(infos, key)
    if info is None:
        infos.append(XResource(key, value))
    else:
        info.value = value
    return infos


def apply_xresource_changes(data: str, changes: Iterable[XResource]) -> str:
    """Apply ``changes`` to resource text and return the new text."""
    if not data:
        infos = [XResource("*customization", "-color")]
        infos.extend(XResource(c.key, c.value) for c in changes)
    else:
        infos = unmarshal_xresources(data)
        for change in changes:
            update_property(infos, change.key, change.value)
    return marshal_xresources(infos)