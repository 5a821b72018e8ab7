"""DPI values derived from the scale factor, and Firefox pixel-ratio prefs."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Union

DPI_FALLBACK = 96
HIDPI_LIMIT = DPI_FALLBACK * 2

FF_KEY_PIXELS = 'user_pref("layout.css.devPixelsPerPx",'

PathLike = Union[str, "os.PathLike[str]"]


def scaled_dpi(scale: float) -> int:
    """Xft/DPI value (DPI times 1024) for ``scale``; non-positive counts as 1."""
    if scale <= 0:
        scale = 1.0
    return int(DPI_FALLBACK * 1024 * scale)


def xft_dpi(scale: float) -> int:
    """Plain DPI written to the ``Xft.dpi`` X resource."""
    return int(DPI_FALLBACK * scale)


def get_firefox_configs(directory: PathLike) -> List[str]:
    """Paths of ``prefs.js`` in each profile directory under ``directory``.

    Raises OSError when ``directory`` cannot be listed.
    """
    directory = os.fspath(directory)
    configs = []
    for name in sorted(os.listdir(directory)):
        config = os.path.join(directory, name, "prefs.js")
        if os.path.exists(config):
            configs.append(config)
    return configs


def _target_line(value: float) -> str:
    return f'{FF_KEY_PIXELS} "{value:.2f}");'


def set_firefox_dpi(value: float, src: PathLike, dest: PathLike) -> None:
    """Write ``src`` to ``dest`` with the device pixel ratio set to ``value``.

    Nothing is written when the preference already has that value, or when
    ``value`` is -1 (the Firefox default) and the preference is absent.
    """
    lines = Path(src).read_text().split("\n")
    target = _target_line(value)
    found = False
    for index, line in enumerate(lines):
        if not line or line.startswith("#"):
            continue
        if FF_KEY_PIXELS not in line:
            continue
        if line == target:
            return
        lines[index] = FF_KEY_PIXELS.split(",")[0] + ", " + f'"{value:.2f}");'
        found = True
        break
    if not found:
        if value == -1:
            return
        lines.insert(len(lines) - 1, target)
    Path(dest).write_text("\n".join(lines))