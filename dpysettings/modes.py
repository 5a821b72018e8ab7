"""Display mode lists, output names and small helpers for the display manager."""

from __future__ import annotations

import logging
import re
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar, Union

logger = logging.getLogger(__name__)

ROTATION_ROTATE_0 = 1
ROTATION_ROTATE_90 = 2
ROTATION_ROTATE_180 = 4
ROTATION_ROTATE_270 = 8
ROTATION_REFLECT_X = 16
ROTATION_REFLECT_Y = 32

_MODE_NAME = re.compile(r"^(\d+)x(\d+)(\D+)$", re.ASCII)

M = TypeVar("M")


class ActionError(RuntimeError):
    """A shell command run by :func:`do_action` failed."""


@dataclass(frozen=True)
class ModeInfo:
    """One video mode of an output."""

    id: int = 0
    width: int = 0
    height: int = 0
    rate: float = 0.0
    name: str = ""

    @property
    def size(self) -> "Size":
        return Size(self.width, self.height)


@dataclass(frozen=True)
class Size:
    """Width and height in pixels."""

    width: int = 0
    height: int = 0

    @property
    def area(self) -> int:
        return self.width * self.height


def format_rate(value: float) -> str:
    """Refresh rate with two decimals, used to compare rates."""
    return f"{value:.2f}"


def _ends_with_digit(name: str) -> bool:
    return bool(name) and "0" <= name[-1] <= "9"


def _find_first(modes: Iterable[ModeInfo], pred: Callable[[ModeInfo], bool]) -> Optional[ModeInfo]:
    return next((mode for mode in modes if pred(mode)), None)


def filter_mode_infos(modes: Sequence[ModeInfo]) -> List[ModeInfo]:
    """Drop suffixed duplicates (such as interlaced names) and repeated size/rate pairs."""
    result: List[ModeInfo] = []
    filtered_names: set = set()
    for mode in modes:
        if mode.name in filtered_names:
            continue
        if _MODE_NAME.match(mode.name):
            same_size = _find_first(
                modes,
                lambda other: other.width == mode.width
                and other.height == mode.height
                and _ends_with_digit(other.name),
            )
            if same_size is not None:
                filtered_names.add(mode.name)
                continue
        rate = format_rate(mode.rate)
        duplicate = _find_first(
            result,
            lambda other: other.width == mode.width
            and other.height == mode.height
            and format_rate(other.rate) == rate,
        )
        if duplicate is None:
            result.append(mode)
    return result


def get_size_mode_map(modes: Iterable[ModeInfo]) -> Dict[Size, List[int]]:
    """Mode ids grouped by size, in the order the modes are given."""
    result: Dict[Size, List[int]] = {}
    for mode in modes:
        result.setdefault(Size(mode.width, mode.height), []).append(mode.id)
    return result


def get_monitors_common_sizes(monitors: Sequence) -> List[Size]:
    """Sizes offered by every monitor, in order of first appearance."""
    counts: Dict[Size, int] = {}
    for monitor in monitors:
        for size in get_size_mode_map(monitor.modes):
            counts[size] = counts.get(size, 0) + 1
    return [size for size, count in counts.items() if count == len(monitors)]


def get_max_area_size(sizes: Sequence[Size]) -> Size:
    """The first size with the largest area; an empty list gives a zero size."""
    if not sizes:
        return Size()
    best = sizes[0]
    for size in sizes[1:]:
        if best.area < size.area:
            best = size
    return best


def is_builtin_output(name: str) -> bool:
    """Whether an output name denotes a built-in panel."""
    name = name.lower()
    if name.startswith(("vga", "hdmi", "dvi")):
        return False
    if name.startswith(("lvds", "lcd", "edp", "dsi")):
        return True
    return name == "default"


def sort_monitors_by_id(monitors: Iterable[M]) -> List[M]:
    """Built-in monitors first, each part ordered by id."""
    return sorted(monitors, key=lambda m: (not is_builtin_output(m.name), m.id))


def get_min_id_monitor(monitors: Sequence[M]) -> Optional[M]:
    """The first built-in monitor, otherwise the one with the lowest id."""
    if not monitors:
        return None
    builtin = next((m for m in monitors if is_builtin_output(m.name)), None)
    if builtin is not None:
        return builtin
    return min(monitors, key=lambda m: m.id)


def need_swap_width_height(rotation: int) -> bool:
    """Whether a rotation turns the output by 90 or 270 degrees."""
    return bool(rotation & ROTATION_ROTATE_90) or bool(rotation & ROTATION_ROTATE_270)


def get_config_version(filename: Union[str, Path]) -> str:
    """Contents of a version file without surrounding whitespace."""
    return Path(filename).read_bytes().strip().decode("utf-8", "surrogateescape")


def do_action(cmd: str) -> None:
    """Run ``cmd`` through the shell; raise ActionError with its stderr on failure."""
    logger.debug("Command: %s", cmd)
    completed = subprocess.run(
        ["/bin/sh", "-c", "exec " + cmd],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.PIPE,
        check=False,
    )
    code = completed.returncode
    if code == 0:
        return
    if code < 0:
        try:
            reason = f"signal: {signal.Signals(-code).name}"
        except ValueError:
            reason = f"signal: {-code}"
    else:
        reason = f"exit status {code}"
    stderr = completed.stderr.decode("utf-8", "replace")
    raise ActionError(f"{reason}, stdErr: {stderr}")