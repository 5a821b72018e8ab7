"""Monitors and the display manager's query and editing interface."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from .modes import (
    ROTATION_REFLECT_X,
    ROTATION_REFLECT_Y,
    ROTATION_ROTATE_0,
    ROTATION_ROTATE_90,
    ROTATION_ROTATE_180,
    ROTATION_ROTATE_270,
    ModeInfo,
    get_monitors_common_sizes,
    need_swap_width_height,
)
from .rect import MonitorsPosition, Rectangle

logger = logging.getLogger(__name__)

ENV_DISABLE_ROTATE = "DEEPIN_DISPLAY_DISABLE_ROTATE"
_RATE_TOLERANCE = 0.01


class DisplayMode(IntEnum):
    """How several monitors share the desktop."""

    CUSTOM = 0
    MIRROR = 1
    EXTEND = 2
    ONLY_ONE = 3
    MIRROR_ONLY_ONE = 4
    EXTEND_ONLY_ONE = 5
    UNKNOWN = 6


def get_first_mode_by_size(
    modes: Sequence[ModeInfo], width: int, height: int
) -> Optional[ModeInfo]:
    """First mode of exactly ``width`` x ``height``, or None."""
    return next((m for m in modes if m.width == width and m.height == height), None)


def get_first_mode_by_size_rate(
    modes: Sequence[ModeInfo], width: int, height: int, rate: float
) -> Optional[ModeInfo]:
    """First mode of that size whose rate is within 0.01 of ``rate``, or None."""
    return next(
        (
            m
            for m in modes
            if m.width == width
            and m.height == height
            and abs(m.rate - rate) <= _RATE_TOLERANCE
        ),
        None,
    )


@dataclass
class MonitorBackup:
    """State of a monitor before its first unapplied change."""

    enabled: bool
    mode: ModeInfo
    x: int
    y: int
    reflect: int
    rotation: int


@dataclass(eq=False)
class Monitor:
    """One connected output and its pending configuration."""

    id: int
    name: str
    uuid: str = ""
    modes: List[ModeInfo] = field(default_factory=list)
    best_mode: ModeInfo = field(default_factory=ModeInfo)
    current_mode: ModeInfo = field(default_factory=ModeInfo)
    connected: bool = True
    enabled: bool = True
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    rotation: int = ROTATION_ROTATE_0
    reflect: int = 0
    refresh_rate: float = 0.0
    mm_width: int = 0
    mm_height: int = 0
    manufacturer: str = ""
    model: str = ""
    rotations: List[int] = field(
        default_factory=lambda: [
            ROTATION_ROTATE_0,
            ROTATION_ROTATE_90,
            ROTATION_ROTATE_180,
            ROTATION_ROTATE_270,
        ]
    )
    reflects: List[int] = field(
        default_factory=lambda: [
            0,
            ROTATION_REFLECT_X,
            ROTATION_REFLECT_Y,
            ROTATION_REFLECT_X | ROTATION_REFLECT_Y,
        ]
    )
    mode_set_flag: DisplayMode = DisplayMode.CUSTOM
    backup: Optional[MonitorBackup] = None
    manager: Optional["DisplayManager"] = field(default=None, repr=False)

    @property
    def preferred_modes(self) -> List[ModeInfo]:
        return [self.best_mode]

    def _mark_changed(self) -> None:
        if self.manager is not None:
            self.manager.has_changed = True
        if self.backup is None:
            self.backup = MonitorBackup(
                enabled=self.enabled,
                mode=self.current_mode,
                x=self.x,
                y=self.y,
                reflect=self.reflect,
                rotation=self.rotation,
            )

    def _apply_mode(self, mode: ModeInfo) -> None:
        self.current_mode = mode
        width, height = mode.width, mode.height
        if need_swap_width_height(self.rotation):
            width, height = height, width
        self.width = width
        self.height = height
        self.refresh_rate = mode.rate

    def enable(self, enabled: bool) -> None:
        """Turn the monitor on or off, tracking single-screen custom modes."""
        if self.enabled == enabled:
            return
        self._mark_changed()
        if enabled:
            if self.mode_set_flag in (
                DisplayMode.EXTEND_ONLY_ONE,
                DisplayMode.MIRROR_ONLY_ONE,
            ):
                self.mode_set_flag = DisplayMode.CUSTOM
        elif self.manager is not None and self.manager.display_mode == DisplayMode.CUSTOM:
            real = self.manager.get_real_display_mode()
            if real == DisplayMode.EXTEND:
                self.mode_set_flag = DisplayMode.EXTEND_ONLY_ONE
            elif real == DisplayMode.MIRROR:
                self.mode_set_flag = DisplayMode.MIRROR_ONLY_ONE
        self.enabled = enabled

    def select_mode(self, width: int, height: int, rate: float) -> ModeInfo:
        """Mode matching size and rate, else size only, else the best mode."""
        mode = get_first_mode_by_size_rate(self.modes, width, height, rate)
        if mode is not None:
            return mode
        mode = get_first_mode_by_size(self.modes, width, height)
        if mode is not None:
            return mode
        return self.best_mode

    def set_mode(self, mode_id: int) -> None:
        """Switch to the mode with ``mode_id``; raise ValueError if unknown."""
        if self.current_mode.id == mode_id:
            return
        new_mode = next((m for m in self.modes if m.id == mode_id), None)
        if new_mode is None:
            raise ValueError(f"invalid mode id {mode_id}")
        if self.manager is not None:
            self.manager.monitors_pos = self.manager.monitors_position()
        self._mark_changed()
        self._apply_mode(new_mode)

    def set_mode_by_size(self, width: int, height: int) -> None:
        mode = get_first_mode_by_size(self.modes, width, height)
        if mode is None:
            raise ValueError("not found match mode")
        self.set_mode(mode.id)

    def set_refresh_rate(self, value: float) -> None:
        if self.width == 0 or self.height == 0:
            raise ValueError("width or height is 0")
        mode = get_first_mode_by_size_rate(self.modes, self.width, self.height, value)
        if mode is None:
            raise ValueError("not found match mode")
        self.set_mode(mode.id)

    def set_position(self, x: int, y: int) -> None:
        if self.x == x and self.y == y:
            return
        self._mark_changed()
        self.x = x
        self.y = y
        if self.manager is None:
            return
        if self.manager.get_real_display_mode() == DisplayMode.ONLY_ONE:
            if x == 0 and y == 0:
                self.mode_set_flag = DisplayMode.MIRROR_ONLY_ONE
            else:
                self.mode_set_flag = DisplayMode.EXTEND_ONLY_ONE
        self.manager.monitors_pos = MonitorsPosition.UNKNOWN

    def set_rotation(self, value: int) -> None:
        if self.rotation == value:
            return
        self._mark_changed()
        width, height = self.current_mode.width, self.current_mode.height
        if need_swap_width_height(value):
            width, height = height, width
        self.rotation = value
        self.width = width
        self.height = height

    def set_reflect(self, value: int) -> None:
        if self.reflect == value:
            return
        self._mark_changed()
        self.reflect = value

    def reset_changes(self) -> None:
        """Restore the state saved before the first pending change."""
        backup = self.backup
        if backup is None:
            return
        logger.debug("restore from backup %s", self.id)
        self.enabled = backup.enabled
        self.x = backup.x
        self.y = backup.y
        self.rotation = backup.rotation
        self.reflect = backup.reflect
        self.current_mode = backup.mode
        self.width = backup.mode.width
        self.height = backup.mode.height
        self.refresh_rate = backup.mode.rate
        self.backup = None

    def to_config(self) -> Dict[str, object]:
        """The monitor's current settings as a saved configuration entry."""
        return {
            "uuid": self.uuid,
            "name": self.name,
            "enabled": self.enabled,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "rotation": self.rotation,
            "reflect": self.reflect,
            "refresh_rate": self.refresh_rate,
            "primary": False,
        }

    def rect(self) -> Rectangle:
        return Rectangle(self.x, self.y, self.width, self.height)


class DisplayManager:
    """The set of monitors and the display-wide queries over them."""

    def __init__(
        self,
        display_mode: DisplayMode = DisplayMode.MIRROR,
        custom_display_mode: DisplayMode = DisplayMode.CUSTOM,
        apply: Optional[Callable[[], None]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        if display_mode == DisplayMode.UNKNOWN:
            display_mode = DisplayMode.MIRROR
        self.display_mode = DisplayMode(display_mode)
        self.custom_display_mode = DisplayMode(custom_display_mode)
        self.has_changed = False
        self.monitors_pos = MonitorsPosition.UNKNOWN
        self.monitors: Dict[int, Monitor] = {}
        self._apply = apply
        self._environ = environ

    def add_monitor(self, monitor: Monitor) -> Monitor:
        monitor.manager = self
        self.monitors[monitor.id] = monitor
        return monitor

    def connected_monitors(self) -> List[Monitor]:
        """Connected monitors ordered by id."""
        return sorted(
            (m for m in self.monitors.values() if m.connected), key=lambda m: m.id
        )

    def monitors_position(self) -> MonitorsPosition:
        """Arrangement of the first and last connected monitor."""
        monitors = self.connected_monitors()
        first = second = Rectangle()
        for index, monitor in enumerate(monitors):
            rect = (monitor.x, monitor.y, monitor.width, monitor.height)
            if index == 0:
                first = rect
            else:
                second = rect
        if isinstance(first, Rectangle):
            first = (first.x, first.y, first.width, first.height)
        if isinstance(second, Rectangle):
            second = (second.x, second.y, second.width, second.height)
        fx, fy, fw, fh = first
        sx, sy, sw, sh = second
        if fy == sy or fy + fh == sy + sh:
            return MonitorsPosition.LEFT_RIGHT
        if fx == sx or fx + fw == sx + sw:
            return MonitorsPosition.UP_DOWN
        return MonitorsPosition.DIAGONAL

    def get_real_display_mode(self) -> DisplayMode:
        """Mode implied by the positions of the enabled monitors."""
        mode = DisplayMode.UNKNOWN
        seen: List[tuple] = []
        for monitor in self.connected_monitors():
            if not monitor.enabled:
                continue
            pair = (monitor.x, monitor.y)
            if pair in seen:
                mode = DisplayMode.MIRROR
            seen.append(pair)
        if mode == DisplayMode.UNKNOWN and seen:
            mode = DisplayMode.ONLY_ONE if len(seen) == 1 else DisplayMode.EXTEND
        return mode

    def get_custom_display_mode(self) -> DisplayMode:
        real = self.get_real_display_mode()
        mode = self.custom_display_mode
        if real != DisplayMode.ONLY_ONE and real != mode:
            mode = real
        return DisplayMode(mode)

    def set_custom_display_mode(self, mode) -> None:
        self.custom_display_mode = DisplayMode(mode)
        logger.debug("custom display mode %s", self.custom_display_mode)

    def list_output_names(self) -> List[str]:
        return [m.name for m in self.connected_monitors()]

    def list_outputs_common_modes(self) -> List[Optional[ModeInfo]]:
        """For each size all monitors offer, the first such mode of the first monitor."""
        monitors = self.connected_monitors()
        if not monitors:
            return []
        return [
            get_first_mode_by_size(monitors[0].modes, size.width, size.height)
            for size in get_monitors_common_sizes(monitors)
        ]

    def can_rotate(self) -> bool:
        environ = os.environ if self._environ is None else self._environ
        return environ.get(ENV_DISABLE_ROTATE) != "1"

    def can_set_brightness(self, output_name: str) -> bool:
        if not output_name:
            raise ValueError("monitor Name is err")
        return True

    def reset_changes(self) -> None:
        """Undo every pending monitor change and apply the restored state."""
        if not self.has_changed:
            return
        for monitor in self.monitors.values():
            monitor.reset_changes()
        if self._apply is not None:
            self._apply()
        self.has_changed = False