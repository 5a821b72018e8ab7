import pytest

from dpysettings.display import (
    DisplayManager,
    DisplayMode,
    Monitor,
    get_first_mode_by_size,
    get_first_mode_by_size_rate,
)
from dpysettings.modes import ROTATION_ROTATE_0, ROTATION_ROTATE_90, ModeInfo
from dpysettings.rect import MonitorsPosition, Rectangle

MODE_A = ModeInfo(id=1, width=1920, height=1080, rate=60.0)
MODE_B = ModeInfo(id=2, width=1920, height=1080, rate=75.0)
MODE_C = ModeInfo(id=3, width=1280, height=720, rate=60.0)
MODES = [MODE_A, MODE_B, MODE_C]


def make_monitor(mid, name, x=0, y=0, modes=None, enabled=True):
    modes = list(MODES if modes is None else modes)
    return Monitor(
        id=mid,
        name=name,
        uuid=f"uuid-{mid}",
        modes=modes,
        best_mode=modes[0],
        current_mode=modes[0],
        x=x,
        y=y,
        width=modes[0].width,
        height=modes[0].height,
        refresh_rate=modes[0].rate,
        enabled=enabled,
    )


def make_manager(*monitors, **kwargs):
    manager = DisplayManager(**kwargs)
    for monitor in monitors:
        manager.add_monitor(monitor)
    return manager


def test_first_mode_by_size():
    assert get_first_mode_by_size(MODES, 1920, 1080) == MODE_A
    assert get_first_mode_by_size(MODES, 800, 600) is None


def test_first_mode_by_size_rate_tolerance():
    assert get_first_mode_by_size_rate(MODES, 1920, 1080, 75.005) == MODE_B
    assert get_first_mode_by_size_rate(MODES, 1920, 1080, 74.9) is None


def test_select_mode_fallbacks():
    monitor = make_monitor(1, "HDMI-1")
    assert monitor.select_mode(1920, 1080, 75.0) == MODE_B
    assert monitor.select_mode(1280, 720, 30.0) == MODE_C
    assert monitor.select_mode(640, 480, 60.0) == monitor.best_mode


def test_set_mode_invalid_raises():
    monitor = make_monitor(1, "HDMI-1")
    make_manager(monitor)
    with pytest.raises(ValueError):
        monitor.set_mode(99)


def test_set_mode_marks_changed_and_backs_up():
    monitor = make_monitor(1, "HDMI-1")
    manager = make_manager(monitor)
    monitor.set_mode(MODE_C.id)
    assert manager.has_changed is True
    assert monitor.current_mode == MODE_C
    assert (monitor.width, monitor.height) == (MODE_C.width, MODE_C.height)
    assert monitor.backup.mode == MODE_A


def test_set_mode_swaps_when_rotated():
    monitor = make_monitor(1, "HDMI-1")
    make_manager(monitor)
    monitor.set_rotation(ROTATION_ROTATE_90)
    monitor.set_mode(MODE_C.id)
    assert (monitor.width, monitor.height) == (MODE_C.height, MODE_C.width)


def test_set_rotation_swaps_size():
    monitor = make_monitor(1, "HDMI-1")
    make_manager(monitor)
    monitor.set_rotation(ROTATION_ROTATE_90)
    assert monitor.rotation == ROTATION_ROTATE_90
    assert (monitor.width, monitor.height) == (MODE_A.height, MODE_A.width)


def test_set_mode_by_size_and_missing():
    monitor = make_monitor(1, "HDMI-1")
    make_manager(monitor)
    monitor.set_mode_by_size(1280, 720)
    assert monitor.current_mode == MODE_C
    with pytest.raises(ValueError):
        monitor.set_mode_by_size(640, 480)


def test_set_refresh_rate():
    monitor = make_monitor(1, "HDMI-1")
    make_manager(monitor)
    monitor.set_refresh_rate(75.0)
    assert monitor.current_mode == MODE_B
    assert monitor.refresh_rate == MODE_B.rate


def test_set_refresh_rate_zero_size_raises():
    monitor = make_monitor(1, "HDMI-1")
    monitor.width = 0
    with pytest.raises(ValueError):
        monitor.set_refresh_rate(60.0)


def test_reset_changes_restores_backup():
    monitor = make_monitor(1, "HDMI-1")
    calls = []
    manager = make_manager(monitor, apply=lambda: calls.append(True))
    monitor.set_mode(MODE_C.id)
    monitor.set_position(100, 50)
    monitor.set_reflect(16)
    manager.reset_changes()
    assert monitor.current_mode == MODE_A
    assert (monitor.x, monitor.y, monitor.reflect) == (0, 0, 0)
    assert monitor.backup is None
    assert manager.has_changed is False
    assert calls == [True]


def test_reset_changes_without_changes_does_not_apply():
    calls = []
    manager = make_manager(make_monitor(1, "HDMI-1"), apply=lambda: calls.append(1))
    manager.reset_changes()
    assert calls == []


def test_real_display_mode_variants():
    a = make_monitor(1, "HDMI-1")
    b = make_monitor(2, "VGA-1")
    manager = make_manager(a, b)
    assert manager.get_real_display_mode() == DisplayMode.MIRROR
    b.x = a.width
    assert manager.get_real_display_mode() == DisplayMode.EXTEND
    b.enabled = False
    assert manager.get_real_display_mode() == DisplayMode.ONLY_ONE
    a.enabled = False
    assert manager.get_real_display_mode() == DisplayMode.UNKNOWN


def test_custom_display_mode():
    a = make_monitor(1, "HDMI-1")
    b = make_monitor(2, "VGA-1", x=1920)
    manager = make_manager(a, b)
    manager.set_custom_display_mode(DisplayMode.MIRROR)
    assert manager.get_custom_display_mode() == DisplayMode.EXTEND
    b.enabled = False
    assert manager.get_custom_display_mode() == DisplayMode.MIRROR


def test_disable_in_custom_extend_sets_flag_and_enable_clears():
    a = make_monitor(1, "HDMI-1")
    b = make_monitor(2, "VGA-1", x=1920)
    make_manager(a, b, display_mode=DisplayMode.CUSTOM)
    b.enable(False)
    assert b.mode_set_flag == DisplayMode.EXTEND_ONLY_ONE
    assert b.enabled is False
    b.enable(True)
    assert b.mode_set_flag == DisplayMode.CUSTOM


def test_set_position_in_only_one_mode():
    a = make_monitor(1, "HDMI-1")
    manager = make_manager(a)
    manager.monitors_pos = MonitorsPosition.LEFT_RIGHT
    a.set_position(10, 0)
    assert a.mode_set_flag == DisplayMode.EXTEND_ONLY_ONE
    assert manager.monitors_pos == MonitorsPosition.UNKNOWN
    a.set_position(0, 0)
    assert a.mode_set_flag == DisplayMode.MIRROR_ONLY_ONE


def test_monitors_position():
    a = make_monitor(1, "HDMI-1")
    b = make_monitor(2, "VGA-1", x=1920)
    manager = make_manager(a, b)
    assert manager.monitors_position() == MonitorsPosition.LEFT_RIGHT
    b.x, b.y = 0, 1080
    assert manager.monitors_position() == MonitorsPosition.UP_DOWN
    b.x, b.y = 1920, 500
    assert manager.monitors_position() == MonitorsPosition.DIAGONAL


def test_list_output_names_sorted_and_connected_only():
    a = make_monitor(2, "VGA-1")
    b = make_monitor(1, "HDMI-1")
    c = make_monitor(3, "DP-1")
    c.connected = False
    manager = make_manager(a, b, c)
    assert manager.list_output_names() == ["HDMI-1", "VGA-1"]


def test_list_outputs_common_modes():
    a = make_monitor(1, "HDMI-1")
    b = make_monitor(2, "VGA-1", modes=[MODE_C])
    manager = make_manager(a, b)
    assert manager.list_outputs_common_modes() == [MODE_C]
    assert DisplayManager().list_outputs_common_modes() == []


def test_can_rotate_env():
    assert DisplayManager(environ={}).can_rotate() is True
    assert DisplayManager(environ={"DEEPIN_DISPLAY_DISABLE_ROTATE": "1"}).can_rotate() is False


def test_can_set_brightness():
    manager = DisplayManager()
    assert manager.can_set_brightness("eDP-1") is True
    with pytest.raises(ValueError):
        manager.can_set_brightness("")


def test_to_config_and_rect():
    monitor = make_monitor(1, "HDMI-1", x=5, y=7)
    config = monitor.to_config()
    assert config["uuid"] == "uuid-1"
    assert config["name"] == "HDMI-1"
    assert (config["x"], config["y"]) == (5, 7)
    assert config["rotation"] == ROTATION_ROTATE_0
    assert monitor.rect() == Rectangle(5, 7, MODE_A.width, MODE_A.height)


def test_unknown_initial_mode_becomes_mirror():
    assert DisplayManager(display_mode=DisplayMode.UNKNOWN).display_mode == DisplayMode.MIRROR