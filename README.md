# dpysettings

Session-side logic for desktop appearance and display settings, written as
plain functions and classes with no dependencies beyond the standard library.

## Modules

- **`dpysettings.xsdata`** — read and write the binary `_XSETTINGS_SETTINGS`
  property format. `unmarshal_setting_data` decodes bytes into an `XSData`
  (empty input gives an empty blob; truncated input raises `ValueError`),
  `marshal_setting_data` encodes it back. Items are `XSItem` objects with a
  `SettingType` of `INTEGER`, `STRING` or `COLOR`; `new_item_integer`,
  `new_item_string` and `new_item_color` create items with last-change
  serial 1. `XSData.get_item`, `XSData.modify_property` (bumps the serial of
  every matching item) and `XSData.list_props` (a bracketed list of quoted
  names) work on a decoded blob. `pad(n)` gives the 4-byte alignment padding.
- **`dpysettings.config`** — `KeyValueConfig`, a typed key/value store with a
  fixed key list. Getters (`get_string`, `get_int`, `get_boolean`,
  `get_double`) return `""`, `-1`, `False` or `-1.0` for unknown keys or
  mismatched types; setters return `False` in those cases, and
  `handle_config_changed(callback)` registers a callback called with the key
  after each successful set.
- **`dpysettings.xresource`** — parse and update X resource-manager text:
  `unmarshal_xresources`, `marshal_xresources`, `get_property`,
  `update_property`, and `apply_xresource_changes`, which starts from
  `*customization:\t-color` when the existing text is empty.
- **`dpysettings.dpi`** — `scaled_dpi(scale)` (the Xft/DPI value, DPI × 1024),
  `xft_dpi(scale)`, `get_firefox_configs(directory)` (the `prefs.js` of each
  profile directory) and `set_firefox_dpi(value, src, dest)`, which sets the
  `layout.css.devPixelsPerPx` preference.
- **`dpysettings.modes`** — `ModeInfo` and `Size`, `filter_mode_infos`,
  `get_size_mode_map`, `get_monitors_common_sizes`, `get_max_area_size`,
  `is_builtin_output`, `sort_monitors_by_id`, `get_min_id_monitor`,
  `need_swap_width_height`, `get_config_version`, and `do_action`, which runs
  a shell command and raises `ActionError` with its stderr on failure.
- **`dpysettings.rect`** — `Rectangle`, `MonitorsPosition`, `intersects`,
  `best_move_offset` and `best_move_position`, which snap one monitor
  rectangle next to another and shift both so the union starts at 0,0.
- **`dpysettings.display`** — `Monitor` (mode, position, rotation, reflect and
  enable changes with a `MonitorBackup` for `reset_changes`) and
  `DisplayManager` (`add_monitor`, `connected_monitors`, `monitors_position`,
  `get_real_display_mode`, `get_custom_display_mode`,
  `set_custom_display_mode`, `list_output_names`,
  `list_outputs_common_modes`, `can_rotate`, `can_set_brightness`,
  `reset_changes`). `DisplayMode` names mirror, extend, only-one and custom
  modes.

## Installation

```
pip install .
```

## Example

```python
from dpysettings.xsdata import XSData, marshal_setting_data, new_item_string, unmarshal_setting_data

data = XSData(items=[new_item_string("Net/ThemeName", "Deepin")])
raw = marshal_setting_data(data)
again = unmarshal_setting_data(raw)
print(again.list_props())          # ["Net/ThemeName"]
```

```python
from dpysettings.display import DisplayManager, Monitor
from dpysettings.modes import ModeInfo

manager = DisplayManager()
mode = ModeInfo(id=1, width=1920, height=1080, rate=60.0)
for ident, name in ((1, "eDP-1"), (2, "HDMI-1")):
    manager.add_monitor(Monitor(id=ident, name=name, modes=[mode], current_mode=mode,
                                width=1920, height=1080))
print(manager.get_real_display_mode())   # DisplayMode.MIRROR (both at 0,0)
```

## What this package does not do

It holds no connection to an X server or a message bus. It does not own the
XSETTINGS selection or write the property to a window, does not set the
resource-manager property on the root window, and has no settings daemon
that maps configuration keys to XSETTINGS properties or keeps screen scale
factors in sync. It does not apply monitor configurations to a compositor,
save display configurations to disk, or control brightness. There is no
command-line program.

## Tests

```
pip install .[test]
pytest
```