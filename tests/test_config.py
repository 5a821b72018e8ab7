import pytest

from dpysettings.config import KeyValueConfig


@pytest.fixture
def config():
    return KeyValueConfig(
        {
            "theme-name": "deepin",
            "xft-dpi": 98304,
            "cursor-blink": True,
            "scale-factor": 1.25,
        }
    )


def test_list_keys_keeps_order(config):
    assert config.list_keys() == ["theme-name", "xft-dpi", "cursor-blink", "scale-factor"]


def test_getters_return_stored_values(config):
    assert config.get_string("theme-name") == "deepin"
    assert config.get_int("xft-dpi") == 98304
    assert config.get_boolean("cursor-blink") is True
    assert config.get_double("scale-factor") == 1.25


def test_unknown_key_defaults(config):
    assert config.get_string("missing") == ""
    assert config.get_int("missing") == -1
    assert config.get_boolean("missing") is False
    assert config.get_double("missing") == -1


def test_type_mismatch_defaults(config):
    assert config.get_int("theme-name") == -1
    assert config.get_string("xft-dpi") == ""
    assert config.get_boolean("xft-dpi") is False
    assert config.get_double("theme-name") == -1


def test_get_double_accepts_int_key(config):
    assert config.get_double("xft-dpi") == 98304.0


def test_set_then_get(config):
    assert config.set_string("theme-name", "light") is True
    assert config.set_int("xft-dpi", 122880) is True
    assert config.set_boolean("cursor-blink", False) is True
    assert config.set_double("scale-factor", 2.0) is True
    assert config.get_string("theme-name") == "light"
    assert config.get_int("xft-dpi") == 122880
    assert config.get_boolean("cursor-blink") is False
    assert config.get_double("scale-factor") == 2.0


def test_set_unknown_key_fails(config):
    assert config.set_string("missing", "x") is False
    assert config.set_int("missing", 1) is False
    assert config.list_keys() == ["theme-name", "xft-dpi", "cursor-blink", "scale-factor"]


def test_set_wrong_kind_fails(config):
    assert config.set_int("theme-name", 3) is False
    assert config.get_string("theme-name") == "deepin"


def test_set_int_range(config):
    with pytest.raises(ValueError):
        config.set_int("xft-dpi", 1 << 31)


def test_set_wrong_python_type(config):
    with pytest.raises(TypeError):
        config.set_string("theme-name", 5)


def test_change_callback(config):
    seen = []
    config.handle_config_changed(seen.append)
    config.set_int("xft-dpi", 1)
    config.set_string("missing", "x")
    config.set_boolean("cursor-blink", False)
    assert seen == ["xft-dpi", "cursor-blink"]


def test_invalid_initial_value():
    with pytest.raises(TypeError):
        KeyValueConfig({"bad": [1, 2]})