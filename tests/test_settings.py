"""Test StorageSettings: explicit vs. default values and validation.

Usage:
    python3 tests/test_settings.py
"""

import pytest

from stream_roles import StorageSetting, StorageSettings


def make_settings(storage=None):
    return StorageSettings({
        "streams": StorageSetting("Streams", multiple=True),
        "quality": StorageSetting("Quality", choices=["low", "high"], default_value="low"),
        "extra": StorageSetting("Extra", type="boolean"),
        "label": StorageSetting("Label"),
    }, storage)


def test_defaults_and_has_value():
    settings = make_settings()
    assert settings.keys == ["streams", "quality", "extra", "label"]
    assert settings.values == {"streams": [], "quality": "low", "extra": False, "label": None}
    assert not settings.has_value("streams")

    settings.put("streams", [])
    assert settings.has_value("streams")
    assert settings.get_value("streams") == []


def test_clear_restores_default():
    storage = {}
    settings = make_settings(storage)
    settings.put("quality", "high")
    assert storage == {"quality": "high"}
    settings.clear("quality")
    assert storage == {}
    assert settings.get_value("quality") == "low"


def test_multiple_value_is_copied():
    settings = make_settings()
    names = ["a", "b"]
    settings.put("streams", names)
    names.append("c")
    value = settings.get_value("streams")
    value.append("d")
    assert settings.get_value("streams") == ["a", "b"]


def test_validation():
    settings = make_settings()
    with pytest.raises(KeyError):
        settings.put("missing", "x")
    with pytest.raises(KeyError):
        settings.has_value("missing")
    with pytest.raises(ValueError):
        settings.put("quality", "ultra")
    with pytest.raises(ValueError):
        settings.put("streams", "a")
    with pytest.raises(ValueError):
        settings.put("streams", ["a", 1])
    with pytest.raises(ValueError):
        settings.put("extra", "yes")
    with pytest.raises(ValueError):
        settings.put("label", 3)
    assert settings.values["label"] is None


def test_describe_merges_overrides():
    settings = make_settings()
    settings.put("extra", True)
    entries = settings.describe({"label": {"hide": True, "choices": ["x"]}})
    by_key = {e["key"]: e for e in entries}
    assert by_key["extra"]["value"] is True
    assert by_key["extra"]["type"] == "boolean"
    assert by_key["quality"]["defaultValue"] == "low"
    assert by_key["label"]["hide"] is True
    assert by_key["label"]["choices"] == ["x"]


if __name__ == "__main__":
    import sys
    sys.exit(pytest.main([__file__, "-v"]))
