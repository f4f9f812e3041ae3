"""Key/value settings store with a declared schema.

Values live in any ``MutableMapping`` handed in by the caller; how that
mapping is persisted is up to the caller.
"""

from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional, Sequence


class StorageSetting:
    """Declaration of one setting: UI metadata plus validation rules."""

    __slots__ = ("title", "description", "group", "type", "multiple",
                 "choices", "default_value", "hide")

    def __init__(self, title: str, description: str = "", group: Optional[str] = None,
                 type: str = "string", multiple: bool = False,
                 choices: Optional[Sequence[str]] = None, default_value: Any = None,
                 hide: bool = False):
        self.title = title
        self.description = description
        self.group = group
        self.type = type
        self.multiple = multiple
        self.choices = tuple(choices) if choices is not None else None
        self.default_value = default_value
        self.hide = hide

    def empty_value(self) -> Any:
        if self.default_value is not None:
            return list(self.default_value) if self.multiple else self.default_value
        if self.multiple:
            return []
        if self.type == "boolean":
            return False
        return None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "multiple": self.multiple,
            "hide": self.hide,
        }
        if self.group is not None:
            data["group"] = self.group
        if self.choices is not None:
            data["choices"] = list(self.choices)
        if self.default_value is not None:
            data["defaultValue"] = self.default_value
        return data


class StorageSettings:
    """Typed view over a key/value store.

    Usage::

        settings = StorageSettings({"enabled": StorageSetting("Enabled", type="boolean")})
        settings.has_value("enabled")  # False
        settings.put("enabled", True)
        settings.values["enabled"]     # True
    """

    def __init__(self, settings: Mapping[str, StorageSetting],
                 storage: Optional[MutableMapping[str, Any]] = None):
        self._settings = dict(settings)
        self._storage = storage if storage is not None else {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def keys(self) -> List[str]:
        return list(self._settings)

    @property
    def settings(self) -> Dict[str, StorageSetting]:
        return dict(self._settings)

    @property
    def values(self) -> Dict[str, Any]:
        """Current value of every declared setting, falling back to its default."""
        return {key: self.get_value(key) for key in self._settings}

    def has_value(self, key: str) -> bool:
        """``True`` if *key* was explicitly set, as opposed to holding its default."""
        self._setting(key)
        return key in self._storage

    def get_value(self, key: str) -> Any:
        setting = self._setting(key)
        if key in self._storage:
            value = self._storage[key]
            return list(value) if setting.multiple else value
        return setting.empty_value()

    def put(self, key: str, value: Any):
        """Store *value* for *key*.

        Raises
        ------
        KeyError
            If *key* is not a declared setting.
        ValueError
            If *value* does not fit the setting's type or choices.
        """
        setting = self._setting(key)
        if setting.multiple:
            if isinstance(value, str) or not isinstance(value, Iterable):
                raise ValueError(f"{key} expects a list of values, got {value!r}")
            value = list(value)
            for item in value:
                self._check_choice(key, setting, item)
        elif setting.type == "boolean":
            if not isinstance(value, bool):
                raise ValueError(f"{key} expects a boolean, got {value!r}")
        else:
            self._check_choice(key, setting, value)
        self._storage[key] = value

    def clear(self, key: str):
        """Drop the explicit value for *key* so its default applies again."""
        self._setting(key)
        self._storage.pop(key, None)

    def describe(self, overrides: Optional[Mapping[str, Mapping[str, Any]]] = None
                 ) -> List[Dict[str, Any]]:
        """Settings as UI entries, with per-key *overrides* merged in."""
        overrides = overrides or {}
        entries = []
        for key, setting in self._settings.items():
            entry = setting.to_dict()
            entry.update(overrides.get(key, {}))
            entry["key"] = key
            entry["value"] = self.get_value(key)
            entries.append(entry)
        return entries

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _setting(self, key: str) -> StorageSetting:
        try:
            return self._settings[key]
        except KeyError:
            raise KeyError(f"Unknown setting: {key}") from None

    @staticmethod
    def _check_choice(key: str, setting: StorageSetting, value: Any):
        if not isinstance(value, str):
            raise ValueError(f"{key} expects a string, got {value!r}")
        if setting.choices is not None and value not in setting.choices:
            raise ValueError(f"{key}: {value!r} is not one of {list(setting.choices)}")
