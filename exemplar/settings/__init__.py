from __future__ import annotations

import copy
import json
from collections.abc import Iterable, Iterator, Mapping
from importlib import import_module
from typing import TYPE_CHECKING, Any, Union, cast

from exemplar.settings import default_settings

if TYPE_CHECKING:
    from types import ModuleType

    from typing_extensions import Self

_SettingsInputT = Union[Mapping[str, Any], str, None]


SETTINGS_PRIORITIES: dict[str, int] = {
    "default": 0,
    "command": 10,
    "project": 20,
    "cmdline": 40,
}


def get_settings_priority(priority: int | str) -> int:
    """Look up a named priority in :data:`SETTINGS_PRIORITIES`, or return a
    numerical priority unchanged.
    """
    if isinstance(priority, str):
        return SETTINGS_PRIORITIES[priority]
    return priority


class SettingsAttribute:
    """A setting value together with the priority it was stored with."""

    def __init__(self, value: Any, priority: int):
        self.value: Any = value
        self.priority: int = priority

    def set(self, value: Any, priority: int) -> None:
        """Sets value if priority is higher or equal than current priority."""
        if priority >= self.priority:
            self.value = value
            self.priority = priority

    def __repr__(self) -> str:
        return f"<SettingsAttribute value={self.value!r} priority={self.priority}>"


class BaseSettings(Mapping[str, Any]):
    """
    Dictionary-like store of ``(key, value)`` pairs, each with a priority.

    A value is only replaced by a write of equal or higher priority, so
    command-line overrides win over defaults no matter the order in which
    they are applied. Once :meth:`freeze` is called, any further write raises
    :exc:`TypeError`; extraction sessions work on frozen copies so their
    configuration cannot change mid-run.
    """

    def __init__(self, values: _SettingsInputT = None, priority: int | str = "project"):
        self.frozen: bool = False
        self.attributes: dict[str, SettingsAttribute] = {}
        if values:
            self.update(values, priority)

    def __getitem__(self, opt_name: str) -> Any:
        if opt_name not in self:
            return None
        return self.attributes[opt_name].value

    def __contains__(self, name: Any) -> bool:
        return name in self.attributes

    def get(self, name: str, default: Any = None) -> Any:
        return self[name] if self[name] is not None else default

    def getbool(self, name: str, default: bool = False) -> bool:
        """
        Get a setting value as a boolean.

        ``1``, ``'1'``, ``True`` and ``'True'`` return ``True``,
        while ``0``, ``'0'``, ``False``, ``'False'`` and ``None`` return ``False``.
        """
        got = self.get(name, default)
        try:
            return bool(int(got))
        except ValueError:
            if got in ("True", "true"):
                return True
            if got in ("False", "false"):
                return False
            raise ValueError(
                "Supported values for boolean settings "
                "are 0/1, True/False, '0'/'1', "
                "'True'/'False' and 'true'/'false'"
            )

    def getint(self, name: str, default: int = 0) -> int:
        return int(self.get(name, default))

    def getpriority(self, name: str) -> int | None:
        if name not in self:
            return None
        return self.attributes[name].priority

    def set(self, name: str, value: Any, priority: int | str = "project") -> None:
        """
        Store a key/value attribute with a given priority.

        :param priority: a key of :data:`SETTINGS_PRIORITIES` or an integer
        """
        self._assert_mutability()
        priority = get_settings_priority(priority)
        if name not in self:
            self.attributes[name] = SettingsAttribute(value, priority)
        else:
            self.attributes[name].set(value, priority)

    def setdict(self, values: _SettingsInputT, priority: int | str = "project") -> None:
        self.update(values, priority)

    def setmodule(
        self, module: ModuleType | str, priority: int | str = "project"
    ) -> None:
        """
        Store every uppercase global of ``module`` with the given priority.
        """
        self._assert_mutability()
        if isinstance(module, str):
            module = import_module(module)
        for key in dir(module):
            if key.isupper():
                self.set(key, getattr(module, key), priority)

    def update(self, values: _SettingsInputT, priority: int | str = "project") -> None:
        """
        Store key/value pairs with a given priority.

        A string is decoded as a JSON object first. When ``values`` is a
        :class:`BaseSettings` its per-key priorities are kept and
        ``priority`` is ignored.
        """
        self._assert_mutability()
        if isinstance(values, str):
            values = cast(dict[str, Any], json.loads(values))
        if values is not None:
            if isinstance(values, BaseSettings):
                for name, value in values.items():
                    self.set(name, value, cast(int, values.getpriority(name)))
            else:
                for name, value in values.items():
                    self.set(name, value, priority)

    def _assert_mutability(self) -> None:
        if self.frozen:
            raise TypeError("Trying to modify an immutable Settings object")

    def copy(self) -> Self:
        return copy.deepcopy(self)

    def freeze(self) -> None:
        self.frozen = True

    def frozencopy(self) -> Self:
        """Return an immutable copy of the current settings."""
        copy = self.copy()
        copy.freeze()
        return copy

    def __iter__(self) -> Iterator[str]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)


class Settings(BaseSettings):
    """
    :class:`BaseSettings` populated with the defaults from
    :mod:`exemplar.settings.default_settings` at ``default`` priority.
    """

    def __init__(self, values: _SettingsInputT = None, priority: int | str = "project"):
        super().__init__()
        self.setmodule(default_settings, "default")
        self.update(values, priority)


def iter_default_settings() -> Iterable[tuple[str, Any]]:
    """Return the default settings as an iterator of (name, value) tuples"""
    for name in dir(default_settings):
        if name.isupper():
            yield name, getattr(default_settings, name)


def overridden_settings(settings: Mapping[str, Any]) -> Iterable[tuple[str, Any]]:
    """Return an iterable of the settings that have been overridden"""
    for name, defvalue in iter_default_settings():
        value = settings[name]
        if value != defvalue:
            yield name, value
