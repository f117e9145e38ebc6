from __future__ import annotations

from enum import Enum


class ThemeMode(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def resolve_theme(mode: ThemeMode | str, system_theme: ThemeMode | str = ThemeMode.LIGHT) -> str:
    """
    Return the concrete theme ("light" or "dark") for a preference.

    ``system`` follows ``system_theme``, which must itself be concrete.
    """
    mode = ThemeMode(mode)
    if mode is ThemeMode.SYSTEM:
        system = ThemeMode(system_theme)
        if system is ThemeMode.SYSTEM:
            raise ValueError("system theme must be 'light' or 'dark'")
        return system.value
    return mode.value
