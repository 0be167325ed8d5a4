"""Live view configuration for the family graph."""

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from logger import get_logger

log = get_logger(__name__)

LAYOUT_TREE = "tree"
LAYOUT_ORGANIC = "organic"
LINK_CURVED = "curved"
LINK_STRAIGHT = "straight"
THEME_MIDNIGHT = "midnight"
THEME_IVORY = "ivory"
THEME_PARCHMENT = "parchment"
SHAPE_CIRCLE = "circle"
SHAPE_HEXAGON = "hexagon"

CHOICES = {
    "layout": (LAYOUT_TREE, LAYOUT_ORGANIC),
    "link_style": (LINK_CURVED, LINK_STRAIGHT),
    "theme": (THEME_MIDNIGHT, THEME_IVORY, THEME_PARCHMENT),
    "node_shape": (SHAPE_CIRCLE, SHAPE_HEXAGON),
}

# camelCase keys as sent by browser clients
ALIASES = {"linkStyle": "link_style", "nodeShape": "node_shape"}
BOOL_STRINGS = {"true": True, "false": False}


@dataclass(frozen=True)
class ViewSettings:
    layout: str = LAYOUT_TREE
    link_style: str = LINK_CURVED
    theme: str = THEME_MIDNIGHT
    node_shape: str = SHAPE_CIRCLE
    particles: bool = False

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ViewSettings":
        """Build settings from a (possibly partial) mapping; bad or missing keys use defaults."""
        values: dict[str, Any] = {}
        for key, value in (data or {}).items():
            key = ALIASES.get(key, key)
            if key in CHOICES:
                if value in CHOICES[key]:
                    values[key] = value
                else:
                    log.warning("Ignoring invalid view setting", extra={"key": key, "value": value})
            elif key == "particles":
                if isinstance(value, str):
                    value = BOOL_STRINGS.get(value.strip().lower(), value)
                if isinstance(value, bool):
                    values[key] = value
                else:
                    log.warning("Ignoring invalid view setting", extra={"key": key, "value": value})
        return cls(**values)

    def replace(self, **changes) -> "ViewSettings":
        return self.from_mapping({**dataclasses.asdict(self), **changes})

    def differs_only_in_theme(self, other: "ViewSettings") -> bool:
        return self != other and dataclasses.replace(other, theme=self.theme) == self


Listener = Callable[[ViewSettings, ViewSettings], None]


class ViewSettingsStore:
    """Holds the current settings value and tells subscribers whenever it is replaced."""

    def __init__(self, settings: ViewSettings | None = None):
        self._settings = settings or ViewSettings()
        self._listeners: list[Listener] = []

    def get(self) -> ViewSettings:
        return self._settings

    def replace(self, settings: ViewSettings | Mapping[str, Any]):
        if not isinstance(settings, ViewSettings):
            settings = ViewSettings.from_mapping(settings)
        old = self._settings
        if settings == old:
            return
        self._settings = settings
        for listener in list(self._listeners):
            listener(old, settings)

    def update(self, **changes):
        """Replace the value with a copy carrying the given changes."""
        self.replace(self._settings.replace(**changes))

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
