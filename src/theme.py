"""Theme palettes. A palette is a plain value; nothing global is touched."""

from dataclasses import dataclass

from view_settings import THEME_IVORY, THEME_MIDNIGHT, THEME_PARCHMENT

GOLD = "#fbbf24"
ACCENT_SECONDARY = "#a78bfa"
TEXT_SECONDARY = "#94a3b8"
WHITE = "#ffffff"


@dataclass(frozen=True)
class Palette:
    name: str
    bg_deep: str
    gradient_inner: str
    gradient_outer: str
    text_primary: str
    accent_primary: str
    accent_secondary: str = ACCENT_SECONDARY
    text_secondary: str = TEXT_SECONDARY
    gold: str = GOLD


PALETTES = {
    THEME_MIDNIGHT: Palette(
        name=THEME_MIDNIGHT,
        bg_deep="#0f172a",
        gradient_inner="#1e293b",
        gradient_outer="#0f172a",
        text_primary="#f8fafc",
        accent_primary="#38bdf8",
    ),
    THEME_IVORY: Palette(
        name=THEME_IVORY,
        bg_deep="#fdfbf7",
        gradient_inner="#ffffff",
        gradient_outer="#f1f5f9",
        text_primary="#1e293b",
        accent_primary="#0ea5e9",
    ),
    THEME_PARCHMENT: Palette(
        name=THEME_PARCHMENT,
        bg_deep="#f5e6d3",
        gradient_inner="#faebd7",
        gradient_outer="#deb887",
        text_primary="#4a3b2a",
        accent_primary="#d97706",
    ),
}


def palette_for(theme: str | None) -> Palette:
    """Palette for a theme name; unknown or missing names get midnight."""
    return PALETTES.get(theme or THEME_MIDNIGHT, PALETTES[THEME_MIDNIGHT])
