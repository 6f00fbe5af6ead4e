"""Theme framework models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ThemeMode(IntEnum):
    """User-facing theme selection stored under the ``theme`` key."""

    SYSTEM = 0
    DARK = 1
    LIGHT = 2
    CUSTOM = 3

    @property
    def nick(self) -> str:
        return self.name.lower()


class ColorScheme(IntEnum):
    """Effective light/dark scheme driving which stylesheet is loaded."""

    DARK = 0
    LIGHT = 1

    @property
    def nick(self) -> str:
        return self.name.lower()

    @classmethod
    def from_nick(cls, nick: str) -> ColorScheme:
        try:
            return cls[nick.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown color scheme {nick!r}") from None

    @classmethod
    def from_index(cls, index: int) -> ColorScheme:
        """Clamp a raw stored index onto a defined scheme."""
        return cls(clamp_index(index, len(cls)))


class Contrast(str, Enum):
    """Build-time contrast level selecting the color source tree."""

    NORMAL = "normal"
    HIGH = "high"


def clamp_index(index: int, count: int) -> int:
    return min(max(int(index), 0), count - 1)


@dataclass(frozen=True, slots=True)
class ColorVariable:
    """A customizable color role substituted into custom templates."""

    name: str
    key: str
    defaults: tuple[str, ...]

    @property
    def placeholder(self) -> str:
        return "${" + self.name + "}"

    def default_for(self, scheme_index: int) -> str:
        """Return the default literal for a scheme index, clamped to known defaults."""
        return self.defaults[clamp_index(scheme_index, len(self.defaults))]


@dataclass(frozen=True, slots=True)
class Template:
    """Generated stylesheet text with unresolved color placeholders."""

    text: str
    placeholders: frozenset[str]
    known: frozenset[str]
