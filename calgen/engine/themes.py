from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from ..config import DEFAULT_THEME

# style-role -> CSS custom property
ROLE_VARIABLES: Dict[str, str] = {
    "primary": "--primary-color",
    "secondary": "--secondary-color",
    "accent": "--accent-color",
    "background": "--background-color",
    "text": "--text-color",
    "border": "--border-color",
    "header-background": "--header-bg",
    "header-text": "--header-text",
    "weekend-background": "--weekend-bg",
    "today-background": "--today-bg",
}

STYLE_ROLES: Tuple[str, ...] = tuple(ROLE_VARIABLES)


@dataclass(frozen=True)
class ThemeOverride:
    """Extra rules scoped under the theme class, e.g. `.day-card.weekend .day-name`."""

    selector: str
    properties: Tuple[Tuple[str, str], ...]

    def get(self, prop: str, default: str | None = None) -> str | None:
        for name, value in self.properties:
            if name == prop:
                return value
        return default


@dataclass(frozen=True)
class ThemeDefinition:
    key: str
    name: str
    roles: Dict[str, str]
    overrides: Tuple[ThemeOverride, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        missing = [role for role in STYLE_ROLES if role not in self.roles]
        if missing:
            raise ValueError(f"Theme '{self.key}' is missing roles: {', '.join(missing)}")

    def role(self, role: str) -> str:
        return self.roles[role]

    def override(self, selector: str, prop: str) -> str | None:
        for rule in self.overrides:
            if rule.selector == selector:
                return rule.get(prop)
        return None

    @property
    def css_class(self) -> str:
        return "" if self.key == DEFAULT_THEME else f"theme-{self.key}"

    def stylesheet(self) -> str:
        scope = ":root" if self.key == DEFAULT_THEME else f".{self.css_class}"
        lines = [f"{scope} {{"]
        lines.extend(f"  {ROLE_VARIABLES[role]}: {self.roles[role]};" for role in STYLE_ROLES)
        lines.append("}")
        for rule in self.overrides:
            lines.append(f"{scope} {rule.selector} {{")
            lines.extend(f"  {name}: {value};" for name, value in rule.properties)
            lines.append("}")
        return "\n".join(lines)


class ThemeRegistry:
    def __init__(self) -> None:
        self._themes: Dict[str, ThemeDefinition] = {}

    def register(self, theme: ThemeDefinition) -> None:
        if theme.key in self._themes:
            raise ValueError(f"Theme '{theme.key}' is already registered")
        self._themes[theme.key] = theme

    def get(self, name: str | None) -> ThemeDefinition:
        key = (name or "").strip().lower()
        return self._themes.get(key) or self._themes[DEFAULT_THEME]

    def __contains__(self, name: object) -> bool:
        return name in self._themes

    def names(self) -> List[str]:
        return list(self._themes)

    def css_class(self, name: str | None) -> str:
        return self.get(name).css_class

    def combined_stylesheet(self) -> str:
        return "\n\n".join(theme.stylesheet() for theme in self._themes.values())


THEMES = ThemeRegistry()

THEMES.register(
    ThemeDefinition(
        key="default",
        name="Default",
        roles={
            "primary": "#2C3E50",
            "secondary": "#3498DB",
            "accent": "#E74C3C",
            "background": "#FFFFFF",
            "text": "#2C3E50",
            "border": "#BDC3C7",
            "header-background": "#34495E",
            "header-text": "#FFFFFF",
            "weekend-background": "#ECF0F1",
            "today-background": "#FFF3CD",
        },
    )
)

THEMES.register(
    ThemeDefinition(
        key="ocean",
        name="Ocean",
        roles={
            "primary": "#006994",
            "secondary": "#00A8CC",
            "accent": "#F39C12",
            "background": "#F8F9FA",
            "text": "#2C3E50",
            "border": "#81C7D4",
            "header-background": "#005073",
            "header-text": "#FFFFFF",
            "weekend-background": "#E8F4F8",
            "today-background": "#D4EDDA",
        },
    )
)

THEMES.register(
    ThemeDefinition(
        key="sunset",
        name="Sunset",
        roles={
            "primary": "#C0392B",
            "secondary": "#E67E22",
            "accent": "#F39C12",
            "background": "#FEF5E7",
            "text": "#2C3E50",
            "border": "#F39C12",
            "header-background": "#D35400",
            "header-text": "#FFFFFF",
            "weekend-background": "#FDEBD0",
            "today-background": "#FFE5CC",
        },
    )
)

THEMES.register(
    ThemeDefinition(
        key="minimalist",
        name="Minimalist",
        roles={
            "primary": "#000000",
            "secondary": "#555555",
            "accent": "#000000",
            "background": "#FFFFFF",
            "text": "#000000",
            "border": "#CCCCCC",
            "header-background": "#F5F5F5",
            "header-text": "#000000",
            "weekend-background": "#FAFAFA",
            "today-background": "#E8E8E8",
        },
    )
)

THEMES.register(
    ThemeDefinition(
        key="darkred",
        name="Dark Red",
        roles={
            "primary": "#8B0000",
            "secondary": "#A52A2A",
            "accent": "#DC143C",
            "background": "#FFFFFF",
            "text": "#2C3E50",
            "border": "#8B0000",
            "header-background": "#4A0000",
            "header-text": "#FFB6C1",
            "weekend-background": "#ECF0F1",
            "today-background": "#FFF3CD",
        },
        overrides=(
            ThemeOverride(".day-info", (("background", "#000000"), ("padding", "8px"), ("border-radius", "4px"))),
            ThemeOverride(".day-name", (("color", "#E60D2D"),)),
            ThemeOverride(".day-number", (("color", "#3C62F7"),)),
            ThemeOverride(".day-card.weekend .day-name", (("color", "#FFB6C1"),)),
            ThemeOverride(".day-card.weekend .day-number", (("color", "#FFB6C1"),)),
        ),
    )
)
