from __future__ import annotations

import pytest

from calgen.engine.pages import PAGE_SIZES, get_page_size, page_size_names
from calgen.engine.themes import STYLE_ROLES, THEMES, ThemeDefinition, ThemeRegistry


def test_builtin_themes_are_registered() -> None:
    assert THEMES.names() == ["default", "ocean", "sunset", "minimalist", "darkred"]
    for name in THEMES.names():
        theme = THEMES.get(name)
        assert all(theme.role(role).startswith("#") for role in STYLE_ROLES)


def test_unknown_theme_falls_back_to_default() -> None:
    assert THEMES.get("neon").key == "default"
    assert THEMES.get(None).key == "default"
    assert THEMES.get(" Ocean ").key == "ocean"


def test_css_class_scoping() -> None:
    assert THEMES.css_class("default") == ""
    assert THEMES.css_class("sunset") == "theme-sunset"
    assert THEMES.get("default").stylesheet().startswith(":root {")
    assert THEMES.get("ocean").stylesheet().startswith(".theme-ocean {")


def test_stylesheet_lists_every_role_variable() -> None:
    css = THEMES.get("ocean").stylesheet()
    assert "--primary-color: #006994;" in css
    assert "--today-bg: #D4EDDA;" in css
    assert css.count(": #") == len(STYLE_ROLES)


def test_darkred_overrides() -> None:
    theme = THEMES.get("darkred")
    assert theme.override(".day-info", "background") == "#000000"
    assert theme.override(".day-name", "color") == "#E60D2D"
    assert theme.override(".day-number", "color") == "#3C62F7"
    assert theme.override(".day-card.weekend .day-number", "color") == "#FFB6C1"
    assert theme.override(".week-day", "color") is None
    assert ".theme-darkred .day-card.weekend .day-name {" in theme.stylesheet()


def test_registry_rejects_duplicates_and_incomplete_themes() -> None:
    registry = ThemeRegistry()
    roles = {role: "#FFFFFF" for role in STYLE_ROLES}
    registry.register(ThemeDefinition("default", "Default", roles))
    with pytest.raises(ValueError):
        registry.register(ThemeDefinition("default", "Again", roles))
    with pytest.raises(ValueError):
        ThemeDefinition("broken", "Broken", {"primary": "#000000"})
    assert "default" in registry
    assert "broken" not in registry


def test_page_sizes() -> None:
    assert page_size_names() == ["A4-portrait", "A4-landscape", "A5-portrait", "A5-landscape"]
    assert get_page_size("A4-landscape").print_format() == {"format": "A4", "landscape": True}
    assert get_page_size("A5-portrait").print_format() == {"format": "A5", "landscape": False}
    assert get_page_size("Letter").key == "A4-portrait"
    assert get_page_size(None).key == "A4-portrait"
    assert PAGE_SIZES["A5-landscape"].css_width == "210mm"
    assert PAGE_SIZES["A5-landscape"].css_height == "148mm"


def test_page_points_follow_millimetres() -> None:
    width, height = get_page_size("A4-portrait").points
    assert width == pytest.approx(595.28, abs=0.01)
    assert height == pytest.approx(841.89, abs=0.01)


def test_page_size_lookup_ignores_case() -> None:
    assert get_page_size("a4-landscape").key == "A4-landscape"
    assert get_page_size(" A5-PORTRAIT ").key == "A5-portrait"
