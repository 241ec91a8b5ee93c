"""Theme Presets — booth color palettes and CSS variable rendering.

Invariants:
    - Every preset defines all six color roles
    - Custom colors only override the palette when the theme is "custom"
    - Unknown theme names resolve to the custom palette
"""

from boothboss.core.domain_types import ThemeName

COLOR_ROLES: tuple[str, ...] = (
    "primary", "secondary", "background", "border", "button", "text",
)

THEMES: dict[str, dict[str, str]] = {
    ThemeName.MIDNIGHT.value: {
        "primary": "#5b21b6",
        "secondary": "#7c3aed",
        "background": "#0f172a",
        "border": "#c026d3",
        "button": "#fbbf24",
        "text": "#f8fafc",
    },
    ThemeName.PASTEL.value: {
        "primary": "#60a5fa",
        "secondary": "#a78bfa",
        "background": "#f0f9ff",
        "border": "#f9a8d4",
        "button": "#34d399",
        "text": "#1e293b",
    },
    ThemeName.BW.value: {
        "primary": "#000000",
        "secondary": "#4b5563",
        "background": "#ffffff",
        "border": "#d1d5db",
        "button": "#111827",
        "text": "#111827",
    },
    ThemeName.CUSTOM.value: {
        "primary": "#3B82F6",
        "secondary": "#1E40AF",
        "background": "#ffffff",
        "border": "#e5e7eb",
        "button": "#3B82F6",
        "text": "#111827",
    },
}


def get_theme_colors(
    theme: str | None, custom_colors: dict[str, str | None] | None = None,
) -> dict[str, str]:
    """Resolve the palette for a theme, merging custom colors for "custom"."""
    if theme not in THEMES:
        theme = ThemeName.CUSTOM.value
    colors = dict(THEMES[theme])
    if theme == ThemeName.CUSTOM.value and custom_colors:
        for role in COLOR_ROLES:
            value = custom_colors.get(role)
            if value:
                colors[role] = value
    return colors


def colors_from_settings(settings: dict) -> dict[str, str]:
    """Palette for a settings dict (reads the *_color columns)."""
    custom = {role: settings.get(f"{role}_color") for role in COLOR_ROLES}
    return get_theme_colors(settings.get("theme"), custom)


def generate_theme_css(colors: dict[str, str]) -> str:
    lines = [f"  --color-{role}: {colors[role]};" for role in COLOR_ROLES if role in colors]
    return ":root {\n" + "\n".join(lines) + "\n}"
