"""
mediarun visual design system.

All colors and icons as named constants.
Import from here — never hardcode markup strings in other modules.
"""

from rich.theme import Theme


# ── Color palette ─────────────────────────────────────────────────────────────
# 24-bit hex, readable on both dark and light terminal backgrounds.

COLOR_CRITICAL = "#D64545"      # Error panels
COLOR_BRAND    = "#5B83C4"      # Consent panel border
COLOR_DIM      = "#7A7A7A"      # Medium gray
COLOR_COMMAND  = "#5BA3C9"      # Commands stand out from dim text
COLOR_TEXT     = "default"      # Terminal's own foreground


# ── Icons ─────────────────────────────────────────────────────────────────────

ICON_ERROR = "❌"
ICON_RUN = "▶"
ICON_EJECT = "⏏"

# Freedesktop icon names from the mount subsystem → terminal glyphs
MOUNT_ICONS: dict[str, str] = {
    "media-removable": "💾",
    "drive-harddisk": "🖴",
    "media-optical": "💿",
}
DEFAULT_MOUNT_ICON = "📁"


# ── Rich Theme ────────────────────────────────────────────────────────────────
# Only the style names used in console markup ([dim], [command]).

MEDIARUN_THEME = Theme(
    {
        "dim":      COLOR_DIM,
        "command":  COLOR_COMMAND,
    }
)
