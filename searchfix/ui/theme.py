"""
searchfix visual design system.

Colors, styles and icons as named constants. Other modules import from
here rather than hardcoding markup strings.

The palette is picked once at import time from the macOS appearance
setting; both palettes are 24-bit hex.
"""

import subprocess

from rich.style import Style
from rich.theme import Theme

from searchfix import __version__


# ── Brand ─────────────────────────────────────────────────────────────────────

APP_NAME = "searchfix"
APP_TAGLINE = "Outlook & Spotlight search repair"
APP_VERSION = __version__


# ── Dark/light detection ──────────────────────────────────────────────────────

def _is_dark_mode() -> bool:
    """
    Detect macOS system appearance.

    Falls back to True (dark palette) on any error, including when
    `defaults` does not exist (non-macOS, CI).
    """
    try:
        r = subprocess.run(
            ["defaults", "read", "-g", "AppleInterfaceStyle"],
            capture_output=True, text=True, timeout=2, check=False,
        )
        # exit 1 → key absent → light mode
        if r.returncode == 0:
            return "Dark" in r.stdout
        if r.returncode == 1:
            return False
    except Exception:
        pass
    return True


DARK_MODE: bool = _is_dark_mode()


# ── Color palette ─────────────────────────────────────────────────────────────

if DARK_MODE:
    COLOR_CRITICAL = "#E05252"
    COLOR_WARNING  = "#D4870A"
    COLOR_PASS     = "#4DBD74"
    COLOR_BRAND    = "#7B9FD4"
    COLOR_DIM      = "#787878"
    COLOR_COMMAND  = "#C0C0C0"
    COLOR_TEXT     = "#F0F0F0"

    PROGRESS_BAR_COLOR      = "#7B9FD4"
    PROGRESS_COMPLETE_COLOR = "#4DBD74"

else:
    # WCAG AA on white
    COLOR_CRITICAL = "#B91C1C"
    COLOR_WARNING  = "#92400E"
    COLOR_PASS     = "#166534"
    COLOR_BRAND    = "#1D4ED8"
    COLOR_DIM      = "#4B5563"
    COLOR_COMMAND  = "#1F2937"
    COLOR_TEXT     = "#0F172A"

    PROGRESS_BAR_COLOR      = "#1D4ED8"
    PROGRESS_COMPLETE_COLOR = "#166534"


# ── Rich styles ───────────────────────────────────────────────────────────────

STYLE_CRITICAL = Style(color=COLOR_CRITICAL, bold=True)
STYLE_WARNING  = Style(color=COLOR_WARNING,  bold=True)
STYLE_PASS     = Style(color=COLOR_PASS,     bold=True)


# ── Outcome icons ─────────────────────────────────────────────────────────────

ICON_PASS = "✅"
ICON_CANCELLED = "⏹️ "
ICON_ERROR = "❌"
ICON_LOCK = "🔐"

OUTCOME_ICONS: dict[str, str] = {
    "completed": ICON_PASS,
    "cancelled": ICON_CANCELLED,
    "failed": ICON_ERROR,
}

OUTCOME_STYLES: dict[str, Style] = {
    "completed": STYLE_PASS,
    "cancelled": STYLE_WARNING,
    "failed": STYLE_CRITICAL,
}


# ── Rich Theme ────────────────────────────────────────────────────────────────

SEARCHFIX_THEME = Theme(
    {
        "critical": f"{COLOR_CRITICAL} bold",
        "warning":  f"{COLOR_WARNING} bold",
        "pass":     f"{COLOR_PASS} bold",
        "brand":    f"{COLOR_BRAND} bold",
        "dim":      COLOR_DIM,
        "command":  COLOR_COMMAND,
        "text":     COLOR_TEXT,
    }
)
