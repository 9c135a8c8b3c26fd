"""
Progress bar renderer.

Stateless — takes a fraction, returns a rich Text. The caller
(RunNarrator) owns state and calls this on every RunState change.

Output:  [█████████████░░░░░░░░░] 55%
"""

from rich.text import Text

from searchfix.ui.theme import COLOR_DIM, PROGRESS_BAR_COLOR, PROGRESS_COMPLETE_COLOR


BAR_WIDTH = 22


def render_progress(fraction: float) -> Text:
    """Return a styled single-line progress bar; fraction is clamped to [0, 1]."""
    pct = max(0.0, min(1.0, fraction))
    filled = round(BAR_WIDTH * pct)
    empty = BAR_WIDTH - filled

    done = pct >= 1.0
    bar_color = PROGRESS_COMPLETE_COLOR if done else PROGRESS_BAR_COLOR
    pct_color = f"{PROGRESS_COMPLETE_COLOR} bold" if done else f"bold {PROGRESS_BAR_COLOR}"

    t = Text()
    t.append("  [", style=COLOR_DIM)
    t.append("█" * filled, style=bar_color)
    t.append("░" * empty, style=COLOR_DIM)
    t.append("]  ", style=COLOR_DIM)
    t.append(f"{round(pct * 100)}%", style=pct_color)

    return t
