"""
Tests for ui/progress.py.
"""

from searchfix.ui.progress import BAR_WIDTH, render_progress


class TestRenderProgress:
    def test_shows_percentage(self):
        assert "55%" in render_progress(0.55).plain

    def test_bar_width_is_constant(self):
        for fraction in (0.0, 0.2, 0.75, 1.0):
            plain = render_progress(fraction).plain
            assert plain.count("█") + plain.count("░") == BAR_WIDTH

    def test_full_bar_at_one(self):
        plain = render_progress(1.0).plain
        assert "░" not in plain
        assert "100%" in plain

    def test_out_of_range_is_clamped(self):
        assert "0%" in render_progress(-1).plain
        assert "100%" in render_progress(3).plain
