"""Terminal presentation: theme, progress bar, live run narrator."""
