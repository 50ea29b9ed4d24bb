"""Trí Việt backend: mind map layout and rendering, summaries, library and learning paths."""
