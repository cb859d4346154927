"""Report presentation - terminal text and HTML."""
