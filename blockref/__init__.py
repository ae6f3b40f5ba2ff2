"""blockref - Block reference analysis for templates."""

__version__ = "0.1.0"
