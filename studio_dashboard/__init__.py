"""Photo studio admin dashboard gateway."""

__version__ = "1.0.0"
