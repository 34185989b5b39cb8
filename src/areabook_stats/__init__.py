"""Average time between contacts, from cached area book data."""

__version__ = "0.1.0"
