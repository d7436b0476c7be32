"""Chart of language model sizes over time."""

__version__ = "0.1.0"
