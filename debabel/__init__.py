"""De-Babel: chat with a language model across an input/search language pair."""

__version__ = "1.0.0"
