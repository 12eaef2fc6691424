"""Tweet summarization, storage and push service."""

__version__ = "2.0.0"
