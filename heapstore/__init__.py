"""Fixed-size pages and slotted heap pages for a page-based storage engine."""

__version__ = "0.1.0"