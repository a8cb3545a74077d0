"""In-memory short link registry with expiry and click statistics."""

__version__ = "0.1.0"
