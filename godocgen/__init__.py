"""Generate GitBook-style API documentation for Go packages."""

__version__ = "0.1.0"
