"""gitwip — find unfinished work across your git repositories."""

__version__ = "0.1.0"
