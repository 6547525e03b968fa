"""recordmap - maps loosely structured source records onto target entity schemas."""

__version__ = "0.1.0"
