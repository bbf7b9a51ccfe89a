"""Repository evaluation: scoring GitHub repositories and comparing evaluations."""

__version__ = "0.1.0"
