"""Command-line client and library for the Gleap customer support API."""

__version__ = "0.3.0"