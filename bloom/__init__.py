"""Bloom - lesson content model and course progression for the Bloom learning app."""

__version__ = "0.1.0"
