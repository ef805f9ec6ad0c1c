"""Animated SVG profile badges generated from GitHub GraphQL activity data."""

__version__ = "0.1.0"
