"""Pageant Vote: one vote per device per category, with live results."""

__version__ = "0.1.0"
