"""Stateless tile renderer: vector strokes in, PNG tiles out."""

__version__ = "0.1.0"
