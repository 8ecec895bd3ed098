"""Dessert shop: remote dessert catalog and a client-side cart."""

__version__ = "0.1.0"
