"""Kas Warga: residential-community treasury dashboard backend."""

__version__ = "0.1.0"
