"""Palabras: Spaanse woordjes leren voor Nederlandstalige kinderen."""

__version__ = "1.0.0"
