"""textshift - batch translation, polishing and typographic formatting for
design-document text fragments."""

__version__ = "1.0.0"
