"""Multi-speaker text-to-speech client with client-side audio merging."""

__version__ = "0.1.0"
