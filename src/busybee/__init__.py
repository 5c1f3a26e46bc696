"""BusyBee: meeting transcripts in, minutes and action items out."""

__version__ = "0.1.0"
