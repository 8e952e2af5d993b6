"""Signal-Fuse: profile fact fusion and compatibility signals."""

__version__ = "0.1.0"
