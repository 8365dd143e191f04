"""Data-over-sound bridge: ggwave codec server and client."""

__version__ = "0.1.0"
