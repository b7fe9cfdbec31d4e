"""Step-by-step simulation and playback of classic data structures."""

__version__ = "0.1.0"
