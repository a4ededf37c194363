"""colorgen: Material Design 3 color schemes from images and seed colors."""

__version__ = "1.0.0"
