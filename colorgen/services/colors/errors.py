"""
Color pipeline errors.

Every failure the pipeline can surface is a ColorGenError. The API layer maps
them to 4xx responses and the CLI to a non-zero exit code.
"""


class ColorGenError(ValueError):
    """Base class for color pipeline failures."""
    pass


class EmptyInputError(ColorGenError):
    """Pixel buffer contains no visible pixels."""
    pass


class InvalidColorError(ColorGenError):
    """Color literal could not be parsed."""
    pass


class ImageDecodeError(ColorGenError):
    """Image bytes could not be decoded."""
    pass
