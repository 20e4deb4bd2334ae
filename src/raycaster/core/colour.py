"""RGBA colours with 8-bit channels."""

from typing import NamedTuple


class Colour(NamedTuple):
    """An RGBA colour, each channel in [0, 255].

    Attributes:
        r: Red channel.
        g: Green channel.
        b: Blue channel.
        a: Alpha channel (255 is opaque).
    """

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 255

    @classmethod
    def from_sequence(cls, values) -> "Colour":
        """Build a colour from an RGB or RGBA sequence.

        Raises:
            ValueError: If the sequence has the wrong length or a channel is
                outside [0, 255].
        """
        channels = tuple(int(v) for v in values)
        if len(channels) not in (3, 4):
            raise ValueError(f"Expected 3 or 4 colour channels, got {len(channels)}")
        for i, channel in enumerate(channels):
            if not 0 <= channel <= 255:
                raise ValueError(f"Colour channel {i} = {channel} is outside [0, 255].")
        return cls(*channels)


# Colour given to objects that are not assigned one explicitly
DEFAULT_OBJECT_COLOUR = Colour(126, 126, 126)

# Colour of pixels where no object was hit
BACKGROUND_COLOUR = Colour(0, 0, 0)
