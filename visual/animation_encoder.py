"""
Animation Encoder Module
Assembles captured frames into a looping animated GIF.

Notes:
    - The alpha channel is dropped, not composited against a background.
    - Frames are assumed to share the first frame's size.
    - Every input frame becomes one GIF frame, identical neighbours included,
      which is why the stream is written with GifImagePlugin's getheader and
      getdata instead of ``Image.save(save_all=True)`` (that merges repeats).
"""

import io
import logging
from dataclasses import dataclass
from typing import List, Sequence

from PIL import GifImagePlugin, Image

from core.errors import EmptyFrameSequence
from utils import config
from .frame import Frame

logger = logging.getLogger(__name__)

GIF_TRAILER = b";"


@dataclass
class AnimationOutput:
    data: bytes
    frame_count: int
    delay_cs: int
    loop_forever: bool = True


def to_palette_image(frame: Frame, max_colors: int = config.GIF_MAX_COLORS) -> Image.Image:
    """
    Reduce a frame to a palette image.

    Frames with at most ``max_colors`` distinct colours keep them exactly.
    Richer frames fall back to median cut without dithering.
    """
    rgb = Image.fromarray(frame.rgb())
    colors = rgb.getcolors(max_colors)
    if colors is None:
        return rgb.quantize(colors=max_colors, method=Image.Quantize.MEDIANCUT,
                            dither=Image.Dither.NONE)

    ordered = [color for _count, color in sorted(colors, key=lambda entry: entry[1])]
    # Pad with repeats so every palette index maps back to a real frame colour
    ordered.extend([ordered[0]] * (256 - len(ordered)))
    palette = []
    for color in ordered:
        palette.extend(color)
    palette_image = Image.new("P", (1, 1))
    palette_image.putpalette(palette)
    return rgb.quantize(palette=palette_image, dither=Image.Dither.NONE)


class AnimationEncoder:
    def __init__(self, delay_cs: int = config.GIF_FRAME_DELAY_CS,
                 max_colors: int = config.GIF_MAX_COLORS):
        self.delay_cs = delay_cs
        self.max_colors = max_colors

    def encode(self, frames: Sequence[Frame]) -> AnimationOutput:
        """
        Encode frames, in order, as an infinitely looping GIF.

        Raises:
            EmptyFrameSequence: no frames were given
        """
        if not frames:
            raise EmptyFrameSequence("Cannot encode an animation with no frames")

        logger.debug(f"Encoding {len(frames)} frames at {frames[0].width}x{frames[0].height}")
        buffer = io.BytesIO()
        palette_images: List[Image.Image] = [to_palette_image(frame, self.max_colors) for frame in frames]

        header, _ = GifImagePlugin.getheader(palette_images[0].copy(), info={"loop": 0})
        for chunk in header:
            buffer.write(chunk)

        for image in palette_images:
            for chunk in GifImagePlugin.getdata(image, duration=self.delay_cs * 10,
                                                include_color_table=True):
                buffer.write(chunk)

        buffer.write(GIF_TRAILER)
        return AnimationOutput(
            data=buffer.getvalue(),
            frame_count=len(palette_images),
            delay_cs=self.delay_cs,
        )
