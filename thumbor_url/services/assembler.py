"""
Path assembly.

Renders a validated TransformRequest into the unsigned config string. The
Thumbor URL grammar is order-sensitive and the signature covers the exact
string, so the segment order below must not change:

    meta/ trim/ crop/ fit-in/ dimensions/ smart-or-alignment/ filters/ image
"""

from typing import List

from thumbor_url.schemas.transform import TransformRequest, TrimOptions

META_SEGMENT = "meta"


def _trim_segment(request: TransformRequest) -> str:
    segment = "trim"
    if isinstance(request.trim, TrimOptions) and request.trim.pixel_color:
        segment += f":{request.trim.pixel_color}"
        if request.trim.color_tolerance:
            segment += f":{request.trim.color_tolerance}"
    return segment


def _dimensions_segment(request: TransformRequest) -> str:
    resize = request.resize
    width = f"-{resize.width}" if resize.flip_horizontally else f"{resize.width}"
    height = f"-{resize.height}" if resize.flip_vertically else f"{resize.height}"
    return f"{width}x{height}"


def assemble_segments(request: TransformRequest) -> List[str]:
    """Return the config segments in URL order, image last."""
    segments = []

    if request.is_metadata:
        segments.append(META_SEGMENT)

    if request.trim:
        segments.append(_trim_segment(request))

    if request.crop is not None:
        crop = request.crop
        segments.append(f"{crop.left}x{crop.top}:{crop.right}x{crop.bottom}")

    if request.fit_in_style:
        segments.append(request.fit_in_style)

    if request.resize is not None:
        segments.append(_dimensions_segment(request))

    # Smart cropping overrides any explicit alignment
    if request.smart:
        segments.append("smart")
    elif request.resize is not None:
        if request.resize.horizontal_align:
            segments.append(request.resize.horizontal_align)
        if request.resize.vertical_align:
            segments.append(request.resize.vertical_align)

    if request.filters:
        segments.append("filters:" + ":".join(request.filters))

    segments.append(request.image)
    return segments


def assemble_config(request: TransformRequest) -> str:
    """Build the config string for an already validated request."""
    return "/".join(assemble_segments(request))
