"""
Filter constructors.

Each function returns one ``name(args)`` token for the ``filters:`` segment
of a Thumbor URL. Custom filters can be passed to the URL builder as plain
strings, these helpers only add argument validation.
"""

from dataclasses import dataclass
from typing import Optional, Union, get_args

from thumbor_url.core.errors import InvalidArgumentError, RangeError
from thumbor_url.schemas.transform import ImageFormat

Number = Union[int, float]


@dataclass(frozen=True)
class Color:
    """An RGB color. Channel bounds depend on the filter using it."""
    r: int
    g: int
    b: int


TRANSPARENT = "transparent"


def _format_number(value: Union[Number, bool]) -> str:
    # Thumbor parses booleans lowercase and integral floats without ".0"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _check_inclusive_range(value: Number, minimum: Number, maximum: Number, label: str = "Amount") -> None:
    if value < minimum or value > maximum:
        raise RangeError(
            f"{label} must be between {minimum} and {maximum}, inclusive",
            field=label.lower().replace(" ", "_"), value=value,
            minimum=minimum, maximum=maximum
        )


def _check_not_blank(value: str, label: str) -> None:
    if not value or not value.strip():
        raise InvalidArgumentError(f"{label} must not be blank", field=label.lower().replace(" ", "_"))


def brightness(amount: Number) -> str:
    """Increase or decrease the image brightness.

    Args:
        amount: -100 to 100, percent change. Positive numbers brighten.
    """
    _check_inclusive_range(amount, -100, 100)
    return f"brightness({_format_number(amount)})"


def contrast(amount: Number) -> str:
    """Increase or decrease the image contrast.

    Args:
        amount: -100 to 100, percent change. Positive numbers add contrast.
    """
    _check_inclusive_range(amount, -100, 100)
    return f"contrast({_format_number(amount)})"


def noise(amount: Number) -> str:
    """Add 0 to 100 percent noise to the image."""
    _check_inclusive_range(amount, 0, 100)
    return f"noise({_format_number(amount)})"


def quality(amount: Number) -> str:
    """Set the JPEG quality, 0 to 100. No effect on PNG or GIF."""
    _check_inclusive_range(amount, 0, 100)
    return f"quality({_format_number(amount)})"


def rgb(color: Color) -> str:
    """Change the amount of color in each channel, -100 to 100 percent each."""
    _check_inclusive_range(color.r, -100, 100, "Red value")
    _check_inclusive_range(color.g, -100, 100, "Green value")
    _check_inclusive_range(color.b, -100, 100, "Blue value")
    return f"rgb({color.r},{color.g},{color.b})"


def round_corner(radius_inner: Number, radius_outer: Number = 0,
                 color: Union[Color, str, None] = None) -> str:
    """Round the image corners, filling the clipped region.

    Args:
        radius_inner: Corner radius in pixels, at least 1
        radius_outer: Second radius of the corner ellipse, 0 for none
        color: Fill color (0-255 channels). None or "transparent" keeps
            the clipped region transparent.
    """
    if radius_inner < 1:
        raise RangeError("Inner radius must be greater than zero",
                         field="radius_inner", value=radius_inner, minimum=1)
    if radius_outer < 0:
        raise RangeError("Outer radius must be greater than or equal to zero",
                         field="radius_outer", value=radius_outer, minimum=0)
    if isinstance(color, str) and color != TRANSPARENT:
        raise InvalidArgumentError(
            f"Color must be a Color or '{TRANSPARENT}', got {color!r}", field="color"
        )

    token = f"round_corner({_format_number(radius_inner)}"
    if radius_outer > 0:
        token += f"|{_format_number(radius_outer)}"
    if isinstance(color, Color):
        token += f",{color.r},{color.g},{color.b})"
    else:
        token += ",0,0,0,1)"
    return token


def watermark(image_url: str, x: Number = 0, y: Number = 0, transparency: Number = 0) -> str:
    """Overlay a watermark image.

    The watermark is loaded with the same image loader Thumbor uses for the
    main image, so ``image_url`` may itself be a Thumbor path.

    Args:
        image_url: Watermark image URL
        x: Horizontal position. Negative values count from the right.
        y: Vertical position. Negative values count from the bottom.
        transparency: 0 (opaque) to 100 (fully transparent)
    """
    _check_not_blank(image_url, "Image URL")
    _check_inclusive_range(transparency, 0, 100, "Transparency")
    return (
        f"watermark({image_url},{_format_number(x)},{_format_number(y)},"
        f"{_format_number(transparency)})"
    )


def sharpen(amount: Number, radius: Number, luminance_only: bool) -> str:
    """Enhance apparent sharpness.

    Args:
        amount: Typical values are between 0.0 and 10.0
        radius: Typical values are between 0.0 and 2.0
        luminance_only: Sharpen only the luminance channel
    """
    return f"sharpen({_format_number(amount)},{_format_number(radius)},{_format_number(bool(luminance_only))})"


def fill(color: str, fill_transparent: bool = False) -> str:
    """Pad the image to the requested size with a color.

    Args:
        color: HTML color name or hex RGB without "#", or one of
            "auto", "blur", "transparent"
        fill_transparent: Also fill the transparent areas of the image
    """
    _check_not_blank(color, "Color")
    return f"fill({color}{',1' if fill_transparent else ''})"


def output_format(image_format: ImageFormat) -> str:
    """Force the output image format."""
    if image_format not in get_args(ImageFormat):
        raise InvalidArgumentError(
            f"Unsupported format: {image_format}. Must be one of: {', '.join(get_args(ImageFormat))}",
            field="image_format"
        )
    return f"format({image_format})"


def frame(image_url: str) -> str:
    """Overlay the image with a 9-patch frame."""
    _check_not_blank(image_url, "Image URL")
    return f"frame({image_url})"


def strip_icc() -> str:
    return "strip_icc()"


def grayscale() -> str:
    return "grayscale()"


def equalize() -> str:
    return "equalize()"


def no_upscale() -> str:
    """Tell Thumbor not to upscale the image."""
    return "no_upscale()"


def blur(radius: Number, sigma: Optional[Number] = 0) -> str:
    """Gaussian blur.

    Args:
        radius: 1 to 150. Bigger radius, blurrier image.
        sigma: Sigma of the gaussian function, not negative
    """
    _check_inclusive_range(radius, 1, 150, "Radius")
    sigma = sigma or 0
    if sigma < 0:
        raise RangeError("Sigma must be greater than or equal to zero",
                         field="sigma", value=sigma, minimum=0)
    return f"blur({_format_number(radius)},{_format_number(sigma)})"


def rotate(angle: Number) -> str:
    """Rotate by an euler angle. Thumbor maps angles >= 360 into 0-359."""
    return f"rotate({_format_number(angle)})"
