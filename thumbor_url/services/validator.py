"""
Option validation.

Rejects requests the Thumbor server could not make sense of before any
part of the path is assembled. The first violation found aborts the call.
"""

from thumbor_url.core.errors import InvalidArgumentError, RangeError
from thumbor_url.schemas.transform import (
    MAX_TRIM_COLOR_TOLERANCE,
    CropBox,
    ResizeOptions,
    TransformRequest,
    TrimOptions,
)


def validate_request(request: TransformRequest) -> None:
    """Validate every option of a request.

    Raises:
        InvalidArgumentError: for blank text options
        RangeError: for numeric options outside of their bounds
    """
    if not request.image.strip():
        raise InvalidArgumentError("image must not be blank", field="image")

    for index, flt in enumerate(request.filters):
        if not flt.strip():
            raise InvalidArgumentError(
                "Filter must not be blank", field="filters", context={"index": index}
            )

    if request.resize is not None:
        validate_resize(request.resize)

    if request.crop is not None:
        validate_crop(request.crop)

    if isinstance(request.trim, TrimOptions):
        validate_trim(request.trim)


def validate_resize(resize: ResizeOptions) -> None:
    for name in ("width", "height"):
        value = getattr(resize, name)
        if isinstance(value, int) and value < 0:
            raise RangeError(
                f"{name.capitalize()} must be a positive number",
                field=f"resize.{name}", value=value, minimum=0
            )

    if resize.width == 0 and resize.height == 0:
        raise RangeError(
            "Both width and height must not be zero",
            field="resize", value=(resize.width, resize.height)
        )


def validate_crop(crop: CropBox) -> None:
    if crop.top < 0:
        raise RangeError("Top must be greater or equal to zero",
                         field="crop.top", value=crop.top, minimum=0)
    if crop.left < 0:
        raise RangeError("Left must be greater or equal to zero",
                         field="crop.left", value=crop.left, minimum=0)
    if crop.bottom < 1 or crop.bottom <= crop.top:
        raise RangeError("Bottom must be greater than zero and top",
                         field="crop.bottom", value=crop.bottom, minimum=max(1, crop.top + 1))
    if crop.right < 1 or crop.right <= crop.left:
        raise RangeError("Right must be greater than zero and left",
                         field="crop.right", value=crop.right, minimum=max(1, crop.left + 1))


def validate_trim(trim: TrimOptions) -> None:
    tolerance = trim.color_tolerance
    if tolerance < 0 or tolerance > MAX_TRIM_COLOR_TOLERANCE:
        raise RangeError(
            f"Color tolerance must be between 0 and {MAX_TRIM_COLOR_TOLERANCE}",
            field="trim.color_tolerance", value=tolerance,
            minimum=0, maximum=MAX_TRIM_COLOR_TOLERANCE
        )
    if tolerance > 0 and not trim.pixel_color:
        raise InvalidArgumentError(
            "Trim pixel color value must be defined", field="trim.pixel_color"
        )
