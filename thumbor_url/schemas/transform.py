from typing import Any, Literal, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator
from pydantic.alias_generators import to_camel

from thumbor_url.core.errors import InvalidArgumentError

# Keep the source image's width or height
ORIGINAL_SIZE = "orig"

OriginalSize = Literal["orig"]
Dimension = Union[int, OriginalSize]
HorizontalAlign = Literal["left", "center", "right"]
VerticalAlign = Literal["top", "middle", "bottom"]
TrimPixelColor = Literal["top-left", "bottom-right"]
FitInStyle = Literal["fit-in", "full-fit-in", "adaptive-fit-in"]
Endpoint = Literal["image", "metadata"]
ImageFormat = Literal["webp", "jpeg", "avif", "heic", "png"]

# Options that only make sense once the image is resized
RESIZE_ONLY_FIELDS = (
    "flip_horizontally",
    "flip_vertically",
    "horizontal_align",
    "vertical_align",
)

MAX_TRIM_COLOR_TOLERANCE = 442


class _RequestModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @model_validator(mode="before")
    @classmethod
    def drop_unset_options(cls, data: Any) -> Any:
        # None means "not set", the field default applies
        if isinstance(data, Mapping):
            return {name: value for name, value in data.items() if value is not None}
        return data


class CropBox(_RequestModel):
    """Manual crop between the (left, top) and (right, bottom) points."""
    top: int = Field(..., description="Top bound")
    left: int = Field(..., description="Left bound")
    bottom: int = Field(..., description="Bottom bound")
    right: int = Field(..., description="Right bound")


class TrimOptions(_RequestModel):
    """Remove surrounding space in the image."""
    pixel_color: Optional[TrimPixelColor] = Field(
        default=None,
        alias="value",
        description="Orientation from where to get the reference pixel color"
    )
    color_tolerance: int = Field(
        default=0,
        description="0 - 442. Euclidean distance allowed between the reference pixel and the trimmed pixels"
    )


class ResizeOptions(_RequestModel):
    """Target size, plus the options that only apply to a resized image."""
    width: Dimension = Field(..., description="Width in pixels or 'orig'")
    height: Dimension = Field(..., description="Height in pixels or 'orig'")
    flip_horizontally: bool = False
    flip_vertically: bool = False
    horizontal_align: Optional[HorizontalAlign] = Field(
        default=None,
        description="Horizontal alignment used when resizing crops the image"
    )
    vertical_align: Optional[VerticalAlign] = Field(
        default=None,
        description="Vertical alignment used when resizing crops the image"
    )


class TransformRequest(_RequestModel):
    """Everything needed to build one Thumbor URL."""
    image: str = Field(..., description="Source image identifier or URL")
    host: Optional[str] = Field(default=None, description="Base URL of the Thumbor server")
    key: Optional[str] = Field(default=None, description="Thumbor security key", repr=False)
    endpoint: Endpoint = "image"
    crop: Optional[CropBox] = None
    trim: Union[bool, TrimOptions] = False
    resize: Optional[ResizeOptions] = None
    fit_in: Union[bool, FitInStyle] = False
    smart: bool = False
    filters: Tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def fold_resize_options(cls, data: Any) -> Any:
        """Move flat flip/alignment options into the resize record."""
        if not isinstance(data, Mapping):
            return data

        data = dict(data)
        flat = {}
        for name in RESIZE_ONLY_FIELDS:
            for alias in (name, to_camel(name)):
                value = data.pop(alias, None)
                # False and "" request nothing
                if value:
                    flat[name] = value

        if not flat:
            return data

        resize = data.get("resize")
        if resize is None:
            raise ValueError(
                f"{', '.join(sorted(flat))} can only be used when resize is set"
            )
        if isinstance(resize, ResizeOptions):
            resize = resize.model_dump(by_alias=True, exclude_defaults=True)
        elif isinstance(resize, Mapping):
            resize = dict(resize)
        else:
            return data

        # Values given inside the resize record win over flat ones
        for name, value in flat.items():
            if name not in resize and to_camel(name) not in resize:
                resize[to_camel(name)] = value
        data["resize"] = resize
        return data

    @property
    def is_metadata(self) -> bool:
        return self.endpoint == "metadata"

    @property
    def fit_in_style(self) -> Optional[str]:
        """The fit-in segment name, or None when fit-in is off."""
        if self.fit_in is True:
            return "fit-in"
        return self.fit_in or None


def parse_request(request: Union[TransformRequest, Mapping[str, Any]]) -> TransformRequest:
    """Coerce a mapping of options into a TransformRequest.

    Raises:
        InvalidArgumentError: if the options have the wrong shape or types
    """
    if isinstance(request, TransformRequest):
        return request

    try:
        return TransformRequest.model_validate(request)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_input=False)
        field = ".".join(str(part) for part in errors[0]["loc"]) if errors and errors[0]["loc"] else None
        raise InvalidArgumentError(
            f"Invalid transform options: {errors[0]['msg'] if errors else str(e)}",
            field=field,
            original_exception=e
        ) from e
