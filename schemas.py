"""Pydantic schemas for text fragments, themes and canvas policies."""


from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class FontSizeClass(str, Enum):
	"""Coarse size hint reported by the recognizer."""
	SMALL = "small"
	MEDIUM = "medium"
	LARGE = "large"


class TextFragment(BaseModel):
	"""One recognized piece of text placed in percent coordinates.

	``y`` is the text baseline. ``align`` is left unset by recognizers and
	defaults to centered rendering.
	"""
	model_config = ConfigDict(populate_by_name=True, frozen=True)

	text: str = Field(min_length=1)
	x: float = Field(allow_inf_nan=False)
	y: float = Field(allow_inf_nan=False)
	font_size_class: FontSizeClass = Field(
		default=FontSizeClass.MEDIUM,
		validation_alias=AliasChoices("font_size_class", "fontSizeClass", "fontSize"),
	)
	align: Literal["left", "center", "right"] | None = None

	@field_validator("font_size_class", mode="before")
	@classmethod
	def _lowercase_size_class(cls, value):
		if isinstance(value, str):
			return value.strip().lower()
		return value


class CanvasSpec(BaseModel):
	"""Output raster dimensions in pixels."""
	model_config = ConfigDict(frozen=True)

	width: int
	height: int


class GradientStop(BaseModel):
	model_config = ConfigDict(frozen=True)

	offset: float
	color: str


class HorizontalRule(BaseModel):
	"""Thin divider line drawn across the background."""
	model_config = ConfigDict(frozen=True)

	y: float
	inset_px: int = 50
	color: str = "#ffffff"
	opacity: float = 0.3


class ThemeSpec(BaseModel):
	"""Decorative elements of a themed background."""
	model_config = ConfigDict(frozen=True)

	gradient_stops: list[GradientStop]
	direction: Literal["diagonal", "vertical", "horizontal"] = "diagonal"
	texture_line_spacing_px: int = 0
	texture_opacity: float = 0.0
	texture_color: str = "#000000"
	rules: list[HorizontalRule] = Field(default_factory=list)


class FontSizeMap(BaseModel):
	"""Pixel sizes per font size class."""
	model_config = ConfigDict(frozen=True)

	small: int = 12
	medium: int = 16
	large: int = 24

	def size_for(self, size_class: FontSizeClass) -> int:
		return getattr(self, FontSizeClass(size_class).value)


class FixedSize(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["fixed"] = "fixed"
	width: int
	height: int


class MatchSource(BaseModel):
	model_config = ConfigDict(frozen=True)

	kind: Literal["source"] = "source"


CanvasPolicy = Annotated[Union[FixedSize, MatchSource], Field(discriminator="kind")]


class Template(BaseModel):
	"""Theme plus the static fragments drawn before recognized text."""
	model_config = ConfigDict(frozen=True)

	name: str
	theme: ThemeSpec
	canvas: FixedSize | None = None
	fragments: list[TextFragment] = Field(default_factory=list)


class RecognitionResult(BaseModel):
	"""Fragments returned by a recognizer backend.

	``structured`` is False when the reply could not be parsed and a single
	fallback fragment carries the raw text.
	"""
	backend: Literal["qwen", "aliyun", "file"]
	image_path: str
	fragments: list[TextFragment]
	structured: bool = True
	raw_text: str = ""
	raw: dict = Field(default_factory=dict)
