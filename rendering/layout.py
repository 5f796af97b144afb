"""Layout compositor: draws text fragments onto a themed background."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from errors import ConfigError
from rendering.theme import parse_color
from schemas import FontSizeClass, FontSizeMap, TextFragment

ANCHORS: dict[str | None, str] = {
	None: "ms",
	"center": "ms",
	"left": "ls",
	"right": "rs",
}


def resolve_position(fragment: TextFragment, width: int, height: int) -> tuple[int, int]:
	"""Map percent coordinates onto the target canvas."""
	return round(fragment.x / 100 * width), round(fragment.y / 100 * height)


def validate_font_sizes(font_sizes: FontSizeMap) -> None:
	if not 0 < font_sizes.small < font_sizes.medium < font_sizes.large:
		raise ConfigError(
			"InvalidFontSizes",
			f"font sizes must satisfy 0 < small < medium < large, got "
			f"{font_sizes.small}/{font_sizes.medium}/{font_sizes.large}",
		)


def resolve_font_size(size_class: FontSizeClass, font_sizes: FontSizeMap) -> int:
	validate_font_sizes(font_sizes)
	return font_sizes.size_for(size_class)


@dataclass
class LayoutCompositor:
	"""Draws fragments in list order with a single foreground color."""

	font_sizes: FontSizeMap = field(default_factory=FontSizeMap)
	foreground: str = "#ffffff"
	font_path: str | None = None
	line_spacing: float = 1.25

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def composite(self, background: Image.Image, fragments: Sequence[TextFragment]) -> Image.Image:
		validate_font_sizes(self.font_sizes)
		fill = parse_color(self.foreground)
		canvas = background.copy()
		if not fragments:
			return canvas

		draw = ImageDraw.Draw(canvas)
		fonts: dict[int, ImageFont.FreeTypeFont | ImageFont.ImageFont] = {}
		width, height = canvas.size
		for fragment in fragments:
			px, py = resolve_position(fragment, width, height)
			size = self.font_sizes.size_for(fragment.font_size_class)
			if size not in fonts:
				fonts[size] = self._load_font(size)
			anchor = ANCHORS[fragment.align]
			# Explicit line breaks stack downwards from the first baseline.
			for index, line in enumerate(fragment.text.split("\n")):
				if not line.strip():
					continue
				baseline = py + round(index * size * self.line_spacing)
				draw.text((px, baseline), line, font=fonts[size], fill=fill, anchor=anchor)
		self._logger.debug("Composited %s fragments onto %sx%s canvas", len(fragments), width, height)
		return canvas

	def _load_font(self, size: int) -> ImageFont.FreeTypeFont | ImageFont.ImageFont:
		try:
			if not self.font_path:
				return ImageFont.load_default(size=size)
			return ImageFont.truetype(self.font_path, size)
		except (OSError, ValueError) as exc:
			source = self.font_path or "default font"
			raise ConfigError("FontUnavailable", f"cannot load {source} at {size}px: {exc}") from exc
