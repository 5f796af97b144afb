"""Orchestrates background rendering, compositing and encoding."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from PIL import Image

from errors import ConfigError, EncodeError, ProcessingError
from rendering.encoder import encode_png
from rendering.layout import LayoutCompositor, validate_font_sizes
from rendering.theme import render_background, validate_canvas, validate_theme
from schemas import CanvasPolicy, CanvasSpec, FixedSize, FontSizeMap, TextFragment, ThemeSpec


@dataclass(frozen=True)
class ProcessingOutcome:
	"""Either PNG bytes or the error that prevented producing them."""
	png: bytes | None = None
	error: ProcessingError | None = None

	@property
	def ok(self) -> bool:
		return self.error is None and self.png is not None

	def unwrap(self) -> bytes:
		if self.error is not None:
			raise self.error
		if self.png is None:
			raise ProcessingError("encode", EncodeError("no output produced"))
		return self.png


def resolve_canvas(source: Image.Image, policy: CanvasPolicy) -> CanvasSpec:
	if isinstance(policy, FixedSize):
		return CanvasSpec(width=policy.width, height=policy.height)
	width, height = source.size
	return CanvasSpec(width=width, height=height)


@dataclass
class SlipProcessor:
	"""Turns a source photo and its fragments into a themed PNG.

	The processor keeps only immutable configuration, so one instance can
	serve concurrent requests.
	"""

	theme: ThemeSpec
	font_sizes: FontSizeMap = field(default_factory=FontSizeMap)
	foreground: str = "#ffffff"
	font_path: str | None = None

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._compositor = LayoutCompositor(
			font_sizes=self.font_sizes,
			foreground=self.foreground,
			font_path=self.font_path,
		)

	def process(
		self,
		source: Image.Image,
		fragments: Sequence[TextFragment],
		canvas_policy: CanvasPolicy,
	) -> ProcessingOutcome:
		stage = "configure"
		try:
			spec = resolve_canvas(source, canvas_policy)
			validate_canvas(spec)
			validate_theme(self.theme)
			validate_font_sizes(self.font_sizes)

			stage = "render"
			self._logger.debug("Rendering %sx%s background", spec.width, spec.height)
			background = render_background(spec, self.theme)

			stage = "composite"
			composed = self._compositor.composite(background, fragments)

			stage = "encode"
			png = encode_png(composed)
		except (ConfigError, EncodeError) as exc:
			self._logger.warning("Slip processing failed during %s: %s", stage, exc)
			return ProcessingOutcome(error=ProcessingError(stage, exc))

		self._logger.info(
			"Rendered %s fragments onto %sx%s canvas (%s bytes)",
			len(fragments),
			spec.width,
			spec.height,
			len(png),
		)
		return ProcessingOutcome(png=png)
