"""Themed background synthesis: linear gradient plus scan-line texture."""
from __future__ import annotations

import logging

import numpy as np
from PIL import Image, ImageColor

from errors import ConfigError
from schemas import CanvasSpec, ThemeSpec

logger = logging.getLogger(__name__)

RGB = tuple[int, int, int]


def parse_color(value: str) -> RGB:
	"""Parse any Pillow color string into an RGB triple."""
	try:
		rgb = ImageColor.getrgb(value)
	except (ValueError, AttributeError) as exc:
		raise ConfigError("InvalidColor", f"unrecognized color {value!r}") from exc
	return rgb[0], rgb[1], rgb[2]


def validate_canvas(spec: CanvasSpec) -> None:
	if spec.width <= 0 or spec.height <= 0:
		raise ConfigError("InvalidCanvas", f"canvas must have positive size, got {spec.width}x{spec.height}")


def resolve_stops(theme: ThemeSpec) -> list[tuple[float, RGB]]:
	"""Clamp offsets to [0, 1], sort them ascending and parse colors."""
	if len(theme.gradient_stops) < 2:
		raise ConfigError(
			"InsufficientGradientStops",
			f"need at least 2 gradient stops, got {len(theme.gradient_stops)}",
		)
	stops = [(min(max(stop.offset, 0.0), 1.0), parse_color(stop.color)) for stop in theme.gradient_stops]
	return sorted(stops, key=lambda stop: stop[0])


def validate_theme(theme: ThemeSpec) -> None:
	resolve_stops(theme)
	if theme.texture_line_spacing_px < 0:
		raise ConfigError("InvalidTexture", "texture line spacing must be >= 0")
	if not 0.0 <= theme.texture_opacity <= 1.0:
		raise ConfigError("InvalidTexture", "texture opacity must be within [0, 1]")
	parse_color(theme.texture_color)
	for rule in theme.rules:
		if not 0.0 <= rule.opacity <= 1.0:
			raise ConfigError("InvalidRule", "rule opacity must be within [0, 1]")
		parse_color(rule.color)


def render_background(spec: CanvasSpec, theme: ThemeSpec) -> Image.Image:
	"""Render a ``spec.width`` x ``spec.height`` RGB background for ``theme``.

	The gradient axis follows canvas ``createLinearGradient`` semantics: the
	diagonal runs from the top-left corner to the bottom-right corner and each
	pixel takes the color at the projection of its centre onto that axis.
	Output depends only on the arguments.
	"""
	validate_canvas(spec)
	validate_theme(theme)
	stops = resolve_stops(theme)

	pixels = _gradient(spec.width, spec.height, theme.direction, stops)
	if theme.texture_opacity > 0 and theme.texture_line_spacing_px > 0:
		color = np.asarray(parse_color(theme.texture_color), dtype=np.float64)
		rows = pixels[:: theme.texture_line_spacing_px]
		pixels[:: theme.texture_line_spacing_px] = rows * (1.0 - theme.texture_opacity) + color * theme.texture_opacity
	for rule in theme.rules:
		_blend_rule(pixels, rule.y, rule.inset_px, parse_color(rule.color), rule.opacity)

	logger.debug(
		"Rendered %sx%s %s background with %s stops",
		spec.width,
		spec.height,
		theme.direction,
		len(stops),
	)
	return Image.fromarray(np.rint(pixels).astype(np.uint8))


def _gradient(width: int, height: int, direction: str, stops: list[tuple[float, RGB]]) -> np.ndarray:
	xs = np.arange(width, dtype=np.float64) + 0.5
	ys = np.arange(height, dtype=np.float64) + 0.5
	if direction == "horizontal":
		t = np.broadcast_to(xs[np.newaxis, :] / width, (height, width))
	elif direction == "vertical":
		t = np.broadcast_to(ys[:, np.newaxis] / height, (height, width))
	else:
		t = (xs[np.newaxis, :] * width + ys[:, np.newaxis] * height) / float(width * width + height * height)

	offsets = np.array([offset for offset, _ in stops], dtype=np.float64)
	colors = np.array([color for _, color in stops], dtype=np.float64)
	pixels = np.empty((height, width, 3), dtype=np.float64)
	for channel in range(3):
		pixels[..., channel] = np.interp(t, offsets, colors[:, channel])
	return pixels


def _blend_rule(pixels: np.ndarray, y: float, inset_px: int, color: RGB, opacity: float) -> None:
	height, width = pixels.shape[:2]
	row = round(y / 100 * height)
	start = max(inset_px, 0)
	stop = width - start
	if not 0 <= row < height or start >= stop:
		return
	segment = pixels[row, start:stop]
	pixels[row, start:stop] = segment * (1.0 - opacity) + np.asarray(color, dtype=np.float64) * opacity
