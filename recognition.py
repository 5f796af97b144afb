"""Turn recognizer output into text fragments.

Vision models are asked for a JSON array of ``{text, x, y, fontSize}``
objects but frequently wrap it in markdown or answer in free text. Parsing
failures never reach the compositor: the whole reply becomes one centered
fallback fragment instead.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Sequence

from pydantic import ValidationError

from schemas import FontSizeClass, TextFragment

logger = logging.getLogger(__name__)

LAYOUT_PROMPT = (
	"Extract all text from this image along with approximate positions. "
	"Return a JSON array with objects containing 'text', 'x' (0-100 representing % from left), "
	"'y' (0-100 representing % from top), 'fontSize' (small/medium/large). "
	"Be precise with positions to maintain the original layout."
)

FENCED_JSON = re.compile(r"```json\s*([\s\S]*?)\s*```")
BARE_ARRAY = re.compile(r"\[[\s\S]*\]")

# Polygon height as a share of image height.
SMALL_HEIGHT_RATIO = 0.025
MEDIUM_HEIGHT_RATIO = 0.045


def fallback_fragment(text: str) -> TextFragment:
	return TextFragment(text=text, x=50, y=50, font_size_class=FontSizeClass.MEDIUM)


def extract_json_payload(reply: str) -> str:
	match = FENCED_JSON.search(reply)
	if match:
		return match.group(1)
	match = BARE_ARRAY.search(reply)
	if match:
		return match.group(0)
	return reply


def parse_recognizer_reply(reply: str) -> tuple[list[TextFragment], bool]:
	"""Parse a model reply into fragments.

	Returns:
		tuple: The fragments and whether they came from structured output.
	"""
	try:
		data: Any = json.loads(extract_json_payload(reply))
		if not isinstance(data, list) or not data:
			raise ValueError("expected a non-empty JSON array")
		fragments = [TextFragment.model_validate(item) for item in data]
	except (ValueError, ValidationError) as exc:
		logger.warning("Failed to parse recognizer reply, using raw text: %s", exc)
		return [fallback_fragment(reply.strip())], False
	return fragments, True


def size_class_for_height(height: float, image_height: float) -> FontSizeClass:
	ratio = height / image_height if image_height > 0 else 0.0
	if ratio < SMALL_HEIGHT_RATIO:
		return FontSizeClass.SMALL
	if ratio < MEDIUM_HEIGHT_RATIO:
		return FontSizeClass.MEDIUM
	return FontSizeClass.LARGE


def fragment_from_polygon(
	text: str,
	polygon: Sequence[tuple[float, float]],
	image_size: tuple[int, int],
) -> TextFragment:
	"""Convert a pixel polygon into a percent-positioned fragment.

	The fragment is centered horizontally on the polygon and sits on its
	bottom edge, which approximates the baseline.
	"""
	width, height = image_size
	xs = [point[0] for point in polygon]
	ys = [point[1] for point in polygon]
	center_x = (min(xs) + max(xs)) / 2
	return TextFragment(
		text=text,
		x=center_x / width * 100,
		y=max(ys) / height * 100,
		font_size_class=size_class_for_height(max(ys) - min(ys), height),
	)
