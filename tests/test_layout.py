"""Tests for fragment placement and drawing."""
from __future__ import annotations

import pytest
from PIL import Image, ImageChops

from errors import ConfigError
from rendering.layout import LayoutCompositor, resolve_font_size, resolve_position
from schemas import FontSizeClass, FontSizeMap, TextFragment

BACKGROUND = (40, 20, 90)


def _background(width: int = 800, height: int = 1200) -> Image.Image:
	return Image.new("RGB", (width, height), BACKGROUND)


def _changed_box(before: Image.Image, after: Image.Image) -> tuple[int, int, int, int] | None:
	return ImageChops.difference(before, after).getbbox()


def test_position_corners_map_to_canvas_edges() -> None:
	"""0% maps to the origin and 100% to the canvas size."""
	assert resolve_position(TextFragment(text="a", x=0, y=0), 800, 1200) == (0, 0)
	assert resolve_position(TextFragment(text="a", x=100, y=100), 800, 1200) == (800, 1200)
	assert resolve_position(TextFragment(text="a", x=50, y=50), 800, 1200) == (400, 600)


def test_position_uses_target_canvas_size() -> None:
	"""The same fragment lands proportionally on differently sized canvases."""
	fragment = TextFragment(text="a", x=25, y=10)
	assert resolve_position(fragment, 400, 300) == (100, 30)
	assert resolve_position(fragment, 1600, 3000) == (400, 300)


@pytest.mark.parametrize(
	"sizes",
	[FontSizeMap(), FontSizeMap(small=8, medium=30, large=31), FontSizeMap(small=1, medium=2, large=200)],
)
def test_font_sizes_keep_class_order(sizes: FontSizeMap) -> None:
	"""small < medium < large under any valid mapping."""
	small = resolve_font_size(FontSizeClass.SMALL, sizes)
	medium = resolve_font_size(FontSizeClass.MEDIUM, sizes)
	large = resolve_font_size(FontSizeClass.LARGE, sizes)
	assert small < medium < large


def test_default_font_sizes() -> None:
	"""Default mapping is 12/16/24 pixels."""
	sizes = FontSizeMap()
	assert [resolve_font_size(c, sizes) for c in FontSizeClass] == [12, 16, 24]


@pytest.mark.parametrize("sizes", [FontSizeMap(small=16, medium=12, large=24), FontSizeMap(small=12, medium=12, large=24)])
def test_non_monotonic_font_sizes_are_rejected(sizes: FontSizeMap) -> None:
	"""The compositor refuses mappings that break size ordering."""
	with pytest.raises(ConfigError) as info:
		LayoutCompositor(font_sizes=sizes).composite(_background(), [TextFragment(text="x", x=1, y=1)])
	assert info.value.code == "InvalidFontSizes"


def test_empty_fragment_list_returns_identical_copy() -> None:
	"""No fragments means the background comes back untouched."""
	background = _background(64, 32)
	result = LayoutCompositor().composite(background, [])
	assert result is not background
	assert result.tobytes() == background.tobytes()


def test_text_is_centered_on_its_baseline() -> None:
	"""Default alignment centers text horizontally with y as baseline."""
	background = _background()
	fragment = TextFragment(text="TOTAL", x=50, y=50, fontSize="large")
	result = LayoutCompositor().composite(background, [fragment])
	box = _changed_box(background, result)
	assert box is not None
	left, top, right, bottom = box
	assert abs((left + right) / 2 - 400) <= 3
	assert top < 600 <= bottom + 2
	assert bottom <= 603


def test_background_is_not_mutated() -> None:
	"""Compositing works on a copy of the background."""
	background = _background(200, 100)
	snapshot = background.tobytes()
	LayoutCompositor().composite(background, [TextFragment(text="hello", x=50, y=50)])
	assert background.tobytes() == snapshot


def test_larger_class_draws_larger_text() -> None:
	"""A large fragment covers more pixels than a small one."""
	background = _background(400, 200)
	compositor = LayoutCompositor()
	small = _changed_box(background, compositor.composite(background, [TextFragment(text="AMOUNT", x=50, y=50, fontSize="small")]))
	large = _changed_box(background, compositor.composite(background, [TextFragment(text="AMOUNT", x=50, y=50, fontSize="large")]))
	assert small is not None and large is not None
	assert large[2] - large[0] > small[2] - small[0]


def test_out_of_bounds_fragments_are_clipped_not_rejected() -> None:
	"""Noisy positions outside the canvas still render without error."""
	background = _background(200, 100)
	fragments = [
		TextFragment(text="far away", x=150, y=-20),
		TextFragment(text="EDGE", x=100, y=100, fontSize="large"),
	]
	result = LayoutCompositor().composite(background, fragments)
	assert result.size == background.size
	box = _changed_box(background, result)
	assert box is not None
	assert box[2] <= 200 and box[3] <= 100


def test_alignment_override_anchors_text() -> None:
	"""Left-aligned text starts at x and right-aligned text ends at x."""
	background = _background(400, 200)
	compositor = LayoutCompositor()
	left = _changed_box(background, compositor.composite(background, [TextFragment(text="Fee", x=50, y=50, align="left")]))
	right = _changed_box(background, compositor.composite(background, [TextFragment(text="Fee", x=50, y=50, align="right")]))
	assert left is not None and right is not None
	assert left[0] >= 198
	assert right[2] <= 202


def test_foreground_color_is_uniform() -> None:
	"""All fragments use the configured foreground color."""
	background = Image.new("RGB", (300, 100), (0, 0, 0))
	compositor = LayoutCompositor(foreground="#ff0000")
	result = compositor.composite(background, [TextFragment(text="IIII", x=50, y=60, fontSize="large")])
	colors = {color for _, color in result.getcolors(maxcolors=100000)}
	assert max(red for red, _, _ in colors) >= 200
	assert all(green == 0 and blue == 0 for _, green, blue in colors)


def test_line_breaks_stack_below_first_baseline() -> None:
	"""Explicit newlines are drawn as separate lines going down."""
	background = _background(400, 400)
	compositor = LayoutCompositor()
	single = _changed_box(background, compositor.composite(background, [TextFragment(text="PAID", x=50, y=25)]))
	double = _changed_box(background, compositor.composite(background, [TextFragment(text="PAID\nPAID", x=50, y=25)]))
	assert single is not None and double is not None
	assert double[1] == single[1]
	assert double[3] >= single[3] + 16


def test_missing_font_file_is_a_config_error(tmp_path) -> None:
	"""An unreadable font path is reported as configuration error."""
	compositor = LayoutCompositor(font_path=str(tmp_path / "missing.ttf"))
	with pytest.raises(ConfigError) as info:
		compositor.composite(_background(50, 50), [TextFragment(text="x", x=50, y=50)])
	assert info.value.code == "FontUnavailable"
