"""Tests for PNG encoding and export."""
from __future__ import annotations

import io

import pytest
from PIL import Image

from errors import EncodeError
from rendering.encoder import encode_png, save_png
from rendering.layout import LayoutCompositor
from rendering.theme import render_background
from schemas import CanvasSpec, GradientStop, TextFragment, ThemeSpec

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

THEME = ThemeSpec(gradient_stops=[GradientStop(offset=0, color="#a8305a"), GradientStop(offset=1, color="#7b3897")])


def test_encoded_composite_decodes_to_same_size() -> None:
	"""Decoding the PNG yields the buffer's pixel dimensions and pixels."""
	background = render_background(CanvasSpec(width=160, height=240), THEME)
	composed = LayoutCompositor().composite(background, [TextFragment(text="Ref 0042", x=50, y=30)])
	data = encode_png(composed)
	assert data.startswith(PNG_SIGNATURE)
	with Image.open(io.BytesIO(data)) as decoded:
		assert decoded.format == "PNG"
		assert decoded.size == (160, 240)
		assert decoded.convert("RGB").tobytes() == composed.tobytes()


def test_encoding_is_deterministic() -> None:
	"""The same buffer always encodes to the same bytes."""
	image = render_background(CanvasSpec(width=50, height=40), THEME)
	assert encode_png(image) == encode_png(image)


@pytest.mark.parametrize("size", [(0, 0), (0, 10), (10, 0)])
def test_zero_area_buffer_is_rejected(size: tuple[int, int]) -> None:
	"""Zero-area images cannot be encoded."""
	with pytest.raises(EncodeError):
		encode_png(Image.new("RGB", size))


def test_save_png_writes_timestamped_file(tmp_path) -> None:
	"""Exported files land in the output directory with a .png suffix."""
	data = encode_png(Image.new("RGB", (4, 4), "white"))
	path = save_png(data, tmp_path / "out", "processed-slip")
	assert path.parent == tmp_path / "out"
	assert path.name.startswith("processed-slip_")
	assert path.suffix == ".png"
	assert path.read_bytes() == data
