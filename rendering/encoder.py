"""PNG encoding and export of composited slips."""
from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path

from PIL import Image

from errors import EncodeError

DATE_PATTERN = "%Y%m%d_%H%M%S"


def encode_png(image: Image.Image) -> bytes:
	"""Serialize ``image`` losslessly as PNG at its native resolution."""
	width, height = image.size
	if width <= 0 or height <= 0:
		raise EncodeError(f"Cannot encode zero-area image ({width}x{height})")
	buffer = io.BytesIO()
	try:
		image.save(buffer, format="PNG")
	except (OSError, ValueError) as exc:
		raise EncodeError(f"PNG encoding failed: {exc}") from exc
	return buffer.getvalue()


def build_output_path(output_dir: Path, name_hint: str, suffix: str = ".png") -> Path:
	"""Compose a timestamped output path within the output directory."""
	timestamp = datetime.now().strftime(DATE_PATTERN)
	return output_dir.joinpath(f"{name_hint}_{timestamp}{suffix}")


def save_png(data: bytes, output_dir: Path, name_hint: str) -> Path:
	output_dir.mkdir(parents=True, exist_ok=True)
	path = build_output_path(output_dir, name_hint)
	path.write_bytes(data)
	return path
