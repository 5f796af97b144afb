"""Utility helpers for working with input images."""

import base64
import mimetypes
from pathlib import Path

from PIL import Image

def ensure_image_path(image: str | Path) -> Path:
	"""Validate that the provided path exists and points to a file."""
	path = Path(image).expanduser().resolve()
	if not path.exists():
		raise FileNotFoundError(f"Image path not found: {path}")
	if not path.is_file():
		raise ValueError(f"Image path is not a file: {path}")
	return path

def read_image_base64(path: Path) -> str:
	"""Read image bytes and encode them as base64 for HTTP payloads."""
	data = path.read_bytes()
	return base64.b64encode(data).decode("utf-8")

def image_data_uri(path: Path) -> str:
	"""Build a ``data:`` URI accepted by vision chat APIs."""
	mime_type = mimetypes.guess_type(path.name)[0] or "image/png"
	return f"data:{mime_type};base64,{read_image_base64(path)}"

def load_image(path: Path) -> Image.Image:
	"""Open an image and load its pixels, rejecting non-image files."""
	if not (mimetypes.guess_type(path.name)[0] or "image/").startswith("image/"):
		raise ValueError(f"Not an image file: {path}")
	with Image.open(path) as image:
		image.load()
		return image.copy()

def read_image_size(path: Path) -> tuple[int, int]:
	"""Return the natural (width, height) of an image file."""
	with Image.open(path) as image:
		return image.size
