"""Error taxonomy for slip rendering."""
from __future__ import annotations


class ConfigError(ValueError):
	"""Invalid theme, canvas, font or template configuration."""

	def __init__(self, code: str, message: str | None = None) -> None:
		self.code = code
		super().__init__(f"{code}: {message}" if message else code)


class EncodeError(RuntimeError):
	"""Raised when a raster buffer cannot be serialized."""


class ProcessingError(Exception):
	"""Wraps a failure from one stage of the render pipeline."""

	def __init__(self, stage: str, cause: Exception) -> None:
		self.stage = stage
		self.cause = cause
		super().__init__(f"{stage} failed: {cause}")
