"""JSON persistence utilities for recognized fragments."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter

from rendering.encoder import build_output_path
from schemas import TextFragment

FRAGMENT_LIST = TypeAdapter(list[TextFragment])

def dump_json(data: dict[str, Any], output_dir: Path, name_hint: str) -> Path:
	"""Persist a dictionary as formatted JSON in the output directory."""
	output_dir.mkdir(parents=True, exist_ok=True)
	path = build_output_path(output_dir, name_hint, suffix=".json")
	path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
	return path

def load_fragments(path: Path) -> list[TextFragment]:
	"""Load a fragment list, either a bare array or ``{"textElements": [...]}``."""
	data = json.loads(path.read_text(encoding="utf-8"))
	if isinstance(data, dict):
		data = data.get("textElements", data.get("fragments", []))
	return FRAGMENT_LIST.validate_python(data)
