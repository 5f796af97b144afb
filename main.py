"""Command-line interface for restyling payment slips."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from config import AppConfig, RenderSettings, configure_logging, load_config
from providers.aliyun_ocr import AliyunOcrClient
from providers.qwen_vision import QwenVisionClient
from rendering.encoder import save_png
from rendering.pipeline import SlipProcessor
from schemas import FixedSize, MatchSource, RecognitionResult, Template
from templates import TEMPLATES, get_template
from utils.image_io import ensure_image_path, load_image
from utils.io_json import dump_json, load_fragments


def parse_arguments(argv: list[str] | None = None) -> argparse.Namespace:
	"""Parse command-line arguments."""
	parser = argparse.ArgumentParser(description="Re-render a payment slip on a themed background")
	parser.add_argument("--image", required=True, help="Path to the slip photo")
	parser.add_argument("--backend", choices=["qwen", "aliyun", "none"], default="qwen", help="Text recognizer to use")
	parser.add_argument("--fragments", default="", help="JSON file with fragments; skips recognition")
	parser.add_argument("--template", choices=sorted(TEMPLATES), default=None, help="Theme template to render")
	parser.add_argument("--canvas", choices=["fixed", "source"], default=None, help="Canvas sizing policy")
	parser.add_argument("--width", type=int, default=None, help="Canvas width for the fixed policy")
	parser.add_argument("--height", type=int, default=None, help="Canvas height for the fixed policy")
	parser.add_argument("--min_conf", type=float, default=0.5, help="Minimum confidence for Aliyun words")
	parser.add_argument("--outdir", default=None, help="Directory to store the PNG and fragment JSON")
	parser.add_argument(
		"--alltext_type",
		default="",
		help="Aliyun RecognizeAllText type (use to switch from RecognizeAdvanced)",
	)
	return parser.parse_args(argv)


def resolve_canvas_policy(
	args: argparse.Namespace,
	render: RenderSettings,
	template: Template,
) -> FixedSize | MatchSource:
	"""Pick the canvas policy: CLI flags, then the template, then config."""
	if args.canvas == "source":
		return MatchSource()
	if args.canvas == "fixed" or args.width or args.height:
		base = render.canvas_policy if isinstance(render.canvas_policy, FixedSize) else template.canvas
		width = args.width or (base.width if base else 800)
		height = args.height or (base.height if base else 1200)
		return FixedSize(width=width, height=height)
	return template.canvas or render.canvas_policy


def recognize(args: argparse.Namespace, config: AppConfig, image_path: Path) -> RecognitionResult:
	"""Obtain fragments from a file or from the selected recognizer backend."""
	if args.fragments:
		fragments = load_fragments(Path(args.fragments).expanduser())
		return RecognitionResult(backend="file", image_path=str(image_path), fragments=fragments)
	if args.backend == "none":
		return RecognitionResult(backend="file", image_path=str(image_path), fragments=[])
	if args.backend == "aliyun":
		if not config.aliyun:
			raise RuntimeError("Aliyun credentials are not configured.")
		client = AliyunOcrClient(config.aliyun)
		return client.recognize(image_path=image_path, min_conf=args.min_conf, alltext_type=args.alltext_type or None)
	if not config.dashscope:
		raise RuntimeError("DashScope API key is not configured.")
	return QwenVisionClient(config.dashscope).recognize(image_path=image_path)


def run(args: argparse.Namespace, config: AppConfig) -> dict[str, Any]:
	"""Recognize, render and export one slip."""
	image_path = ensure_image_path(args.image)
	output_dir = Path(args.outdir).expanduser().resolve() if args.outdir else config.output_dir
	template = get_template(args.template or config.render.template)
	source = load_image(image_path)

	recognition = recognize(args, config, image_path)
	if not recognition.structured:
		logging.warning("Recognizer reply was not structured; rendering raw text as one fragment")
	fragments = [*template.fragments, *recognition.fragments]

	processor = SlipProcessor(
		theme=template.theme,
		font_sizes=config.render.font_sizes,
		foreground=config.render.foreground,
		font_path=config.render.font_path,
	)
	canvas_policy = resolve_canvas_policy(args, config.render, template)
	png = processor.process(source, fragments, canvas_policy).unwrap()

	name_hint = f"processed-slip_{template.name}"
	image_output = save_png(png, output_dir, name_hint)
	summary = {
		"image": str(image_path),
		"backend": recognition.backend,
		"template": template.name,
		"structured": recognition.structured,
		"fragments": [fragment.model_dump(mode="json") for fragment in recognition.fragments],
		"output": str(image_output),
	}
	json_output = dump_json(summary, output_dir, name_hint)
	logging.info("Saved restyled slip to %s", image_output)
	logging.info("Saved fragments to %s", json_output)
	return summary


def main(argv: list[str] | None = None) -> int:
	"""Entry point for the CLI application."""
	config = load_config()
	configure_logging(config.log_level)
	try:
		args = parse_arguments(argv)
		run(args, config)
	except Exception as exc:  # noqa: BLE001
		logging.exception("Slip processing failed: %s", exc)
		return 1
	return 0


if __name__ == "__main__":
	raise SystemExit(main())
