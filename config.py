"""Application configuration management for the slip restyler CLI."""


import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from dotenv import load_dotenv

from schemas import FixedSize, FontSizeMap, MatchSource

ENV_FILE: Final[str] = ".env"
DEFAULT_REGION: Final[str] = "cn-hangzhou"
DEFAULT_QWEN_MODEL: Final[str] = "qwen-vl-max"
DEFAULT_LOG_LEVEL: Final[int] = logging.INFO
DEFAULT_CANVAS: Final[tuple[int, int]] = (800, 1200)


@dataclass(frozen=True)
class AliyunCredentials:
	"""Container for Aliyun credential details."""
	access_key_id: str
	access_key_secret: str
	region_id: str = DEFAULT_REGION


@dataclass(frozen=True)
class DashScopeCredentials:
	"""Container for DashScope credential details."""
	api_key: str
	model: str = DEFAULT_QWEN_MODEL


@dataclass(frozen=True)
class RenderSettings:
	"""Caller-side defaults handed to the slip processor."""
	template: str
	canvas_policy: FixedSize | MatchSource
	font_sizes: FontSizeMap
	foreground: str = "#ffffff"
	font_path: str | None = None


@dataclass(frozen=True)
class AppConfig:
	"""Aggregate configuration for the CLI runtime."""
	aliyun: AliyunCredentials | None
	dashscope: DashScopeCredentials | None
	render: RenderSettings
	output_dir: Path
	log_level: int = DEFAULT_LOG_LEVEL


def load_config() -> AppConfig:
	"""Load environment-based configuration values.

	Returns:
		AppConfig: Parsed configuration with credentials when available.
	"""
	load_dotenv(ENV_FILE)
	output_dir = Path(os.getenv("SLIP_OUTPUT_DIR", "outputs")).resolve()
	output_dir.mkdir(parents=True, exist_ok=True)

	return AppConfig(
		aliyun=_load_aliyun_credentials(),
		dashscope=_load_dashscope_credentials(),
		render=_load_render_settings(),
		output_dir=output_dir,
		log_level=_load_log_level(),
	)


def configure_logging(level: int = DEFAULT_LOG_LEVEL) -> None:
	"""Configure the root logger for the application."""
	logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def _load_aliyun_credentials() -> AliyunCredentials | None:
	"""Load Aliyun credentials from the environment if available."""
	access_key_id = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_ID")
	access_key_secret = os.getenv("ALIBABA_CLOUD_ACCESS_KEY_SECRET")
	region_id = os.getenv("ALIBABA_CLOUD_REGION", DEFAULT_REGION)
	if access_key_id and access_key_secret:
		return AliyunCredentials(
			access_key_id=access_key_id,
			access_key_secret=access_key_secret,
			region_id=region_id,
		)
	return None


def _load_dashscope_credentials() -> DashScopeCredentials | None:
	"""Load DashScope credentials from the environment if available."""
	api_key = os.getenv("DASHSCOPE_API_KEY")
	if api_key:
		return DashScopeCredentials(api_key=api_key, model=os.getenv("QWEN_VL_MODEL", DEFAULT_QWEN_MODEL))
	return None


def _load_render_settings() -> RenderSettings:
	"""Load template, canvas and font defaults from the environment."""
	if os.getenv("SLIP_CANVAS_POLICY", "fixed").lower() == "source":
		canvas_policy: FixedSize | MatchSource = MatchSource()
	else:
		canvas_policy = FixedSize(
			width=int(os.getenv("SLIP_CANVAS_WIDTH", DEFAULT_CANVAS[0])),
			height=int(os.getenv("SLIP_CANVAS_HEIGHT", DEFAULT_CANVAS[1])),
		)
	defaults = FontSizeMap()
	font_sizes = FontSizeMap(
		small=int(os.getenv("SLIP_FONT_SMALL", defaults.small)),
		medium=int(os.getenv("SLIP_FONT_MEDIUM", defaults.medium)),
		large=int(os.getenv("SLIP_FONT_LARGE", defaults.large)),
	)
	return RenderSettings(
		template=os.getenv("SLIP_TEMPLATE", "aurora"),
		canvas_policy=canvas_policy,
		font_sizes=font_sizes,
		foreground=os.getenv("SLIP_FOREGROUND", "#ffffff"),
		font_path=os.getenv("SLIP_FONT_PATH") or None,
	)


def _load_log_level() -> int:
	level = logging.getLevelName(os.getenv("SLIP_LOG_LEVEL", "INFO").upper())
	return level if isinstance(level, int) else DEFAULT_LOG_LEVEL
