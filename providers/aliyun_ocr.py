"""Aliyun OCR recognizer converting word polygons into text fragments."""


import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from config import AliyunCredentials
from recognition import fragment_from_polygon
from schemas import RecognitionResult, TextFragment
from utils.image_io import read_image_base64, read_image_size

try:
	from alibabacloud_ocr_api20210707.client import Client as OcrClient
	from alibabacloud_ocr_api20210707 import models as ocr_models
	from alibabacloud_tea_openapi import models as open_api_models
	from alibabacloud_tea_util import models as util_models
except ImportError:
	OcrClient = None  # type: ignore[assignment]
	ocr_models = None  # type: ignore[assignment]
	open_api_models = None  # type: ignore[assignment]
	util_models = None  # type: ignore[assignment]

JsonDict = dict[str, Any]
Polygon = list[tuple[float, float]]


@dataclass
class AliyunOcrClient:
	"""Client wrapper around the Aliyun OCR API."""

	credentials: AliyunCredentials
	retries: int = 3
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)
		self._client = self._create_client()

	def recognize(self, image_path: Path, min_conf: float, alltext_type: str | None = None) -> RecognitionResult:
		payload = read_image_base64(image_path)
		if alltext_type:
			request = self._build_all_text_request(payload, alltext_type)
			response = self._execute(lambda: self._invoke_client("recognize_all_text", request))
		else:
			request = self._build_advanced_request(payload)
			response = self._execute(lambda: self._invoke_client("recognize_advanced", request))

		raw = self._to_dict(response)
		fragments = self.parse_fragments(raw, read_image_size(image_path), min_conf)
		if not fragments:
			raise RuntimeError("No text extracted from image")
		return RecognitionResult(
			backend="aliyun",
			image_path=str(image_path),
			fragments=fragments,
			raw_text="\n".join(fragment.text for fragment in fragments),
			raw=raw,
		)

	def parse_fragments(self, payload: JsonDict, image_size: tuple[int, int], min_conf: float) -> list[TextFragment]:
		body = self._extract_body(payload)
		fragments: list[TextFragment] = []
		for item in self._collect_candidates(body):
			text = self._extract_text(item)
			polygon = self._extract_polygon(item)
			if not text or not polygon:
				continue
			confidence = self._extract_confidence(item)
			if confidence is not None and confidence < min_conf:
				continue
			fragments.append(fragment_from_polygon(text, polygon, image_size))
		self._logger.debug("Parsed %s fragments from Aliyun response", len(fragments))
		return fragments

	def _create_client(self) -> Any:
		if not all([OcrClient, open_api_models]):
			raise ImportError("Aliyun OCR SDK is not installed. Please install alibabacloud-ocr_api20210707.")
		config = open_api_models.Config(
			access_key_id=self.credentials.access_key_id,
			access_key_secret=self.credentials.access_key_secret,
			region_id=self.credentials.region_id,
		)
		return OcrClient(config)

	def _build_advanced_request(self, body: str):
		if not ocr_models:
			raise ImportError("Aliyun OCR models unavailable. Install alibabacloud-ocr_api20210707.")
		return ocr_models.RecognizeAdvancedRequest(body=body)

	def _build_all_text_request(self, body: str, alltext_type: str):
		if not ocr_models:
			raise ImportError("Aliyun OCR models unavailable. Install alibabacloud-ocr_api20210707.")
		return ocr_models.RecognizeAllTextRequest(body=body, type=alltext_type)

	def _invoke_client(self, method_base: str, request: Any):
		method = getattr(self._client, method_base, None)
		if callable(method):
			return method(request)
		with_options = getattr(self._client, f"{method_base}_with_options", None)
		if callable(with_options):
			runtime = util_models.RuntimeOptions() if util_models else None
			return with_options(request, runtime, {})
		raise AttributeError(f"Aliyun client missing method for {method_base}")

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				return call()
			except Exception as exc:  # noqa: BLE001
				wait = self.backoff ** attempt
				self._logger.warning("Aliyun OCR call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise
				time.sleep(wait)

	def _to_dict(self, response: Any) -> JsonDict:
		if hasattr(response, "to_map"):
			return response.to_map()
		if hasattr(response, "body") and hasattr(response.body, "to_map"):
			return {"body": response.body.to_map()}
		if isinstance(response, dict):
			return response
		return {"body": response} if response is not None else {}

	def _extract_body(self, payload: JsonDict) -> Any:
		body = payload.get("body") if isinstance(payload, dict) else None
		if not isinstance(body, dict):
			return payload
		data = body.get("Data", body)
		# RecognizeAdvanced returns its result as a JSON string.
		if isinstance(data, str):
			try:
				return json.loads(data)
			except ValueError:
				self._logger.warning("Aliyun response Data is not valid JSON")
				return {}
		return data

	def _collect_candidates(self, data: Any) -> list[JsonDict]:
		if not isinstance(data, dict):
			return []
		candidates: list[JsonDict] = []
		for key in ("prism_wordsInfo", "Results", "PrismWordsInfo", "Lines", "Blocks"):
			items = data.get(key)
			if isinstance(items, list):
				candidates.extend(item for item in items if isinstance(item, dict))
		return candidates

	def _extract_text(self, item: JsonDict) -> str:
		for key in ("word", "Text", "Word", "Content", "text"):
			value = item.get(key)
			if isinstance(value, str) and value.strip():
				return value.strip()
		return ""

	def _extract_confidence(self, item: JsonDict) -> float | None:
		for key in ("prob", "Score", "Confidence", "Prob"):
			value = item.get(key)
			if isinstance(value, (int, float)):
				# Aliyun reports word probability on a 0-100 scale.
				return float(value) / 100 if value > 1 else float(value)
		return None

	def _extract_polygon(self, item: JsonDict) -> Polygon | None:
		points = item.get("pos") or item.get("Polygon") or item.get("Quad") or item.get("Points")
		if isinstance(points, list) and points and isinstance(points[0], dict):
			return [(float(point.get("x", 0.0)), float(point.get("y", 0.0))) for point in points]
		if isinstance(points, list) and points and isinstance(points[0], (list, tuple)):
			return [(float(point[0]), float(point[1])) for point in points]
		if isinstance(points, list) and len(points) >= 4 and all(isinstance(val, (int, float)) for val in points):
			iterator = iter(points)
			return [(float(a), float(b)) for a, b in zip(iterator, iterator)]
		return None
