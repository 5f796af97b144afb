"""DashScope Qwen-VL recognizer returning positioned text fragments."""


import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from config import DashScopeCredentials
from recognition import LAYOUT_PROMPT, parse_recognizer_reply
from schemas import RecognitionResult
from utils.image_io import image_data_uri

try:
	from dashscope import MultiModalConversation
except ImportError:
	MultiModalConversation = None  # type: ignore[assignment]


@dataclass
class QwenVisionClient:
	"""Client wrapper asking a Qwen-VL model for the slip's text layout."""

	credentials: DashScopeCredentials
	retries: int = 3
	backoff: float = 1.5

	def __post_init__(self) -> None:
		self._logger = logging.getLogger(self.__class__.__name__)

	def recognize(self, image_path: Path) -> RecognitionResult:
		if MultiModalConversation is None:
			raise ImportError("DashScope SDK is not installed. Please install dashscope.")
		messages = self._build_messages(image_path)
		response = self._execute(lambda: self._call_service(messages))
		raw = self._serialize_response(response)
		reply = self._extract_reply(response)
		if not reply:
			raise RuntimeError("No text extracted from image")
		fragments, structured = parse_recognizer_reply(reply)
		self._logger.info("Qwen-VL returned %s fragments (structured=%s)", len(fragments), structured)
		return RecognitionResult(
			backend="qwen",
			image_path=str(image_path),
			fragments=fragments,
			structured=structured,
			raw_text=reply,
			raw=raw,
		)

	def _call_service(self, messages: list[dict[str, Any]]):
		return MultiModalConversation.call(
			model=self.credentials.model,
			messages=messages,
			api_key=self.credentials.api_key,
		)

	def _build_messages(self, path: Path) -> list[dict[str, Any]]:
		return [
			{
				"role": "user",
				"content": [
					{"image": image_data_uri(path)},
					{"text": LAYOUT_PROMPT},
				],
			}
		]

	def _execute(self, call: Callable[[], Any]):
		for attempt in range(1, self.retries + 1):
			try:
				response = call()
				if getattr(response, "status_code", 500) != 200:
					raise RuntimeError(getattr(response, "message", "Qwen-VL request failed."))
				return response
			except Exception as exc:  # noqa: BLE001
				wait = self.backoff ** attempt
				self._logger.warning("Qwen-VL call failed (attempt %s/%s): %s", attempt, self.retries, exc)
				if attempt == self.retries:
					raise
				time.sleep(wait)

	def _serialize_response(self, response: Any) -> dict[str, Any]:
		raw = {
			"status_code": getattr(response, "status_code", None),
			"request_id": getattr(response, "request_id", None),
			"code": getattr(response, "code", None),
			"message": getattr(response, "message", None),
			"usage": getattr(response, "usage", None),
		}
		if hasattr(response, "to_dict"):
			raw.update(response.to_dict())  # type: ignore[arg-type]
		return raw

	def _extract_reply(self, response: Any) -> str:
		output = getattr(response, "output", None)
		choices = getattr(output, "choices", None) or []
		if not choices:
			return ""
		message = getattr(choices[0], "message", None)
		content = getattr(message, "content", None)
		if isinstance(content, str):
			return content.strip()
		parts: list[str] = []
		for item in content or []:
			if isinstance(item, dict) and isinstance(item.get("text"), str):
				parts.append(item["text"])
		return "\n".join(parts).strip()
