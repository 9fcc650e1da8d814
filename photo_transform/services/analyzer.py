from __future__ import annotations

import asyncio
from typing import Protocol, runtime_checkable

from google import genai
from google.genai import types
from google.oauth2 import service_account
from loguru import logger

from ..exceptions import ConfigurationError, ServiceError
from ..settings import Settings, get_settings
from ..shard import constants as C
from ..utils.error_helpers import augment_with_hint, classify_service_error

SCOPES = [
    "https://www.googleapis.com/auth/generative-language",
    "https://www.googleapis.com/auth/cloud-platform",
]


@runtime_checkable
class VisionAnalyzer(Protocol):
    """Vision-language model collaborator.

    Returns the raw response text, which may or may not contain JSON. Failures
    raise ``ServiceError`` with a classified reason.
    """

    async def analyze(self, image_bytes: bytes, prompt: str, safety: dict[str, str] | None = None) -> str: ...


class GeminiAnalyzer:
    """Gemini / Vertex AI implementation of ``VisionAnalyzer``.

    Routes to Vertex AI when a project, location and service account file are
    configured, otherwise to the Gemini Developer API.
    """

    def __init__(self, settings: Settings | None = None, client: genai.Client | None = None) -> None:
        self.settings = settings or get_settings()
        self._client = client

    def _genai_client(self) -> genai.Client:
        if self._client is not None:
            return self._client
        s = self.settings
        if s.use_vertex:
            credentials = service_account.Credentials.from_service_account_file(s.vertex_credentials_path, scopes=SCOPES)
            self._client = genai.Client(vertexai=True, project=s.vertex_project, location=s.vertex_location, credentials=credentials)
        elif s.gemini_api_key:
            self._client = genai.Client(api_key=s.gemini_api_key)
        else:
            raise ConfigurationError(
                "No model credentials configured",
                user_message="GEMINI_API_KEY (or VERTEX_PROJECT, VERTEX_LOCATION and VERTEX_CREDENTIALS_PATH) must be set to analyze images.",
            )
        return self._client

    def _config(self, safety: dict[str, str] | None) -> types.GenerateContentConfig:
        s = self.settings
        thresholds = s.safety_settings if safety is None else safety
        return types.GenerateContentConfig(
            temperature=s.temperature,
            top_k=s.top_k,
            top_p=s.top_p,
            max_output_tokens=s.max_output_tokens,
            safety_settings=[types.SafetySetting(category=category, threshold=threshold) for category, threshold in thresholds.items()],
        )

    @staticmethod
    def _response_text(resp: types.GenerateContentResponse) -> str:
        text = resp.text
        if not text:
            raise ServiceError("Model returned an empty response", user_message="The model returned no analysis for this image.")
        return text

    async def analyze(self, image_bytes: bytes, prompt: str, safety: dict[str, str] | None = None) -> str:
        client = self._genai_client()
        contents = [types.Part.from_bytes(data=image_bytes, mime_type=C.JPEG_MIME), prompt]
        try:
            resp = await asyncio.wait_for(
                client.aio.models.generate_content(model=self.settings.analysis_model, contents=contents, config=self._config(safety)),  # type: ignore[arg-type]
                timeout=self.settings.request_timeout_seconds,
            )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            reason = classify_service_error(e)
            logger.warning(f"Analysis call failed ({reason.value}): {e}")
            raise ServiceError(f"Analysis request failed: {e}", reason, user_message=augment_with_hint(f"Image analysis failed: {e}", reason)) from e
        return self._response_text(resp)


__all__ = ["VisionAnalyzer", "GeminiAnalyzer", "SCOPES"]
