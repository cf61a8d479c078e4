import time
from typing import Any, Optional

import vertexai
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions
from vertexai.generative_models import Content, GenerationConfig, GenerativeModel, Part

from mindshift_assist.domain.errors import (
    ConfigurationError,
    ModelAuthError,
    ModelError,
    ModelRateLimitError,
    ModelResponseError,
    ModelTimeoutError,
)
from mindshift_assist.domain.models import ModelCompletion
from mindshift_assist.infrastructure.config.settings import Settings, get_settings
from mindshift_assist.infrastructure.llm.params import generation_params


class VertexModelInvoker:
    # # Thin wrapper around Vertex AI GenerativeModel for Gemini
    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or get_settings()
        self._initialized = False
        self._model: Optional[GenerativeModel] = None

    def _init_client(self) -> None:
        # # Lazily initialize Vertex AI; the project id is the required credential
        if self._initialized:
            return

        if not self._settings.gcp_project_id:
            raise ConfigurationError(
                "MINDSHIFT_GCP_PROJECT_ID environment variable is required"
            )

        # # Application Default Credentials are resolved here; a missing ADC is a config problem
        try:
            vertexai.init(
                project=self._settings.gcp_project_id,
                location=self._settings.gcp_location,
            )
            self._model = GenerativeModel(self._settings.vertex_model_name)
        except google_auth_exceptions.GoogleAuthError as exc:
            raise ConfigurationError(f"Vertex credentials unavailable: {exc}") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise ModelError(f"Vertex initialization failed: {exc}") from exc
        self._initialized = True

    def _build_generation_config(self, linguistic: bool) -> GenerationConfig:
        # # Map mode-specific sampling parameters to Vertex generation config
        params = generation_params(linguistic, self._settings)
        return GenerationConfig(
            max_output_tokens=params.max_tokens,
            temperature=params.temperature,
        )

    def invoke(self, prompt: str, linguistic: bool) -> ModelCompletion:
        # # Gemini contents carry no system role, so the prompt travels as the only turn
        self._init_client()
        assert self._model is not None

        contents = [Content(role="user", parts=[Part.from_text(prompt)])]

        start = time.perf_counter()
        try:
            response = self._model.generate_content(
                contents=contents,
                generation_config=self._build_generation_config(linguistic),
                stream=False,
            )
        except (google_exceptions.Unauthenticated, google_exceptions.PermissionDenied) as exc:
            raise ModelAuthError(f"Vertex authentication failed: {exc}") from exc
        except google_auth_exceptions.GoogleAuthError as exc:
            # # Credential refresh happens lazily on the first request
            raise ModelAuthError(f"Vertex credentials rejected: {exc}") from exc
        except google_exceptions.ResourceExhausted as exc:
            raise ModelRateLimitError(f"Vertex quota exhausted: {exc}") from exc
        except google_exceptions.DeadlineExceeded as exc:
            raise ModelTimeoutError(f"Vertex request timed out: {exc}") from exc
        except google_exceptions.GoogleAPIError as exc:
            raise ModelError(f"Vertex request failed: {exc}") from exc
        latency_ms = (time.perf_counter() - start) * 1000.0

        try:
            output_text = response.text
        except (ValueError, AttributeError) as exc:
            # # Raised when the candidate was blocked or carries no text part
            raise ModelResponseError(f"Vertex response has no text: {exc}") from exc

        try:
            input_tokens, output_tokens, total_tokens = self._extract_usage(response)
        except (TypeError, ValueError, OverflowError) as exc:
            raise ModelResponseError(f"Vertex usage metadata is malformed: {exc}") from exc

        return ModelCompletion(
            content=(output_text or "").strip(),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            model=self._settings.vertex_model_name,
            latency_ms=latency_ms,
        )

    @staticmethod
    def _extract_usage(response: Any) -> tuple:
        # # Extract token usage from Vertex response object
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return 0, 0, 0

        input_tokens = getattr(usage, "prompt_token_count", 0) or 0
        output_tokens = getattr(usage, "candidates_token_count", 0) or 0
        total_tokens = getattr(usage, "total_token_count", 0) or (
            input_tokens + output_tokens
        )
        return int(input_tokens), int(output_tokens), int(total_tokens)
