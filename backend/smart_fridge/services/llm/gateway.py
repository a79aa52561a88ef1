"""Text-generation gateway: prompt in, raw model text out.

Two transports share one contract. DspyGateway calls the configured language
model in-process; HttpGateway posts to a remote proxy function that answers
``{"text": ...}`` or ``{"error": ...}``. Both raise GatewayError on any failure
and never retry.
"""

from typing import Protocol

import dspy
import httpx

from smart_fridge.config import settings
from smart_fridge.logging import get_logger
from smart_fridge.schemas.llm import GatewayRequest
from smart_fridge.services.exceptions import GatewayError
from smart_fridge.services.llm.dspy_client import is_configured, run_with_logging
from smart_fridge.services.llm.prompt_builder import resolve_prompt
from smart_fridge.services.llm.prompts import RECIPE_MODE_PROMPT_VERSION, RECIPE_PROMPT_VERSION
from smart_fridge.utils.timing import time_span

logger = get_logger(__name__)


class TextGateway(Protocol):
    name: str

    def generate(self, request: GatewayRequest) -> str: ...


class FreeTextSignature(dspy.Signature):
    """Answer the prompt as plain text, following any output format the prompt specifies exactly."""

    prompt: str = dspy.InputField()
    text: str = dspy.OutputField(desc="the complete answer, in the format requested by the prompt")


class FreeTextGenerator(dspy.Module):
    def __init__(self) -> None:
        super().__init__()
        self.predict = dspy.Predict(FreeTextSignature)

    def forward(self, prompt: str) -> dspy.Prediction:
        return self.predict(prompt=prompt)


class DspyGateway:
    name = "dspy"

    def generate(self, request: GatewayRequest) -> str:
        prompt = resolve_prompt(request)
        version = RECIPE_MODE_PROMPT_VERSION if request.recipe_mode else RECIPE_PROMPT_VERSION
        with time_span("llm.gateway.generate", transport=self.name, chars=len(prompt)):
            # dspy settings belong to the thread that configured them; startup does that once
            if not is_configured():
                raise GatewayError("LLM is not configured; configure_dspy() must run at startup")
            try:
                prediction = run_with_logging(
                    prompt_name="recipe_mode" if request.recipe_mode else "recipe_generate",
                    prompt_version=version,
                    fn=FreeTextGenerator().forward,
                    prompt=prompt,
                )
            except Exception as e:
                logger.warning("llm.gateway.failed transport=%s error=%s", self.name, e)
                raise GatewayError(f"LLM call failed: {e}") from e
        text = (getattr(prediction, "text", None) or "").strip()
        if not text:
            raise GatewayError("LLM returned no text")
        return text


class HttpGateway:
    name = "http"

    def __init__(self, url: str | None = None, token: str | None = None, timeout: float | None = None) -> None:
        self._url = url or settings.llm_gateway_url
        self._token = settings.llm_gateway_token if token is None else token
        self._timeout = timeout or float(settings.llm_timeout_s)

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def generate(self, request: GatewayRequest) -> str:
        # Validates input locally so nothing is sent for an empty prompt
        resolve_prompt(request)
        with time_span("llm.gateway.generate", transport=self.name):
            try:
                resp = httpx.post(
                    self._url,
                    json=request.to_payload(),
                    headers=self._headers(),
                    timeout=self._timeout,
                )
            except httpx.HTTPError as e:
                logger.warning("llm.gateway.failed transport=%s url=%s error=%s", self.name, self._url, e)
                raise GatewayError(f"Gateway request failed: {e}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise GatewayError(f"Gateway returned HTTP {resp.status_code} without a JSON object")
        if data.get("error"):
            logger.warning("llm.gateway.error_payload status=%s error=%s", resp.status_code, data["error"])
            raise GatewayError(str(data["error"]))
        if resp.is_error:
            raise GatewayError(f"Gateway returned HTTP {resp.status_code}")
        text = data.get("text")
        if not isinstance(text, str) or not text.strip():
            raise GatewayError("Gateway returned no text")
        return text


def get_gateway() -> TextGateway:
    if settings.llm_gateway_url:
        return HttpGateway()
    return DspyGateway()
