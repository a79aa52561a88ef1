import time
from typing import Any

import dspy

from smart_fridge.config import settings
from smart_fridge.logging import get_logger
from smart_fridge.storage.db import get_session
from smart_fridge.storage.repositories import log_llm_call
from smart_fridge.utils.timing import format_duration

logger = get_logger(__name__)


def _make_lm(model: str) -> dspy.LM:
    return dspy.LM(
        f"{settings.llm_provider}/{model}",
        api_key=settings.llm_api_key or None,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout_s,
    )


def configure_dspy() -> None:
    lm = _make_lm(settings.llm_model)
    dspy.settings.configure(lm=lm, trace=[])
    logger.info("llm.configure provider=%s model=%s", settings.llm_provider, settings.llm_model)


def is_configured() -> bool:
    return getattr(dspy.settings, "lm", None) is not None


# Audit rows keep a bounded slice of the prompt and answer
MAX_PAYLOAD_CHARS = 4000


def _clip(value: Any) -> str:
    text = str(value)
    if len(text) <= MAX_PAYLOAD_CHARS:
        return text
    return text[:MAX_PAYLOAD_CHARS] + f"...[+{len(text) - MAX_PAYLOAD_CHARS} chars]"


def run_with_logging(prompt_name: str, prompt_version: str, fn: Any, **kwargs: Any) -> Any:
    """Run one LLM-backed callable and record an LLMCallLog row, failed calls included.

    Exceptions from `fn` are re-raised after the row is written.
    """
    start = time.time()
    logger.info(
        "[TIMING] llm.call.start name=%s version=%s model=%s", prompt_name, prompt_version, settings.llm_model
    )
    error: Exception | None = None
    result: Any = None
    try:
        result = fn(**kwargs)
    except Exception as e:
        error = e
    latency_ms = int((time.time() - start) * 1000)
    with get_session() as session:
        log_llm_call(
            session=session,
            prompt_name=prompt_name,
            prompt_version=prompt_version,
            model=settings.llm_model,
            input_payload=_clip(kwargs),
            output_payload=_clip(f"error: {error}" if error else result),
            latency_ms=latency_ms,
        )
    logger.info(
        "[TIMING] llm.call.end name=%s ok=%s latency_ms=%s (%s)",
        prompt_name,
        error is None,
        latency_ms,
        format_duration(latency_ms),
    )
    if error is not None:
        raise error
    return result
