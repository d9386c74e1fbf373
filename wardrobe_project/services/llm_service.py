# wardrobe_project/services/llm_service.py
import asyncio
import logging
from typing import Any, Callable, Optional

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPICallError

from config.settings import Settings
from ..core.ai_provider import AIProviderError, ClassificationProvider

logger = logging.getLogger(__name__)

IMAGE_GENERATION_CONFIG = {"temperature": 0.3, "max_output_tokens": 500, "top_p": 0.8, "top_k": 40}
TEXT_GENERATION_CONFIG = {"temperature": 0.7, "max_output_tokens": 2048, "top_p": 0.8, "top_k": 40}


def is_retryable_status(status_code: Optional[int]) -> bool:
    """5xx, 429 and errors without a status (transport failures) are worth retrying."""
    if status_code is None:
        return True
    return status_code >= 500 or status_code == 429


async def call_with_backoff(
    func: Callable[..., Any],
    *args,
    max_retries: int = 3,
    base_delay: float = 1.0,
    **kwargs,
) -> Any:
    """
    Runs a blocking SDK call in a worker thread, retrying with exponential backoff.

    max_retries counts retries after the first attempt. Non-retryable 4xx
    errors are raised as AIProviderError immediately.
    """
    delay = base_delay
    attempt = 0
    while True:
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except GoogleAPICallError as e:
            status_code = int(e.code) if e.code is not None else None
            if not is_retryable_status(status_code):
                raise AIProviderError(f"AI provider rejected the request: {e}", status_code=status_code) from e
            last_error: Exception = e
        except Exception as e:
            last_error = e

        if attempt >= max_retries:
            raise AIProviderError(
                f"AI provider call failed after {attempt + 1} attempts: {last_error}",
                status_code=getattr(last_error, "status_code", None),
            ) from last_error
        logger.warning(f"AI provider call failed (attempt {attempt + 1}), retrying in {delay}s. Error: {last_error}")
        await asyncio.sleep(delay)
        delay *= 2
        attempt += 1


def response_text(response: Any) -> str:
    # .text raises ValueError when the candidate was blocked or has no parts
    try:
        return (response.text or "").strip()
    except ValueError:
        return ""


class GeminiClassificationProvider(ClassificationProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: str = "gemini-1.5-flash",
        max_retries: int = 3,
        base_delay: float = 1.0,
        model: Any = None,
    ):
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self.model = model
        self.max_retries = max_retries
        self.base_delay = base_delay

    async def _generate(self, contents: Any, generation_config: dict) -> str:
        response = await call_with_backoff(
            self.model.generate_content,
            contents,
            generation_config=generation_config,
            max_retries=self.max_retries,
            base_delay=self.base_delay,
        )
        text = response_text(response)
        if not text:
            raise AIProviderError("Gemini returned an empty response.")
        return text

    async def complete_with_image(self, prompt: str, image: bytes, mime_type: str) -> str:
        return await self._generate([prompt, {"mime_type": mime_type, "data": image}], IMAGE_GENERATION_CONFIG)

    async def generate_text(self, prompt: str) -> str:
        return await self._generate(prompt, TEXT_GENERATION_CONFIG)


def build_classification_provider(settings: Settings) -> Optional[ClassificationProvider]:
    """Returns the configured provider, or None when AI classification is unavailable."""
    provider_name = (settings.AI_PROVIDER or "").lower()
    if provider_name != "gemini":
        logger.warning(f"Unknown AI provider '{settings.AI_PROVIDER}'. AI classification is disabled.")
        return None
    if not settings.GOOGLE_GEMINI_API_KEY:
        logger.warning("GOOGLE_GEMINI_API_KEY is not set. AI classification is disabled.")
        return None
    logger.info(f"Using Gemini model '{settings.GEMINI_MODEL}' for classification.")
    return GeminiClassificationProvider(
        api_key=settings.GOOGLE_GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
        max_retries=settings.AI_MAX_RETRIES,
        base_delay=settings.AI_RETRY_BASE_DELAY,
    )
