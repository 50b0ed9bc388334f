import asyncio
import logging
import time

from google import genai
from google.genai import errors as genai_errors

from app.core.exceptions import ModelInvocationError

logger = logging.getLogger(__name__)


class LLMService:
    """
    Thin wrapper around the Gemini text generation call.

    The GenAI SDK call is synchronous, so it runs in a worker thread to keep the
    event loop free. Any failure (quota, network, model error) is surfaced as
    ``ModelInvocationError``; there is no retry.
    """

    def __init__(self, client: genai.Client, model: str):
        self.client = client
        self.model = model

    async def generate_text(self, prompt: str) -> str:
        logger.info(f"🤖 Calling Gemini API (model={self.model})...")
        start_time = time.perf_counter()

        try:
            response = await asyncio.to_thread(
                self.client.models.generate_content,
                model=self.model,
                contents=prompt,
            )
        except genai_errors.APIError as e:
            if e.code == 429:
                logger.error(f"Gemini quota/rate limit reached: {e}")
            else:
                logger.error(f"Gemini API error ({e.code}): {e}", exc_info=True)
            raise ModelInvocationError(str(e)) from e
        except Exception as e:
            logger.error(f"Gemini call failed: {type(e).__name__}: {e}", exc_info=True)
            raise ModelInvocationError(str(e) or type(e).__name__) from e

        elapsed = time.perf_counter() - start_time
        logger.info(f"✅ Gemini API call completed in {elapsed:.2f}s")

        return response.text or ""
