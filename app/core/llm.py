"""
Generative model client configuration.

The Gemini client is built once in the application lifespan and handed to
``LLMService``; nothing in this module runs at import time.
"""
import logging

from google import genai

from app.core.config import Settings
from app.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_genai_client(settings: Settings) -> genai.Client:
    """Build the GenAI SDK client. Fails fast if no API key is configured."""
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY is not configured. Set it in the environment or .env file.")
    try:
        client = genai.Client(api_key=settings.GEMINI_API_KEY)
    except Exception as e:
        logger.error(f"Failed to initialize GenAI client: {e}")
        raise ConfigurationError(f"Failed to initialize GenAI client: {e}") from e
    logger.info(f"GenAI client initialized (model={settings.GEMINI_MODEL})")
    return client
