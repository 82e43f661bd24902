"""
AI client dispatcher.
Selects the active backend based on the AI_PROVIDER environment variable
and delegates the analysis call to it.

Supported backends (ai_backends/<name>.py, each must expose an async call()):
  gemini_api  — Google Gemini via google-genai SDK (default)

To add a new backend:
  1. Create ai_backends/my_provider.py with an async call() matching the signature below.
  2. Set AI_PROVIDER=my_provider in .env.
"""
import os
import importlib

from dotenv import load_dotenv

from errors import AnalysisError
from image_payload import ImagePayload

load_dotenv()


async def analyze(payload: ImagePayload, prompt: str) -> str:
    """Send an image + prompt to the active AI backend and return its text answer.

    One round trip: no retry, no caching.  Every failure reaches the caller
    as a single AnalysisError with a readable message.
    """
    load_dotenv(override=True)  # re-read .env so changes apply without server restart
    provider = os.environ.get("AI_PROVIDER", "gemini_api")
    try:
        backend = importlib.import_module(f"ai_backends.{provider}")
    except ModuleNotFoundError as e:
        raise AnalysisError(
            f"AI backend '{provider}' not found. "
            f"Create ai_backends/{provider}.py or change AI_PROVIDER in .env."
        ) from e

    try:
        return await backend.call(payload, prompt)
    except AnalysisError:
        raise
    except Exception as e:
        raise AnalysisError(f"Failed to analyze image: {e}") from e
