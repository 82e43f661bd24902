"""
AI backend: Google Gemini
Sends the photo inline with the prompt and returns the free-text answer.
Model defaults to gemini-2.5-flash-lite (override with GEMINI_MODEL).
Requires GEMINI_API_KEY in environment.
"""
import os

from google import genai
from google.genai import errors as genai_errors, types

from errors import AnalysisError
from image_payload import ImagePayload

DEFAULT_MODEL = "gemini-2.5-flash-lite"


def _retry_hint(details) -> str:
    """Pull the RetryInfo delay out of a Gemini error payload, if present."""
    if not isinstance(details, dict):
        return ""
    for d in details.get("error", {}).get("details", []) or []:
        if d.get("@type", "").endswith("RetryInfo") and d.get("retryDelay"):
            return f" Retry after: {d['retryDelay']}."
    return ""


def _api_error_message(e: genai_errors.APIError) -> str:
    if e.code == 429 or e.status == "RESOURCE_EXHAUSTED":
        return (
            "Gemini API quota exceeded, free tier limit reached."
            f"{_retry_hint(e.details)} "
            "Generate a new key at https://aistudio.google.com/apikey "
            "or wait and try again."
        )
    return f"Gemini API error ({e.code}): {e.message or e.status or 'no details'}"


async def call(payload: ImagePayload, prompt: str) -> str:
    """Send an image + prompt to Gemini and return the response text verbatim.

    Args:
        payload: Encoded image to analyze.
        prompt:  Instruction sent alongside the image.

    Raises:
        AnalysisError: missing key, API error, transport failure, blocked or empty reply.
    """
    api_key = os.environ.get("GEMINI_API_KEY")
    if not api_key:
        raise AnalysisError(
            "GEMINI_API_KEY is not set. Copy .env.example to .env and add your key."
        )
    model = os.environ.get("GEMINI_MODEL") or DEFAULT_MODEL

    client = genai.Client(api_key=api_key)

    try:
        # Each request runs on its own event loop; close the async transport with it
        async with client.aio as aclient:
            response = await aclient.models.generate_content(
                model=model,
                contents=[
                    types.Part.from_bytes(data=payload.decode(), mime_type=payload.media_type),
                    prompt,
                ],
            )
    except genai_errors.APIError as e:
        raise AnalysisError(_api_error_message(e)) from e
    except Exception as e:
        raise AnalysisError(f"Could not reach the Gemini API: {e}") from e

    feedback = getattr(response, "prompt_feedback", None)
    block_reason = getattr(feedback, "block_reason", None)
    if block_reason:
        raise AnalysisError(f"Gemini declined to analyze this image ({block_reason}).")

    text = response.text
    if not text or not text.strip():
        raise AnalysisError("AI returned an empty response. Please try again.")
    return text
