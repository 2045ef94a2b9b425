"""Title prompt/schema contract and the Gemini-backed title oracle."""

import json
from typing import Any, Optional, Protocol

import structlog

from .errors import OracleAuthError, OracleError, OracleRateLimitError, OracleResponseError

logger = structlog.get_logger()

_PROMPT = (
    "Based on the following key sentences, provide a single, concise title for a note. "
    'The title should be 10 words or less. Key sentences: "{context}"'
)

TITLE_SCHEMA: dict = {
    "type": "object",
    "properties": {
        "title": {
            "type": "string",
            "description": "A concise title for the note, 10 words or less.",
        },
    },
    "required": ["title"],
}

_HARM_CATEGORIES = (
    "HARM_CATEGORY_HARASSMENT",
    "HARM_CATEGORY_HATE_SPEECH",
    "HARM_CATEGORY_SEXUALLY_EXPLICIT",
    "HARM_CATEGORY_DANGEROUS_CONTENT",
)


class TitleOracle(Protocol):
    """Anything that turns a prompt + response schema into raw JSON text."""

    async def generate(self, prompt: str, schema: dict) -> Optional[str]: ...


def build_prompt(context: str) -> str:
    return _PROMPT.format(context=context)


def parse_title_response(response_text: Optional[str]) -> str:
    """Pull the `title` string out of an oracle JSON response.

    Raises:
        OracleResponseError: missing response, malformed JSON, or no string title.
    """
    if response_text is None or not response_text.strip():
        raise OracleResponseError("No response from the title oracle")
    try:
        payload = json.loads(response_text)
    except json.JSONDecodeError as e:
        raise OracleResponseError(f"Failed to parse oracle JSON response: {e}") from e

    title = payload.get("title") if isinstance(payload, dict) else None
    if not isinstance(title, str):
        raise OracleResponseError("Oracle JSON response has no string 'title' field")
    return title.strip()


def _to_gemini_schema(schema: Any) -> Any:
    """Gemini spells schema types in upper case (OBJECT, STRING...)."""
    if isinstance(schema, dict):
        return {
            k: (v.upper() if k == "type" and isinstance(v, str) else _to_gemini_schema(v))
            for k, v in schema.items()
        }
    if isinstance(schema, list):
        return [_to_gemini_schema(v) for v in schema]
    return schema


def _handle_gemini_error(e: Exception):
    err_str = str(e).lower()
    if "api key" in err_str or "authentication" in err_str or "permission" in err_str:
        raise OracleAuthError(f"Gemini auth failed: {e}") from e
    if "resource_exhausted" in err_str or "rate limit" in err_str or "429" in err_str:
        raise OracleRateLimitError(f"Gemini rate limit: {e}") from e
    raise OracleError(f"Gemini API error: {e}") from e


class GeminiTitleOracle:
    """Title oracle backed by the google-genai SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
        client=None,
        temperature: float = 0.7,
        max_output_tokens: int = 5000,
    ):
        self.model_name = model
        self.temperature = temperature
        self.max_output_tokens = max_output_tokens

        if client:
            self.client = client
            return

        from google import genai

        self.client = genai.Client(api_key=api_key)

    def _config(self, schema: dict):
        from google.genai import types

        return types.GenerateContentConfig(
            temperature=self.temperature,
            top_k=1,
            top_p=1,
            max_output_tokens=self.max_output_tokens,
            response_mime_type="application/json",
            response_schema=_to_gemini_schema(schema),
            safety_settings=[
                types.SafetySetting(category=category, threshold="BLOCK_NONE")
                for category in _HARM_CATEGORIES
            ],
        )

    async def generate(self, prompt: str, schema: dict) -> Optional[str]:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=self._config(schema),
            )
        except Exception as e:
            logger.warning("oracle_call_failed", model=self.model_name, error=str(e))
            _handle_gemini_error(e)

        if response is None:
            return None
        return response.text


async def request_title(oracle: TitleOracle, context: str) -> str:
    """Ask the oracle for a title for the extracted context."""
    raw = await oracle.generate(build_prompt(context), TITLE_SCHEMA)
    title = parse_title_response(raw)
    logger.debug("title_received", title=title)
    return title
