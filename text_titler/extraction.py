"""Turn raw note text into a short context string for the title prompt."""

from __future__ import annotations

import re
from typing import Optional

import structlog

from .datatypes import ExtractionResult
from .errors import EmptyDocumentError
from .preprocessing import PreprocessConfig
from .summarize import SummarizerConfig, summarize

logger = structlog.get_logger()

FALLBACK_CHARS = 500
NO_SENTENCES = "no_sentences"
SUMMARIZER_ERROR = "summarizer_error"

# a line holding nothing but one embedded image: ![[img.png]] or ![alt](img.png)
_IMAGE_EMBED_RE = re.compile(r"^(?:!\[\[[^\]]*\]\]|!\[[^\]]*\]\([^)]*\))$")


def strip_image_embeds(text: str) -> str:
    lines = text.split("\n")
    return "\n".join(line for line in lines if not _IMAGE_EMBED_RE.match(line.strip()))


def extract_context(
    text: str,
    k: int,
    cfg: Optional[SummarizerConfig] = None,
    preprocess: Optional[PreprocessConfig] = None,
) -> ExtractionResult:
    """Pick the top-k sentences of `text` and join them into one string.

    Falls back to the first 500 characters when summarization yields nothing.

    Raises:
        EmptyDocumentError: text is blank, or holds nothing but image embeds.
    """
    if not text.strip():
        raise EmptyDocumentError("Document is empty")

    filtered = strip_image_embeds(text)
    if not filtered.strip():
        raise EmptyDocumentError("Document contains only embedded images")

    if isinstance(k, bool) or not isinstance(k, int) or k <= 0:
        raise ValueError(f"Sentence count must be a positive integer, got {k!r}")

    try:
        result = summarize(filtered, k, cfg=cfg, preprocess=preprocess)
    except Exception as e:
        logger.warning("summarization_failed", error=str(e), exc_info=True)
        return _fallback(filtered, SUMMARIZER_ERROR)

    if not result.sentences:
        return _fallback(filtered, NO_SENTENCES)

    texts = result.texts
    logger.debug(
        "sentences_extracted",
        selected=len(texts),
        iterations=result.iterations,
        converged=result.converged,
    )
    return ExtractionResult(context=" ".join(texts), sentences=texts)


def _fallback(filtered: str, reason: str) -> ExtractionResult:
    context = filtered[:FALLBACK_CHARS]
    logger.info("extraction_fallback", reason=reason, chars=len(context))
    return ExtractionResult(context=context, fallback_reason=reason)
