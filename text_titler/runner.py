"""Sequence extraction, the oracle call and renaming over one or many notes."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import structlog

from .applicator import ApplyStatus, apply_title
from .config import Settings
from .errors import (
    ConfigurationError,
    EmptyDocumentError,
    OracleError,
    RenameError,
)
from .extraction import SUMMARIZER_ERROR, extract_context
from .oracle import GeminiTitleOracle, TitleOracle, request_title
from .summarize import SummarizerConfig

logger = structlog.get_logger()

RENAMED = "renamed"
UNCHANGED = "unchanged"
EMPTY_TITLE = "empty_title"
SKIPPED = "skipped"
FAILED = "failed"

_APPLY_STATUS = {
    ApplyStatus.RENAMED: RENAMED,
    ApplyStatus.UNCHANGED: UNCHANGED,
    ApplyStatus.EMPTY_TITLE: EMPTY_TITLE,
}


@dataclass
class DocumentOutcome:
    ref: Path
    status: str
    title: Optional[str] = None
    new_ref: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class BatchReport:
    outcomes: list[DocumentOutcome] = field(default_factory=list)

    def _with(self, status: str) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def renamed(self) -> list[DocumentOutcome]:
        return self._with(RENAMED)

    @property
    def failed(self) -> list[DocumentOutcome]:
        return self._with(FAILED)

    @property
    def skipped(self) -> list[DocumentOutcome]:
        return self._with(SKIPPED)

    @property
    def unchanged(self) -> list[DocumentOutcome]:
        return self._with(UNCHANGED) + self._with(EMPTY_TITLE)

    def summary(self) -> str:
        return (
            f"Finished generating titles for {len(self.outcomes)} note(s): "
            f"{len(self.renamed)} renamed, {len(self.unchanged)} unchanged, "
            f"{len(self.skipped)} skipped, {len(self.failed)} failed."
        )


def is_untitled(ref: Path) -> bool:
    return ref.stem.lower().startswith("untitled")


class TitleRunner:
    """Generates titles for notes served by a document host, one at a time."""

    def __init__(
        self,
        settings: Settings,
        host,
        oracle: Optional[TitleOracle] = None,
        summarizer: Optional[SummarizerConfig] = None,
    ):
        self.settings = settings
        self.host = host
        self.summarizer = summarizer or SummarizerConfig()
        self._oracle = oracle
        self._last_active: Optional[Path] = None

    @property
    def oracle(self) -> TitleOracle:
        if self._oracle is None:
            self._oracle = GeminiTitleOracle(
                api_key=self.settings.require_api_key(), model=self.settings.model_id
            )
        return self._oracle

    async def generate_title(self, text: str) -> str:
        """Extract key sentences from `text` and ask the oracle for a title.

        Raises:
            ConfigurationError: no API key configured.
            EmptyDocumentError: nothing usable in `text`.
            OracleError: the oracle failed or answered without a title.
        """
        self.settings.require_api_key()

        extraction = extract_context(text, self.settings.number_of_sentences, cfg=self.summarizer)
        if extraction.fallback_reason == SUMMARIZER_ERROR:
            self.host.notify(
                "Error during sentence extraction. Using the first 500 characters of the note."
            )
        elif extraction.used_fallback:
            self.host.notify(
                "No key sentences found, using the first 500 characters of the note for context."
            )

        return await request_title(self.oracle, extraction.context)

    async def title_text(self, ref: Path, text: str) -> DocumentOutcome:
        """Title `ref` from already-loaded text (e.g. an editor buffer)."""
        name = ref.stem
        log = logger.bind(note=name)
        try:
            title = await self.generate_title(text)
            applied = await apply_title(self.host, ref, title)
        except ConfigurationError as e:
            self.host.notify(str(e))
            return DocumentOutcome(ref, FAILED, error=str(e))
        except EmptyDocumentError as e:
            log.info("note_skipped", reason=str(e))
            self.host.notify(f'Note "{name}" is empty. Skipping.')
            return DocumentOutcome(ref, SKIPPED, error=str(e))
        except OracleError as e:
            log.warning("title_generation_failed", error=str(e))
            self.host.notify(f'Failed to generate a title for "{name}": {e}')
            return DocumentOutcome(ref, FAILED, error=str(e))
        except RenameError as e:
            self.host.notify(f'Error updating title for "{name}": {e}')
            return DocumentOutcome(ref, FAILED, error=str(e))

        log.info("title_applied", title=applied.title, status=applied.status.value)
        return DocumentOutcome(
            ref, _APPLY_STATUS[applied.status], title=applied.title, new_ref=applied.ref
        )

    async def title_document(self, ref: Path) -> DocumentOutcome:
        try:
            text = await self.host.read(ref)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("note_read_failed", path=str(ref), error=str(e))
            self.host.notify(f'Error reading note "{ref.stem}".')
            return DocumentOutcome(ref, FAILED, error=str(e))
        if not text.strip():
            self.host.notify(f'Note "{ref.stem}" is empty. Skipping.')
            return DocumentOutcome(ref, SKIPPED, error="Document is empty")
        return await self.title_text(ref, text)

    async def run_batch(self, refs: Iterable[Path]) -> BatchReport:
        """Title each note in turn; a failing note never stops the batch."""
        refs = list(refs)
        report = BatchReport()
        self.host.notify(f"Generating titles for {len(refs)} note(s)...")

        for ref in refs:
            try:
                outcome = await self.title_document(ref)
            except Exception as e:
                logger.exception("note_processing_failed", path=str(ref))
                self.host.notify(f'Error processing note "{ref.stem}".')
                outcome = DocumentOutcome(ref, FAILED, error=str(e))
            report.outcomes.append(outcome)

        self.host.notify(report.summary())
        logger.info(
            "batch_finished",
            total=len(report.outcomes),
            renamed=len(report.renamed),
            failed=len(report.failed),
        )
        return report

    async def auto_update_untitled(self) -> Optional[BatchReport]:
        """Title every open note still named "Untitled..." (startup pass)."""
        if not self.settings.auto_update_untitled_notes:
            return None

        candidates = [ref for ref in await self.host.list_open() if is_untitled(ref)]
        if not candidates:
            return None

        report = BatchReport()
        for ref in candidates:
            # may have been renamed or removed since listing
            if not await self.host.exists(ref) or not is_untitled(ref):
                continue
            self.host.notify(f'Auto-updating title for open note: "{ref.stem}"...')
            try:
                outcome = await self.title_document(ref)
            except Exception as e:
                logger.exception("auto_update_failed", path=str(ref))
                self.host.notify(f'Error auto-updating title for "{ref.stem}".')
                outcome = DocumentOutcome(ref, FAILED, error=str(e))
            report.outcomes.append(outcome)

        if report.renamed:
            self.host.notify(f"Updated titles for {len(report.renamed)} untitled note(s).")
        return report

    async def handle_active_change(self, current: Optional[Path]) -> Optional[DocumentOutcome]:
        """Track the active note; title the one just left if it is untitled."""
        previous, self._last_active = self._last_active, current

        if not self.settings.auto_update_untitled_notes or previous is None:
            return None
        if previous == current or not is_untitled(previous):
            return None
        if not await self.host.exists(previous):
            return None

        self.host.notify(f'Checking to auto-update title for "{previous.stem}"...')
        try:
            return await self.title_document(previous)
        except Exception as e:
            logger.exception("auto_update_failed", path=str(previous))
            self.host.notify(f'Error auto-updating title for "{previous.stem}".')
            return DocumentOutcome(previous, FAILED, error=str(e))
