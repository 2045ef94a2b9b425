"""Sanitize a generated title and rename the document to it."""

import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import structlog

from .errors import RenameError

logger = structlog.get_logger()

_FORBIDDEN_RE = re.compile(r'[\\/:*?"<>|]')
_NEWLINE_RE = re.compile(r"[\r\n]")


class ApplyStatus(enum.Enum):
    RENAMED = "renamed"
    EMPTY_TITLE = "empty_title"
    UNCHANGED = "unchanged"


@dataclass
class ApplyOutcome:
    status: ApplyStatus
    title: str
    ref: Path  # new reference when renamed, original otherwise

    @property
    def renamed(self) -> bool:
        return self.status is ApplyStatus.RENAMED


def sanitize_title(title: Optional[str]) -> str:
    """Strip characters that are illegal in file names, flatten newlines, trim."""
    if not title:
        return ""
    title = _FORBIDDEN_RE.sub("", title)
    title = _NEWLINE_RE.sub(" ", title)
    return title.strip()


async def apply_title(host, ref: Path, title: Optional[str]) -> ApplyOutcome:
    """Rename `ref` to the sanitized `title`, keeping its directory and suffix.

    Raises:
        RenameError: the host rejected the rename; the document is unchanged.
    """
    sanitized = sanitize_title(title)
    if not sanitized:
        host.notify("Generated title is empty. No changes made.")
        return ApplyOutcome(ApplyStatus.EMPTY_TITLE, sanitized, ref)

    new_name = f"{sanitized}{ref.suffix}"
    if new_name == ref.name:
        host.notify(f'Note title is already "{sanitized}". No changes made.')
        return ApplyOutcome(ApplyStatus.UNCHANGED, sanitized, ref)

    try:
        new_ref = await host.rename(ref, new_name)
    except Exception as e:
        logger.warning("rename_failed", path=str(ref), new_name=new_name, error=str(e))
        raise RenameError(f'Could not rename "{ref.stem}" to "{sanitized}": {e}') from e

    host.notify(f'Note title updated to: "{sanitized}"')
    logger.info("note_renamed", old=ref.name, new=new_name)
    return ApplyOutcome(ApplyStatus.RENAMED, sanitized, new_ref)
