"""Document host interface and a local-folder implementation."""

import asyncio
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()


class DocumentHost(Protocol):
    """Capabilities the title runner needs from its environment."""

    async def read(self, ref: Path) -> str: ...

    async def rename(self, ref: Path, new_name: str) -> Path: ...

    async def list_open(self) -> list[Path]: ...

    async def exists(self, ref: Path) -> bool: ...

    def notify(self, message: str) -> None: ...


class FolderHost:
    """Serves the Markdown notes of one directory.

    Every `*.md` file in the folder counts as open. Notices are logged and
    kept in `notices` so a UI can show them.
    """

    def __init__(self, root: Path, pattern: str = "*.md"):
        self.root = Path(root).expanduser()
        self.pattern = pattern
        self.notices: list[str] = []

    async def read(self, ref: Path) -> str:
        return await asyncio.to_thread(Path(ref).read_text, encoding="utf-8")

    async def rename(self, ref: Path, new_name: str) -> Path:
        ref = Path(ref)
        if Path(new_name).name != new_name:
            raise ValueError(f"Invalid file name: {new_name!r}")
        target = ref.with_name(new_name)
        if target.exists():
            raise FileExistsError(f"A note named {new_name!r} already exists")
        await asyncio.to_thread(ref.rename, target)
        return target

    async def list_open(self) -> list[Path]:
        return await asyncio.to_thread(
            lambda: sorted(p for p in self.root.glob(self.pattern) if p.is_file())
        )

    async def exists(self, ref: Path) -> bool:
        return await asyncio.to_thread(Path(ref).is_file)

    def notify(self, message: str) -> None:
        self.notices.append(message)
        logger.info("notice", message=message)

    def drain_notices(self) -> list[str]:
        notices, self.notices = self.notices, []
        return notices
