"""Shared test fixtures for the title generator."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from text_titler.config import Settings


class FakeHost:
    """In-memory document host that records renames and notices."""

    def __init__(self, docs: dict[str, str] | None = None, folder: str = "notes"):
        self.folder = Path(folder)
        self.docs = {self.folder / name: text for name, text in (docs or {}).items()}
        self.notices: list[str] = []
        self.rename_calls: list[tuple[Path, str]] = []
        self.rename_error: Exception | None = None

    def ref(self, name: str) -> Path:
        return self.folder / name

    async def read(self, ref: Path) -> str:
        if ref not in self.docs:
            raise FileNotFoundError(str(ref))
        return self.docs[ref]

    async def rename(self, ref: Path, new_name: str) -> Path:
        self.rename_calls.append((ref, new_name))
        if self.rename_error:
            raise self.rename_error
        target = ref.with_name(new_name)
        self.docs[target] = self.docs.pop(ref)
        return target

    async def list_open(self) -> list[Path]:
        return sorted(self.docs)

    async def exists(self, ref: Path) -> bool:
        return ref in self.docs

    def notify(self, message: str) -> None:
        self.notices.append(message)


def title_json(title) -> str:
    return json.dumps({"title": title})


@pytest.fixture
def settings():
    return Settings(api_key="test-key", number_of_sentences=5)


@pytest.fixture
def fake_host():
    return FakeHost()


@pytest.fixture
def mock_oracle():
    """Oracle whose generate() answers with a fixed title."""
    oracle = AsyncMock()
    oracle.generate.return_value = title_json("Generated Title")
    return oracle


@pytest.fixture
def mammals_text():
    return "Cats are mammals. Dogs are mammals too. Both are popular pets. Birds can fly."
