from datetime import datetime
from pathlib import Path

import pytest

from fman.config import FmanConfig
from fman.models import EntryKind, FileEntry, OperationKind, OperationRequest


@pytest.fixture(autouse=True)
def isolated_default_config(tmp_path, monkeypatch):
    """Never pick up the real ~/.fman.yaml during tests."""
    monkeypatch.setattr("fman.config_loader.DEFAULT_CONFIG_PATH", tmp_path / "no-such-config.yaml")


@pytest.fixture
def base(tmp_path) -> Path:
    return tmp_path.resolve()


@pytest.fixture
def tree(base) -> Path:
    """src/{a.txt, sub/b.txt}"""
    src = base / "src"
    (src / "sub").mkdir(parents=True)
    (src / "a.txt").write_text("alpha", encoding="utf-8")
    (src / "sub" / "b.txt").write_text("bravo!", encoding="utf-8")
    return src


@pytest.fixture
def config(base) -> FmanConfig:
    return FmanConfig(log_dir=base / "logs", chunk_size=4)


def make_request(kind: OperationKind, sources, destination=None, **kwargs) -> OperationRequest:
    if isinstance(sources, (str, Path)):
        sources = [sources]
    return OperationRequest(kind=kind, sources=tuple(sources), destination=destination, **kwargs)


def make_entry(name: str = "file.txt", size: int = 0, kind: EntryKind = EntryKind.FILE,
               modified: datetime = datetime(2024, 1, 1), depth: int = 0) -> FileEntry:
    path = Path("/data") / name
    return FileEntry(path=path, kind=kind, size=size, modified_at=modified,
                     source=path, depth=depth)
