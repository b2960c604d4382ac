"""
데이터 모델 모듈: 요청, 탐색 항목, 처리 결과
"""

import threading
from pathlib import Path
from typing import Optional, Tuple, Any
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class OperationKind(Enum):
    """작업 유형"""
    COPY = "copy"
    MOVE = "move"
    DELETE = "delete"


class EntryKind(Enum):
    """항목 유형"""
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"


class Outcome(Enum):
    """항목 처리 결과"""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class OperationRequest:
    """CLI가 만든 작업 요청 (생성 후 변경 불가)"""
    kind: OperationKind
    sources: Tuple[Path, ...]
    destination: Optional[Path] = None
    recursive: bool = False
    filters: Tuple[Any, ...] = ()
    confirm: bool = False
    overwrite: bool = False
    dry_run: bool = False
    use_trash: bool = False

    def __post_init__(self):
        # 리스트로 넘어와도 불변 튜플로 고정
        object.__setattr__(self, "sources", tuple(Path(s) for s in self.sources))
        object.__setattr__(self, "filters", tuple(self.filters))
        if self.destination is not None:
            object.__setattr__(self, "destination", Path(self.destination))


@dataclass(frozen=True)
class FileEntry:
    """탐색으로 발견된 항목"""
    path: Path
    kind: EntryKind
    size: int
    modified_at: datetime
    source: Path = None
    relative: Path = field(default_factory=Path)
    depth: int = 0
    error: Optional[str] = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_dir(self) -> bool:
        return self.kind == EntryKind.DIRECTORY


@dataclass(frozen=True)
class ResolvedSource:
    """검증된 원본과 계산된 대상 경로"""
    source: Path
    target: Optional[Path] = None


@dataclass(frozen=True)
class OperationResult:
    """항목 하나의 처리 결과"""
    entry: FileEntry
    outcome: Outcome
    reason: str = ""
    target: Optional[Path] = None


class CancelToken:
    """
    전체 취소 플래그

    전역 상태 대신 탐색기와 실행기에 명시적으로 전달됩니다.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
