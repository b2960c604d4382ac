"""
필터 모듈: 이름/크기/수정일 조건으로 탐색 항목 거르기

각 필터는 accepts(entry) -> bool 하나만 제공하며, FilterEngine이 AND로 결합합니다.
"""

import fnmatch
import re
from typing import Iterable, Iterator, Optional, Union
from dataclasses import dataclass
from datetime import datetime

from .models import FileEntry


@dataclass(frozen=True)
class NameGlob:
    """파일명 glob 패턴 (예: *.txt)"""
    pattern: str
    case_sensitive: bool = True

    def accepts(self, entry: FileEntry) -> bool:
        if self.case_sensitive:
            return fnmatch.fnmatchcase(entry.name, self.pattern)
        return fnmatch.fnmatchcase(entry.name.lower(), self.pattern.lower())


@dataclass(frozen=True)
class SizeRange:
    """크기 범위 (바이트, 양 끝 포함)"""
    min_size: Optional[int] = None
    max_size: Optional[int] = None

    def accepts(self, entry: FileEntry) -> bool:
        if self.min_size is not None and entry.size < self.min_size:
            return False
        if self.max_size is not None and entry.size > self.max_size:
            return False
        return True


@dataclass(frozen=True)
class ModifiedRange:
    """수정 시각 범위 (after 이상, before 미만)"""
    after: Optional[datetime] = None
    before: Optional[datetime] = None

    def accepts(self, entry: FileEntry) -> bool:
        if self.after is not None and entry.modified_at < self.after:
            return False
        if self.before is not None and entry.modified_at >= self.before:
            return False
        return True


Filter = Union[NameGlob, SizeRange, ModifiedRange]


class FilterEngine:
    """필터 결합 클래스 (모든 필터를 통과해야 채택)"""

    def __init__(self, filters: Iterable[Filter] = ()):
        self.filters = tuple(filters)

    def accepts(self, entry: FileEntry) -> bool:
        return all(f.accepts(entry) for f in self.filters)

    def apply(self, entries: Iterable[FileEntry]) -> Iterator[FileEntry]:
        """
        순서를 유지하며 항목 거르기

        Args:
            entries: 탐색 항목 (지연 시퀀스 가능)

        Yields:
            모든 필터를 통과한 항목
        """
        for entry in entries:
            if self.accepts(entry):
                yield entry


# ============================================================
# CLI 값 변환
# ============================================================

_SIZE_UNITS = {
    '': 1,
    'B': 1,
    'K': 1024,
    'KB': 1024,
    'M': 1024 ** 2,
    'MB': 1024 ** 2,
    'G': 1024 ** 3,
    'GB': 1024 ** 3,
    'T': 1024 ** 4,
    'TB': 1024 ** 4,
}

_SIZE_PATTERN = re.compile(r'^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$')


def parse_size(text: str) -> int:
    """
    크기 문자열을 바이트로 변환

    Args:
        text: "512", "10K", "1.5MB", "2G" 형식

    Returns:
        바이트 수

    Raises:
        ValueError: 형식이 잘못된 경우
    """
    match = _SIZE_PATTERN.match(text)
    if not match:
        raise ValueError(f"잘못된 크기 형식입니다: {text}")

    number, unit = match.groups()
    unit = unit.upper()
    if unit not in _SIZE_UNITS:
        raise ValueError(f"알 수 없는 크기 단위입니다: {unit}")

    return int(float(number) * _SIZE_UNITS[unit])


def parse_datetime(text: str) -> datetime:
    """ISO 형식 날짜/시각 변환 (예: 2024-01-31, 2024-01-31T12:00)"""
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        raise ValueError(f"잘못된 날짜 형식입니다 (YYYY-MM-DD[THH:MM]): {text}")


def build_filters(name: Optional[str] = None,
                  min_size: Optional[int] = None,
                  max_size: Optional[int] = None,
                  modified_after: Optional[datetime] = None,
                  modified_before: Optional[datetime] = None) -> tuple:
    """지정된 조건만으로 필터 튜플 생성"""
    filters = []
    if name:
        filters.append(NameGlob(name))
    if min_size is not None or max_size is not None:
        filters.append(SizeRange(min_size, max_size))
    if modified_after is not None or modified_before is not None:
        filters.append(ModifiedRange(modified_after, modified_before))
    return tuple(filters)
