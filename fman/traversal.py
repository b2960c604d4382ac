"""
탐색 모듈: 디렉토리 트리를 깊이 우선 전위 순회하며 FileEntry 생성
"""

import os
import stat
from pathlib import Path
from typing import Iterator, List
from dataclasses import replace
from datetime import datetime

from .errors import TraversalError
from .models import EntryKind, FileEntry


def _kind_from_mode(mode: int) -> EntryKind:
    if stat.S_ISLNK(mode):
        return EntryKind.SYMLINK
    if stat.S_ISDIR(mode):
        return EntryKind.DIRECTORY
    return EntryKind.FILE


class TreeWalker:
    """
    트리 탐색 클래스

    심볼릭 링크는 SYMLINK 항목으로만 반환하고 따라가지 않으므로 순환이 생기지 않습니다.
    walk() 호출마다 독립된 상태로 시작합니다.
    전체 취소 후에도 탐색은 끝까지 진행되며, 남은 항목은 실행 단계에서 건너뜀으로 기록됩니다.
    """

    def __init__(self, recursive: bool = False):
        self.recursive = recursive

    def walk(self, root: Path) -> Iterator[FileEntry]:
        """
        항목을 지연 생성 (폴더가 하위 항목보다 먼저)

        Args:
            root: 탐색 시작 경로

        Yields:
            FileEntry (읽을 수 없는 항목은 error 필드가 설정됨)
        """
        root = Path(root)
        stack = [(root, Path(), 0)]

        while stack:
            path, relative, depth = stack.pop()
            entry = self._make_entry(path, root, relative, depth)

            if not (entry.is_dir and self.recursive) or entry.error:
                yield entry
                continue

            # 폴더 목록을 먼저 읽어서 실패하면 하위 트리 전체를 하나의 실패로 기록
            try:
                children = self._read_directory(path)
            except TraversalError as e:
                yield replace(entry, error=e.reason)
                continue

            yield entry

            for name in reversed(children):
                stack.append((path / name, relative / name, depth + 1))

    def _read_directory(self, directory: Path) -> List[str]:
        try:
            return self._list_children(directory)
        except OSError as e:
            raise TraversalError(directory, f"폴더를 읽을 수 없습니다: {e.strerror or e}")

    @staticmethod
    def _list_children(directory: Path) -> List[str]:
        with os.scandir(directory) as it:
            return sorted(item.name for item in it)

    @staticmethod
    def _stat(path: Path) -> os.stat_result:
        try:
            return os.lstat(path)
        except OSError as e:
            raise TraversalError(path, f"항목 정보를 읽을 수 없습니다: {e.strerror or e}")

    @classmethod
    def _make_entry(cls, path: Path, root: Path, relative: Path, depth: int) -> FileEntry:
        try:
            st = cls._stat(path)
        except TraversalError as e:
            return FileEntry(
                path=path,
                kind=EntryKind.FILE,
                size=0,
                modified_at=datetime.fromtimestamp(0),
                source=root,
                relative=relative,
                depth=depth,
                error=e.reason,
            )

        kind = _kind_from_mode(st.st_mode)
        return FileEntry(
            path=path,
            kind=kind,
            size=0 if kind == EntryKind.DIRECTORY else st.st_size,
            modified_at=datetime.fromtimestamp(st.st_mtime),
            source=root,
            relative=relative,
            depth=depth,
        )
