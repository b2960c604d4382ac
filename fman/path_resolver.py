"""
경로 검증 모듈: 원본/대상 경로 정규화 및 사전 검사

이 단계의 오류는 파일 시스템을 변경하기 전에 요청 전체를 중단시킵니다.
"""

import os
from pathlib import Path
from typing import List, Union

from .errors import InvalidPathError, InvalidDestinationError, SelfConflictError
from .models import OperationKind, OperationRequest, ResolvedSource


def canonical_path(raw: Union[str, Path]) -> Path:
    """
    절대 경로로 정규화 (~/ 처리)

    마지막 구성요소는 심볼릭 링크일 수 있으므로 부모 디렉토리만 resolve 합니다.

    Args:
        raw: 사용자가 입력한 경로

    Returns:
        정규화된 절대 경로
    """
    path = Path(os.path.abspath(Path(raw).expanduser()))
    if path.parent == path:
        return path
    return path.parent.resolve() / path.name


class PathResolver:
    """요청 경로 검증 클래스"""

    def resolve(self, request: OperationRequest) -> List[ResolvedSource]:
        """
        요청의 원본/대상 경로를 검증하고 원본별 대상 경로 계산

        Args:
            request: 작업 요청

        Returns:
            ResolvedSource 리스트 (원본 순서 유지)

        Raises:
            InvalidPathError: 원본 경로가 존재하지 않음, 중복되거나 다른 원본 안에 포함됨
            InvalidDestinationError: 대상 경로 또는 그 부모 디렉토리가 없음
            SelfConflictError: 대상이 원본과 같거나 원본 내부에 있음
        """
        if not request.sources:
            raise InvalidPathError("원본 경로가 지정되지 않았습니다")

        sources = [self._resolve_source(raw) for raw in request.sources]
        self._check_overlap(sources, request.recursive)

        if request.kind == OperationKind.DELETE:
            return [ResolvedSource(source=src) for src in sources]

        if request.destination is None:
            raise InvalidDestinationError("대상 경로가 지정되지 않았습니다")

        destination = canonical_path(request.destination)
        if not destination.parent.is_dir():
            raise InvalidDestinationError(
                f"대상 경로의 상위 폴더가 존재하지 않습니다: {destination.parent}"
            )

        dest_is_dir = destination.is_dir()
        if len(sources) > 1 and not dest_is_dir:
            raise InvalidDestinationError(
                f"원본이 여러 개일 때 대상은 기존 폴더여야 합니다: {destination}"
            )

        resolved = []
        for src in sources:
            # 대상이 폴더면 그 안으로, 아니면 이름 변경
            target = destination / src.name if dest_is_dir else destination
            self._check_self_conflict(src, destination, target)
            resolved.append(ResolvedSource(source=src, target=target))

        return resolved

    def _resolve_source(self, raw: Union[str, Path]) -> Path:
        path = canonical_path(raw)
        if not os.path.lexists(path):
            raise InvalidPathError(f"원본 경로가 존재하지 않습니다: {path}")
        return path

    @staticmethod
    def _check_self_conflict(source: Path, destination: Path, target: Path):
        """대상/최종 경로가 원본과 같거나 원본 폴더 내부인지 확인"""
        if source.is_symlink():
            real_source = source
            is_dir = False
        else:
            real_source = source.resolve()
            is_dir = real_source.is_dir()

        for candidate in (destination, target):
            real = candidate.resolve()
            if real == real_source or (is_dir and real.is_relative_to(real_source)):
                raise SelfConflictError(
                    f"대상 경로가 원본과 같거나 원본 내부에 있습니다: {source} -> {candidate}"
                )

    @staticmethod
    def _check_overlap(sources: List[Path], recursive: bool):
        """같은 원본이 두 번, 또는 재귀 모드에서 다른 원본 안의 경로가 지정되었는지 확인"""
        for i, src in enumerate(sources):
            for other in sources[:i]:
                if src == other:
                    raise InvalidPathError(f"같은 원본 경로가 두 번 지정되었습니다: {src}")
                if recursive and (src.is_relative_to(other) or other.is_relative_to(src)):
                    raise InvalidPathError(
                        f"원본 경로가 다른 원본 안에 포함됩니다: {other} / {src}"
                    )
