"""
작업 실행 모듈: 항목별 복사, 이동, 삭제

한 항목의 실패는 형제 항목 처리에 영향을 주지 않습니다.
폴더 이동/삭제 결과는 하위 항목이 모두 처리된 뒤에 확정됩니다.
"""

import errno
import os
import shutil
import tempfile
from pathlib import Path
from typing import Iterable, Iterator, List, Optional
from dataclasses import dataclass
from enum import Enum

from send2trash import send2trash

from .config import FmanConfig, TEMP_PREFIX
from .confirmation import ConfirmationPolicy, Decision
from .errors import AlreadyExistsError, OperationFailure, UserCancelled, VerificationError
from .models import (
    CancelToken, EntryKind, FileEntry, OperationKind, OperationRequest,
    OperationResult, Outcome, ResolvedSource,
)


class CopyState(Enum):
    """파일 복사 진행 상태"""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    VERIFIED = "verified"
    FAILED = "failed"


@dataclass
class _PendingDirectory:
    """하위 항목 처리를 기다리는 폴더"""
    entry: FileEntry
    target: Optional[Path]
    child_failed: bool = False
    child_skipped: bool = False


def _is_within(path: Path, directory: Path) -> bool:
    return path != directory and path.is_relative_to(directory)


class OperationExecutor:
    """작업 실행 클래스"""

    def __init__(self, config: FmanConfig = None,
                 confirmation: ConfirmationPolicy = None,
                 cancel_token: CancelToken = None,
                 logger=None):
        """
        Args:
            config: 설정 객체 (None이면 기본 설정)
            confirmation: 확인 정책 (None이면 응답자 없는 정책)
            cancel_token: 전체 취소 플래그
            logger: 로거 객체 (선택)
        """
        self.config = config or FmanConfig()
        self.confirmation = confirmation or ConfirmationPolicy()
        self.cancel_token = cancel_token or CancelToken()
        self.logger = logger

    def _log(self, message: str):
        """디버그 로깅 헬퍼 (항목 결과 자체는 엔진이 기록)"""
        if self.logger:
            self.logger.debug(message)

    # ============================================================
    # 배치 처리
    # ============================================================

    def execute(self, request: OperationRequest, resolved: ResolvedSource,
                entries: Iterable[FileEntry]) -> Iterator[OperationResult]:
        """
        원본 하나의 항목 시퀀스 처리

        Args:
            request: 작업 요청
            resolved: 검증된 원본과 대상 경로
            entries: 필터를 통과한 항목 (전위 순서)

        Yields:
            항목마다 정확히 하나의 OperationResult
        """
        pending: List[_PendingDirectory] = []
        skipped_root: Optional[Path] = None

        for entry in entries:
            # 현재 항목을 포함하지 않는 폴더는 하위 처리가 끝났으므로 확정
            while pending and not _is_within(entry.path, pending[-1].entry.path):
                yield self._settle(pending, self._finish_directory(request, pending.pop()))

            if skipped_root is not None and not _is_within(entry.path, skipped_root):
                skipped_root = None

            target = self._target_for(resolved, entry)

            if entry.error:
                result = self._result(entry, Outcome.FAILED, entry.error, target)
            else:
                try:
                    self._gate(request, entry, skipped_root)
                except UserCancelled as e:
                    if entry.is_dir and skipped_root is None:
                        skipped_root = entry.path
                    result = self._result(entry, Outcome.SKIPPED, e.reason, target)
                else:
                    if entry.is_dir and request.recursive and request.kind != OperationKind.COPY:
                        result = self._begin_directory(request, entry, target, pending)
                    else:
                        result = self._run_one(request, entry, target)

            if result is not None:
                yield self._settle(pending, result)

        while pending:
            yield self._settle(pending, self._finish_directory(request, pending.pop()))

    def _gate(self, request: OperationRequest, entry: FileEntry, skipped_root: Optional[Path]):
        """
        항목 시작 전 취소/건너뜀/확인 검사

        Raises:
            UserCancelled: 전체 취소됨, 상위 폴더를 건너뜀, 또는 사용자가 건너뜀/취소 선택
        """
        if self.cancel_token.cancelled:
            raise UserCancelled()
        if skipped_root is not None:
            raise UserCancelled("상위 폴더를 건너뛰었습니다")
        if not self.confirmation.needs_confirmation(request, entry):
            return

        decision = self.confirmation.ask(entry)
        if decision == Decision.CANCEL_ALL:
            self.cancel_token.cancel()
            raise UserCancelled()
        if decision == Decision.SKIP:
            raise UserCancelled("사용자가 건너뛰었습니다")

    @staticmethod
    def _settle(pending: List[_PendingDirectory], result: OperationResult) -> OperationResult:
        """결과를 대기 중인 상위 폴더들에 반영"""
        for directory in pending:
            if result.outcome == Outcome.FAILED:
                directory.child_failed = True
            elif result.outcome == Outcome.SKIPPED:
                directory.child_skipped = True
        return result

    @staticmethod
    def _target_for(resolved: ResolvedSource, entry: FileEntry) -> Optional[Path]:
        if resolved.target is None:
            return None
        return resolved.target / entry.relative

    @staticmethod
    def _result(entry: FileEntry, outcome: Outcome, reason: str = "",
                target: Optional[Path] = None) -> OperationResult:
        return OperationResult(entry=entry, outcome=outcome, reason=reason, target=target)

    def _run_one(self, request: OperationRequest, entry: FileEntry,
                 target: Optional[Path]) -> OperationResult:
        """폴더 대기가 필요 없는 항목 즉시 처리"""
        if request.dry_run:
            if entry.is_dir and request.kind == OperationKind.COPY and not request.recursive:
                return self._result(entry, Outcome.FAILED, "폴더 복사에는 --recursive 옵션이 필요합니다", target)
            return self._result(entry, Outcome.SUCCESS, "드라이 런", target)

        try:
            if request.kind == OperationKind.COPY:
                reason = self._copy_entry(entry, target, request)
            elif request.kind == OperationKind.MOVE:
                reason = self._move_entry(entry, target, request)
            else:
                reason = self._delete_entry(entry, request)
        except OperationFailure as e:
            self._log(f"처리 실패: {entry.path} - {e.reason}")
            return self._result(entry, Outcome.FAILED, e.reason, target)

        return self._result(entry, Outcome.SUCCESS, reason, target)

    # ============================================================
    # 폴더 (하위 항목 처리 후 확정)
    # ============================================================

    def _begin_directory(self, request: OperationRequest, entry: FileEntry,
                         target: Optional[Path],
                         pending: List[_PendingDirectory]) -> Optional[OperationResult]:
        """이동/삭제 대상 폴더를 대기 목록에 등록 (이동은 대상 폴더 먼저 생성)"""
        if request.kind == OperationKind.MOVE and not request.dry_run:
            try:
                self._make_directory(target)
            except OperationFailure as e:
                return self._result(entry, Outcome.FAILED, e.reason, target)

        pending.append(_PendingDirectory(entry=entry, target=target))
        return None

    def _finish_directory(self, request: OperationRequest,
                          directory: _PendingDirectory) -> OperationResult:
        entry, target = directory.entry, directory.target

        if directory.child_failed:
            return self._result(entry, Outcome.FAILED,
                                "하위 항목 처리에 실패하여 폴더를 유지합니다", target)
        if directory.child_skipped:
            return self._result(entry, Outcome.SKIPPED,
                                "건너뛴 하위 항목이 있어 폴더를 유지합니다", target)
        if request.dry_run:
            return self._result(entry, Outcome.SUCCESS, "드라이 런", target)

        try:
            os.rmdir(entry.path)
        except OSError as e:
            if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                return self._result(entry, Outcome.SKIPPED,
                                    "필터에서 제외된 항목이 남아 있어 폴더를 유지합니다", target)
            return self._result(entry, Outcome.FAILED, f"폴더 삭제 실패: {e.strerror or e}", target)

        reason = "이동 완료" if request.kind == OperationKind.MOVE else "삭제 완료"
        return self._result(entry, Outcome.SUCCESS, reason, target)

    # ============================================================
    # 복사
    # ============================================================

    def _copy_entry(self, entry: FileEntry, target: Path, request: OperationRequest) -> str:
        if entry.kind == EntryKind.DIRECTORY:
            if not request.recursive:
                raise OperationFailure(entry.path, "폴더 복사에는 --recursive 옵션이 필요합니다")
            self._make_directory(target)
            return "폴더 생성"

        if entry.kind == EntryKind.SYMLINK:
            self._copy_symlink(entry.path, target, request.overwrite)
            return "링크 복사 완료"

        self._copy_file(entry.path, target, request.overwrite)
        return "복사 완료"

    def _copy_file(self, src: Path, target: Path, overwrite: bool) -> CopyState:
        """
        검증된 파일 복사

        대상 폴더의 임시 파일에 기록하고 바이트 수를 확인한 뒤 대상 이름으로 교체합니다.
        실패 시 임시 파일만 삭제되므로 기존 대상 파일은 손상되지 않습니다.

        Args:
            src: 원본 파일
            target: 대상 파일 경로
            overwrite: 기존 대상 파일 덮어쓰기 허용

        Returns:
            CopyState.VERIFIED

        Raises:
            OperationFailure: 복사 또는 검증 실패
        """
        self._check_target(target, overwrite)
        if not src.is_file():
            raise OperationFailure(src, "일반 파일이 아니므로 복사할 수 없습니다")

        self._ensure_directory(target.parent)

        state = CopyState.PENDING
        try:
            expected = os.stat(src).st_size
            fd, tmp_name = tempfile.mkstemp(prefix=TEMP_PREFIX, dir=target.parent)
        except OSError as e:
            raise OperationFailure(src, f"복사 준비 실패: {e.strerror or e}", e)

        tmp = Path(tmp_name)
        state = CopyState.IN_PROGRESS
        try:
            with os.fdopen(fd, 'wb') as fdst, open(src, 'rb') as fsrc:
                written = self._transfer(fsrc, fdst)

            actual = tmp.stat().st_size
            if written != expected or actual != expected:
                raise VerificationError(
                    src, f"복사된 크기가 원본과 다릅니다 ({written}/{expected} 바이트)"
                )

            if self.config.preserve_metadata:
                shutil.copystat(src, tmp)
            os.replace(tmp, target)
            state = CopyState.VERIFIED

        except OSError as e:
            state = CopyState.FAILED
            raise OperationFailure(src, f"복사 실패: {e.strerror or e}", e)
        except OperationFailure:
            state = CopyState.FAILED
            raise
        finally:
            if state != CopyState.VERIFIED:
                tmp.unlink(missing_ok=True)
                self._log(f"임시 파일 정리: {tmp}")

        self._log(f"복사 검증 완료: {src} -> {target} ({expected} 바이트)")
        return state

    def _transfer(self, fsrc, fdst) -> int:
        """청크 단위 스트림 복사 후 기록한 바이트 수 반환"""
        written = 0
        while True:
            chunk = fsrc.read(self.config.chunk_size)
            if not chunk:
                break
            fdst.write(chunk)
            written += len(chunk)
        return written

    def _copy_symlink(self, src: Path, target: Path, overwrite: bool):
        self._check_target(target, overwrite)
        self._ensure_directory(target.parent)
        try:
            link = os.readlink(src)
            if os.path.lexists(target):
                os.unlink(target)
            os.symlink(link, target)
        except OSError as e:
            raise OperationFailure(src, f"링크 복사 실패: {e.strerror or e}", e)

    # ============================================================
    # 이동
    # ============================================================

    def _move_entry(self, entry: FileEntry, target: Path, request: OperationRequest) -> str:
        self._check_target(target, request.overwrite and not entry.is_dir)
        self._ensure_directory(target.parent)

        rename = os.replace if request.overwrite else os.rename
        try:
            rename(entry.path, target)
            return "이동 완료"
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise OperationFailure(entry.path, f"이동 실패: {e.strerror or e}", e)

        # 다른 볼륨: 검증된 복사가 끝난 뒤에만 원본 삭제
        if entry.kind == EntryKind.DIRECTORY:
            raise OperationFailure(
                entry.path, "다른 볼륨으로 폴더를 이동하려면 --recursive 옵션이 필요합니다"
            )

        self._log(f"다른 볼륨으로 이동, 복사 후 원본 삭제: {entry.path} -> {target}")
        if entry.kind == EntryKind.SYMLINK:
            self._copy_symlink(entry.path, target, request.overwrite)
        else:
            self._copy_file(entry.path, target, request.overwrite)

        try:
            self._remove_file(entry.path)
        except OSError as e:
            raise OperationFailure(
                entry.path, f"복사는 완료되었지만 원본 삭제에 실패했습니다: {e.strerror or e}", e
            )
        return "이동 완료 (복사 후 원본 삭제)"

    # ============================================================
    # 삭제
    # ============================================================

    def _delete_entry(self, entry: FileEntry, request: OperationRequest) -> str:
        if entry.kind == EntryKind.DIRECTORY:
            # 재귀가 아닐 때는 빈 폴더만 삭제
            try:
                os.rmdir(entry.path)
            except OSError as e:
                if e.errno in (errno.ENOTEMPTY, errno.EEXIST):
                    raise OperationFailure(
                        entry.path, "폴더가 비어 있지 않습니다 (--recursive 옵션 필요)", e
                    )
                raise OperationFailure(entry.path, f"폴더 삭제 실패: {e.strerror or e}", e)
            return "삭제 완료"

        try:
            if request.use_trash:
                send2trash(str(entry.path))
                return "휴지통으로 이동"
            self._remove_file(entry.path)
        except OSError as e:
            raise OperationFailure(entry.path, f"삭제 실패: {e.strerror or e}", e)
        return "삭제 완료"

    # ============================================================
    # 보조
    # ============================================================

    @staticmethod
    def _remove_file(path: Path):
        os.unlink(path)

    @staticmethod
    def _check_target(target: Path, overwrite: bool):
        """대상 경로 충돌 확인"""
        if not os.path.lexists(target):
            return
        if not overwrite:
            raise AlreadyExistsError(target)
        if target.is_dir() and not target.is_symlink():
            raise OperationFailure(target, "대상이 폴더이므로 덮어쓸 수 없습니다")

    def _ensure_directory(self, path: Path):
        """
        디렉토리 존재 확인 및 생성

        Raises:
            OperationFailure: 생성 실패 또는 같은 이름의 파일이 있음
        """
        try:
            path.mkdir(parents=True, exist_ok=True)
        except (OSError, PermissionError) as e:
            self._log(f"디렉토리 생성 실패: {path} - {e}")
            raise OperationFailure(path, f"대상 디렉토리 생성 실패: {e.strerror or e}", e)

    def _make_directory(self, target: Path):
        """대상 폴더 생성 (이미 폴더면 병합)"""
        if os.path.lexists(target) and not target.is_dir():
            raise OperationFailure(target, "같은 이름의 파일이 있어 폴더를 만들 수 없습니다")
        self._ensure_directory(target)
