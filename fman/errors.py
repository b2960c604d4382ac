"""
오류 모듈: fman 예외 계층 정의

사전 검사 오류(PreflightError)는 파일 시스템 변경 전에 요청 전체를 중단시키고,
항목별 오류(TraversalError, OperationFailure)는 보고서에 기록된 뒤 작업이 계속됩니다.
"""

from pathlib import Path
from typing import Optional


class FmanError(Exception):
    """fman 기본 예외"""


class ConfigError(FmanError):
    """설정 파일을 읽을 수 없거나 형식이 잘못된 경우"""


# ============================================================
# 사전 검사 오류 (요청 전체 중단)
# ============================================================

class PreflightError(FmanError):
    """변경 작업 시작 전에 발견된 요청 오류"""


class InvalidPathError(PreflightError):
    """원본 경로가 존재하지 않음"""


class InvalidDestinationError(PreflightError):
    """대상 경로가 없거나 사용할 수 없음"""


class SelfConflictError(PreflightError):
    """대상 경로가 원본과 같거나 원본 내부에 있음"""


# ============================================================
# 항목별 오류 (보고서에 기록, 작업 계속)
# ============================================================

class EntryError(FmanError):
    """단일 항목 처리 오류"""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{reason}: {path}")


class TraversalError(EntryError):
    """탐색 중 디렉토리/항목을 읽을 수 없음"""


class OperationFailure(EntryError):
    """복사/이동/삭제 실패"""

    def __init__(self, path: Path, reason: str, cause: Optional[BaseException] = None):
        super().__init__(path, reason)
        self.cause = cause


class AlreadyExistsError(OperationFailure):
    """대상 파일이 이미 존재함 (덮어쓰기 미허용)"""

    def __init__(self, path: Path):
        super().__init__(path, "대상 파일이 이미 존재합니다")


class VerificationError(OperationFailure):
    """복사된 바이트 수가 원본과 다름"""


class UserCancelled(FmanError):
    """사용자가 항목을 건너뛰거나 전체 작업을 취소함 (결과는 SKIPPED)"""

    def __init__(self, reason: str = "사용자가 전체 작업을 취소했습니다"):
        self.reason = reason
        super().__init__(reason)
