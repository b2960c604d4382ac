"""
로깅 모듈: 세션 단위 작업 로그 (텍스트 + JSON)

텍스트 로그에는 모든 레벨을, 콘솔에는 console_level 이상만 출력합니다.
JSON 로그는 항목별 결과를 나중에 다시 읽을 수 있도록 구조화해 저장합니다.
"""

import logging
import json
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional
from dataclasses import dataclass, asdict

from .models import OperationResult, OperationRequest, Outcome


@dataclass
class LogEntry:
    """로그 항목"""
    timestamp: str
    level: str
    action: str
    source: Optional[str] = None
    target: Optional[str] = None
    outcome: Optional[str] = None
    reason: Optional[str] = None
    details: Optional[Dict] = None


# 결과별 로그 레벨
_OUTCOME_LEVELS = {
    Outcome.SUCCESS: logging.INFO,
    Outcome.SKIPPED: logging.WARNING,
    Outcome.FAILED: logging.ERROR,
}


class OperationLogger:
    """작업 세션 로거"""

    def __init__(self, log_dir: Path, session_name: str = None,
                 console_level: int = logging.INFO, json_log: bool = True):
        """
        Args:
            log_dir: 로그 파일 저장 디렉토리
            session_name: 세션 이름 (None이면 세션 ID 사용)
            console_level: 콘솔 출력 레벨
            json_log: 종료 시 JSON 로그 저장 여부
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # 같은 초에 여러 세션이 열려도 파일이 겹치지 않도록 마이크로초까지 사용
        self.session_id = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        self.session_name = session_name or self.session_id
        self.json_log = json_log

        self.log_file = self.log_dir / f"fman_{self.session_id}.log"
        self.json_log_file = self.log_dir / f"fman_{self.session_id}.json"

        self.entries: List[LogEntry] = []
        self.summary: Optional[Dict] = None
        self.logger = self._build_logger(console_level)

        self.debug("세션 시작", details={"session_id": self.session_id})

    def _build_logger(self, console_level: int) -> logging.Logger:
        logger = logging.getLogger(f"fman.session.{self.session_id}")
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        logger.handlers = []

        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter('%(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    def _emit(self, level: int, action: str, source: str = None, target: str = None,
              outcome: str = None, reason: str = None, details: Dict = None):
        """항목을 기록하고 표준 로거로 출력"""
        self.entries.append(LogEntry(
            timestamp=datetime.now().isoformat(),
            level=logging.getLevelName(level),
            action=action,
            source=source,
            target=target,
            outcome=outcome,
            reason=reason,
            details=details,
        ))

        message = action
        if source:
            message += f" | 원본: {source}"
        if target:
            message += f" | 대상: {target}"
        if reason and reason != action:
            message += f" | 사유: {reason}"
        if details:
            message += " | " + ", ".join(f"{k}={v}" for k, v in details.items())
        self.logger.log(level, message)

    def debug(self, action: str, source: str = None, details: Dict = None):
        self._emit(logging.DEBUG, action, source=source, details=details)

    def info(self, action: str, source: str = None, details: Dict = None):
        self._emit(logging.INFO, action, source=source, details=details)

    def warning(self, action: str, source: str = None, details: Dict = None):
        self._emit(logging.WARNING, action, source=source, details=details)

    def error(self, action: str, source: str = None, error: str = None,
              details: Dict = None):
        self._emit(logging.ERROR, action, source=source, reason=error, details=details)

    def log_request(self, request: OperationRequest):
        """작업 요청 로그"""
        self._emit(
            logging.INFO,
            f"{request.kind.value} 시작",
            target=str(request.destination) if request.destination else None,
            details={
                "sources": len(request.sources),
                "recursive": request.recursive,
                "filters": len(request.filters),
                "confirm": request.confirm,
                "overwrite": request.overwrite,
                "dry_run": request.dry_run,
            }
        )

    def log_result(self, result: OperationResult):
        """항목 처리 결과 로그 (성공: INFO, 건너뜀: WARNING, 실패: ERROR)"""
        labels = {
            Outcome.SUCCESS: result.reason or "완료",
            Outcome.SKIPPED: "건너뜀",
            Outcome.FAILED: "실패",
        }
        self._emit(
            _OUTCOME_LEVELS[result.outcome],
            labels[result.outcome],
            source=str(result.entry.path),
            target=str(result.target) if result.target else None,
            outcome=result.outcome.value,
            reason=result.reason,
        )

    def log_summary(self, summary: Dict):
        """배치 요약 로그 (JSON 로그에도 별도 저장)"""
        self.summary = dict(summary)
        self._emit(logging.INFO, "작업 요약", details=self.summary)

    def save_json_log(self):
        """JSON 형식 로그 저장"""
        log_data = {
            "session_id": self.session_id,
            "session_name": self.session_name,
            "start_time": self.entries[0].timestamp if self.entries else None,
            "end_time": datetime.now().isoformat(),
            "summary": self.summary,
            "total_entries": len(self.entries),
            "entries": [asdict(entry) for entry in self.entries],
        }

        try:
            with open(self.json_log_file, 'w', encoding='utf-8') as f:
                json.dump(log_data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            self.logger.error(f"JSON 로그 저장 실패: {e}")

    def finalize(self):
        """세션 종료: JSON 로그 저장 후 핸들러 정리"""
        self.debug("세션 종료", details={"total_entries": len(self.entries)})
        if self.json_log:
            self.save_json_log()

        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def get_log_paths(self) -> Dict[str, Path]:
        return {"text_log": self.log_file, "json_log": self.json_log_file}

    def get_statistics(self) -> Dict:
        """레벨별/결과별 집계와 실패 목록"""
        by_level: Dict[str, int] = {}
        by_outcome: Dict[str, int] = {}
        errors = []

        for entry in self.entries:
            by_level[entry.level] = by_level.get(entry.level, 0) + 1
            if entry.outcome:
                by_outcome[entry.outcome] = by_outcome.get(entry.outcome, 0) + 1
            if entry.level == "ERROR":
                errors.append({
                    "timestamp": entry.timestamp,
                    "source": entry.source,
                    "error": entry.reason,
                })

        return {
            "total_entries": len(self.entries),
            "by_level": by_level,
            "by_outcome": by_outcome,
            "errors": errors,
        }


def create_session_logger(base_dir: Path = None, session_name: str = None,
                          quiet: bool = False, json_log: bool = True) -> OperationLogger:
    """
    새 세션 로거 생성 헬퍼 함수

    Args:
        base_dir: 로그 기본 디렉토리 (None이면 ~/.fman/logs)
        session_name: 세션 이름
        quiet: True면 콘솔에는 경고 이상만 출력
        json_log: JSON 로그 저장 여부

    Returns:
        OperationLogger 인스턴스
    """
    if base_dir is None:
        base_dir = Path.home() / ".fman" / "logs"

    return OperationLogger(
        log_dir=base_dir,
        session_name=session_name,
        console_level=logging.WARNING if quiet else logging.INFO,
        json_log=json_log,
    )
