"""
보고서 모듈: 배치 결과 집계 및 출력용 보고서 생성
"""

from typing import List, Tuple
from dataclasses import dataclass, field

from .models import FileEntry, OperationResult, Outcome


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


@dataclass
class Report:
    """배치 결과 집계 (항목당 결과 하나)"""
    succeeded: int = 0
    skipped: int = 0
    failed: List[Tuple[FileEntry, str]] = field(default_factory=list)
    results: List[OperationResult] = field(default_factory=list)
    dry_run: bool = False

    def add(self, result: OperationResult):
        """결과 추가"""
        self.results.append(result)
        if result.outcome == Outcome.SUCCESS:
            self.succeeded += 1
        elif result.outcome == Outcome.SKIPPED:
            self.skipped += 1
        else:
            self.failed.append((result.entry, result.reason))

    @property
    def total(self) -> int:
        return self.succeeded + self.skipped + len(self.failed)

    @property
    def exit_code(self) -> int:
        return EXIT_FAILED if self.failed else EXIT_OK

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "skipped": self.skipped,
            "failed": len(self.failed),
            "dry_run": self.dry_run,
        }


def format_size(size_bytes: float) -> str:
    """바이트를 읽기 쉬운 형식으로 변환"""
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.2f} PB"


def format_report(report: Report, max_errors: int = 10) -> str:
    """
    실행 결과 보고서 생성

    Args:
        report: 집계된 보고서
        max_errors: 표시할 최대 오류 수

    Returns:
        포맷된 보고서
    """
    transferred = sum(
        r.entry.size for r in report.results if r.outcome == Outcome.SUCCESS
    )

    lines = []
    lines.append("=" * 60)
    lines.append("  실행 결과")
    lines.append("=" * 60)

    if report.dry_run:
        lines.append("\n[드라이 런 모드 - 실제 파일 변경 없음]")

    lines.append(f"\n총 항목: {report.total}개")
    lines.append(f"  성공: {report.succeeded}개")
    lines.append(f"  건너뜀: {report.skipped}개")
    lines.append(f"  실패: {len(report.failed)}개")
    lines.append(f"\n처리된 용량: {format_size(transferred)}")

    if report.failed:
        lines.append(f"\n오류 발생 ({len(report.failed)}개):")
        for entry, reason in report.failed[:max_errors]:
            lines.append(f"  - {entry.path}")
            lines.append(f"    오류: {reason}")
        if len(report.failed) > max_errors:
            lines.append(f"  ... 외 {len(report.failed) - max_errors}개")

    lines.append("\n" + "=" * 60)

    return "\n".join(lines)
