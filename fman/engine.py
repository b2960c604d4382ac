"""
작업 엔진 모듈: 경로 검증, 탐색, 필터, 실행을 통합한 FileOperationEngine 클래스
"""

from typing import List

from .config import FmanConfig
from .confirmation import ConfirmationPolicy
from .errors import PreflightError
from .executor import OperationExecutor
from .filters import FilterEngine
from .models import CancelToken, OperationRequest, ResolvedSource
from .path_resolver import PathResolver
from .report import Report
from .traversal import TreeWalker


class FileOperationEngine:
    """
    파일 작업 통합 클래스

    요청 하나를 검증한 뒤 원본별로 탐색 -> 필터 -> 실행 순서로 처리하고
    모든 결과를 Report로 집계합니다.
    """

    def __init__(self, config: FmanConfig = None, logger=None,
                 confirmation: ConfirmationPolicy = None,
                 cancel_token: CancelToken = None):
        """
        Args:
            config: 설정 객체 (None이면 기본 설정 사용)
            logger: OperationLogger (None이면 로깅 안 함)
            confirmation: 확인 정책
            cancel_token: 전체 취소 플래그 (None이면 새로 생성)
        """
        self.config = config or FmanConfig()
        self.logger = logger
        self.cancel_token = cancel_token or CancelToken()

        self.resolver = PathResolver()
        self.executor = OperationExecutor(
            self.config, confirmation, self.cancel_token, logger
        )

    def plan(self, request: OperationRequest) -> List[ResolvedSource]:
        """
        사전 검사만 수행 (파일 시스템 변경 없음)

        Raises:
            PreflightError: 경로 검증 실패
        """
        try:
            return self.resolver.resolve(request)
        except PreflightError as e:
            if self.logger:
                self.logger.error("사전 검사 실패", error=str(e))
            raise

    def run(self, request: OperationRequest) -> Report:
        """
        요청 실행

        Args:
            request: 작업 요청

        Returns:
            Report (방문한 항목마다 결과 하나)

        Raises:
            PreflightError: 경로 검증 실패 (어떤 변경도 일어나기 전)
        """
        resolved_sources = self.plan(request)

        if self.logger:
            self.logger.log_request(request)

        report = Report(dry_run=request.dry_run)
        walker = TreeWalker(recursive=request.recursive)
        filter_engine = FilterEngine(request.filters)

        for resolved in resolved_sources:
            entries = filter_engine.apply(walker.walk(resolved.source))
            for result in self.executor.execute(request, resolved, entries):
                report.add(result)
                if self.logger:
                    self.logger.log_result(result)

        if self.logger:
            self.logger.log_summary(report.to_dict())

        return report
