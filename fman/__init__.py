"""
fman - 파일 관리 도구 핵심 모듈

제공 기능:
- FmanConfig: 설정 클래스
- FileOperationEngine: 통합 작업 엔진
- PathResolver: 경로 검증
- TreeWalker: 트리 탐색
- FilterEngine: 이름/크기/수정일 필터
- OperationExecutor: 안전한 복사/이동/삭제
"""

from .config import FmanConfig
from .engine import FileOperationEngine
from .path_resolver import PathResolver
from .traversal import TreeWalker
from .filters import FilterEngine, NameGlob, SizeRange, ModifiedRange
from .executor import OperationExecutor
from .models import OperationKind, OperationRequest, FileEntry, OperationResult, Outcome
from .report import Report

__version__ = "0.1.0"

__all__ = [
    'FmanConfig',
    'FileOperationEngine',
    'PathResolver',
    'TreeWalker',
    'FilterEngine',
    'NameGlob',
    'SizeRange',
    'ModifiedRange',
    'OperationExecutor',
    'OperationKind',
    'OperationRequest',
    'FileEntry',
    'OperationResult',
    'Outcome',
    'Report',
]
