"""
확인 정책 모듈: 항목별 사용자 확인 필요 여부와 응답 처리
"""

from typing import Callable, Optional
from enum import Enum

from .models import FileEntry, OperationKind, OperationRequest


class Decision(Enum):
    """사용자 응답"""
    PROCEED = "proceed"
    SKIP = "skip"
    CANCEL_ALL = "cancel_all"


Responder = Callable[[FileEntry], Decision]


def needs_confirmation(request: OperationRequest, entry: FileEntry) -> bool:
    """
    확인이 필요한지 판단 (부작용 없음)

    삭제는 모든 항목, 복사/이동은 사용자가 지정한 최상위 원본만 확인합니다.
    """
    if not request.confirm:
        return False
    if request.kind == OperationKind.DELETE:
        return True
    return entry.depth == 0


class ConfirmationPolicy:
    """확인 정책 클래스"""

    def __init__(self, responder: Optional[Responder] = None):
        """
        Args:
            responder: 항목을 받아 Decision을 돌려주는 차단형 함수
                       (None이면 확인이 필요한 항목은 모두 건너뜀)
        """
        self.responder = responder

    def needs_confirmation(self, request: OperationRequest, entry: FileEntry) -> bool:
        return needs_confirmation(request, entry)

    def ask(self, entry: FileEntry) -> Decision:
        if self.responder is None:
            return Decision.SKIP
        return self.responder(entry)


_ACTION_LABELS = {
    OperationKind.COPY: "복사",
    OperationKind.MOVE: "이동",
    OperationKind.DELETE: "삭제",
}

_ANSWERS = {
    'y': Decision.PROCEED,
    'yes': Decision.PROCEED,
    'n': Decision.SKIP,
    'no': Decision.SKIP,
    'q': Decision.CANCEL_ALL,
    'quit': Decision.CANCEL_ALL,
}


def make_console_responder(kind: OperationKind,
                           input_func: Optional[Callable[[str], str]] = None,
                           print_func: Callable[[str], None] = print) -> Responder:
    """
    콘솔 프롬프트 응답 함수 생성

    Args:
        kind: 작업 유형 (프롬프트 문구용)
        input_func: 입력 함수 (None이면 호출 시점의 input 사용)
        print_func: 안내 출력 함수

    Returns:
        Responder
    """
    label = _ACTION_LABELS[kind]

    def respond(entry: FileEntry) -> Decision:
        suffix = " (하위 항목 포함)" if entry.is_dir else ""
        message = f"{entry.path}{suffix} {label}하시겠습니까? [y/n/q] (기본: n): "
        read = input_func if input_func is not None else input

        while True:
            try:
                answer = read(message).strip().lower()
            except EOFError:
                return Decision.CANCEL_ALL

            if not answer:
                return Decision.SKIP
            if answer in _ANSWERS:
                return _ANSWERS[answer]
            print_func("  잘못된 선택입니다. y(진행), n(건너뛰기), q(전체 취소) 중에서 선택하세요.")

    return respond
