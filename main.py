#!/usr/bin/env python3
"""
파일 관리 도구 - 메인 진입점

사용법:
    python main.py copy <원본>... <대상> [--recursive] [--force]
    python main.py move <원본>... <대상> [--recursive]
    python main.py delete <대상>... [--recursive] [--trash]

기능:
    1. 검증된 복사 (바이트 수 확인, 실패 시 임시 파일 정리)
    2. 이동 / 이름 변경 (다른 볼륨이면 복사 검증 후 원본 삭제)
    3. 삭제 (하위 항목이 모두 성공해야 폴더 삭제)
    4. 이름/크기/수정일 필터
"""

import sys
import io

from fman.cli import main as cli_main


# Windows 콘솔 인코딩 설정
def _setup_console_encoding():
    """Windows 콘솔 출력을 UTF-8로 설정"""
    if sys.platform == 'win32':
        try:
            if hasattr(sys.stdout, 'buffer') and sys.stdout.buffer and not sys.stdout.closed:
                sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8', errors='replace')
            if hasattr(sys.stderr, 'buffer') and sys.stderr.buffer and not sys.stderr.closed:
                sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8', errors='replace')
        except (ValueError, AttributeError, OSError):
            pass


def main():
    """메인 함수"""
    _setup_console_encoding()
    sys.exit(cli_main())


if __name__ == "__main__":
    main()
