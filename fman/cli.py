"""
CLI 인터페이스 모듈: 명령줄 인수를 OperationRequest로 변환하고 엔진 실행

종료 코드:
    0  모든 항목 성공 (건너뜀 포함)
    1  하나 이상 실패
    2  잘못된 호출 (인수/설정 오류, 사전 검사 실패)
"""

import argparse
import signal
import sys
from pathlib import Path
from typing import List, Optional

from .config import FmanConfig
from .config_loader import load_config
from .confirmation import ConfirmationPolicy, make_console_responder
from .engine import FileOperationEngine
from .errors import ConfigError, PreflightError
from .filters import build_filters, parse_datetime, parse_size
from .logger import create_session_logger
from .models import CancelToken, OperationKind, OperationRequest
from .report import EXIT_INVALID, format_report


def _size_arg(text: str) -> int:
    try:
        return parse_size(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _datetime_arg(text: str):
    try:
        return parse_datetime(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _common_options() -> argparse.ArgumentParser:
    """하위 명령 공통 옵션"""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-r", "--recursive",
        action="store_true",
        help="하위 폴더까지 재귀적으로 처리"
    )
    common.add_argument(
        "--confirm",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="항목별 확인 여부 (기본: 설정 파일 값)"
    )
    common.add_argument(
        "--dry-run",
        action="store_true",
        help="실제 변경 없이 미리보기"
    )

    filters = common.add_argument_group("필터")
    filters.add_argument(
        "--name",
        type=str,
        default=None,
        help="파일명 glob 패턴 (예: '*.txt')"
    )
    filters.add_argument(
        "--min-size",
        type=_size_arg,
        default=None,
        help="최소 크기 (예: 10K, 2M)"
    )
    filters.add_argument(
        "--max-size",
        type=_size_arg,
        default=None,
        help="최대 크기 (예: 1G)"
    )
    filters.add_argument(
        "--modified-after",
        type=_datetime_arg,
        default=None,
        help="이 시각 이후 수정된 항목만 (YYYY-MM-DD[THH:MM])"
    )
    filters.add_argument(
        "--modified-before",
        type=_datetime_arg,
        default=None,
        help="이 시각 이전 수정된 항목만 (YYYY-MM-DD[THH:MM])"
    )

    common.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML 설정 파일 경로 (기본: ~/.fman.yaml)"
    )
    common.add_argument(
        "--log-dir",
        type=str,
        default=None,
        help="로그 폴더 (기본: ~/.fman/logs)"
    )
    common.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="항목별 진행 로그를 콘솔에 출력하지 않음"
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    """명령줄 파서 생성"""
    common = _common_options()

    parser = argparse.ArgumentParser(
        prog="fman",
        description="파일 관리 도구 - 안전한 복사, 이동, 삭제",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
사용 예시:
    # 폴더 복사
    fman copy -r ~/project ~/backup

    # 여러 파일을 폴더로 이동
    fman move a.txt b.txt ~/archive

    # 미리보기 후 삭제
    fman delete -r --name '*.tmp' ~/Downloads --dry-run
        """
    )
    subparsers = parser.add_subparsers(dest="command", required=True, metavar="COMMAND")

    for command, help_text in (("copy", "파일/폴더 복사"), ("move", "파일/폴더 이동 또는 이름 변경")):
        sub = subparsers.add_parser(command, parents=[common], help=help_text)
        sub.add_argument(
            "paths",
            nargs="+",
            metavar="PATH",
            help="원본 경로들과 마지막 대상 경로"
        )
        sub.add_argument(
            "-f", "--force",
            action="store_true",
            help="대상 파일이 있으면 덮어쓰기"
        )

    delete = subparsers.add_parser("delete", parents=[common], help="파일/폴더 삭제")
    delete.add_argument(
        "paths",
        nargs="+",
        metavar="TARGET",
        help="삭제할 경로들"
    )
    delete.add_argument(
        "--trash",
        action="store_true",
        help="영구 삭제 대신 시스템 휴지통으로 이동"
    )

    return parser


def build_request(args: argparse.Namespace, config: FmanConfig) -> OperationRequest:
    """
    파싱된 인수와 설정으로 OperationRequest 생성

    Args:
        args: argparse 결과
        config: 설정 (명령줄 옵션이 우선)

    Returns:
        OperationRequest
    """
    kind = OperationKind(args.command)

    if kind == OperationKind.DELETE:
        sources, destination = args.paths, None
        default_confirm = config.confirm_delete
        overwrite = False
        use_trash = args.trash or config.use_trash
    else:
        sources, destination = args.paths[:-1], args.paths[-1]
        default_confirm = config.confirm_transfer
        overwrite = args.force or config.overwrite
        use_trash = False

    return OperationRequest(
        kind=kind,
        sources=tuple(Path(s) for s in sources),
        destination=Path(destination) if destination is not None else None,
        recursive=args.recursive,
        filters=build_filters(
            name=args.name,
            min_size=args.min_size,
            max_size=args.max_size,
            modified_after=args.modified_after,
            modified_before=args.modified_before,
        ),
        confirm=default_confirm if args.confirm is None else args.confirm,
        overwrite=overwrite,
        dry_run=args.dry_run,
        use_trash=use_trash,
    )


def _install_interrupt_handler(cancel_token: CancelToken):
    """Ctrl-C를 전체 취소 플래그로 전환 (진행 중인 항목은 끝까지 처리)"""

    def handle(signum, frame):
        print("\n중단 요청: 진행 중인 항목을 마친 뒤 나머지를 건너뜁니다.", file=sys.stderr)
        cancel_token.cancel()

    try:
        return signal.signal(signal.SIGINT, handle)
    except ValueError:
        # 메인 스레드가 아니면 시그널 핸들러를 설치할 수 없음
        return None


def main(argv: Optional[List[str]] = None) -> int:
    """CLI 진입점"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in ("copy", "move") and len(args.paths) < 2:
        parser.error(f"{args.command}: 원본과 대상 경로가 모두 필요합니다")

    try:
        config = load_config(Path(args.config) if args.config else None)
    except ConfigError as e:
        print(f"오류: {e}", file=sys.stderr)
        return EXIT_INVALID

    if args.log_dir:
        config.log_dir = Path(args.log_dir).expanduser()

    request = build_request(args, config)

    logger = create_session_logger(config.log_dir, quiet=args.quiet, json_log=config.json_log)
    cancel_token = CancelToken()
    confirmation = ConfirmationPolicy(make_console_responder(request.kind))
    engine = FileOperationEngine(config, logger, confirmation, cancel_token)

    previous_handler = _install_interrupt_handler(cancel_token)
    try:
        report = engine.run(request)
    except PreflightError as e:
        print(f"오류: {e}", file=sys.stderr)
        return EXIT_INVALID
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGINT, previous_handler)
        logger.finalize()

    print(format_report(report))

    if request.dry_run:
        print("이것은 미리보기입니다. 실제 실행하려면 --dry-run 없이 다시 실행하세요.")

    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
