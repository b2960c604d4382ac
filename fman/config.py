"""
설정 모듈: 애플리케이션 전역 설정 및 상수 정의
"""

from pathlib import Path
from dataclasses import dataclass, field


# 기본 설정 파일 위치
DEFAULT_CONFIG_PATH = Path.home() / ".fman.yaml"

# 복사 시 임시 파일 접두어
TEMP_PREFIX = ".fman-tmp-"


@dataclass
class FmanConfig:
    """fman 설정 클래스"""

    # 대상 파일이 있으면 덮어쓰기 (False면 해당 항목 실패 처리)
    overwrite: bool = False

    # 삭제 시 항목별 확인
    confirm_delete: bool = True

    # 복사/이동 시 최상위 원본 확인
    confirm_transfer: bool = False

    # 삭제 대신 시스템 휴지통으로 이동
    use_trash: bool = False

    # 복사 시 수정 시각/권한 유지 (shutil.copystat)
    preserve_metadata: bool = True

    # 복사 청크 크기 (바이트)
    chunk_size: int = 1024 * 1024

    # 로그 폴더
    log_dir: Path = field(default_factory=lambda: Path.home() / ".fman" / "logs")

    # JSON 세션 로그 저장 여부
    json_log: bool = True

    def __post_init__(self):
        """초기화 후 처리"""
        self.log_dir = Path(self.log_dir).expanduser()
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size는 양수여야 합니다: {self.chunk_size}")
