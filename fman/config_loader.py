"""
YAML 설정 파일 로더
"""

import yaml
from pathlib import Path
from typing import Optional, Dict, Any

from .config import FmanConfig, DEFAULT_CONFIG_PATH
from .errors import ConfigError


# YAML 키 -> 타입
_KNOWN_KEYS = {
    'overwrite': bool,
    'confirm_delete': bool,
    'confirm_transfer': bool,
    'use_trash': bool,
    'preserve_metadata': bool,
    'chunk_size': int,
    'log_dir': str,
    'json_log': bool,
}


def load_yaml_config(config_path: Path) -> Dict[str, Any]:
    """
    YAML 설정 파일 로드

    Args:
        config_path: YAML 파일 경로

    Returns:
        설정 딕셔너리

    Raises:
        ConfigError: 파일이 없거나 YAML 형식이 잘못된 경우
    """
    if not config_path.exists():
        raise ConfigError(f"설정 파일을 찾을 수 없습니다: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"설정 파일 형식 오류: {config_path} - {e}")
    except OSError as e:
        raise ConfigError(f"설정 파일을 읽을 수 없습니다: {config_path} - {e}")

    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"설정 파일 최상위는 매핑이어야 합니다: {config_path}")

    return config_data


def expand_path(path_str: str) -> Path:
    """경로 확장 (~/ 처리)"""
    return Path(path_str).expanduser().resolve()


def create_config_from_yaml(yaml_path: Path) -> FmanConfig:
    """
    YAML 파일에서 FmanConfig 생성

    Args:
        yaml_path: YAML 설정 파일 경로

    Returns:
        FmanConfig 인스턴스
    """
    data = load_yaml_config(yaml_path)

    values = {}
    for key, value in data.items():
        if key not in _KNOWN_KEYS:
            raise ConfigError(f"알 수 없는 설정 항목입니다: {key}")

        expected = _KNOWN_KEYS[key]
        # bool은 int의 하위 타입이므로 따로 확인
        if expected is int and (isinstance(value, bool) or not isinstance(value, int)):
            raise ConfigError(f"'{key}' 값은 정수여야 합니다: {value!r}")
        if not isinstance(value, expected):
            raise ConfigError(f"'{key}' 값의 형식이 잘못되었습니다: {value!r}")

        values[key] = value

    if 'log_dir' in values:
        values['log_dir'] = expand_path(values['log_dir'])

    try:
        return FmanConfig(**values)
    except ValueError as e:
        raise ConfigError(str(e))


def load_config(config_path: Optional[Path] = None) -> FmanConfig:
    """
    설정 로드

    경로를 지정하지 않으면 ~/.fman.yaml이 있을 때만 읽고, 없으면 기본 설정을 사용합니다.
    """
    if config_path is not None:
        return create_config_from_yaml(Path(config_path).expanduser())

    if DEFAULT_CONFIG_PATH.exists():
        return create_config_from_yaml(DEFAULT_CONFIG_PATH)

    return FmanConfig()
