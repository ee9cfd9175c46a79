# src/module_wizard/logging_config.py
import logging
import logging.config
import sys
from pathlib import Path
from typing import Optional, Union

import coloredlogs  # YAML 안의 coloredlogs.ColoredFormatter 를 인식하기 위해 필요
import yaml

from .models import DEFAULT_LOGGER_NAME

# 설정 과정 자체 로깅용
config_logger = logging.getLogger(__name__)

# 패키지 안에 함께 배포되는 기본 설정 파일
DEFAULT_CONFIG_PATH = Path(__file__).parent / 'logging_config.yaml'


def setup_logging(config_path: Optional[Path] = None, level: Union[str, int, None] = None):
    """YAML 설정 파일을 로드하여 로깅 시스템을 설정합니다. 라이브러리가 아닌 애플리케이션(CLI)에서 호출합니다."""

    # dictConfig 가 ColoredFormatter 를 로드하기 전에 전역 설정을 초기화
    coloredlogs.install()
    config_logger.debug("Called coloredlogs.install() for initial setup.")

    config_path = config_path or DEFAULT_CONFIG_PATH

    try:
        if config_path.is_file():
            config_logger.debug(f"Found logging configuration file: {config_path}")
            with open(config_path, 'rt', encoding='utf-8') as f:
                config = yaml.safe_load(f.read())

            if config:
                logging.config.dictConfig(config)
                logging.getLogger(DEFAULT_LOGGER_NAME).debug("Logging setup complete from YAML using dictConfig.")
            else:
                # YAML 파일은 있지만 내용이 비어있는 경우
                print(f"Warning: Logging configuration file {config_path} is empty. Using basicConfig.", file=sys.stderr)
                logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
        else:
            print(f"Warning: Logging configuration file not found at {config_path}. Using basicConfig.", file=sys.stderr)
            logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')

    except yaml.YAMLError as yaml_e:
        print(f"Error parsing logging configuration file {config_path}: {yaml_e}", file=sys.stderr)
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(DEFAULT_LOGGER_NAME).error(f"Failed to parse logging config YAML: {yaml_e}")
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        # dictConfig 는 잘못된 설정에 대해 이 예외들을 던짐
        print(f"Error loading logging configuration from {config_path}: {e}", file=sys.stderr)
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(DEFAULT_LOGGER_NAME).error(f"Failed to load logging config: {e}", exc_info=True)

    if level is not None:
        if isinstance(level, str):
            level = level.upper()
        logging.getLogger(DEFAULT_LOGGER_NAME).setLevel(level)
