# src/module_wizard/models.py
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# 기본 로거: 라이브러리 자체는 핸들러를 붙이지 않음 (setup_logging 참고)
DEFAULT_LOGGER_NAME = "module_wizard"


class WizardOptions(BaseModel):
    """Wizard 설정값. 생성 후에는 변경할 수 없습니다."""
    cwd: Path = Field(default_factory=Path.cwd)   # 작업 디렉토리 (절대 경로로 변환됨)
    logger: Any = Field(default_factory=lambda: logging.getLogger(DEFAULT_LOGGER_NAME))
    verbose: bool = True
    logging_type: str = "info"                   # 로거에서 호출할 메서드 이름
    default_exclusion: List[str] = Field(default_factory=list)
    fail_fast: bool = True                       # False 이면 파일 단위로 오류를 격리

    @field_validator("cwd")
    @classmethod
    def absolute_cwd(cls, value: Path) -> Path:
        return value.expanduser().resolve()

    model_config = ConfigDict(extra='forbid', frozen=True)


class WizardConfigFile(BaseModel):
    """YAML 배선(wiring) 파일의 구조를 정의하고 유효성을 검사하는 모델"""
    options: Dict[str, Any] = Field(default_factory=dict)
    inject: List[Union[str, List[str]]] = Field(default_factory=list)
    exclude: List[str] = Field(default_factory=list)

    @field_validator("options")
    @classmethod
    def no_logger_in_file(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        # 로거 객체는 YAML 로 표현할 수 없음
        if "logger" in value:
            raise ValueError("'logger' cannot be set from a config file")
        return value

    model_config = ConfigDict(extra='forbid')


# --- 로더 결과: 두 가지 형태 ---
class DirectValue(BaseModel):
    """모듈(또는 데이터 파일)의 값 그대로."""
    value: Any

    model_config = ConfigDict(frozen=True)


class DefaultWrapped(BaseModel):
    """모듈 레벨 `default` 속성으로 내보낸 값."""
    value: Any
    module: Optional[Any] = None

    model_config = ConfigDict(frozen=True)


LoadResult = Union[DirectValue, DefaultWrapped]
