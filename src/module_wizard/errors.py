# src/module_wizard/errors.py
from typing import Optional


class WizardError(Exception):
    pass


class InvalidArgument(WizardError, ValueError):
    """inject/exclude 에 패턴이 주어지지 않았을 때 발생합니다."""
    pass


class ResolutionError(WizardError):
    """glob 해석 단계의 실패. 원본 예외는 __cause__ 에 연결됩니다."""

    def __init__(self, patterns, cause: Optional[BaseException] = None):
        self.patterns = list(patterns)
        self.cause = cause
        super().__init__(f"Could not resolve {self.patterns}: {cause}")


class LoadOrInvokeError(WizardError):
    """모듈 로드 또는 팩토리 호출 중 발생한 예외를 감쌉니다."""

    def __init__(self, path: str, cause: Optional[BaseException] = None):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to inject {path}: {cause}")


class WizardBusy(WizardError, RuntimeError):
    pass
