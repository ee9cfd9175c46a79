from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


class RecordingLogger:
    """Wizard 의 logger 옵션으로 넘기는 기록용 로거."""

    def __init__(self):
        self.records = []

    def _record(self, level):
        return lambda message: self.records.append((level, message))

    def __getattr__(self, name):
        if name in ("debug", "info", "warning", "error"):
            return self._record(name)
        raise AttributeError(name)

    def messages(self, level=None):
        return [m for lvl, m in self.records if level is None or lvl == level]


@pytest.fixture
def module_files():
    return FIXTURES / "module_files"


@pytest.fixture
def module_es6():
    return FIXTURES / "module_es6"


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def write_file(tmp_path):
    def _write(relative_path, content):
        path = tmp_path / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
