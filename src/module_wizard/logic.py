# src/module_wizard/logic.py
import json
import os
import sys
import uuid
from collections.abc import MutableMapping
from fnmatch import fnmatchcase
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path, PurePosixPath
from typing import Any, Iterable, List, Sequence

import pathspec
import yaml

from .models import DefaultWrapped, DirectValue, LoadResult

DATA_SUFFIXES = {".json", ".yaml", ".yml"}


# --- glob 패턴을 pathspec 객체로 변환 ---
def build_spec(patterns: Iterable[str]) -> pathspec.GitIgnoreSpec:
    """
    glob 패턴 목록으로 GitIgnoreSpec 을 만듭니다.
    '/' 가 없는 패턴은 cwd 기준 최상위로 고정합니다 ('service.py' 는 루트의 파일만 의미).
    디렉토리에 맞는 패턴은 그 아래 전체에도 맞으므로 제외(ignore) 목록에 적합합니다.
    """
    anchored = []
    for pattern in patterns:
        if pattern.startswith("./"):
            pattern = pattern[2:]
        if "/" not in pattern.rstrip("/") and not pattern.startswith("/"):
            pattern = "/" + pattern
        anchored.append(pattern)
    return pathspec.GitIgnoreSpec.from_lines(anchored)


# --- 정확한 glob 매칭 (세그먼트 단위, '**' 는 0개 이상의 디렉토리) ---
def _match_segments(parts: Sequence[str], pattern_parts: Sequence[str]) -> bool:
    if not pattern_parts:
        return not parts
    head = pattern_parts[0]
    if head == "**":
        return any(_match_segments(parts[i:], pattern_parts[1:]) for i in range(len(parts) + 1))
    return bool(parts) and fnmatchcase(parts[0], head) and _match_segments(parts[1:], pattern_parts[1:])


def glob_match(relative_path: str, pattern: str) -> bool:
    """'model/*' 는 model 의 직계 파일만, 'model/**/*.py' 는 model 아래 모든 .py 에 맞습니다."""
    pattern_parts = [part for part in pattern.strip("/").split("/") if part not in ("", ".")]
    return _match_segments(relative_path.split("/"), pattern_parts)


# --- 기본 glob 해석기 ---
def glob_files(patterns: Sequence[str], ignore: Sequence[str], cwd: Path) -> List[str]:
    """
    cwd 아래의 파일 중 patterns 에 맞고 ignore 에 맞지 않는 파일을 찾습니다.
    결과는 cwd 기준 상대 경로(posix 형식)의 정렬된 리스트입니다.
    """
    root_dir = Path(cwd)
    if not root_dir.is_dir():
        raise FileNotFoundError(f"Working directory not found: {root_dir}")

    # pathspec 으로 후보를 거른 뒤 glob 의미로 다시 확인 (gitignore 는 디렉토리 하위까지 맞음)
    include_spec = build_spec(patterns)
    ignore_spec = build_spec(ignore) if ignore else None

    matched = []
    for item in root_dir.rglob('*'):
        if not item.is_file():
            continue
        relative_path = item.relative_to(root_dir).as_posix()
        if not include_spec.match_file(relative_path):
            continue
        if not any(glob_match(relative_path, pattern) for pattern in patterns):
            continue
        if ignore_spec and ignore_spec.match_file(relative_path):
            continue  # 제외 대상
        matched.append(relative_path)

    return sorted(matched)


# --- 모듈 로더: 캐시를 절대 사용하지 않음 ---
def load_module(path: Path) -> LoadResult:
    """
    파일을 매번 새로 실행(또는 파싱)하여 LoadResult 로 돌려줍니다.
    .py 는 importlib 로 실행하고, .json/.yaml/.yml 은 데이터로 읽습니다.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix in DATA_SUFFIXES:
        text = path.read_text(encoding='utf-8')
        if suffix == ".json":
            return DirectValue(value=json.loads(text))
        return DirectValue(value=yaml.safe_load(text))

    # 매 호출마다 고유한 이름을 사용해 sys.modules 캐시와 충돌하지 않게 함
    module_name = f"module_wizard.loaded.{path.stem}_{uuid.uuid4().hex}"
    spec = spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load {path}: unsupported file type")

    module = module_from_spec(spec)
    # dataclass 등 실행 중 sys.modules 를 조회하는 코드를 위해 잠시 등록
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    finally:
        sys.modules.pop(module_name, None)

    if hasattr(module, "default"):
        return DefaultWrapped(value=module.default, module=module)
    return DirectValue(value=module)


# --- 기본 processor ---
def default_processor(loaded: LoadResult, args: Sequence[Any]) -> Any:
    """
    DefaultWrapped 는 내부 값으로 풀고, 그 값이 호출 가능하면 args 로 호출한 결과를 돌려줍니다.
    """
    if isinstance(loaded, (DefaultWrapped, DirectValue)):
        value = loaded.value
    else:
        # 사용자 정의 로더가 LoadResult 가 아닌 값을 준 경우 그대로 사용
        value = loaded

    if callable(value):
        value = value(*args)
    return value


# --- 네임스페이스 경로 계산 ---
def namespace_path(relative_path: str) -> List[str]:
    """'model/sub/a.py' -> ['model', 'sub', 'a']"""
    parts = [part for part in PurePosixPath(relative_path.replace(os.sep, "/")).parts
             if part not in (".", "/")]
    if not parts:
        raise ValueError(f"Empty namespace path for {relative_path!r}")
    parts[-1] = PurePosixPath(parts[-1]).stem
    return parts


# --- create-if-absent 삽입 ---
def insert_namespace(target: MutableMapping, parts: Sequence[str], value: Any) -> bool:
    """
    parts 경로를 따라 target 에 value 를 넣습니다. 이미 있는 키는 절대 덮어쓰지 않습니다.
    실제로 값이 들어갔으면 True, 기존 값 때문에 무시되었으면 False.
    """
    if not parts:
        raise ValueError("Namespace path must not be empty")

    node = target
    for part in parts[:-1]:
        if part not in node:
            node[part] = {}
        node = node[part]
        if not isinstance(node, MutableMapping):
            # 중간 경로에 이미 잎(leaf) 값이 있음: 먼저 쓴 쪽이 이김
            return False

    last = parts[-1]
    if last in node:
        return False
    node[last] = value
    return True
