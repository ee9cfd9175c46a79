# src/module_wizard/wizard.py
import asyncio
from collections.abc import Mapping, MutableMapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import yaml

from .errors import InvalidArgument, LoadOrInvokeError, ResolutionError, WizardBusy
from .logic import (
    default_processor,
    glob_files,
    insert_namespace,
    load_module,
    namespace_path,
)
from .models import WizardConfigFile, WizardOptions

Pattern = Union[str, Sequence[str]]
Processor = Callable[[Any, Tuple[Any, ...]], Any]


class Wizard:
    """
    glob 패턴으로 찾은 파일들을 모듈로 로드해 대상 매핑 안의 중첩 네임스페이스에 넣습니다.

        app = {}
        await Wizard({"cwd": "app"}).inject("model/**/*.py").inject("controller/**/*.py").into(app)
        app["model"]["module1"]
    """

    def __init__(
        self,
        options: Union[Mapping, WizardOptions, None] = None,
        *,
        resolver: Optional[Callable[..., List[str]]] = None,
        loader: Optional[Callable[[Path], Any]] = None,
        exists: Optional[Callable[[Path], bool]] = None,
    ):
        if isinstance(options, WizardOptions):
            self.options = options
        else:
            # 사용자 옵션이 기본값보다 우선 (키 단위 얕은 병합)
            self.options = WizardOptions(**dict(options or {}))

        self.injection_globs: List[List[str]] = []
        self.exclusion_globs: List[str] = []
        self.processor_fn: Processor = default_processor
        self.failures: List[LoadOrInvokeError] = []

        # 외부 협력자 (glob 해석, 모듈 로드, 존재 확인)
        self.resolver = resolver or glob_files
        self.loader = loader or load_module
        self.exists = exists or Path.is_file

        self._in_flight = 0

        self._load_default_exclusion()
        self._log(['Initialized in', str(self.options.cwd)])

    # --- YAML 배선 파일에서 생성 ---
    @classmethod
    def from_config(cls, config_path: Union[str, Path], **overrides) -> "Wizard":
        """
        YAML 파일(options / inject / exclude)로 Wizard 를 만듭니다.
        파일 안의 상대 cwd 는 YAML 파일 위치를 기준으로 해석됩니다.
        """
        config_path = Path(config_path)
        with open(config_path, 'rt', encoding='utf-8') as f:
            raw = yaml.safe_load(f.read()) or {}

        config = WizardConfigFile(**raw)
        options = dict(config.options)
        base_dir = config_path.resolve().parent
        options["cwd"] = base_dir / Path(options.get("cwd", "."))
        options.update(overrides)

        wizard = cls(options)
        for group in config.inject:
            wizard.inject(group)
        if config.exclude:
            wizard.exclude(config.exclude)
        return wizard

    # --- 내부 유틸 ---
    @staticmethod
    def _assert_pattern(pattern: Optional[Pattern]) -> None:
        if pattern is None or len(pattern) == 0:
            raise InvalidArgument('Glob is required.')

    def _assert_idle(self) -> None:
        if self._in_flight:
            raise WizardBusy('Cannot reconfigure a Wizard while into() is running.')

    @contextmanager
    def _running(self):
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def _load_default_exclusion(self) -> "Wizard":
        default_exclusion = self.options.default_exclusion
        if len(default_exclusion) > 0:
            return self.exclude(default_exclusion)
        return self

    def _log(self, message: List[str], type_: Optional[str] = None, force: bool = False) -> "Wizard":
        """
        verbose 일 때 (또는 force) 설정된 로거의 메서드로 메시지를 남깁니다.
        로거에 type_ 메서드가 없으면 logging_type 메서드를 사용합니다.
        """
        if self.options.verbose or force:
            logger = self.options.logger
            method = getattr(logger, type_, None) if type_ else None
            if method is None:
                method = getattr(logger, self.options.logging_type)
            method(' '.join(message))
        return self

    def _full_path(self, relative_path: str) -> Path:
        return self.options.cwd / relative_path

    # --- 설정 단계 API ---
    def inject(self, glob: Pattern) -> "Wizard":
        """네임스페이스에 넣을 glob 그룹을 하나 추가합니다."""
        self._assert_pattern(glob)
        self._assert_idle()

        if isinstance(glob, str):
            self.injection_globs.append([glob])
        else:
            self.injection_globs.append(list(glob))
        return self

    def exclude(self, glob: Pattern) -> "Wizard":
        """제외할 glob 패턴을 추가합니다."""
        self._assert_pattern(glob)
        self._assert_idle()

        if isinstance(glob, str):
            self.exclusion_globs.append(glob)
        else:
            self.exclusion_globs.extend(glob)
        return self

    def set_processor(self, processor_fn: Processor) -> None:
        self._assert_idle()
        self.processor_fn = processor_fn

    def get_processor(self) -> Processor:
        return self.processor_fn

    def get_default_processor(self) -> Processor:
        return default_processor

    def get_options(self) -> WizardOptions:
        return self.options

    def get_injection(self) -> List[List[str]]:
        return self.injection_globs

    def get_exclusion(self) -> List[str]:
        return self.exclusion_globs

    def get_failures(self) -> List[LoadOrInvokeError]:
        """마지막 into() 호출에서 격리된 실패 목록 (fail_fast=False 일 때만 채워짐)."""
        return self.failures

    # --- glob 해석 ---
    async def resolve_group(self, patterns: Sequence[str], ignore: Optional[Sequence[str]] = None) -> List[str]:
        ignore = list(self.exclusion_globs if ignore is None else ignore)
        try:
            files = await asyncio.to_thread(self.resolver, list(patterns), ignore, self.options.cwd)
        except Exception as e:
            raise ResolutionError(patterns, e) from e
        return list(files)

    async def resolve_all(self, groups: Optional[Sequence[Sequence[str]]] = None,
                          ignore: Optional[Sequence[str]] = None) -> List[List[str]]:
        """그룹 순서를 유지하며 하나씩 차례로 해석합니다."""
        grouped_files = []
        for patterns in (self.injection_globs if groups is None else groups):
            grouped_files.append(await self.resolve_group(patterns, ignore))
        return grouped_files

    # --- 실행 단계 ---
    async def into(self, target: MutableMapping, *opt_args: Any) -> List[List[str]]:
        """
        주입된 모든 파일을 target 에 넣고, 처리한 그룹별 파일 목록을 돌려줍니다.
        일치하는 파일이 하나도 없으면 [] 를 돌려주고 target 은 건드리지 않습니다.
        """
        with self._running():
            # 실행 중 설정이 바뀌지 않도록 스냅샷
            groups = [list(group) for group in self.injection_globs]
            ignore = list(self.exclusion_globs)
            processor = self.processor_fn
            self.failures = []

            files = await self.resolve_all(groups, ignore)
            if not any(files):
                return []

            call_args = (target, *opt_args)
            for file_group in files:
                self._process_injection(file_group, target, call_args, processor)

            return files

    def _process_injection(self, file_group: List[str], target: MutableMapping,
                           call_args: Tuple[Any, ...], processor: Processor) -> None:
        for loop_file in file_group:
            full_path = self._full_path(loop_file)

            # 해석 이후 파일이 삭제된 경우: 경고만 남기고 건너뜀
            if not self.exists(full_path):
                self._log(['File not found:', loop_file], 'warning', force=True)
                continue

            try:
                mod = processor(self.loader(full_path), call_args)
            except Exception as e:
                error = LoadOrInvokeError(loop_file, e)
                if self.options.fail_fast:
                    raise error from e
                error.__cause__ = e
                self.failures.append(error)
                self._log(['Failed to inject', loop_file, f'({e})'], 'error', force=True)
                continue

            if insert_namespace(target, namespace_path(loop_file), mod):
                self._log(['+', loop_file], 'info')
            else:
                self._log(['=', loop_file, '(already present)'], 'debug')
