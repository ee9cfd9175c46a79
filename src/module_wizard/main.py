# src/module_wizard/main.py
import asyncio
from collections.abc import Mapping
from pathlib import Path
from typing import List, Optional

import pydantic
import typer
import yaml
from typing_extensions import Annotated

from .errors import InvalidArgument, LoadOrInvokeError, ResolutionError
from .logging_config import setup_logging
from .wizard import Wizard

try:
    from importlib.metadata import PackageNotFoundError, version
    __version__ = version("module-wizard")
except PackageNotFoundError:
    # 패키지가 설치되지 않은 상태일 때 대비
    __version__ = "0.1.0"


# --- Typer 앱 생성 및 기본 설정 ---
app = typer.Typer(
    name="wizard",
    help="Inspects how glob-matched modules would be wired into a nested namespace.",
    add_completion=False,
    no_args_is_help=True,
)

# --- 공통 인자/옵션 정의 ---
CwdArgument = Annotated[Optional[Path], typer.Argument(
    help="Working directory the patterns are resolved against. Defaults to the config file directory, then the current directory.",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
)]
InjectOption = Annotated[Optional[List[str]], typer.Option(
    "--inject", "-i",
    help="Glob pattern to inject. Each occurrence is one injection group.",
)]
ExcludeOption = Annotated[Optional[List[str]], typer.Option(
    "--exclude", "-e",
    help="Glob pattern to exclude.",
)]
ConfigOption = Annotated[Optional[Path], typer.Option(
    "--config", "-c",
    help="YAML wiring file (options / inject / exclude).",
    exists=True,
    dir_okay=False,
    resolve_path=True,
)]


def version_callback(value: bool):
    if value:
        typer.echo(f"wizard version: {__version__}")
        raise typer.Exit()


@app.callback()
def main_options(
    version: Annotated[Optional[bool], typer.Option(
        "--version", "-v",
        help="Show the application's version and exit.",
        callback=version_callback,
        is_eager=True,
    )] = None,
):
    """
    wizard: auto-wire a directory tree of modules into one namespace.
    """


def _build_wizard(cwd: Optional[Path], inject: Optional[List[str]], exclude: Optional[List[str]],
                  config: Optional[Path], verbose: bool) -> Wizard:
    """CLI 인자(및 선택적 YAML 파일)로 Wizard 를 구성합니다. CLI 인자가 파일 내용 뒤에 추가됩니다."""
    overrides = {"verbose": verbose}
    if cwd is not None:
        overrides["cwd"] = cwd

    if config is not None:
        wizard = Wizard.from_config(config, **overrides)
    else:
        wizard = Wizard({"cwd": Path.cwd(), **overrides})

    for pattern in inject or []:
        wizard.inject(pattern)
    if exclude:
        wizard.exclude(exclude)
    return wizard


def render_namespace(namespace: Mapping, name: str = ".") -> str:
    """네임스페이스 트리를 문자열로 만듭니다. 잎(leaf)은 타입 이름과 함께 표시됩니다."""
    tree_lines = [name]

    def _render_recursive(node: Mapping, prefix: str):
        keys = list(node.keys())
        pointers = ["├── "] * (len(keys) - 1) + ["└── "]
        for pointer, key in zip(pointers, keys):
            value = node[key]
            if isinstance(value, Mapping):
                tree_lines.append(f"{prefix}{pointer}{key}/")
                extension = "│   " if pointer == "├── " else "    "
                _render_recursive(value, prefix + extension)
            else:
                tree_lines.append(f"{prefix}{pointer}{key}: {type(value).__name__}")

    _render_recursive(namespace, "")
    return "\n".join(tree_lines)


def _exit_with_error(message: str, code: int):
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=code)


# --- 'ls' 하위 명령어 ---
@app.command()
def ls(
    cwd: CwdArgument = None,
    inject: InjectOption = None,
    exclude: ExcludeOption = None,
    config: ConfigOption = None,
):
    """
    Lists the files each injection group matches, without loading them.
    """
    try:
        wizard = _build_wizard(cwd, inject, exclude, config, verbose=False)
        groups = asyncio.run(wizard.resolve_all())
    except (pydantic.ValidationError, yaml.YAMLError) as e:
        _exit_with_error(f"Error: Invalid config file: {e}", 1)
    except (ResolutionError, InvalidArgument) as e:
        _exit_with_error(f"Error: {e}", 1)

    if not any(groups):
        typer.secho("Warning: No files matched.", fg=typer.colors.YELLOW, err=True)
        return

    for index, group in enumerate(groups, start=1):
        for relative_path in group:
            typer.echo(f"[group {index}] {relative_path}")


# --- 'tree' 하위 명령어 ---
@app.command()
def tree(
    cwd: CwdArgument = None,
    inject: InjectOption = None,
    exclude: ExcludeOption = None,
    config: ConfigOption = None,
    loglevel: Annotated[str, typer.Option(
        "--loglevel", "-l",
        help="Log level for the module_wizard logger.",
    )] = "warning",
):
    """
    Injects the matched modules into an empty namespace and prints the result.
    """
    setup_logging(level=loglevel)
    namespace = {}

    try:
        wizard = _build_wizard(cwd, inject, exclude, config, verbose=True)
        asyncio.run(wizard.into(namespace))
    except (pydantic.ValidationError, yaml.YAMLError) as e:
        _exit_with_error(f"Error: Invalid config file: {e}", 1)
    except (ResolutionError, InvalidArgument) as e:
        _exit_with_error(f"Error: {e}", 1)
    except LoadOrInvokeError as e:
        _exit_with_error(f"Error: {e}", 2)

    typer.echo(render_namespace(namespace, name=str(wizard.get_options().cwd)))


if __name__ == "__main__":
    app()
