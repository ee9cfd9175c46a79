# src/module_wizard/__init__.py
from .errors import (
    InvalidArgument,
    LoadOrInvokeError,
    ResolutionError,
    WizardBusy,
    WizardError,
)
from .logic import (
    default_processor,
    glob_files,
    insert_namespace,
    load_module,
    namespace_path,
)
from .models import (
    DefaultWrapped,
    DirectValue,
    LoadResult,
    WizardConfigFile,
    WizardOptions,
)
from .wizard import Wizard

__all__ = [
    "Wizard",
    "WizardOptions",
    "WizardConfigFile",
    "DirectValue",
    "DefaultWrapped",
    "LoadResult",
    "default_processor",
    "glob_files",
    "insert_namespace",
    "load_module",
    "namespace_path",
    "WizardError",
    "InvalidArgument",
    "ResolutionError",
    "LoadOrInvokeError",
    "WizardBusy",
]
