"""
Source module loader - builtin commands, user modules and configured modules.

User modules live in ~/.cmdweave/modules/. Each must be in its own
subdirectory with an __init__.py that exposes ``module`` as either a
SourceModule or a ModuleBuilder:

    # ~/.cmdweave/modules/deploy/__init__.py
    from cmdweave import ModuleBuilder

    module = ModuleBuilder("deploy", author="Ops")

    @module.command("deploy.status", "Show deployment status")
    def deploy_status(args, ctx):
        return "all green"

Modules can also be named in config as "package.module:attribute".
"""

from __future__ import annotations

import importlib
import logging
import sys
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import Any, Iterable

from cmdweave.core import ModuleBuilder, ModuleLoadError, SourceModule

logger = logging.getLogger(__name__)

# Default user modules directory
USER_MODULES_DIR = Path.home() / ".cmdweave" / "modules"

# Package builtins directory
PACKAGE_BUILTINS_DIR = Path(__file__).parent / "builtins"
BUILTINS_PACKAGE = "cmdweave.cli.commands.builtins"


def discover_modules(modules_dir: Path) -> list[Path]:
    """
    Discover module directories in the given path.

    Each module must be in its own subdirectory with an __init__.py file.

    Args:
        modules_dir: Directory to search

    Returns:
        List of __init__.py paths, sorted by directory name.
    """
    if not modules_dir.exists():
        return []

    if not modules_dir.is_dir():
        logger.warning(f"Modules path is not a directory: {modules_dir}")
        return []

    paths = []
    for subdir in sorted(modules_dir.iterdir()):
        if not subdir.is_dir():
            continue
        # Skip hidden and private directories
        if subdir.name.startswith((".", "_")):
            continue
        init_file = subdir / "__init__.py"
        if init_file.exists():
            paths.append(init_file)
        else:
            logger.debug(f"Skipping {subdir.name}: no __init__.py")

    return paths


def as_source_module(obj: Any, origin: str) -> SourceModule:
    """Turn a SourceModule or ModuleBuilder into a SourceModule."""
    if isinstance(obj, ModuleBuilder):
        return obj.build()
    if isinstance(obj, SourceModule):
        return obj
    raise ModuleLoadError(
        f"{origin}: expected SourceModule or ModuleBuilder, got {type(obj).__name__}"
    )


def load_module(
    module_path: Path,
    prefix: str = "cmdweave_user",
) -> tuple[str, SourceModule | None, str]:
    """
    Load a single user module from its __init__.py.

    Args:
        module_path: Path to the module's __init__.py file.
        prefix: Module name prefix for sys.modules

    Returns:
        Tuple of (module_name, SourceModule or None, error_message)
    """
    name = module_path.parent.name
    module_name = f"{prefix}.{name}"

    try:
        spec = spec_from_file_location(module_name, module_path)
        if spec is None or spec.loader is None:
            return (name, None, "Could not create module spec")

        py_module = module_from_spec(spec)
        sys.modules[module_name] = py_module
        spec.loader.exec_module(py_module)

        if not hasattr(py_module, "module"):
            return (name, None, "No 'module' attribute defined")
        return (name, as_source_module(py_module.module, str(module_path)), "")

    except SyntaxError as e:
        return (name, None, f"Syntax error: {e}")
    except ImportError as e:
        return (name, None, f"Import error: {e}")
    except Exception as e:
        return (name, None, f"Error: {e}")


def load_user_modules(modules_dir: Path | None = None) -> list[SourceModule]:
    """
    Load every user module found in the modules directory.

    Failures are logged and skipped.

    Args:
        modules_dir: User modules directory (default: ~/.cmdweave/modules)

    Returns:
        Loaded source modules, in directory order.
    """
    modules_dir = modules_dir or USER_MODULES_DIR
    loaded = []

    for path in discover_modules(modules_dir):
        name, module, error = load_module(path)
        if module is not None:
            loaded.append(module)
            logger.debug(f"Loaded user module: {name} ({len(module.commands)} commands)")
        else:
            logger.warning(f"Failed to load module '{name}': {error}")

    return loaded


def load_module_spec(spec: str) -> SourceModule:
    """Import a source module from a "package.module:attribute" spec.

    Raises:
        ModuleLoadError: if the spec is malformed or cannot be imported.
    """
    module_name, sep, attr = spec.partition(":")
    if not sep or not module_name or not attr:
        raise ModuleLoadError(f"Invalid module spec '{spec}': expected 'package.module:attribute'")

    try:
        py_module = importlib.import_module(module_name)
    except ImportError as e:
        raise ModuleLoadError(f"Cannot import '{module_name}': {e}") from e

    try:
        obj = getattr(py_module, attr)
    except AttributeError as e:
        raise ModuleLoadError(f"'{module_name}' has no attribute '{attr}'") from e

    if callable(obj) and not isinstance(obj, (ModuleBuilder, SourceModule)):
        obj = obj()
    return as_source_module(obj, spec)


def load_configured_modules(specs: Iterable[str]) -> list[SourceModule]:
    """Load modules named in config, logging and skipping failures."""
    loaded = []
    for spec in specs or []:
        try:
            loaded.append(load_module_spec(spec))
        except ModuleLoadError as e:
            logger.warning(f"Failed to load module '{spec}': {e}")
    return loaded


def load_builtin_commands() -> int:
    """Import every builtin command package so it registers its commands.

    Returns:
        Number of builtin packages imported.
    """
    count = 0
    for path in discover_modules(PACKAGE_BUILTINS_DIR):
        importlib.import_module(f"{BUILTINS_PACKAGE}.{path.parent.name}")
        count += 1
    return count
