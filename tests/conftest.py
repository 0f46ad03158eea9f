"""Shared fixtures for cmdweave tests."""

import logging

import pytest

from cmdweave import logging as cmdweave_logging
from cmdweave.config import ConfigManager
from cmdweave.config import config as config_module
from cmdweave.core import ModuleBuilder, build_registry


def make_module(module_id, names, **kwargs):
    """Build a source module whose handlers return their own command name."""
    builder = ModuleBuilder(module_id, **kwargs)
    for name in names:
        builder.add(name, lambda args, ctx, _name=name: _name, about=f"About {name}")
    return builder.build()


@pytest.fixture
def sys_registry():
    """Registry with about, sys.info and sys.flush."""
    registry, _ = build_registry([make_module("base", ["about", "sys.info", "sys.flush"])])
    return registry


@pytest.fixture
def ll_registry():
    """Registry with a deeper ll.* namespace."""
    registry, _ = build_registry([make_module("ll", [
        "about",
        "ll.agent.create",
        "ll.agent.engage",
        "ll.agent.list",
        "ll.world.load",
        "ll.llm.config",
    ])])
    return registry


@pytest.fixture
def temp_config(tmp_path, monkeypatch):
    """Point the config manager singleton at a temporary directory."""
    config_dir = tmp_path / ".cmdweave"
    config_dir.mkdir()
    monkeypatch.setattr(ConfigManager, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(ConfigManager, "CONFIG_FILE", config_dir / "config.json")
    monkeypatch.setattr(config_module, "_manager", None)
    return config_dir


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by configure_logging during a test."""
    yield
    logger = logging.getLogger("cmdweave")
    for handler in cmdweave_logging._handlers:
        logger.removeHandler(handler)
    cmdweave_logging._handlers.clear()
    logger.setLevel(logging.NOTSET)
