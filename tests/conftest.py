from collections.abc import Iterator
from pathlib import Path

import pytest

from sysweb.core.config import ConfigManager
from sysweb.util.log import Log, LogFormat, LogLevel


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[Path]:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("SYSWEB_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("SYSWEB_LOG_DIR", str(tmp_path / "log"))
    for name in ("SYSWEB_CONFIG", "SYSWEB_CONFIG_CONTENT", "SYSWEB_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    ConfigManager.reset()
    try:
        yield config_dir
    finally:
        ConfigManager.reset()


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    Log.configure(level=LogLevel.INFO, format=LogFormat.KV, console=True, file=False)
    yield
    Log.close()
