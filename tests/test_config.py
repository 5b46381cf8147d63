from __future__ import annotations

import os
from pathlib import Path

import pytest

from obligations.config import load_env
from obligations.infra.logging import resolve_log_dir


def test_relative_log_dir_resolves_against_working_directory(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert resolve_log_dir("logs") == tmp_path / "logs"


def test_absolute_log_dir_is_used_as_given(tmp_path: Path) -> None:
    target = tmp_path / "var" / "log"

    assert resolve_log_dir(str(target), base=Path("/elsewhere")) == target


def test_load_env_reads_dotenv_from_working_directory(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / ".env").write_text("OBLIGATIONS_TEST_VALUE=base\n", encoding="utf-8")
    (tmp_path / ".env.staging").write_text("OBLIGATIONS_TEST_VALUE=staging\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("APP_ENV", "staging")
    monkeypatch.delenv("OBLIGATIONS_TEST_VALUE", raising=False)

    load_env()

    assert os.environ["OBLIGATIONS_TEST_VALUE"] == "staging"
    monkeypatch.delenv("OBLIGATIONS_TEST_VALUE")


@pytest.mark.parametrize("app_env", ["development", "production"])
def test_load_env_without_files_is_a_no_op(tmp_path: Path, monkeypatch, app_env: str) -> None:
    monkeypatch.setenv("APP_ENV", app_env)
    monkeypatch.delenv("OBLIGATIONS_TEST_VALUE", raising=False)

    load_env(tmp_path)

    assert "OBLIGATIONS_TEST_VALUE" not in os.environ
