import os
from pathlib import Path
import subprocess
import sys


def _run_cli(*args: str) -> subprocess.CompletedProcess[str]:
    src_root = Path(__file__).resolve().parents[1] / "src"
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        item for item in (str(src_root), env.get("PYTHONPATH", "")) if item
    )
    return subprocess.run(
        [sys.executable, "-m", "algoframe.cli", *args],
        capture_output=True,
        text=True,
        env=env,
    )


def test_cli_help_top_level() -> None:
    result = _run_cli("--help")
    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()


def test_cli_help_subcommands() -> None:
    for subcommand in (
        "list",
        "describe",
        "run",
        "cfg",
        "pipeline",
    ):
        result = _run_cli(subcommand, "--help")
        assert result.returncode == 0
        assert "usage:" in result.stdout.lower()


def test_cli_without_command_exits_2() -> None:
    result = _run_cli()
    assert result.returncode == 2
