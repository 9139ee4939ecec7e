"""Integration tests for the command-line interface.

These run the installed package in a subprocess and cover:
- Export of a realistic project tree
- Named rules, gitignore patterns and manual selections
- Symlink following
- Output file and summary destinations
- Version information and exit codes
"""

import os
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest

# Slow tests only run when --run-cli-tests is given
pytestmark = pytest.mark.skipif(
    "not config.getoption('--run-cli-tests')", reason="Only run when --run-cli-tests is given"
)


@pytest.fixture
def temp_project():
    """Create a temporary web project with the clutter the named rules target."""
    with tempfile.TemporaryDirectory() as tmpdir:
        base_dir = Path(tmpdir) / "webapp"

        (base_dir / "src" / "components").mkdir(parents=True)
        (base_dir / "node_modules" / "react").mkdir(parents=True)
        (base_dir / "dist").mkdir()
        (base_dir / "docs").mkdir()

        (base_dir / "src" / "App.tsx").write_text("export const App = () => null;\n")
        (base_dir / "src" / "components" / "Button.tsx").write_text("export const Button = () => null;\n")
        (base_dir / "src" / "logo.svg").write_text("<svg/>\n")
        (base_dir / "node_modules" / "react" / "index.js").write_text("module.exports = {};\n")
        (base_dir / "dist" / "bundle.js").write_text("console.log('bundle');\n")
        (base_dir / "docs" / "guide.md").write_text("# Guide\n")
        (base_dir / "package.json").write_text('{"name": "webapp"}\n')
        (base_dir / "yarn.lock").write_text("# yarn lockfile v1\n")
        (base_dir / "server.log").write_text("DEBUG: test log\n")
        (base_dir / ".gitignore").write_text("*.log\ndist/\n")

        yield base_dir


def run_cli(args, cwd=None, timeout=30):
    """Run the dir2prompt CLI with the given arguments and capture its output."""
    cmd = [sys.executable, "-m", "dir2prompt.cli.main"] + [str(arg) for arg in args]
    return subprocess.run(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, cwd=cwd, timeout=timeout)


def exported_paths(output):
    prefix = "//--- File: "
    return [line[len(prefix) : -len(" ---")] for line in output.splitlines() if line.startswith(prefix)]  # noqa: E203


def test_export_without_rules(temp_project):
    result = run_cli([temp_project])

    assert result.returncode == 0
    assert exported_paths(result.stdout) == [
        "dist/bundle.js",
        "docs/guide.md",
        "node_modules/react/index.js",
        "src/components/Button.tsx",
        "src/App.tsx",
        "package.json",
    ]


def test_named_rules(temp_project):
    result = run_cli(["-r", "Node Modules", "-r", "Dist/Build", "-r", "Markdown", "-r", "JS/TS Config", temp_project])

    assert result.returncode == 0
    assert exported_paths(result.stdout) == ["src/components/Button.tsx", "src/App.tsx"]


def test_gitignore_file_and_manual_override(temp_project):
    result = run_cli(
        ["-e", temp_project / ".gitignore", "--all-rules", "--select", "node_modules/react/index.js", temp_project]
    )

    assert result.returncode == 0
    paths = exported_paths(result.stdout)
    assert "node_modules/react/index.js" in paths
    assert "dist/bundle.js" not in paths
    assert "docs/guide.md" not in paths


def test_output_file_and_summary(temp_project):
    output = temp_project.parent / "prompt.txt"
    result = run_cli(["-o", output, "-s", "stdout", "--deselect", "node_modules", temp_project])

    assert result.returncode == 0
    assert "//--- File: src/App.tsx ---" in output.read_text()
    assert "Files: 5" in result.stdout
    assert "Characters: " in result.stdout


def test_tree_and_verbose_logging(temp_project):
    result = run_cli(["--tree", "-v", "-r", "Node Modules", temp_project])

    assert result.returncode == 0
    assert "webapp/" in result.stderr
    assert "INFO: Opened webapp" in result.stderr
    assert "node_modules/" not in result.stderr.split("webapp/", 1)[1]


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="Symlinks not supported")
def test_symlinked_directories(temp_project):
    try:
        os.symlink(temp_project / "src", temp_project / "src_link")
    except OSError:
        pytest.skip("Cannot create symlinks here")

    plain = run_cli(["--deselect", "node_modules", temp_project])
    followed = run_cli(["-L", "--deselect", "node_modules", temp_project])

    assert "src_link/App.tsx" not in exported_paths(plain.stdout)
    assert "src_link/App.tsx" in exported_paths(followed.stdout)


def test_version():
    result = run_cli(["--version"])
    assert result.returncode == 0
    assert result.stdout.startswith("dir2prompt ")


def test_exit_codes(temp_project):
    assert run_cli([]).returncode == 2
    assert run_cli([temp_project / "missing"]).returncode == 1
    assert run_cli(["-r", "Nope", temp_project]).returncode == 1
