"""Tests for the project and dependency files the deploy tooling reads."""

import re
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
PULUMI_PACKAGES = {"pulumi", "pulumi-azure-native", "pulumi-synced-folder", "pulumi-command"}


def requirement_names(path: Path) -> set:
    names = set()
    for line in path.read_text().splitlines():
        line = line.split("#", 1)[0].strip()
        if line and not line.startswith("-"):
            names.add(re.split(r"[<>=!~\[; ]", line, maxsplit=1)[0].lower())
    return names


class TestPulumiProject:
    def test_project_sits_beside_program(self) -> None:
        assert (REPO_ROOT / "infra" / "Pulumi.yaml").exists()
        assert (REPO_ROOT / "infra" / "__main__.py").exists()
        assert not (REPO_ROOT / "Pulumi.yaml").exists()

    def test_uses_pip_toolchain_with_repo_venv(self) -> None:
        project = (REPO_ROOT / "infra" / "Pulumi.yaml").read_text()
        assert "toolchain: pip" in project
        assert "virtualenv: ../.venv" in project

    def test_requirements_cover_program_imports(self) -> None:
        assert PULUMI_PACKAGES <= requirement_names(REPO_ROOT / "infra" / "requirements.txt")

    def test_requirements_install_this_repository(self) -> None:
        lines = [line.strip() for line in (REPO_ROOT / "infra" / "requirements.txt").read_text().splitlines()]
        assert "-e .." in lines


class TestFunctionRequirements:
    def test_function_package_needs_only_the_worker_library(self) -> None:
        assert requirement_names(REPO_ROOT / "requirements.txt") == {"azure-functions"}
