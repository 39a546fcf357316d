"""Guardrail tests for layering and test categorisation rules."""

import ast
from pathlib import Path

import pytest

TESTS_ROOT = Path(__file__).parent
PACKAGE_ROOT = TESTS_ROOT.parent / "src" / "sitescout"

# Library layers must not depend on presentation or server frameworks
LIBRARY_DIRS = ("discovery", "services")
FORBIDDEN_LIBRARY_IMPORTS = {"click", "rich", "fastmcp"}

# Test files that may talk to the live network; they carry @pytest.mark.e2e
E2E_TEST_FILES: set[str] = {
    "test_cli_commands.py",
}


def _get_imports(filepath: Path) -> set[str]:
    """Extract all imported module names from a Python file."""
    imports: set[str] = set()
    try:
        tree = ast.parse(filepath.read_text(encoding="utf-8"))
    except SyntaxError:
        return imports

    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom):
            if node.module:
                imports.add(node.module.split(".")[0])

    return imports


@pytest.mark.unit
def test_library_layers_do_not_import_frontends() -> None:
    """
    Verify that discovery and services do not import CLI or MCP frameworks.

    The extraction engine is used as a library; click, rich and fastmcp
    belong to the cli and mcp packages only.
    """
    violations: list[str] = []

    for directory in LIBRARY_DIRS:
        for source in sorted((PACKAGE_ROOT / directory).rglob("*.py")):
            forbidden_found = _get_imports(source) & FORBIDDEN_LIBRARY_IMPORTS
            if forbidden_found:
                violations.append(f"{source.relative_to(PACKAGE_ROOT)} imports {forbidden_found}")

    if violations:
        pytest.fail("Library modules import frontend frameworks:\n" + "\n".join(f"  - {v}" for v in violations))


@pytest.mark.unit
def test_e2e_test_files_exist() -> None:
    """Verify that all files in E2E_TEST_FILES actually exist."""
    for filename in E2E_TEST_FILES:
        full_path = TESTS_ROOT / filename
        if not full_path.exists():
            pytest.fail(
                f"File '{filename}' in E2E_TEST_FILES does not exist. Remove it from the set or create the file."
            )


@pytest.mark.unit
def test_e2e_test_files_are_marked() -> None:
    """Verify that files in E2E_TEST_FILES use the e2e marker."""
    for filename in E2E_TEST_FILES:
        source = (TESTS_ROOT / filename).read_text(encoding="utf-8")
        if "pytest.mark.e2e" not in source:
            pytest.fail(f"File '{filename}' is listed in E2E_TEST_FILES but has no @pytest.mark.e2e marker.")
