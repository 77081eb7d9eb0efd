"""Check that the installed linter matches the version a CI workflow expects."""

from __future__ import annotations

import argparse
import re
import subprocess
from typing import Any

import yaml

DEFAULT_WORKFLOW_PATH = "../../.github/workflows/test-on-push.yaml"

# Name of the linter executable and the workflow key that pins its version.
LINTER = "go" "langci-lint"
VERSION_KEY = "GO" "LANGCILINT_VER"

_VERSION_RE = re.compile(re.escape(LINTER) + r"\shas\sversion\sv?([\d+.]+[\d])")

_NUM = r"(?:0|[1-9][0-9]*)"
_PRERELEASE_ID = r"(?:0|[1-9][0-9]*|[0-9]*[A-Za-z-][0-9A-Za-z-]*)"
_BUILD_ID = r"[0-9A-Za-z-]+"
_SEMVER_RE = re.compile(
    rf"v(?P<major>{_NUM})"
    rf"(?:\.(?P<minor>{_NUM})"
    rf"(?:\.{_NUM}"
    rf"(?:-{_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*)?"
    rf"(?:\+{_BUILD_ID}(?:\.{_BUILD_ID})*)?"
    r")?)?"
)


def _mapping(value: Any, where: str) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a mapping at {where}, got {type(value).__name__}")
    return value


def parse_workflow_version_from_file(path: str) -> str:
    """Return the linter version pinned in a CI workflow file, or "" if absent.

    Raises OSError if the file cannot be read and yaml.YAMLError or ValueError
    if it is not a well-formed workflow document.
    """
    with open(path, encoding="utf-8") as handle:
        document = yaml.safe_load(handle)
    jobs = _mapping(_mapping(document, "document").get("jobs"), "jobs")
    build = _mapping(jobs.get("build"), "jobs.build")
    env = _mapping(build.get("env"), "jobs.build.env")
    version = env.get(VERSION_KEY)
    if version is None:
        return ""
    if isinstance(version, (dict, list)):
        raise ValueError(f"{VERSION_KEY} must be a scalar")
    return str(version)


def get_current_version() -> str:
    """Return the installed linter's version, prefixed with "v"."""
    result = subprocess.run(
        [LINTER, "--version"],
        stdout=subprocess.PIPE,
        text=True,
        check=True,
    )
    output = result.stdout
    match = _VERSION_RE.search(output)
    if match is None:
        raise ValueError(f"no version found: {output}")
    return "v" + match.group(1)


def major_minor(version: str) -> str:
    """Return "vMAJOR.MINOR" of a semantic version, or "" if it is invalid."""
    match = _SEMVER_RE.fullmatch(version)
    if match is None:
        return ""
    minor = match.group("minor") or "0"
    return f"v{match.group('major')}.{minor}"


def is_version_valid(workflow_version: str, current_version: str) -> bool:
    """Return whether both versions share major and minor numbers."""
    return major_minor(workflow_version) == major_minor(current_version)


def compare_versions(path: str) -> str:
    """Return a message saying whether the installed linter matches the workflow."""
    try:
        workflow_version = parse_workflow_version_from_file(path)
    except (OSError, yaml.YAMLError, ValueError) as err:
        return f"Error parsing workflow version: {err}"
    try:
        current_version = get_current_version()
    except (OSError, subprocess.CalledProcessError, ValueError) as err:
        return f"Error getting current version: {err}"
    if not is_version_valid(workflow_version, current_version):
        return (
            f"Invalid version, expected: {workflow_version}, current: {current_version}"
            f" - See the {LINTER} installation instructions to update"
        )
    return "Linter version is valid (MajorMinor): " + current_version


def main(argv: list[str] | None = None) -> int:
    """Print the result of comparing the installed linter with a workflow file."""
    parser = argparse.ArgumentParser(
        description="Compare the installed linter version with a CI workflow."
    )
    parser.add_argument("path", nargs="?", default=DEFAULT_WORKFLOW_PATH)
    args = parser.parse_args(argv)
    print(compare_versions(args.path))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())