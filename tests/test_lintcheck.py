import subprocess
from unittest import mock

import pytest
import yaml

from flowkit.lintcheck import (
    LINTER,
    VERSION_KEY,
    compare_versions,
    get_current_version,
    is_version_valid,
    main,
    major_minor,
    parse_workflow_version_from_file,
)

VALID_WORKFLOW = f"""\
name: test-tooling
jobs:
  build:
    runs-on: ubuntu-latest
    env:
      GOVER: "1.22"
      {VERSION_KEY}: "v1.61.0"
"""

MISSING_KEY_WORKFLOW = """\
name: test
jobs:
  build:
    env:
      GOVER: "1.22"
"""

INVALID_YAML = "jobs: [unclosed\n  build: {\n"


def _completed(stdout):
    return subprocess.CompletedProcess([LINTER, "--version"], 0, stdout=stdout)


def _version_line(version):
    return f"{LINTER} has version {version} built from abc\n"


@pytest.fixture
def valid_file(tmp_path):
    path = tmp_path / "test-tooling.yml"
    path.write_text(VALID_WORKFLOW)
    return str(path)


@pytest.fixture
def missing_key_file(tmp_path):
    path = tmp_path / "invalid-test.yml"
    path.write_text(MISSING_KEY_WORKFLOW)
    return str(path)


@pytest.fixture
def invalid_yaml_file(tmp_path):
    path = tmp_path / "invalid-yaml.yml"
    path.write_text(INVALID_YAML)
    return str(path)


def test_parse_missing_file(tmp_path):
    with pytest.raises(OSError):
        parse_workflow_version_from_file(str(tmp_path / "invalid.yaml"))


def test_parse_missing_key(missing_key_file):
    assert parse_workflow_version_from_file(missing_key_file) == ""


def test_parse_invalid_yaml(invalid_yaml_file):
    with pytest.raises(yaml.YAMLError):
        parse_workflow_version_from_file(invalid_yaml_file)


def test_parse_scalar_document(tmp_path):
    path = tmp_path / "scalar.yml"
    path.write_text("just some text\n")
    with pytest.raises(ValueError):
        parse_workflow_version_from_file(str(path))


def test_parse_valid_workflow(valid_file):
    assert parse_workflow_version_from_file(valid_file) == "v1.61.0"


def test_parse_empty_file(tmp_path):
    path = tmp_path / "empty.yml"
    path.write_text("")
    assert parse_workflow_version_from_file(str(path)) == ""


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_get_current_version(run):
    run.return_value = _completed(_version_line("1.61.0"))
    assert get_current_version() == "v1.61.0"


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_get_current_version_with_v_prefix(run):
    run.return_value = _completed(_version_line("v1.54.2"))
    assert get_current_version() == "v1.54.2"


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_get_current_version_no_match(run):
    run.return_value = _completed("something else entirely\n")
    with pytest.raises(ValueError, match="no version found"):
        get_current_version()


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_get_current_version_missing_binary(run):
    run.side_effect = FileNotFoundError(LINTER)
    with pytest.raises(FileNotFoundError):
        get_current_version()


@pytest.mark.parametrize(
    "version, expected",
    [
        ("v1.54.2", "v1.54"),
        ("v1.61.0", "v1.61"),
        ("v2", "v2.0"),
        ("v1.2", "v1.2"),
        ("v1.2.3-rc.1+build.5", "v1.2"),
        ("1.2.3", ""),
        ("v01.2.3", ""),
        ("v1.2-rc", ""),
        ("", ""),
    ],
)
def test_major_minor(version, expected):
    assert major_minor(version) == expected


@pytest.mark.parametrize(
    "workflow_version, current_version, expected",
    [
        ("v1.54.2", "v1.54.2", True),
        ("v1.54.3", "v1.54.2", True),
        ("v1.54.2", "v1.54.3", True),
        ("v1.54.2", "v1.52.2", False),
        ("v1.52.2", "v1.54.2", False),
    ],
)
def test_is_version_valid(workflow_version, current_version, expected):
    assert is_version_valid(workflow_version, current_version) is expected


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_compare_versions_valid(run, valid_file):
    run.return_value = _completed(_version_line("1.61.3"))
    result = compare_versions(valid_file)
    assert "Linter version is valid" in result
    assert result.endswith("v1.61.3")


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_compare_versions_invalid(run, missing_key_file):
    run.return_value = _completed(_version_line("1.61.0"))
    assert "Invalid version" in compare_versions(missing_key_file)


def test_compare_versions_bad_path(tmp_path):
    result = compare_versions(str(tmp_path / "invalid-test-incorrect-path.yml"))
    assert "Error parsing workflow" in result


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_compare_versions_current_version_failure(run, valid_file):
    run.side_effect = FileNotFoundError(LINTER)
    assert compare_versions(valid_file).startswith("Error getting current version")


@mock.patch("flowkit.lintcheck.subprocess.run")
def test_main_prints_result(run, valid_file, capsys):
    run.return_value = _completed(_version_line("1.61.0"))
    assert main([valid_file]) == 0
    assert "Linter version is valid (MajorMinor): v1.61.0" in capsys.readouterr().out