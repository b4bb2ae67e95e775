# pylint: disable=missing-module-docstring
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pathlib

import pytest

import rsaflow

tomllib = pytest.importorskip("tomllib")

PYPROJECT = pathlib.Path(__file__).parents[1] / "pyproject.toml"


@pytest.fixture(scope="module")
def project() -> dict:
    with open(PYPROJECT, "rb") as f:
        return tomllib.load(f)["project"]


def test_design_notes_are_not_the_long_description(project):
    assert project.get("readme") != "DESIGN.md"


def test_version_matches_package(project):
    assert project["version"] == rsaflow.__version__


def test_runtime_dependencies(project):
    names = {dep.split(">")[0] for dep in project["dependencies"]}
    assert names == {"cryptography", "pyasn1", "pyasn1-modules"}
