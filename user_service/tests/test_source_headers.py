from __future__ import annotations

from pathlib import Path

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1]
LICENSE_HEADER = "# SPDX-License-Identifier: Apache-2.0\n# Copyright 2025 Vova Orig\n"


def _source_files() -> list[Path]:
    return sorted(
        path
        for path in PACKAGE_ROOT.rglob("*.py")
        if "tests" not in path.relative_to(PACKAGE_ROOT).parts and path.stat().st_size
    )


@pytest.mark.parametrize("path", _source_files(), ids=lambda p: str(p.relative_to(PACKAGE_ROOT)))
def test_source_module_carries_license_header(path: Path) -> None:
    assert path.read_text(encoding="utf-8").startswith(LICENSE_HEADER)
