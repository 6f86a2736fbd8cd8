"""Shared pytest fixtures for depscan tests."""

from __future__ import annotations

import json
import stat
import sys
import uuid
from pathlib import Path

import pytest

MIT_TEXT = """MIT License

Copyright (c) 2024 Example Authors

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

GPL2_HEADER = """                    GNU GENERAL PUBLIC LICENSE
                       Version 2, June 1991

 Copyright (C) 1989, 1991 Free Software Foundation, Inc.,
 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA
 Everyone is permitted to copy and distribute verbatim copies
 of this license document, but changing it is not allowed.
"""


@pytest.fixture
def make_oracle(tmp_path: Path):
    """Write an executable stand-in for ``go list -m -json all``.

    Returns the script path; it ignores its arguments and prints *records*
    as pretty-printed, concatenated JSON objects (or *raw* verbatim).
    """

    def _make(
        records: list[dict] | None = None,
        *,
        raw: str | None = None,
        exit_code: int = 0,
        stderr: str = "",
        sleep: float = 0.0,
    ) -> Path:
        if raw is None:
            raw = "".join(json.dumps(r, indent="\t") + "\n" for r in records or [])
        script = tmp_path / f"fake_go_{uuid.uuid4().hex[:8]}.py"
        script.write_text(
            f"#!{sys.executable}\n"
            "import sys, time\n"
            f"time.sleep({sleep!r})\n"
            f"sys.stdout.write({raw!r})\n"
            "sys.stdout.flush()\n"
            f"sys.stderr.write({stderr!r})\n"
            f"sys.exit({exit_code})\n"
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def scenario(tmp_path: Path, make_oracle):
    """example.com/app requiring a (direct, MIT) and b (indirect, no license)."""
    project = tmp_path / "app"
    project.mkdir()
    go_mod = project / "go.mod"
    go_mod.write_text(
        "module example.com/app\n"
        "\n"
        "go 1.22\n"
        "\n"
        "require example.com/a v1.0.0\n"
        "\n"
        "require example.com/b v2.0.0 // indirect\n"
    )

    mod_a = tmp_path / "cache" / "example.com" / "a@v1.0.0"
    mod_b = tmp_path / "cache" / "example.com" / "b@v2.0.0"
    mod_a.mkdir(parents=True)
    mod_b.mkdir(parents=True)
    (mod_a / "LICENSE").write_text(MIT_TEXT)
    (mod_b / "main.go").write_text("package b\n")

    oracle = make_oracle(
        [
            {"Path": "example.com/app", "Main": True, "Dir": str(project), "GoMod": str(go_mod)},
            {"Path": "example.com/a", "Version": "v1.0.0", "Dir": str(mod_a)},
            {"Path": "example.com/b", "Version": "v2.0.0", "Dir": str(mod_b)},
        ]
    )
    return {"go_mod": go_mod, "oracle": oracle, "mod_a": mod_a, "mod_b": mod_b}
