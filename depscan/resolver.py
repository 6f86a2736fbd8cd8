"""ModuleResolver: expand go.mod into the full resolved module set.

Runs ``go list -m -json all`` once and decodes its output as a stream of
concatenated JSON objects, one record at a time.
"""

from __future__ import annotations

import json
import subprocess
import tempfile
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path
from typing import IO, Any

import structlog

from depscan.config import DEFAULT_RESOLVE_TIMEOUT
from depscan.exceptions import ResolutionError
from depscan.models import ResolvedModule

log = structlog.get_logger("depscan.resolver")

DEFAULT_COMMAND: tuple[str, ...] = ("go", "list", "-m", "-json", "all")

_CHUNK_SIZE = 64 * 1024


def iter_json_objects(stream: IO[str], chunk_size: int = _CHUNK_SIZE) -> Iterator[dict[str, Any]]:
    """Yield each top-level JSON object from a stream of concatenated objects.

    Only the object currently being read is buffered. Raises ``ValueError``
    (``json.JSONDecodeError`` for bad syntax) on malformed or truncated input.
    """
    buf: list[str] = []
    depth = 0
    started = False
    in_string = False
    escaped = False

    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            break
        for ch in chunk:
            if not started:
                if ch.isspace():
                    continue
                if ch != "{":
                    raise ValueError(f"expected '{{' at start of record, got {ch!r}")
                started = True
            buf.append(ch)

            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue

            if ch == '"':
                in_string = True
            elif ch in "{[":
                depth += 1
            elif ch in "}]":
                depth -= 1
                if depth == 0:
                    text = "".join(buf)
                    buf = []
                    started = False
                    yield json.loads(text)

    if started:
        raise ValueError("truncated record at end of output")


class ModuleResolver:
    """Invoke the module resolution command exactly once per run."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        timeout: float = DEFAULT_RESOLVE_TIMEOUT,
    ) -> None:
        self.command = list(command)
        self.timeout = timeout

    def resolve(self, module_root: str | Path) -> list[ResolvedModule]:
        """Run the command in *module_root* and return every resolved module.

        Raises :class:`ResolutionError` if the command is missing, exits
        non-zero, times out, or emits unparsable output. Nothing decoded
        before the failure is returned.
        """
        cwd = str(module_root)
        log.info("resolver.started", command=" ".join(self.command), cwd=cwd)

        with tempfile.TemporaryFile() as stderr_file:
            try:
                proc = subprocess.Popen(
                    self.command,
                    cwd=cwd,
                    stdout=subprocess.PIPE,
                    stderr=stderr_file,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            except FileNotFoundError as e:
                raise ResolutionError(f"{self.command[0]} not found: {e}") from e
            except OSError as e:
                raise ResolutionError(f"failed to start {self.command[0]}: {e}") from e

            timed_out = threading.Event()

            def _kill() -> None:
                timed_out.set()
                proc.kill()

            timer = threading.Timer(self.timeout, _kill)
            timer.daemon = True
            timer.start()

            modules: list[ResolvedModule] = []
            decode_error: ValueError | None = None
            try:
                try:
                    for record in iter_json_objects(proc.stdout):  # type: ignore[arg-type]
                        if not isinstance(record, dict):
                            raise ValueError("record is not a JSON object")
                        modules.append(ResolvedModule.from_record(record))
                except ValueError as e:
                    decode_error = e
                    proc.kill()
                returncode = proc.wait()
            finally:
                timer.cancel()
                if proc.stdout is not None:
                    proc.stdout.close()

            if timed_out.is_set():
                raise ResolutionError(
                    f"{self.command[0]} timed out after {self.timeout:g}s", returncode=returncode
                )
            if decode_error is not None:
                raise ResolutionError(
                    f"failed to decode {self.command[0]} output: {decode_error}"
                ) from decode_error

            stderr_file.seek(0)
            stderr = stderr_file.read().decode("utf-8", errors="replace").strip()

        if returncode != 0:
            raise ResolutionError(
                f"{' '.join(self.command)} failed (exit {returncode}): {stderr}",
                returncode=returncode,
                stderr=stderr,
            )

        log.info("resolver.finished", modules=len(modules))
        return modules
