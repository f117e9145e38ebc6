# mdview/markdown/plugins/mermaid_cli.py
"""Compile Mermaid diagram source to SVG with the mermaid-cli (``mmdc``) tool."""

from __future__ import annotations

import asyncio
import itertools
import logging
import shutil
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "mmdc"


class DiagramCompileError(Exception):
    """Raised when a diagram source cannot be turned into markup."""


def find_executable(executable: str = DEFAULT_EXECUTABLE) -> str | None:
    return shutil.which(executable)


class MermaidCliCompiler:
    """
    Async callable ``(source, theme) -> svg`` backed by mermaid-cli.

    Each diagram is written to a private temporary directory, compiled by a
    subprocess, and read back. Call ``close()`` to remove the directory.
    """

    def __init__(self, executable: str, background: str = "transparent"):
        self.executable = executable
        self.background = background
        self._workdir: tempfile.TemporaryDirectory | None = None
        self._counter = itertools.count(1)

    async def __call__(self, source: str, theme: str) -> str:
        workdir = self._ensure_workdir()
        n = next(self._counter)
        input_path = workdir / f"diagram-{n}.mmd"
        output_path = workdir / f"diagram-{n}.svg"
        try:
            input_path.write_text(source, encoding="utf-8")
            process = await asyncio.create_subprocess_exec(
                self.executable,
                "--quiet",
                "-i", str(input_path),
                "-o", str(output_path),
                "-t", theme,
                "-b", self.background,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            _, stderr = await process.communicate()

            if process.returncode != 0 or not output_path.exists():
                message = stderr.decode("utf-8", errors="replace").strip()
                raise DiagramCompileError(
                    message or f"{self.executable} exited with {process.returncode}"
                )
            return output_path.read_text(encoding="utf-8")
        finally:
            input_path.unlink(missing_ok=True)
            output_path.unlink(missing_ok=True)

    def _ensure_workdir(self) -> Path:
        if self._workdir is None:
            self._workdir = tempfile.TemporaryDirectory(prefix="mdview-mermaid-")
            logger.debug(f"Created mermaid work directory {self._workdir.name}")
        return Path(self._workdir.name)

    def close(self) -> None:
        if self._workdir is not None:
            self._workdir.cleanup()
            self._workdir = None
