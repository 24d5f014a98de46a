"""Runs Python code in a child interpreter.

``execute_code`` is one-shot: spawn, wait, report. ``PythonSession`` keeps an
interactive ``python -i`` alive and streams what it prints through ``events()``.
"""
import asyncio
import logging
from collections.abc import AsyncGenerator

from pydantic import BaseModel

from workbench.config import settings

logger = logging.getLogger(__name__)


class ExecutionResult(BaseModel):
    success: bool
    output: str
    error: str | None = None


async def execute_code(code: str, timeout: float | None = None) -> ExecutionResult:
    timeout = settings.python_timeout_seconds if timeout is None else timeout
    try:
        proc = await asyncio.create_subprocess_exec(
            settings.python_executable, "-c", code,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        return ExecutionResult(success=False, output="", error=str(e))

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning("Python execution killed after %ss", timeout)
        return ExecutionResult(
            success=False,
            output="",
            error=f"Execution timed out after {timeout:g} seconds",
        )

    success = proc.returncode == 0
    return ExecutionResult(
        success=success,
        output=stdout.decode(errors="replace"),
        error=None if success else stderr.decode(errors="replace"),
    )


class PythonSession:
    """One interactive interpreter. Output arrives as ("output" | "error" | "exit", text)."""

    def __init__(self, executable: str | None = None):
        self.executable = executable or settings.python_executable
        self._proc: asyncio.subprocess.Process | None = None
        self._queue: asyncio.Queue[tuple[str, str]] = asyncio.Queue()
        self._readers: list[asyncio.Task] = []
        self._watcher: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._proc is not None and self._proc.returncode is None

    async def start(self) -> None:
        if self.is_running:
            await self.stop()
        # -u: unbuffered, so prompts and output show up as they are produced
        self._proc = await asyncio.create_subprocess_exec(
            self.executable, "-u", "-i",
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        self._readers = [
            asyncio.create_task(self._pump(self._proc.stdout, "output")),
            asyncio.create_task(self._pump(self._proc.stderr, "error")),
        ]
        self._watcher = asyncio.create_task(self._watch(self._proc, self._readers))

    async def send(self, command: str) -> None:
        if not self.is_running or self._proc.stdin is None:
            return
        self._proc.stdin.write((command + "\n").encode())
        await self._proc.stdin.drain()

    async def stop(self) -> None:
        proc, self._proc = self._proc, None
        if proc is None or proc.returncode is not None:
            return
        proc.kill()
        await proc.wait()

    async def events(self) -> AsyncGenerator[tuple[str, str], None]:
        while True:
            kind, data = await self._queue.get()
            yield kind, data
            if kind == "exit":
                return

    async def _pump(self, stream: asyncio.StreamReader, kind: str) -> None:
        while chunk := await stream.read(4096):
            await self._queue.put((kind, chunk.decode(errors="replace")))

    async def _watch(self, proc: asyncio.subprocess.Process, readers: list[asyncio.Task]) -> None:
        code = await proc.wait()
        await asyncio.gather(*readers, return_exceptions=True)
        await self._queue.put(("exit", str(code)))
