"""Tests for workbench.services.python_executor (runs a real interpreter)"""
import asyncio

from workbench.services.python_executor import PythonSession, execute_code


class TestExecuteCode:

    async def test_success(self, python_executable):
        result = await execute_code("print(6 * 7)")
        assert result.success is True
        assert result.output.strip() == "42"
        assert result.error is None

    async def test_failure_reports_stderr(self, python_executable):
        result = await execute_code("raise ValueError('bad input')")
        assert result.success is False
        assert "ValueError: bad input" in result.error

    async def test_timeout(self, python_executable):
        result = await execute_code("import time; time.sleep(5)", timeout=0.5)
        assert result.success is False
        assert result.output == ""
        assert "timed out" in result.error

    async def test_missing_interpreter(self, monkeypatch):
        from workbench.config import settings

        monkeypatch.setattr(settings, "python_executable", "/nonexistent/python")
        result = await execute_code("print(1)")
        assert result.success is False


class TestPythonSession:

    async def test_command_output_and_exit(self, python_executable):
        session = PythonSession()
        await session.start()
        assert session.is_running

        await session.send("print('from-session')")

        output = ""

        async def collect():
            nonlocal output
            async for kind, data in session.events():
                if kind == "output":
                    output += data
                if "from-session" in output:
                    return

        await asyncio.wait_for(collect(), timeout=10)
        await session.stop()
        assert not session.is_running

        kinds = []

        async def drain():
            async for kind, _ in session.events():
                kinds.append(kind)

        await asyncio.wait_for(drain(), timeout=10)
        assert kinds[-1] == "exit"

    async def test_send_after_stop_is_ignored(self, python_executable):
        session = PythonSession()
        await session.start()
        await session.stop()
        await session.send("print(1)")
