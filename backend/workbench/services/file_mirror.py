"""On-disk copy of project files under ``settings.projects_root/<project_id>/``.

The database is the source of truth. The mirror exists so the interpreter and
external tools can see real files.
"""
import asyncio
import shutil
from pathlib import Path

from workbench.pipeline.errors import MirrorError


class FileMirror:
    def __init__(self, base_path: str | Path):
        self.base_path = Path(base_path).resolve()

    def project_path(self, project_id: str) -> Path:
        path = (self.base_path / project_id).resolve()
        if path.parent != self.base_path:
            raise MirrorError(f"Invalid project id: {project_id!r}")
        return path

    def file_path(self, project_id: str, file_path: str) -> Path:
        root = self.project_path(project_id)
        path = (root / file_path.lstrip("/")).resolve()
        if not path.is_relative_to(root) or path == root:
            raise MirrorError(f"Path escapes project directory: {file_path!r}")
        return path

    async def create_project(self, project_id: str) -> None:
        path = self.project_path(project_id)
        await self._run(path.mkdir, parents=True, exist_ok=True)

    async def delete_project(self, project_id: str) -> None:
        path = self.project_path(project_id)
        await self._run(shutil.rmtree, path, ignore_errors=True)

    async def create_file(self, project_id: str, file_path: str, content: str) -> None:
        path = self.file_path(project_id, file_path)

        def write():
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        await self._run(write)

    async def update_file(self, project_id: str, file_path: str, content: str) -> None:
        await self.create_file(project_id, file_path, content)

    async def delete_file(self, project_id: str, file_path: str) -> None:
        root = self.project_path(project_id)
        path = self.file_path(project_id, file_path)

        def remove():
            path.unlink(missing_ok=True)
            # Prune directories left empty, up to the project root
            parent = path.parent
            while parent != root and parent.is_dir() and not any(parent.iterdir()):
                parent.rmdir()
                parent = parent.parent

        await self._run(remove)

    @staticmethod
    async def _run(fn, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except OSError as e:
            raise MirrorError(str(e)) from e
