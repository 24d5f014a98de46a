"""Tests for workbench.services.file_mirror"""
import pytest

from workbench.pipeline.errors import MirrorError


class TestFileMirror:

    async def test_create_and_delete(self, mirror):
        await mirror.create_project("p1")
        await mirror.create_file("p1", "/css/style.css", "body {}")

        assert (mirror.base_path / "p1" / "css" / "style.css").read_text() == "body {}"

        await mirror.delete_file("p1", "css/style.css")
        assert not (mirror.base_path / "p1" / "css" / "style.css").exists()

    async def test_delete_prunes_empty_directories(self, mirror):
        await mirror.create_file("p1", "pages/contact/index.html", "")
        await mirror.create_file("p1", "pages/about.html", "")

        await mirror.delete_file("p1", "pages/contact/index.html")

        assert not (mirror.base_path / "p1" / "pages" / "contact").exists()
        assert (mirror.base_path / "p1" / "pages" / "about.html").exists()

    async def test_delete_missing_file_is_noop(self, mirror):
        await mirror.create_project("p1")
        await mirror.delete_file("p1", "ghost.txt")

    async def test_delete_project(self, mirror):
        await mirror.create_file("p1", "a.py", "print(1)")
        await mirror.delete_project("p1")
        assert not (mirror.base_path / "p1").exists()

    @pytest.mark.parametrize("path", ["../p2/a.txt", "../../etc/passwd", "a/../../x"])
    async def test_path_cannot_escape_project(self, mirror, path):
        with pytest.raises(MirrorError):
            await mirror.create_file("p1", path, "x")

    async def test_project_id_cannot_escape_root(self, mirror):
        with pytest.raises(MirrorError):
            await mirror.create_project("../outside")


    async def test_os_error_becomes_mirror_error(self, mirror):
        await mirror.create_file("p1", "assets", "not a directory")
        with pytest.raises(MirrorError):
            await mirror.create_file("p1", "assets/logo.svg", "<svg/>")
