"""Tests for meddle.middleware.static — FileServer."""

import os

import pytest

from meddle.dispatch import handle
from meddle.http.request import Request
from meddle.http.response import Response
from meddle.middleware.base import middleware
from meddle.middleware.builtin import NotFound, URLDecoder
from meddle.middleware.static import FileServer, path_in_dir


@pytest.fixture
def www(tmp_path):
    """Create a temporary document root with a sibling secret."""
    root = tmp_path / "www"
    root.mkdir()
    (root / "index.html").write_text("<h1>Home</h1>")
    (root / "my file.txt").write_text("spaced")
    (root / "data.bin").write_bytes(b"\x00\x01\x02\x03")
    docs = root / "docs"
    docs.mkdir()
    (docs / "guide.txt").write_text("guide")
    (tmp_path / "secret.txt").write_text("top secret")
    private = tmp_path / "www-private"
    private.mkdir()
    (private / "key.txt").write_text("key")
    return root


@middleware
async def fallback(request, response, next):
    response.write("fallback")
    return response.finish()


class TestServing:
    @pytest.mark.anyio
    async def test_serves_existing_file(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="/index.html"), Response())
        assert result.status == 200
        assert result.body == (www / "index.html").read_bytes()
        assert result.finished is True
        assert result.headers["Content-Type"] == "text/html"

    @pytest.mark.anyio
    async def test_serves_nested_file(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="/docs/guide.txt"), Response())
        assert result.text == "guide"

    @pytest.mark.anyio
    async def test_binary_file(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="/data.bin"), Response())
        assert result.body == b"\x00\x01\x02\x03"

    @pytest.mark.anyio
    async def test_uses_decoded_resource(self, www) -> None:
        stack = [URLDecoder(), FileServer(www)]
        result = await handle(stack, Request(resource="/my%20file.txt?v=2"), Response())
        assert result.text == "spaced"

    @pytest.mark.anyio
    async def test_decodes_without_url_decoder(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="/my%20file.txt"), Response())
        assert result.text == "spaced"

    @pytest.mark.anyio
    async def test_repeated_leading_slashes(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="///index.html"), Response())
        assert result.text == "<h1>Home</h1>"

    @pytest.mark.anyio
    async def test_short_circuits(self, www) -> None:
        stack = [FileServer(www), fallback]
        result = await handle(stack, Request(resource="/index.html"), Response())
        assert b"fallback" not in result.body

    @pytest.mark.anyio
    async def test_keeps_existing_content_type(self, www) -> None:
        response = Response(headers={"Content-Type": "text/plain"})
        result = await handle([FileServer(www)], Request(resource="/index.html"), response)
        assert result.headers["Content-Type"] == "text/plain"

    @pytest.mark.anyio
    async def test_keeps_content_type_in_any_case(self, www) -> None:
        response = Response(headers={"content-type": "text/plain"})
        result = await handle([FileServer(www)], Request(resource="/index.html"), response)
        assert result.headers == {"content-type": "text/plain"}

    @pytest.mark.anyio
    async def test_default_root_is_cwd(self, www, monkeypatch) -> None:
        monkeypatch.chdir(www)
        server = FileServer()
        assert os.path.realpath(server.root) == os.path.realpath(www)
        result = await handle([server], Request(resource="/index.html"), Response())
        assert result.text == "<h1>Home</h1>"


class TestMissingFiles:
    @pytest.mark.anyio
    async def test_missing_file_continues(self, www) -> None:
        stack = [FileServer(www), fallback]
        result = await handle(stack, Request(resource="/nope.html"), Response())
        assert result.status == 200
        assert result.text == "fallback"

    @pytest.mark.anyio
    async def test_missing_file_reaches_not_found(self, www) -> None:
        result = await handle([FileServer(www), NotFound()], Request(resource="/nope.html"), Response())
        assert result.status == 404

    @pytest.mark.anyio
    async def test_missing_file_leaves_response_unmodified(self, www) -> None:
        response = Response()
        result = await handle([FileServer(www)], Request(resource="/nope.html"), response)
        assert result is response
        assert (result.status, result.body, result.finished) == (200, b"", False)

    @pytest.mark.anyio
    async def test_directory_continues(self, www) -> None:
        result = await handle([FileServer(www), NotFound()], Request(resource="/docs"), Response())
        assert result.status == 404

    @pytest.mark.anyio
    async def test_root_continues(self, www) -> None:
        result = await handle([FileServer(www), NotFound()], Request(resource="/"), Response())
        assert result.status == 404

    @pytest.mark.anyio
    async def test_non_slash_resource_continues(self, www) -> None:
        result = await handle([FileServer(www), NotFound()], Request(resource="*"), Response())
        assert result.status == 404

    @pytest.mark.anyio
    async def test_name_too_long_continues(self, www) -> None:
        resource = "/" + "a" * 300
        result = await handle([FileServer(www), NotFound()], Request(resource=resource), Response())
        assert result.status == 404

    @pytest.mark.anyio
    async def test_unreadable_file_continues(self, www, monkeypatch) -> None:
        import anyio

        async def denied(*args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(anyio.Path, "read_bytes", denied)
        result = await handle([FileServer(www), NotFound()], Request(resource="/index.html"), Response())
        assert result.status == 404
        assert result.body == b""


class TestTraversal:
    @pytest.mark.anyio
    async def test_dotdot_escape_rejected(self, www) -> None:
        stack = [FileServer(www), fallback]
        result = await handle(stack, Request(resource="/../secret.txt"), Response())
        assert result.status == 400
        assert result.finished is True
        assert b"top secret" not in result.body

    @pytest.mark.anyio
    async def test_deep_escape_rejected(self) -> None:
        result = await handle(
            [FileServer("/srv/www")], Request(resource="/../../etc/passwd"), Response()
        )
        assert result.status == 400
        assert result.body == b""

    @pytest.mark.anyio
    async def test_encoded_escape_rejected(self, www) -> None:
        stack = [URLDecoder(), FileServer(www)]
        result = await handle(stack, Request(resource="/%2e%2e/secret.txt"), Response())
        assert result.status == 400

    @pytest.mark.anyio
    async def test_sibling_prefix_rejected(self, www) -> None:
        """``www-private`` shares the textual prefix ``www`` but is not inside it."""
        result = await handle([FileServer(www)], Request(resource="/../www-private/key.txt"), Response())
        assert result.status == 400

    @pytest.mark.anyio
    async def test_inner_dotdot_allowed(self, www) -> None:
        result = await handle([FileServer(www)], Request(resource="/docs/../index.html"), Response())
        assert result.text == "<h1>Home</h1>"

    @pytest.mark.anyio
    async def test_escape_rejected_before_file_read(self, www, monkeypatch) -> None:
        import anyio

        async def fail(*args, **kwargs):
            raise AssertionError("filesystem touched")

        monkeypatch.setattr(anyio.Path, "is_file", fail)
        monkeypatch.setattr(anyio.Path, "read_bytes", fail)
        result = await handle([FileServer(www)], Request(resource="/../secret.txt"), Response())
        assert result.status == 400

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    @pytest.mark.anyio
    async def test_symlink_escape_rejected(self, www) -> None:
        (www / "leak.txt").symlink_to(www.parent / "secret.txt")
        result = await handle([FileServer(www)], Request(resource="/leak.txt"), Response())
        assert result.status == 400
        assert b"top secret" not in result.body


class TestPathInDir:
    def test_child(self) -> None:
        assert path_in_dir("/srv/www/index.html", "/srv/www")

    def test_root_itself(self) -> None:
        assert path_in_dir("/srv/www", "/srv/www")

    def test_parent(self) -> None:
        assert not path_in_dir("/srv", "/srv/www")

    def test_sibling_with_shared_prefix(self) -> None:
        assert not path_in_dir("/srv/www2/x", "/srv/www")

    def test_filesystem_root(self) -> None:
        assert path_in_dir("/etc/passwd", "/")
