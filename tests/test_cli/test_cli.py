"""Tests for CLI commands."""

import json

import httpx
import pytest
from click.testing import CliRunner

from recipebox.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def http_routes(monkeypatch, jpeg_bytes):
    """Route every AsyncClient the CLI builds through an in-memory transport.

    Paths listed in the returned set answer 404; anything else gets a JPEG.
    """
    broken = set()
    real_client = httpx.AsyncClient

    def handler(request):
        if request.url.path in broken:
            return httpx.Response(404)
        return httpx.Response(200, content=jpeg_bytes)

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)
    return broken


class TestCLIGroup:
    def test_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "recipebox" in result.output
        for command in ("recipes", "fetch-image", "prefetch", "cache"):
            assert command in result.output


class TestRecipesCommand:
    def test_help(self, runner):
        result = runner.invoke(cli, ["recipes", "--help"])
        assert result.exit_code == 0
        assert "--local" in result.output
        assert "--search" in result.output

    def test_list_local(self, runner, feed_file, tmp_path):
        result = runner.invoke(
            cli, ["recipes", "--local", str(feed_file), "--cache-dir", str(tmp_path / "c")]
        )
        assert result.exit_code == 0
        assert "Recipes (2)" in result.output

    def test_search(self, runner, feed_file, tmp_path):
        result = runner.invoke(
            cli,
            ["recipes", "--local", str(feed_file), "--search", "british",
             "--cache-dir", str(tmp_path / "c")],
        )
        assert result.exit_code == 0
        assert "Apam Balik" not in result.output
        assert "Recipes (1)" in result.output

    def test_invalid_feed_exits_nonzero(self, runner, tmp_path, new_record):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"recipes": [new_record(uuid="invalid-uuid")]}))
        result = runner.invoke(
            cli, ["recipes", "--local", str(path), "--cache-dir", str(tmp_path / "c")]
        )
        assert result.exit_code == 1

    def test_nonexistent_file(self, runner):
        result = runner.invoke(cli, ["recipes", "--local", "nonexistent.json"])
        assert result.exit_code != 0


class TestCacheCommands:
    def test_stats(self, runner, tmp_path):
        result = runner.invoke(cli, ["cache", "stats", "--cache-dir", str(tmp_path / "c")])
        assert result.exit_code == 0
        assert "Entries" in result.output

    def test_sweep(self, runner, tmp_path):
        result = runner.invoke(cli, ["cache", "sweep", "--cache-dir", str(tmp_path / "c")])
        assert result.exit_code == 0
        assert "Removed 0" in result.output

    def test_clear_requires_confirmation(self, runner, tmp_path):
        cache_dir = tmp_path / "c"
        cache_dir.mkdir()
        (cache_dir / "https___x_a.jpg").write_bytes(b"x")
        result = runner.invoke(cli, ["cache", "clear", "--cache-dir", str(cache_dir)], input="n\n")
        assert result.exit_code != 0
        assert (cache_dir / "https___x_a.jpg").exists()

    def test_clear_with_yes(self, runner, tmp_path):
        cache_dir = tmp_path / "c"
        cache_dir.mkdir()
        (cache_dir / "https___x_a.jpg").write_bytes(b"x")
        result = runner.invoke(cli, ["cache", "clear", "--cache-dir", str(cache_dir), "--yes"])
        assert result.exit_code == 0
        assert not (cache_dir / "https___x_a.jpg").exists()
        assert cache_dir.is_dir()

    def test_stats_accepts_verbose(self, runner, tmp_path):
        result = runner.invoke(cli, ["cache", "stats", "-v", "--cache-dir", str(tmp_path / "c")])
        assert result.exit_code == 0

    def test_clear_accepts_verbose(self, runner, tmp_path):
        result = runner.invoke(
            cli, ["cache", "clear", "-vv", "--yes", "--cache-dir", str(tmp_path / "c")]
        )
        assert result.exit_code == 0


class TestFetchImageCommand:
    URL = "https://img.example.com/photos/a.jpg"

    def test_miss_then_hit(self, runner, tmp_path, http_routes):
        args = ["fetch-image", self.URL, "--cache-dir", str(tmp_path / "c")]

        first = runner.invoke(cli, args)
        assert first.exit_code == 0
        assert "from network" in first.output
        assert (tmp_path / "c" / "https___img.example.com_photos_a.jpg").is_file()

        second = runner.invoke(cli, args)
        assert second.exit_code == 0
        assert "from cache" in second.output

    def test_http_failure_exits_nonzero(self, runner, tmp_path, http_routes):
        http_routes.add("/photos/a.jpg")
        result = runner.invoke(cli, ["fetch-image", self.URL, "--cache-dir", str(tmp_path / "c")])
        assert result.exit_code == 1
        assert not (tmp_path / "c" / "https___img.example.com_photos_a.jpg").exists()

    def test_malformed_url_exits_nonzero(self, runner, tmp_path, http_routes):
        result = runner.invoke(cli, ["fetch-image", "http://[::1", "--cache-dir", str(tmp_path / "c")])
        assert result.exit_code == 1


class TestPrefetchCommand:
    def test_counts_across_runs(self, runner, tmp_path, feed_file, http_routes):
        http_routes.add("/small2.jpg")
        args = ["prefetch", "--local", str(feed_file), "--cache-dir", str(tmp_path / "c")]

        first = runner.invoke(cli, args)
        assert first.exit_code == 0
        assert "1 downloaded, 0 already cached, 1 failed" in first.output

        second = runner.invoke(cli, args)
        assert second.exit_code == 0
        assert "0 downloaded, 1 already cached, 1 failed" in second.output

    def test_large_size(self, runner, tmp_path, feed_file, http_routes):
        result = runner.invoke(
            cli,
            ["prefetch", "--local", str(feed_file), "--size", "large",
             "--cache-dir", str(tmp_path / "c")],
        )
        assert result.exit_code == 0
        assert "2 downloaded" in result.output
        assert (tmp_path / "c" / "https___some.url_large2.jpg").is_file()

    def test_invalid_feed_exits_nonzero(self, runner, tmp_path, new_record, http_routes):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"recipes": [new_record(name="")]}))
        result = runner.invoke(
            cli, ["prefetch", "--local", str(path), "--cache-dir", str(tmp_path / "c")]
        )
        assert result.exit_code == 1
