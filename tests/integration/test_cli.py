"""Integration tests for the versecut CLI.

Tests the command-line interface and main entry point. The autouse fake
backend from conftest stands in for the sentence-transformers model.
"""

import io
import json

import pytest

from tests.fixtures.backends import FailingBackend, KeywordBackend
from versecut import __version__
from versecut.classifiers import load_centroids
from versecut.cli import create_parser, main, run

SONG = "[Verse 1]\nWalking down the street at night\n\nCHORUS\nHold me close tonight please\n"


@pytest.fixture
def song_file(tmp_path):
    path = tmp_path / "song.txt"
    path.write_text(SONG, encoding="utf-8")
    return path


class TestCreateParser:
    """Tests for argument parser creation."""

    def test_parser_creates_successfully(self):
        parser = create_parser()
        assert parser.prog == "versecut"

    def test_classify_defaults(self):
        args = create_parser().parse_args(["classify"])
        assert args.input == "-"
        assert not args.json
        assert not args.strip
        assert args.centroids is None
        assert args.workers is None

    def test_json_and_strip_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["classify", "x.txt", "--json", "--strip"])


class TestMain:
    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage:" in capsys.readouterr().out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert f"versecut v{__version__}" in capsys.readouterr().out

    def test_invalid_workers(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["classify", "--workers", "0"])
        assert exc_info.value.code == 2


class TestClassifyCommand:
    def test_json_output(self, song_file, capsys):
        assert main(["classify", str(song_file), "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        types = [r["type"] for r in payload["results"]]
        assert types == ["header", "lyric", "empty", "header", "lyric"]
        assert payload["results"][0]["method"] == "rule-safe"
        assert payload["stats"]["total"] == 5
        assert payload["stats"]["headers"] == 2

    def test_strip_output(self, song_file, capsys):
        assert main(["classify", str(song_file), "--strip"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "Walking down the street at night",
            "",
            "Hold me close tonight please",
        ]

    def test_table_output(self, song_file, capsys):
        assert main(["classify", str(song_file)]) == 0
        out = capsys.readouterr().out
        assert "Line classification" in out
        assert "2 headers" in out

    def test_reads_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("V2\nYeah!\n"))
        assert main(["classify", "-", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert [r["type"] for r in payload["results"]] == ["header", "lyric"]

    def test_workers_flag(self, song_file, capsys):
        assert main(["classify", str(song_file), "--json", "--workers", "3"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["stats"]["headers"] == 2

    def test_invalid_utf8_file(self, tmp_path, capsys):
        path = tmp_path / "latin1.txt"
        path.write_bytes(b"\xff\xfeCHORUS\nWalking down the street at night\n")
        assert main(["classify", str(path), "--json"]) == 1
        out = capsys.readouterr().out
        assert "not valid UTF-8 text" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["classify", str(tmp_path / "nope.txt")]) == 1
        assert "file not found" in capsys.readouterr().out

    def test_backend_failure_reported(self, song_file, monkeypatch, capsys):
        backend = FailingBackend()
        monkeypatch.setattr("versecut.embedding_adapter.get_default_backend", lambda: backend)
        assert main(["classify", str(song_file)]) == 1
        out = capsys.readouterr().out
        assert "Error:" in out
        assert "line_index: 3" in out

    def test_explicit_config(self, song_file, tmp_path, monkeypatch, capsys):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"embedding": {"model_name": "tiny-model"}}))
        seen = []

        def fake_backend(config):
            seen.append(config.model_name)
            return KeywordBackend()

        monkeypatch.setattr("versecut.cli.SentenceTransformerBackend", fake_backend)
        assert main(["--config", str(config_path), "classify", str(song_file), "--json"]) == 0
        assert seen == ["tiny-model"]
        capsys.readouterr()


    def test_missing_config_file(self, song_file, tmp_path, capsys):
        missing = tmp_path / "absent.json"
        assert main(["--config", str(missing), "classify", str(song_file)]) == 1
        out = capsys.readouterr().out
        assert "Config file not found" in out
        assert "config_path" in out


class TestCentroidsCommand:
    def test_build_and_reuse(self, song_file, tmp_path, auto_fake_backend, capsys):
        output = tmp_path / "centroids.npy"
        assert main(["centroids", str(output)]) == 0
        assert output.exists()
        assert load_centroids(output).dim == auto_fake_backend.embedding_dim

        calls = auto_fake_backend.calls
        capsys.readouterr()
        assert main(["classify", str(song_file), "--json", "--centroids", str(output)]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["stats"]["headers"] == 2
        # Only CHORUS needed an embedding; the corpus was not re-encoded
        assert auto_fake_backend.calls == calls + 1

    def test_refuses_overwrite_without_force(self, tmp_path, capsys):
        output = tmp_path / "centroids.npy"
        output.write_bytes(b"old")
        assert main(["centroids", str(output)]) == 1
        assert "--force" in capsys.readouterr().out
        assert output.read_bytes() == b"old"

        assert main(["centroids", str(output), "--force"]) == 0
        assert load_centroids(output).dim == 8

    def test_bad_centroids_file(self, song_file, tmp_path, capsys):
        bad = tmp_path / "bad.npy"
        bad.write_bytes(b"not numpy")
        assert main(["classify", str(song_file), "--centroids", str(bad)]) == 1


class TestRun:
    def test_keyboard_interrupt(self, monkeypatch):
        def interrupted():
            raise KeyboardInterrupt

        monkeypatch.setattr("versecut.cli.main", interrupted)
        with pytest.raises(SystemExit) as exc_info:
            run()
        assert exc_info.value.code == 130

    def test_exit_code_propagated(self, monkeypatch):
        monkeypatch.setattr("versecut.cli.main", lambda: 0)
        with pytest.raises(SystemExit) as exc_info:
            run()
        assert exc_info.value.code == 0
