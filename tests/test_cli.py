"""Tests for the CLI module: arg parsing, exit codes, formats, stdin, end-to-end."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from urclhl.cli import CliOptions, build_parser, highlight_file, main, watch_loop

# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        p = build_parser()
        ns = p.parse_args(["prog.urcl"])
        assert ns.input == "prog.urcl"
        assert ns.output is None
        assert ns.format is None
        assert ns.css == []

    def test_output_and_format(self) -> None:
        p = build_parser()
        ns = p.parse_args(["prog.urcl", "-o", "out.html", "-f", "fragment"])
        assert ns.output == "out.html"
        assert ns.format == "fragment"

    def test_stdin_dash(self) -> None:
        p = build_parser()
        ns = p.parse_args(["-"])
        assert ns.input == "-"

    def test_css_repeatable(self) -> None:
        p = build_parser()
        ns = p.parse_args(["prog.urcl", "--css", "a.css", "--css", "b.css"])
        assert ns.css == ["a.css", "b.css"]

    def test_watch_and_debug(self) -> None:
        p = build_parser()
        ns = p.parse_args(["prog.urcl", "--watch", "--debug"])
        assert ns.watch is True
        assert ns.debug is True

    def test_unknown_format_rejected(self) -> None:
        p = build_parser()
        with pytest.raises(SystemExit):
            p.parse_args(["prog.urcl", "-f", "pdf"])


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.urcl"
        src.write_text("add r1 r2 r3\n")
        out = tmp_path / "out.html"
        assert main([str(src), "-o", str(out)]) == 0

    def test_missing_input_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "missing.urcl")]) == 1
        assert "error: cannot read" in capsys.readouterr().err

    def test_undecodable_input_returns_1(self, tmp_path: Path) -> None:
        src = tmp_path / "bad.urcl"
        src.write_bytes(b"\xff\xfe\xfa")
        assert main([str(src)]) == 1

    def test_bad_config_returns_2(self, tmp_path: Path, capsys) -> None:
        (tmp_path / "urclhl.toml").write_text('[output]\nformat = "pdf"\n')
        src = tmp_path / "prog.urcl"
        src.write_text("hlt\n")
        assert main([str(src)]) == 2
        assert "unknown output format" in capsys.readouterr().err

    def test_watch_with_stdin_returns_2(self, capsys) -> None:
        assert main(["-", "--watch"]) == 2
        assert "--watch" in capsys.readouterr().err

    def test_malformed_source_still_succeeds(self, tmp_path: Path) -> None:
        src = tmp_path / "junk.urcl"
        src.write_text('/* open "string\n@@@ ,,, \\')
        out = tmp_path / "out.html"
        assert main([str(src), "-o", str(out)]) == 0


# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------


class TestFormats:
    def test_html_document(self, tmp_path: Path) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("add r1\n")
        out = tmp_path / "out.html"
        assert main([str(src), "-o", str(out), "--title", "Demo", "--css", "t.css"]) == 0
        html = out.read_text()
        assert html.startswith("<!DOCTYPE html>")
        assert "<title>Demo</title>" in html
        assert '<link rel="stylesheet" href="t.css">' in html
        assert '<span class="hljs-keyword">add </span>' in html

    def test_fragment_to_stdout(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("add r1")
        assert main([str(src), "-f", "fragment"]) == 0
        assert capsys.readouterr().out == (
            '<span class="hljs-keyword">add </span><span class="hljs-built_in">r1</span>'
        )

    def test_tokens_format(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("hlt")
        assert main([str(src), "-f", "tokens"]) == 0
        assert capsys.readouterr().out == "1:1 keyword 'hlt'\n"

    def test_class_prefix_flag(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("r1")
        assert main([str(src), "-f", "fragment", "--class-prefix", "x-"]) == 0
        assert capsys.readouterr().out == '<span class="x-built_in">r1</span>'


# ---------------------------------------------------------------------------
# stdin and --debug
# ---------------------------------------------------------------------------


class TestStdin:
    def test_reads_stdin(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO(".loop\n"))
        assert main(["-", "-f", "fragment"]) == 0
        assert capsys.readouterr().out == '<span class="hljs-symbol">.loop</span>\n'


class TestDebug:
    def test_debug_dumps_tokens_to_stderr(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("add r1")
        out = tmp_path / "out.html"
        assert main([str(src), "-o", str(out), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "1:1 keyword 'add '" in err
        assert "1:5 built_in 'r1'" in err


# ---------------------------------------------------------------------------
# highlight_file smoke test
# ---------------------------------------------------------------------------


class TestHighlightFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "simple.urcl"
        src.write_text("// hi\n")
        opts = CliOptions(
            input_file=src,
            output_file=None,
            format="fragment",
            title=None,
            class_prefix="hljs-",
            css_files=[],
            watch=False,
            debug=False,
        )
        assert highlight_file(opts) == '<span class="hljs-comment">// hi</span>\n'


# ---------------------------------------------------------------------------
# watch_loop
# ---------------------------------------------------------------------------


def _options(input_file: Path | None, output_file: Path | None) -> CliOptions:
    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format="fragment",
        title=None,
        class_prefix="hljs-",
        css_files=[],
        watch=True,
        debug=False,
    )


class TestWatchLoop:
    def test_stdin_options_return_immediately(self, capsys) -> None:
        watch_loop(_options(None, None))
        assert capsys.readouterr().err == ""

    def test_highlights_once_then_stops_on_interrupt(
        self, tmp_path: Path, monkeypatch, capsys
    ) -> None:
        src = tmp_path / "prog.urcl"
        src.write_text("hlt")
        out = tmp_path / "out.html"

        def interrupt(_secs: float) -> None:
            raise KeyboardInterrupt

        monkeypatch.setattr("urclhl.cli.time.sleep", interrupt)
        watch_loop(_options(src, out))
        assert out.read_text() == '<span class="hljs-keyword">hlt</span>'
        assert f"Highlighted {src}" in capsys.readouterr().err
