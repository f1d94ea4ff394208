"""Command-line interface for the URCL highlighter."""

from __future__ import annotations

import argparse
import io
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from urclhl.errors import ConfigError
from urclhl.render import DEFAULT_CLASS_PREFIX

FORMATS = ("html", "fragment", "tokens")
CONFIG_NAME = "urclhl.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options. ``input_file`` is None when reading stdin."""

    input_file: Path | None
    output_file: Path | None
    format: str
    title: str | None
    class_prefix: str
    css_files: list[str]
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="urclhl",
        description="Syntax-highlight URCL assembly source",
    )
    p.add_argument("input", help="Input .urcl file, or - for stdin")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "-f",
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: html)",
    )
    p.add_argument("--title", default=None, help="Document title for html output")
    p.add_argument(
        "--class-prefix",
        default=None,
        metavar="PREFIX",
        help=f"CSS class prefix for scopes (default: {DEFAULT_CLASS_PREFIX})",
    )
    p.add_argument(
        "--css",
        action="append",
        default=[],
        metavar="FILE",
        help="CSS file to link from html output (repeatable)",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and re-highlight")
    p.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        if config_path is not None:
            raise ConfigError("config file not found", path)
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config: {exc.strerror}", path) from exc


def _table(config: dict[str, Any], name: str, path: Path | None) -> dict[str, Any]:
    value = config.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table", path)
    return value


def _string(table: dict[str, Any], key: str, section: str, path: Path | None) -> str | None:
    value = table.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{section}.{key} must be a string", path)
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)
    source_path = config_path if config_path is not None else input_dir / CONFIG_NAME

    output_cfg = _table(config, "output", source_path)
    html_cfg = _table(config, "html", source_path)

    # Output format: default < config < CLI
    fmt = args.format or _string(output_cfg, "format", "output", source_path) or "html"
    if fmt not in FORMATS:
        raise ConfigError(
            f"unknown output format {fmt!r} (expected one of: {', '.join(FORMATS)})",
            source_path,
        )

    title = args.title or _string(html_cfg, "title", "html", source_path)

    class_prefix = args.class_prefix
    if class_prefix is None:
        class_prefix = _string(html_cfg, "class_prefix", "html", source_path)
    if class_prefix is None:
        class_prefix = DEFAULT_CLASS_PREFIX

    # CSS files: config < CLI
    css_files: list[str] = []
    cfg_css = html_cfg.get("css", [])
    if not isinstance(cfg_css, list):
        raise ConfigError("html.css must be a list of file names", source_path)
    css_files.extend(str(f) for f in cfg_css)
    css_files.extend(args.css)

    if args.watch and input_file is None:
        raise ConfigError("--watch needs an input file, not stdin")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        format=fmt,
        title=title,
        class_prefix=class_prefix,
        css_files=css_files,
        watch=args.watch,
        debug=args.debug,
    )


def highlight_source(source: str, options: CliOptions) -> str:
    """Scan source text and format it according to the options."""
    from urclhl.debug import dump_tokens
    from urclhl.lexer import scan
    from urclhl.render import render_document, render_fragment

    tokens = scan(source)

    if options.debug:
        dump_tokens(tokens)

    if options.format == "tokens":
        buf = io.StringIO()
        dump_tokens(tokens, file=buf)
        return buf.getvalue()
    if options.format == "fragment":
        return render_fragment(tokens, options.class_prefix)
    return render_document(
        tokens,
        title=options.title,
        css_files=options.css_files,
        class_prefix=options.class_prefix,
    )


def highlight_file(options: CliOptions) -> str:
    """Read the input (file or stdin) and return the formatted output."""
    if options.input_file is None:
        source = sys.stdin.read()
    else:
        source = options.input_file.read_text(encoding="utf-8")
    return highlight_source(source, options)


def _write_output(text: str, options: CliOptions) -> None:
    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, re-highlight on each modification."""
    input_file = options.input_file
    if input_file is None:
        return
    last_mtime = 0.0
    print(f"Watching {input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write_output(highlight_file(options), options)
                    print(f"Highlighted {input_file}", file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if options.watch:
        watch_loop(options)
        return 0

    try:
        output = highlight_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {args.input}: {exc}", file=sys.stderr)
        return 1

    try:
        _write_output(output, options)
    except OSError as exc:
        print(f"error: cannot write {options.output_file}: {exc}", file=sys.stderr)
        return 1

    return 0
