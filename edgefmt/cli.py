from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from .engine import format_data
from .errors import EdgeFmtError, TreeLoadError
from .options import FormatOptions, find_config, load_options
from .version import tool_version

logger = logging.getLogger("edgefmt")


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="edgefmt",
        description="Pretty-print a parsed Edge template (JSON tree dump)",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("tree", help="path to the parser's JSON dump, or - for stdin")
    p.add_argument("-o", "--output", metavar="FILE", help="write the result here instead of stdout")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="YAML options file (default: nearest .edgefmt.yaml above the tree file)",
    )
    p.add_argument("--use-tabs", action="store_true", default=None, help="indent with tabs")
    p.add_argument("--tab-width", type=int, metavar="N", help="spaces per indentation level")
    p.add_argument("--print-width", type=int, metavar="N", help="line width before tag props explode")
    p.add_argument(
        "--single-attribute-per-line",
        action="store_true",
        default=None,
        help="put every tag prop on its own line when a tag has several",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p


def _setup_logging(verbose: bool) -> None:
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        logger.addHandler(h)


def _read_tree(source: str) -> Dict[str, Any]:
    try:
        raw = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise TreeLoadError(f"Cannot read tree {source}: {e}") from e
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise TreeLoadError(f"Invalid JSON in {source}: {e}") from e
    if not isinstance(data, dict):
        raise TreeLoadError(f"{source}: top-level value must be an object")
    return data


def _options(ns: argparse.Namespace) -> FormatOptions:
    config: Optional[Path]
    if ns.config:
        config = Path(ns.config)
    else:
        config = find_config(Path.cwd() if ns.tree == "-" else Path(ns.tree))

    base = load_options(config) if config is not None else FormatOptions()
    if config is not None:
        logger.debug("options loaded from %s", config)

    return base.merged({
        "use_tabs": ns.use_tabs,
        "tab_width": ns.tab_width,
        "print_width": ns.print_width,
        "single_attribute_per_line": ns.single_attribute_per_line,
    })


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(ns.verbose)

    try:
        result = format_data(_read_tree(ns.tree), _options(ns))
        if ns.output:
            Path(ns.output).write_text(result, encoding="utf-8")
        else:
            sys.stdout.write(result)
        return 0
    except EdgeFmtError as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
