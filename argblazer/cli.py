"""
cli.py — command line entry point

  argblazer report debate.yaml                 # writes debate_argBlazerReport.html
  argblazer report debate.yaml -o out.html
  argblazer report debate.yaml --json          # payload to stdout
  argblazer serve --port 8787
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from argblazer.argumentation import ArgumentationError, SemanticsEngine, StepDecomposer
from argblazer.report import build_payload, default_report_name, load_file, render_html

log = logging.getLogger("argblazer.cli")


def cmd_report(args: argparse.Namespace) -> int:
    source = Path(args.file)
    document = load_file(source)
    engine = SemanticsEngine(max_arguments=args.max_arguments)
    steps = StepDecomposer(engine=engine).decompose(document.arguments, document.attacks)

    if args.json:
        print(json.dumps(build_payload(document, steps), indent=2))
        return 0

    out = Path(args.output) if args.output else source.with_name(default_report_name(source))
    html = render_html(document, steps, title=args.title or f"ArgBlazer Report - {source.name}")
    out.write_text(html, encoding="utf-8")
    log.info(f"HTML report exported to {out}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from argblazer.app import HOST, PORT, main as serve
    serve(host=args.host or HOST, port=args.port or PORT)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="argblazer",
        description="Extension-based semantics and step-by-step reports for argumentation frameworks",
    )
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    rep = sub.add_parser("report", help="render a YAML framework document")
    rep.add_argument("file", help="YAML document with 'arguments' and optional 'attacks'")
    rep.add_argument("-o", "--output", help="HTML output path")
    rep.add_argument("--json", action="store_true", help="print the JSON payload instead")
    rep.add_argument("--title", help="report title")
    rep.add_argument("--max-arguments", type=int, default=None,
                     help="enumeration cap (default: ARGBLAZER_MAX_ARGUMENTS or 20)")
    rep.set_defaults(func=cmd_report)

    srv = sub.add_parser("serve", help="run the HTTP API")
    srv.add_argument("--host", help="bind address (default: ARGBLAZER_HOST or 0.0.0.0)")
    srv.add_argument("--port", type=int, help="port (default: ARGBLAZER_PORT or 8787)")
    srv.set_defaults(func=cmd_serve)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s │ %(name)-22s │ %(levelname)-7s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        return args.func(args)
    except ArgumentationError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
