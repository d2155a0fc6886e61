"""CLI entrypoints for eodoc commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import TRANSFORM_ERROR_POLICIES, ConfigError, load_config
from .emitters.summary import SummaryValidationError
from .engine import DocsEngine
from .logging import configure_logging
from .transform import TransformError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="eodoc",
        description="Generate HTML documentation and an XML summary from XMIR files.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    docs_parser = subparsers.add_parser(
        "docs",
        help="Generate documentation for parsed XMIR files.",
    )
    _add_verbose_option(docs_parser, suppress_default=True)
    docs_parser.add_argument(
        "-t",
        "--target",
        default=".",
        help="Project target directory holding the parser output (defaults to current directory).",
    )
    docs_parser.add_argument(
        "--input-dir",
        default=None,
        help="Directory under the target that contains .xmir files (default: 1-parse).",
    )
    docs_parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory under the target that receives documentation (default: docs).",
    )
    docs_parser.add_argument(
        "--xsl",
        type=Path,
        default=None,
        help="XSLT stylesheet used to render each XMIR file.",
    )
    docs_parser.add_argument(
        "--stylesheet",
        type=Path,
        default=None,
        help="CSS file copied to styles.css in the output directory.",
    )
    docs_parser.add_argument(
        "--no-sort",
        action="store_true",
        help="Keep file system order instead of sorting artifacts by path.",
    )
    docs_parser.add_argument(
        "--on-transform-error",
        choices=TRANSFORM_ERROR_POLICIES,
        default=None,
        help="Abort on the first XSL failure (fail) or render a placeholder (skip).",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing documentation generation.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for eodoc commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "docs":
        try:
            target = Path(args.target)
            config = load_config(target).with_overrides(
                input_dir=args.input_dir,
                output_dir=args.output_dir,
                transformer=args.xsl,
                stylesheet=args.stylesheet,
                sort=False if args.no_sort else None,
                on_transform_error=args.on_transform_error,
            )
            result = DocsEngine(config=config).run(target)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, TransformError, SummaryValidationError, OSError) as exc:
            parser.exit(1, f"eodoc docs failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Documentation generated in {_relativize(result.output_dir)}")
        print(f"XML summary written to {_relativize(result.summary_path)}")
        if result.failed:
            print(f"Skipped {len(result.failed)} artifacts: {', '.join(result.failed)}")
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
