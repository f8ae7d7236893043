"""CLI entrypoints for apicheck commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .baseline import BaselineGenerator, filters_from_config
from .comparison import compare_baselines
from .config import load_config
from .errors import ApiCheckError
from .logging import configure_logging
from .metadata import open_source
from .stores import load_baseline, save_baseline

BASELINE_SUFFIX = ".baseline.json"


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


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write detailed logs (timestamps, logger names) to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .apicheck.yml or the directory holding it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apicheck",
        description="Record the public API surface of a compiled module and detect breaking changes.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a baseline document for a module.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_log_file_option(generate_parser, suppress_default=True)
    _add_config_option(generate_parser)
    generate_parser.add_argument("module", help="Path to the module metadata to introspect.")
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help=f"Where to write the baseline (defaults to <module>{BASELINE_SUFFIX}).",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Report breaking changes between two baseline documents.",
    )
    _add_verbose_option(compare_parser, suppress_default=True)
    _add_log_file_option(compare_parser, suppress_default=True)
    _add_config_option(compare_parser)
    compare_parser.add_argument("old", help="Baseline of the previous release.")
    compare_parser.add_argument("new", help="Baseline of the candidate release.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apicheck commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    if args.command == "generate":
        try:
            output_path = _run_generate(Path(args.module), args.output, Path(args.config))
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ApiCheckError as exc:
            parser.exit(1, f"apicheck generate failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Baseline written to {_relativize(output_path)}")
    elif args.command == "compare":
        try:
            config = load_config(Path(args.config))
            result = compare_baselines(
                load_baseline(Path(args.old)),
                load_baseline(Path(args.new)),
                ignore_types=config.compare.ignore_types,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except ApiCheckError as exc:
            parser.exit(1, f"apicheck compare failed: {exc}\nRun with --verbose for more details.\n")
        if not result.has_breaking_changes:
            print("No breaking changes")
            return
        for change in result.breaking_changes:
            print(change.describe())
        parser.exit(1, f"{len(result.breaking_changes)} breaking change(s) found\n")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(module: Path, output: str | None, config_path: Path) -> Path:
    config = load_config(config_path)
    if not module.exists():
        raise FileNotFoundError(f"Module not found: {module}")
    source = open_source(module)
    document = BaselineGenerator(source, filters_from_config(config.filters)).generate_baseline()

    if output:
        target = Path(output)
    elif config.output is not None:
        target = config.output
    else:
        target = module.with_name(module.stem + BASELINE_SUFFIX)
    return save_baseline(document, target)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
