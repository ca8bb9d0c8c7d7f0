"""
Application entry point — wires dependencies and runs the pipeline once.

Composition root: creates concrete adapters, injects them into the
pipeline and prints the CT log IDs of the decoded trust list.

This is the ONLY place where concrete classes are instantiated.
Everything else depends on Protocol interfaces.

Responsibilities:
  1. Parse command-line arguments
  2. Load and validate configuration from environment
  3. Configure structlog (human-readable, on stderr; stdout carries results)
  4. Create concrete adapters (HTTP or file source, cabinet extractor, decoder)
  5. Run the pipeline inside a LoggingExecutionContext and report the outcome

Exit status: 0 on success, 1 on configuration or pipeline failure.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog
from railway import LoggingExecutionContext

from authroot_parser import __version__
from authroot_parser.adapters.cab_extractor import CabDerExtractor, PassthroughDerExtractor
from authroot_parser.adapters.file_source import FileArchiveSource
from authroot_parser.adapters.http_client import HttpArchiveFetcher
from authroot_parser.adapters.stl_decoder import DerTrustListDecoder
from authroot_parser.config import AppSettings
from authroot_parser.domain.ports import ArchiveSource, DerExtractor
from authroot_parser.pipeline import run_pipeline
from authroot_parser.report import render_trust_list

PROG = "authroot-ctlogs"


def configure_structlog(log_level: str = "INFO") -> None:
    """Configure structlog for colored, human-readable console output on stderr."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="List the Certificate Transparency logs recognized by Microsoft's authroot.stl.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--cab", type=Path, metavar="PATH", help="decode a local authrootstl.cab")
    source.add_argument("--stl", type=Path, metavar="PATH", help="decode a local authroot.stl")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print the trust-list header and key details",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _create_adapters(
    settings: AppSettings,
    args: argparse.Namespace,
) -> tuple[ArchiveSource, DerExtractor, DerTrustListDecoder]:
    """Instantiate the source, extractor and decoder for this run."""
    source: ArchiveSource
    extractor: DerExtractor
    if args.stl is not None:
        source = FileArchiveSource(args.stl)
        extractor = PassthroughDerExtractor()
    elif args.cab is not None:
        source = FileArchiveSource(args.cab)
        extractor = CabDerExtractor()
    else:
        source = HttpArchiveFetcher(
            url=settings.fetch.url,
            timeout=settings.fetch.timeout_seconds,
            deadline=settings.fetch.deadline_seconds,
            max_attempts=settings.fetch.max_attempts,
        )
        extractor = CabDerExtractor()
    decoder = DerTrustListDecoder(strict_content_types=settings.decoder.strict_content_types)
    return source, extractor, decoder


def main(argv: list[str] | None = None) -> None:
    """Wire dependencies, run the pipeline and print the result."""
    args = build_parser().parse_args(argv)

    try:
        settings = AppSettings()
    except Exception as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    configure_structlog(settings.log_level)
    log = structlog.get_logger()
    log.info("app.starting", version=__version__, log_level=settings.log_level)

    source, extractor, decoder = _create_adapters(settings, args)
    ctx = LoggingExecutionContext(operation="AuthrootCtLogs")
    result = ctx.execute(lambda: run_pipeline(source, extractor, decoder))

    if result.is_failure():
        error = result.error()
        log.error("pipeline.failed", code=error.code.value, failure=str(error))
        print(f"{PROG}: {error}", file=sys.stderr)  # noqa: T201
        sys.exit(1)

    for line in render_trust_list(result.value(), verbose=args.verbose):
        print(line)  # noqa: T201


if __name__ == "__main__":
    main()
