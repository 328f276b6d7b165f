"""Command line interface."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from . import __version__
from .config import REPORT_FORMATS, ScanConfig
from .errors import ScannerError
from .log import setup_logging
from .models import Severity
from .report import Reporter
from .scanner import AnchorScanner

TOOL_NAME = "Anchor Security Scanner"

SECURITY_WARNING = """
This tool performs STATIC ANALYSIS only and may produce false positives/negatives.

Important limitations:
- Findings are heuristic; there is no dataflow or control-flow analysis
- Manual code review and professional audits are essential
- Test thoroughly on devnet before mainnet deployment
"""


def print_banner(console: Console) -> None:
    """Print application banner."""
    console.print("[bold cyan]" + "=" * 60 + "[/bold cyan]")
    console.print(f"[bold cyan]{TOOL_NAME}[/bold cyan]")
    console.print("[bold cyan]" + "=" * 60 + "[/bold cyan]")
    console.print(f"[dim]Version {__version__}[/dim]")
    console.print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anchorsecscan",
        description=f"{TOOL_NAME} - Static analysis for Solana/Anchor programs",
    )
    parser.add_argument("path", nargs="?", default=".", help="Path to the Anchor project or a Rust file")
    parser.add_argument("-o", "--output", help="Write the report to this file")
    parser.add_argument("-f", "--format", default="markdown", choices=REPORT_FORMATS, help="Report format")
    parser.add_argument("--descriptions", help="Directory with vulnerability descriptions (default: ./vulnerabilities)")
    parser.add_argument("--ignore", action="append", help="Additional ignore patterns (can be used multiple times)")
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    parser.add_argument("--quiet", action="store_true", help="Do not print the report to the terminal")
    parser.add_argument("--no-banner", action="store_true", help="Skip banner")
    parser.add_argument("--version", action="version", version=f"{TOOL_NAME} v{__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    console = Console()

    if not args.no_banner:
        print_banner(console)
        console.print(Panel(Text(SECURITY_WARNING, style="yellow"), title="[yellow]NOTICE[/yellow]", border_style="yellow"))

    logger = setup_logging(args.verbose)

    try:
        config = ScanConfig.build(
            project_path=Path(args.path),
            output_file=Path(args.output) if args.output else None,
            format=args.format,
            descriptions_dir=Path(args.descriptions) if args.descriptions else None,
            ignore_patterns=args.ignore,
            verbose=args.verbose,
        )

        scanner = AnchorScanner(config, logger=logger)
        result = scanner.scan(console)

        if not args.quiet:
            Reporter.print_console_report(result, console, files_scanned=scanner.files_scanned, duration=scanner.duration)

        if config.output_file:
            Reporter.write_report(result, config.format, config.output_file)
            console.print(f"\n[green]✓[/green] {config.format} report saved to: {config.output_file}")

        if result.count(Severity.CRITICAL) > 0 or result.count(Severity.HIGH) > 0:
            return 1
        return 0

    except ScannerError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1
    except KeyboardInterrupt:
        console.print("\n[yellow]Scan interrupted[/yellow]")
        return 1
    except OSError as e:
        console.print(f"\n[red]Fatal error: {escape(str(e))}[/red]")
        logger.exception("Fatal error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
