"""
Scan driver: runs the visitor over every Rust file of a project and
collects the findings into one AnalysisResult.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from .catalog import DescriptionCatalog
from .config import ScanConfig
from .loader import RustSourceLoader, check_overflow_checks, find_rust_files
from .models import AnalysisResult, Info, Location, Warning
from .visitor import AnchorVisitor

OVERFLOW_CHECKS_INFO = (
    "Project has overflow-checks = true in Cargo.toml, which provides runtime "
    "protection against integer overflow/underflow"
)

logger = logging.getLogger(__name__)


def analyze_source(
    source: str,
    file_path: Union[str, Path] = "<memory>",
    has_overflow_checks: bool = False,
    result: Optional[AnalysisResult] = None,
    loader: Optional[RustSourceLoader] = None,
) -> AnalysisResult:
    """
    Analyze one in-memory Rust source.

    Args:
        source: Rust source text
        file_path: Path reported in finding locations
        has_overflow_checks: Whether overflow-checks are enabled for the project
        result: Result to append to; a fresh one is created if omitted
        loader: Parser to reuse across calls

    Returns:
        The result holding this file's findings
    """
    result = result if result is not None else AnalysisResult()
    loader = loader or RustSourceLoader()
    file_path = str(file_path)

    outcome = loader.parse(source)
    if not outcome.ok:
        logger.warning(f"Failed to parse {file_path}: {outcome.error}")
        result.add_warning(Warning(
            description=f"Failed to parse file: {outcome.error}",
            location=Location(file=file_path, line=0, column=0),
            suggestion="Check for syntax errors or unsupported Rust syntax",
        ))
        return result

    visitor = AnchorVisitor(result, file_path, source, has_overflow_checks)
    visitor.visit(outcome.tree)
    return result


class AnchorScanner:
    """Main Anchor program scanner class."""

    def __init__(self, config: ScanConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize scanner.

        Args:
            config: Validated scan configuration
            logger: Logger instance
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.loader = RustSourceLoader()

        self.result = AnalysisResult()
        self.files_scanned = 0
        self.scan_start: Optional[datetime] = None
        self.scan_end: Optional[datetime] = None
        self.has_overflow_checks = False

    @property
    def duration(self) -> float:
        """Seconds between scan start and end, 0 before a scan has finished."""
        if self.scan_start is None or self.scan_end is None:
            return 0.0
        return (self.scan_end - self.scan_start).total_seconds()

    def find_rust_files(self) -> List[Path]:
        """Find all Rust files to scan."""
        return find_rust_files(self.config.project_path, self.config.ignore_patterns)

    def scan(self, console: Optional[Console] = None) -> AnalysisResult:
        """
        Run the security scan.

        Args:
            console: Rich console for progress output; silent if omitted

        Returns:
            Analysis result with all findings
        """
        self.scan_start = datetime.now()
        self.result.description_catalog = DescriptionCatalog.load(self.config.descriptions_dir)

        self.has_overflow_checks = check_overflow_checks(self.config.project_path)
        if self.has_overflow_checks:
            self.result.add_info(Info(
                description=OVERFLOW_CHECKS_INFO,
                location=Location(file="Cargo.toml", line=0, column=0),
            ))

        files_to_scan = self.find_rust_files()
        self.files_scanned = len(files_to_scan)
        self.logger.info(f"Found {len(files_to_scan)} Rust files under {self.config.project_path}")

        if not files_to_scan:
            if console is not None:
                console.print("[yellow]No Rust files found to scan[/yellow]")
            self.scan_end = datetime.now()
            return self.result

        if console is None:
            for file_path in files_to_scan:
                self.analyze_file(file_path)
        else:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
                transient=True,
            ) as progress:
                task = progress.add_task("[cyan]Scanning files...", total=len(files_to_scan))
                for file_path in files_to_scan:
                    self.analyze_file(file_path)
                    progress.advance(task)

        self.scan_end = datetime.now()
        return self.result

    def analyze_file(self, file_path: Path) -> None:
        """
        Analyze a single Rust file, appending findings to the shared result.

        Args:
            file_path: Path to Rust file
        """
        self.logger.debug(f"Analyzing {file_path}")
        try:
            content = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Error reading {file_path}: {e}")
            self.result.add_warning(Warning(
                description=f"Failed to read file: {e}",
                location=Location(file=str(file_path), line=0, column=0),
                suggestion="Make sure the file is readable UTF-8 text",
            ))
            return

        analyze_source(
            content,
            file_path=file_path,
            has_overflow_checks=self.has_overflow_checks,
            result=self.result,
            loader=self.loader,
        )
