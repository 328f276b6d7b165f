"""
Report rendering: Markdown, JSON and the rich console summary.

Renderers only read the AnalysisResult; the description catalog is used to
enrich Markdown output and is never part of the JSON document.
"""

import json
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .catalog import DescriptionCatalog, VulnerabilityDescription
from .models import SEVERITY_ORDER, AnalysisResult, Severity, Vulnerability

REPORT_TITLE = "Anchor Security Scan Report"

SEVERITY_COLORS = {
    Severity.CRITICAL: "red bold",
    Severity.HIGH: "red",
    Severity.MEDIUM: "yellow",
    Severity.LOW: "blue",
}


def _description_keywords(description: str) -> List[str]:
    return [w.strip(".,:;()'\"").lower() for w in description.split() if len(w) > 4]


def find_description(vuln: Vulnerability, catalog: Optional[DescriptionCatalog]) -> Optional[VulnerabilityDescription]:
    """
    Look up the catalog entry for a vulnerability.

    Words longer than four characters of the finding's description are
    tried in order; the first one matching a catalog key wins.

    Args:
        vuln: Vulnerability to enrich
        catalog: Loaded catalog, may be None or empty

    Returns:
        Catalog entry or None
    """
    if not catalog:
        return None
    for keyword in _description_keywords(vuln.description):
        entry = catalog.lookup(keyword)
        if entry is not None:
            return entry
    return None


class Reporter:
    """Handles result reporting."""

    @staticmethod
    def to_markdown(result: AnalysisResult) -> str:
        """
        Render the result as a Markdown document.

        Args:
            result: Analysis result

        Returns:
            Markdown text
        """
        lines = [f"# {REPORT_TITLE}", "", "## Summary", ""]
        lines.append(f"- **Critical Vulnerabilities**: {result.count(Severity.CRITICAL)}")
        lines.append(f"- **High Severity Vulnerabilities**: {result.count(Severity.HIGH)}")
        lines.append(f"- **Medium Severity Vulnerabilities**: {result.count(Severity.MEDIUM)}")
        lines.append(f"- **Low Severity Vulnerabilities**: {result.count(Severity.LOW)}")
        lines.append(f"- **Warnings**: {len(result.warnings)}")
        lines.append(f"- **Informational Items**: {len(result.info)}")
        lines.append("")

        if result.vulnerabilities:
            lines.extend(["## Vulnerabilities", ""])
            for severity, vulns in result.by_severity().items():
                if not vulns:
                    continue
                lines.extend([f"### {severity.value} Severity", ""])
                for vuln in vulns:
                    lines.extend(Reporter._vulnerability_section(vuln, result.description_catalog))

        if result.warnings:
            lines.extend(["## Warnings", ""])
            for warning in result.warnings:
                lines.extend([
                    f"### {warning.description}",
                    "",
                    f"**Location**: {warning.location}",
                    "",
                    f"**Suggestion**: {warning.suggestion}",
                    "",
                    "---",
                    "",
                ])

        if result.info:
            lines.extend(["## Informational Items", ""])
            for info in result.info:
                lines.append(f"- **{info.description}** ({info.location})")
            lines.append("")

        return "\n".join(lines)

    @staticmethod
    def _vulnerability_section(vuln: Vulnerability, catalog: Optional[DescriptionCatalog]) -> List[str]:
        lines = [f"#### {vuln.description}", ""]
        entry = find_description(vuln, catalog)

        if entry is not None and entry.description:
            lines.extend(["**Detailed Description**:", entry.description, ""])
        if entry is not None and entry.example_scenario:
            lines.extend(["**Example Scenario**:", entry.example_scenario, ""])

        lines.extend([f"**Location**: {vuln.location}", "", f"**Suggestion**: {vuln.suggestion}", ""])

        if entry is not None and entry.secure_example:
            lines.extend(["**Secure Implementation Example**:", "```rust", entry.secure_example, "```", ""])

        lines.extend(["---", ""])
        return lines

    @staticmethod
    def to_json(result: AnalysisResult) -> str:
        """Render vulnerabilities, warnings and info as pretty JSON."""
        return json.dumps(result.to_dict(), indent=2, ensure_ascii=False)

    @staticmethod
    def write_report(result: AnalysisResult, fmt: str, output_path: Path) -> None:
        """
        Write the report to a file.

        Args:
            result: Analysis result
            fmt: "markdown" or "json"
            output_path: Destination file
        """
        report = Reporter.to_json(result) if fmt == "json" else Reporter.to_markdown(result)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(report)

    @staticmethod
    def print_console_report(
        result: AnalysisResult,
        console: Console,
        files_scanned: int = 0,
        duration: float = 0.0,
    ) -> None:
        """
        Print results to console.

        Args:
            result: Analysis result
            console: Rich console instance
            files_scanned: Number of files analyzed, shown in the header
            duration: Scan time in seconds, shown in the header
        """
        console.print()
        console.print(Panel.fit(
            f"[bold cyan]Scan Complete[/bold cyan]\n"
            f"Files: {files_scanned} | Duration: {duration:.2f}s | Warnings: {len(result.warnings)} | Info: {len(result.info)}",
            border_style="cyan"
        ))

        console.print()
        console.print("[bold]Summary:[/bold]")
        summary_table = Table(show_header=True, header_style="bold magenta")
        summary_table.add_column("Severity", style="cyan", width=15)
        summary_table.add_column("Count", justify="right", style="yellow", width=8)
        for severity in SEVERITY_ORDER:
            color = SEVERITY_COLORS[severity]
            summary_table.add_row(
                f"[{color}]{severity.value}[/{color}]",
                f"[{color}]{result.count(severity)}[/{color}]"
            )
        summary_table.add_row("WARNINGS", str(len(result.warnings)))
        summary_table.add_row("INFO", str(len(result.info)))
        console.print(summary_table)

        if not result.vulnerabilities and not result.warnings:
            console.print("\n[green]✓ No security issues detected![/green]")
            console.print("[dim]Note: This doesn't guarantee the program is secure. Manual review is essential.[/dim]")
            return

        if result.vulnerabilities:
            console.print()
            console.print("[bold]Vulnerabilities:[/bold]")
            for severity, vulns in result.by_severity().items():
                color = SEVERITY_COLORS[severity]
                for vuln in vulns:
                    console.print(f"  [{color}][{severity.value}][/{color}] {escape(str(vuln.location))}: {escape(vuln.description)}")
                    console.print(f"     [dim]{escape(vuln.suggestion)}[/dim]")

        if result.warnings:
            console.print()
            console.print("[bold]Warnings:[/bold]")
            for warning in result.warnings:
                console.print(f"  [yellow][WARNING][/yellow] {escape(str(warning.location))}: {escape(warning.description)}")
                console.print(f"     [dim]{escape(warning.suggestion)}[/dim]")
