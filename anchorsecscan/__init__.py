"""
Anchor Security Scanner - static analysis for Solana/Anchor programs.

Scans Rust sources for missing reinitialization guards, unchecked account
references, unsafe arithmetic, unsafe cross-program invocations and PDA
bump seed misuse.
"""

__version__ = "0.1.0"

from .catalog import DescriptionCatalog, VulnerabilityDescription
from .config import ScanConfig
from .errors import ConfigError, ScannerError
from .models import AnalysisResult, Info, Location, Severity, Vulnerability, Warning
from .report import Reporter
from .scanner import AnchorScanner, analyze_source
from .visitor import AnchorVisitor

__all__ = [
    "AnalysisResult",
    "AnchorScanner",
    "AnchorVisitor",
    "ConfigError",
    "DescriptionCatalog",
    "Info",
    "Location",
    "Reporter",
    "ScanConfig",
    "ScannerError",
    "Severity",
    "Vulnerability",
    "VulnerabilityDescription",
    "Warning",
    "analyze_source",
]
