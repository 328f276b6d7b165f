"""
Finding model for the Anchor security scanner.

Plain data types shared by the visitor engine, the scanner and the report
renderer: severities, source locations, the three finding kinds and the
run-wide AnalysisResult that accumulates them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# === Enums ===
class Severity(Enum):
    """Severity levels for vulnerabilities."""
    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    def __str__(self) -> str:
        return self.value


SEVERITY_ORDER = [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]

# === Data Models ===
@dataclass
class Location:
    """Approximate position of a finding; line 0 means unknown."""
    file: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> Dict[str, Any]:
        return {"file": self.file, "line": self.line, "column": self.column}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Location":
        return cls(
            file=str(data.get("file", "")),
            line=int(data.get("line", 0)),
            column=int(data.get("column", 0)),
        )


@dataclass
class Vulnerability:
    """A security vulnerability with an assigned severity."""
    severity: Severity
    description: str
    location: Location
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert vulnerability to dictionary."""
        return {
            "severity": self.severity.value,
            "description": self.description,
            "location": self.location.to_dict(),
            "suggestion": self.suggestion,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vulnerability":
        return cls(
            severity=Severity(data["severity"]),
            description=data["description"],
            location=Location.from_dict(data.get("location", {})),
            suggestion=data.get("suggestion", ""),
        )


@dataclass
class Warning:
    """Lower-confidence or stylistic issue; ranks below any vulnerability."""
    description: str
    location: Location
    suggestion: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert warning to dictionary."""
        return {
            "description": self.description,
            "location": self.location.to_dict(),
            "suggestion": self.suggestion,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Warning":
        return cls(
            description=data["description"],
            location=Location.from_dict(data.get("location", {})),
            suggestion=data.get("suggestion", ""),
        )


@dataclass
class Info:
    """Observational note, never an actionable finding."""
    description: str
    location: Location

    def to_dict(self) -> Dict[str, Any]:
        """Convert info item to dictionary."""
        return {
            "description": self.description,
            "location": self.location.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Info":
        return cls(
            description=data["description"],
            location=Location.from_dict(data.get("location", {})),
        )


@dataclass
class AnalysisResult:
    """
    Container for all findings of one run.

    Findings are only ever appended, so their order is the file traversal
    order followed by the emission order inside each file. The description
    catalog rides along for report enrichment and is never serialized.
    """
    vulnerabilities: List[Vulnerability] = field(default_factory=list)
    warnings: List[Warning] = field(default_factory=list)
    info: List[Info] = field(default_factory=list)
    description_catalog: Any = field(default=None, repr=False, compare=False)

    def add_vulnerability(self, vulnerability: Vulnerability) -> None:
        """Add a vulnerability to results."""
        self.vulnerabilities.append(vulnerability)

    def add_warning(self, warning: Warning) -> None:
        """Add a warning to results."""
        self.warnings.append(warning)

    def add_info(self, info: Info) -> None:
        """Add an informational item to results."""
        self.info.append(info)

    def by_severity(self) -> Dict[Severity, List[Vulnerability]]:
        """
        Group vulnerabilities by severity, most severe first.

        Returns:
            Mapping with every severity as a key, preserving emission order
            inside each group
        """
        grouped: Dict[Severity, List[Vulnerability]] = {s: [] for s in SEVERITY_ORDER}
        for vuln in self.vulnerabilities:
            grouped[vuln.severity].append(vuln)
        return grouped

    def count(self, severity: Severity) -> int:
        return sum(1 for v in self.vulnerabilities if v.severity is severity)

    def get_summary(self) -> Dict[str, int]:
        """Get summary statistics."""
        summary = {s.value.lower(): 0 for s in SEVERITY_ORDER}
        for vuln in self.vulnerabilities:
            summary[vuln.severity.value.lower()] += 1
        summary["vulnerabilities"] = len(self.vulnerabilities)
        summary["warnings"] = len(self.warnings)
        summary["info"] = len(self.info)
        return summary

    def to_dict(self) -> Dict[str, Any]:
        """Convert analysis result to dictionary, leaving out the catalog."""
        return {
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "warnings": [w.to_dict() for w in self.warnings],
            "info": [i.to_dict() for i in self.info],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], description_catalog: Optional[Any] = None) -> "AnalysisResult":
        """
        Rebuild a result from its serialized form.

        Args:
            data: Dictionary produced by to_dict (or parsed from a JSON report)
            description_catalog: Optional catalog to attach

        Returns:
            AnalysisResult instance
        """
        return cls(
            vulnerabilities=[Vulnerability.from_dict(v) for v in data.get("vulnerabilities", [])],
            warnings=[Warning.from_dict(w) for w in data.get("warnings", [])],
            info=[Info.from_dict(i) for i in data.get("info", [])],
            description_catalog=description_catalog,
        )
