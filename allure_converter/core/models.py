"""
Value objects passed between the reader, transformer and writer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class EnvironmentContext:
    """Run configuration recorded alongside the results."""
    browser: str
    environment_name: str
    base_url: str
    timeout_ms: int = 30000


@dataclass
class ConversionResult:
    """Everything a conversion produces, ready to be written."""
    records: List[Dict[str, Any]] = field(default_factory=list)
    environment: Dict[str, str] = field(default_factory=dict)
    categories: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)
