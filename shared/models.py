"""
PassForge Report Models
========================

Pydantic v2 models used to present any PassForge evaluation as a list of
findings with an overall risk score.  The library operations return their
own typed records (see :mod:`passforge.core.models`); the engine facade
folds those records into a :class:`ScanResult` for console and JSON
reporting.

Severity and risk classification follow the OWASP Risk Rating
Methodology; the finding structure is inspired by SARIF result objects.

References:
    - OWASP Risk Rating Methodology.
      https://owasp.org/www-community/OWASP_Risk_Rating_Methodology
    - SARIF v2.1.0 Specification (OASIS, 2020).
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import datetime as _dt
import json as _json
from enum import Enum
from typing import Any, Optional

from pydantic import (
    BaseModel,
    Field,
    ConfigDict,
    field_validator,
    model_validator,
)


def _utcnow() -> _dt.datetime:
    return _dt.datetime.now(_dt.timezone.utc)


# ========================== Enumerations ===================================


class Severity(str, Enum):
    """Finding severity level.

    Attributes:
        CRITICAL: Password must not be used (breached, blocklisted).
        HIGH:     Serious weakness; rotation or replacement advised.
        MEDIUM:   Moderate weakness such as a detectable pattern.
        LOW:      Minor issue.
        INFO:     Informational observation; no direct risk.
    """

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INFO = "INFO"


class RiskLevel(str, Enum):
    """Qualitative risk level derived from a numeric risk score.

    Attributes:
        CRITICAL:   Score 90-100.
        HIGH:       Score 70-89.
        MEDIUM:     Score 40-69.
        LOW:        Score 10-39.
        NEGLIGIBLE: Score 0-9.
    """

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    NEGLIGIBLE = "NEGLIGIBLE"

    @classmethod
    def from_score(cls, score: float) -> RiskLevel:
        """Derive the qualitative level from a 0-100 numeric score."""
        if score >= 90:
            return cls.CRITICAL
        if score >= 70:
            return cls.HIGH
        if score >= 40:
            return cls.MEDIUM
        if score >= 10:
            return cls.LOW
        return cls.NEGLIGIBLE


# ========================== Core Models ====================================


class Finding(BaseModel):
    """A single observation produced by a PassForge evaluation.

    Attributes:
        severity:       Qualitative severity rating.
        title:          Short, descriptive finding title.
        description:    Detailed explanation of the finding.
        evidence:       Supporting data (never the password itself).
        recommendation: Suggested remediation action.
        references:     External reference URLs or citations.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        validate_assignment=True,
        use_enum_values=False,
        extra="ignore",
    )

    severity: Severity = Field(..., description="Severity level of this finding")
    title: str = Field(..., min_length=1, max_length=256, description="Short descriptive title")
    description: str = Field(..., min_length=1, description="Detailed explanation")
    evidence: str = Field(default="", description="Supporting evidence")
    recommendation: str = Field(default="", description="Suggested remediation")
    references: list[str] = Field(default_factory=list, description="References")

    @field_validator("evidence", mode="before")
    @classmethod
    def _coerce_evidence(cls, v: Any) -> str:
        """Auto-convert non-string evidence (dict, list) to a JSON string."""
        if isinstance(v, str):
            return v
        if isinstance(v, (dict, list)):
            return _json.dumps(v, ensure_ascii=False, default=str)
        return str(v)


class Risk(BaseModel):
    """Quantitative + qualitative risk assessment.

    The numeric *score* (0-100) is canonical; *level* is derived from it
    when not provided.
    """

    model_config = ConfigDict(validate_assignment=True, use_enum_values=False)

    score: float = Field(..., ge=0.0, le=100.0, description="Numeric risk score (0-100)")
    level: Optional[RiskLevel] = Field(default=None, description="Qualitative risk level")
    factors: list[str] = Field(default_factory=list, description="Contributing risk factors")

    @model_validator(mode="after")
    def _derive_level(self) -> Risk:
        if self.level is None:
            self.level = RiskLevel.from_score(self.score)
        return self


class ScanResult(BaseModel):
    """Aggregated result of a single evaluation run.

    Attributes:
        tool_name:  Name of the command that produced the result.
        target:     Masked description of what was evaluated.
        start_time: UTC timestamp when the evaluation started.
        end_time:   UTC timestamp when the evaluation ended.
        findings:   Individual findings.
        risk:       Overall risk assessment (optional).
        summary:    Human-readable summary text.
        metadata:   The serialised library record behind the findings.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        use_enum_values=False,
        extra="ignore",
    )

    tool_name: str = Field(..., min_length=1)
    target: str = Field(..., min_length=1)
    start_time: _dt.datetime = Field(default_factory=_utcnow)
    end_time: Optional[_dt.datetime] = None
    findings: list[Finding] = Field(default_factory=list)
    risk: Optional[Risk] = None
    summary: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    # ------------------------------------------------------------------ #
    #  Derived properties
    # ------------------------------------------------------------------ #

    @property
    def duration_seconds(self) -> float | None:
        """Elapsed time in seconds, or ``None`` if *end_time* is unset."""
        if self.end_time is None:
            return None
        return (self.end_time - self.start_time).total_seconds()

    @property
    def severity_counts(self) -> dict[str, int]:
        """Count of findings grouped by severity name."""
        counts: dict[str, int] = {s.value: 0 for s in Severity}
        for finding in self.findings:
            counts[finding.severity.value] += 1
        return counts

    @property
    def highest_severity(self) -> Severity | None:
        """The most severe finding, or ``None`` when the list is empty."""
        if not self.findings:
            return None
        order = list(Severity)
        return min((f.severity for f in self.findings), key=order.index)

    @property
    def finding_count(self) -> int:
        return len(self.findings)

    # ------------------------------------------------------------------ #
    #  Mutating helpers
    # ------------------------------------------------------------------ #

    def add_finding(self, finding: Finding) -> None:
        self.findings.append(finding)

    def finalize(self, summary: str) -> ScanResult:
        """Stamp *end_time* and record *summary*; returns ``self``."""
        self.end_time = _utcnow()
        self.summary = summary
        return self
