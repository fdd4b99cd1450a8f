"""
PassForge Core Data Models
===========================

Pydantic models for every value PassForge produces or accepts: pattern
findings, strength and quick-check results, rotation estimates, policy
configuration and results, generator options and Argon2id parameters.

All records are immutable and created fresh per call.  Enumerations are
``str`` enums whose values are the wire strings (``"very-strong"``,
``"error"``, ``"NFKC"``), so JSON output and comparisons against plain
strings behave as expected.

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines --
      Authentication and Lifecycle Management.
    - Reinhold, A. G. (1995). The Diceware Passphrase Home Page.
    - OWASP Password Storage Cheat Sheet (2023).
"""

from __future__ import annotations

import datetime as _dt
import enum
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


_FROZEN = ConfigDict(frozen=True, use_enum_values=False)


# ===================================================================== #
#  Enumerations
# ===================================================================== #


class StrengthBand(str, enum.Enum):
    """Four-band strength rating used by generators and analyzers.

    Bands are totally ordered: ``weak < medium < strong < very-strong``.
    """

    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"
    VERY_STRONG = "very-strong"

    @property
    def rank(self) -> int:
        """Position in the total order, 0 for ``weak``."""
        return list(StrengthBand).index(self)

    @classmethod
    def from_score(cls, score: float) -> StrengthBand:
        """Map a score (or bit count) to a band: <40, <60, <80, else."""
        if score < 40:
            return cls.WEAK
        if score < 60:
            return cls.MEDIUM
        if score < 80:
            return cls.STRONG
        return cls.VERY_STRONG


class EntropyBand(str, enum.Enum):
    """Five-band entropy rating used only by the rotation engine."""

    VERY_WEAK = "very-weak"
    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"
    VERY_STRONG = "very-strong"

    @classmethod
    def from_bits(cls, bits: float) -> EntropyBand:
        if bits < 40:
            return cls.VERY_WEAK
        if bits < 60:
            return cls.WEAK
        if bits < 80:
            return cls.MODERATE
        if bits < 100:
            return cls.STRONG
        return cls.VERY_STRONG


class PatternKind(str, enum.Enum):
    """Category of a detected structural weakness."""

    KEYBOARD = "keyboard"
    REPETITIVE = "repetitive"
    SEQUENTIAL = "sequential"
    YEAR = "year"
    DICTIONARY = "dictionary"


class RiskProfile(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class HashAlgorithm(str, enum.Enum):
    """Server-side password hashing algorithm, slowest first."""

    ARGON2ID = "argon2id"
    SCRYPT = "scrypt"
    BCRYPT = "bcrypt"
    PBKDF2 = "pbkdf2"
    SHA256 = "sha256"
    SHA1 = "sha1"
    MD5 = "md5"


class ViolationSeverity(str, enum.Enum):
    """``error`` makes a password invalid; ``warning`` only lowers the score."""

    ERROR = "error"
    WARNING = "warning"


class NormalizationForm(str, enum.Enum):
    """Unicode normalization forms accepted by :func:`unicodedata.normalize`."""

    NFC = "NFC"
    NFD = "NFD"
    NFKC = "NFKC"
    NFKD = "NFKD"


class SeparatorStyle(str, enum.Enum):
    DASH = "dash"
    SPACE = "space"
    SYMBOL = "symbol"
    NONE = "none"


class CapitalizeStyle(str, enum.Enum):
    NONE = "none"
    FIRST = "first"
    ALL = "all"
    RANDOM = "random"


class MemorableLength(str, enum.Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


# ===================================================================== #
#  Pattern / Strength Models
# ===================================================================== #


class PatternFinding(BaseModel):
    """A structural weakness found inside a password.

    Attributes:
        kind: Pattern category.
        matched: The substring (lower-cased) that triggered the finding.
        description: Human-readable form, e.g. ``keyboard pattern "qwerty"``.
    """

    model_config = _FROZEN

    kind: PatternKind
    matched: str
    description: str


class ScorerFeedback(BaseModel):
    model_config = _FROZEN

    warning: str = ""
    suggestions: tuple[str, ...] = ()


class ScorerResult(BaseModel):
    """Normalised output of an external strength scorer.

    Attributes:
        score: Scorer rating on the 0..4 scale.
        crack_time_seconds: Estimated seconds to guess online at
            10 guesses/second without throttling.
        feedback: Warning and suggestions reported by the scorer.
    """

    model_config = _FROZEN

    score: int = Field(..., ge=0, le=4)
    crack_time_seconds: float = Field(default=0.0, ge=0.0)
    feedback: ScorerFeedback = Field(default_factory=ScorerFeedback)


class StrengthResult(BaseModel):
    """Composite strength analysis of a single password.

    Attributes:
        score: Composite score in [0, 100].
        strength: Band derived from *score*.
        entropy: Nominal entropy in bits, rounded to one decimal.
        crack_time: Human-readable crack time.
        crack_time_seconds: Raw crack time reported by the scorer.
        feedback: Scorer warning plus suggestions.
        weaknesses: Heuristic weakness labels.
    """

    model_config = _FROZEN

    score: int = Field(..., ge=0, le=100)
    strength: StrengthBand
    entropy: float = 0.0
    crack_time: str = "instant"
    crack_time_seconds: float = 0.0
    feedback: ScorerFeedback = Field(default_factory=ScorerFeedback)
    weaknesses: tuple[str, ...] = ()


class QuickStrengthResult(BaseModel):
    model_config = _FROZEN

    score: int
    strength: StrengthBand


class MinimumRequirementsResult(BaseModel):
    model_config = _FROZEN

    meets: bool
    missing: tuple[str, ...] = ()


# ===================================================================== #
#  Rotation Models
# ===================================================================== #


class ExpiryOptions(BaseModel):
    """Account attributes that shape the rotation period.

    Attributes:
        risk_profile: Account risk; scales the base period.
        has_mfa: Doubles the period when set.
        is_privileged: Caps the period at 90 days.
        hash_algorithm: Server-side hash used for the crack cost estimate.
        days_since_breach_found: Age in days of the most recent similar
            breach; ``None`` when unknown.
        is_breached: The password itself appears in a breach corpus.
        has_similar_breaches: Similar passwords were breached.
    """

    model_config = _FROZEN

    risk_profile: RiskProfile = RiskProfile.MEDIUM
    has_mfa: bool = False
    is_privileged: bool = False
    hash_algorithm: HashAlgorithm = HashAlgorithm.ARGON2ID
    days_since_breach_found: Optional[int] = None
    is_breached: bool = False
    has_similar_breaches: bool = False

    def merged(self, override: Optional[ExpiryOptions]) -> ExpiryOptions:
        """Return a copy where fields explicitly set on *override* win."""
        if override is None:
            return self
        data = self.model_dump()
        data.update({name: getattr(override, name) for name in override.model_fields_set})
        return ExpiryOptions.model_validate(data)


class ExpiryEstimate(BaseModel):
    """Rotation recommendation for one password.

    Attributes:
        expiry_date: When the password should be rotated.
        days_remaining: Whole days until *expiry_date*, never negative.
        recommend_rotation: Rotate now or soon.
        reason: Human-readable explanation.
        next_check_date: When to re-evaluate.
        rotation_period_days: Effective rotation period.
        entropy: Nominal entropy in bits.
        estimated_crack_cost: Offline brute-force cost in US dollars.
    """

    model_config = _FROZEN

    expiry_date: _dt.datetime
    days_remaining: int = Field(..., ge=0)
    recommend_rotation: bool
    reason: str
    next_check_date: _dt.datetime
    rotation_period_days: int = Field(..., ge=0)
    entropy: float
    estimated_crack_cost: float = Field(..., ge=0.0)


class ExpiryRequest(BaseModel):
    """One item of a batch rotation request."""

    model_config = ConfigDict(frozen=True)

    password: str
    created_at: _dt.datetime
    options: Optional[ExpiryOptions] = None


# ===================================================================== #
#  Policy Models
# ===================================================================== #


class ValidationContext(BaseModel):
    """Personal and service data a password must not contain.

    Unknown keys are kept and handed to custom rules untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ValidationRule(BaseModel):
    """A caller-supplied predicate applied after the built-in checks.

    Attributes:
        name: Rule identifier, reported in violation details.
        validate: ``(password, context) -> bool``; ``False`` is a failure.
        message: Violation message reported on failure.
        severity: Violation severity reported on failure.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    validate_fn: Callable[[str, Optional[ValidationContext]], bool] = Field(..., alias="validate")
    message: str
    severity: ViolationSeverity = ViolationSeverity.ERROR


class PolicyConfig(BaseModel):
    """NIST 800-63B-style password policy.

    Attributes:
        min_length: Minimum accepted length (>= 1).
        max_length: Maximum accepted length (>= *min_length*).
        require_unicode: Reserved flag; carried but not enforced.
        blocklists: Named blocklists; any non-empty value enables the
            built-in common-password list.
        context_words: Service-specific words the password must not contain.
        allowed_chars: Optional allow-list of characters.
        normalization: Unicode form applied before every check.
        detect_patterns: Run structural pattern detection.
        custom_rules: Extra predicates evaluated last.
    """

    model_config = ConfigDict(frozen=True)

    min_length: int = Field(default=15, ge=1)
    max_length: int = 128
    require_unicode: bool = False
    blocklists: tuple[str, ...] = ("common-passwords",)
    context_words: tuple[str, ...] = ()
    allowed_chars: Optional[str] = None
    normalization: NormalizationForm = NormalizationForm.NFKC
    detect_patterns: bool = True
    custom_rules: tuple[ValidationRule, ...] = ()

    @model_validator(mode="after")
    def _check_bounds(self) -> PolicyConfig:
        if self.max_length < self.min_length:
            raise ValueError(
                f"max_length ({self.max_length}) must be >= min_length ({self.min_length})"
            )
        return self

    def merged(self, overrides: Mapping[str, Any]) -> PolicyConfig:
        """Return a new policy with *overrides* applied field by field."""
        data = {name: getattr(self, name) for name in type(self).model_fields}
        data.update(overrides)
        return PolicyConfig.model_validate(data)


class PolicyViolation(BaseModel):
    """A single policy failure.

    Attributes:
        field: Check that produced it (``length``, ``characters``,
            ``blocklist``, ``pattern``, ``context`` or ``custom``).
        message: Human-readable message.
        severity: ``error`` or ``warning``.
        details: Extra detail, e.g. ``Current length: 8``.
    """

    model_config = _FROZEN

    field: str
    message: str
    severity: ViolationSeverity
    details: Optional[str] = None


class PolicyResult(BaseModel):
    """Outcome of validating one password against a policy.

    Attributes:
        valid: ``True`` when no violation has severity ``error``.
        violations: Violations in check order.
        score: ``max(0, 100 - 20*errors - 10*warnings)``.
        normalized: The normalized password every check ran on.
    """

    model_config = _FROZEN

    valid: bool
    violations: tuple[PolicyViolation, ...] = ()
    score: int = Field(..., ge=0, le=100)
    normalized: str

    @property
    def errors(self) -> list[PolicyViolation]:
        return [v for v in self.violations if v.severity is ViolationSeverity.ERROR]

    @property
    def warnings(self) -> list[PolicyViolation]:
        return [v for v in self.violations if v.severity is ViolationSeverity.WARNING]


# ===================================================================== #
#  Generator Models
# ===================================================================== #


class PasswordGeneratorOptions(BaseModel):
    """Options for random password generation.

    Range checks on *length* live in the generator so that the error
    message stays stable regardless of how the options were built.
    """

    model_config = ConfigDict(frozen=True)

    length: int = 16
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = True
    exclude_ambiguous: bool = False
    custom_charset: Optional[str] = None


class PassphraseOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    word_count: int = 5
    separator: SeparatorStyle = SeparatorStyle.DASH
    capitalize: CapitalizeStyle = CapitalizeStyle.FIRST
    include_numbers: bool = True


class GeneratedPassword(BaseModel):
    """A generated secret with its nominal entropy and band."""

    model_config = _FROZEN

    password: str
    entropy: float
    strength: StrengthBand


# ===================================================================== #
#  Hashing Models
# ===================================================================== #


class Argon2Options(BaseModel):
    """Argon2id cost parameters (OWASP 2023 minimums by default).

    Attributes:
        memory_kib: Memory cost in KiB.
        iterations: Time cost (passes over memory).
        parallelism: Degree of parallelism (lanes).
        hash_length: Raw digest length in bytes.
    """

    model_config = ConfigDict(frozen=True)

    memory_kib: int = Field(default=19_456, ge=8)
    iterations: int = Field(default=2, ge=1)
    parallelism: int = Field(default=1, ge=1)
    hash_length: int = Field(default=32, ge=4)


class HashResult(BaseModel):
    """Raw digest, salt and PHC-encoded string of an Argon2id hash."""

    model_config = ConfigDict(frozen=True)

    hash: bytes
    salt: bytes
    encoded: str


class HashTimeEstimate(BaseModel):
    """Rough hashing time range in milliseconds."""

    model_config = _FROZEN

    min: int
    max: int
    optimal: int
