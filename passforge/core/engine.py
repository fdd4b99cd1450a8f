"""
PassForge Engine
=================

Central orchestrator for the PassForge toolkit.  The :class:`ForgeEngine`
turns configuration sections into typed option records, calls the
library operations and folds their results into
:class:`shared.models.ScanResult` objects for console and JSON output.

Architecture follows the Facade pattern (Gamma et al., 1994): the
analyzers, generators and the hashing wrapper stay usable on their own,
while the engine gives the CLI a single uniform surface.

Passwords never appear in a ``ScanResult`` target, finding or metadata
entry, except for generated passwords, which are the output.

References:
    - Gamma, E., Helm, R., Johnson, R., & Vlissides, J. (1994).
      Design Patterns: Elements of Reusable Object-Oriented Software.
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Mapping, Optional

from shared.config import ForgeConfig
from shared.logger import ForgeLogger
from shared.models import Finding, Risk, ScanResult, Severity

from passforge.analyzers.crack_cost import CrackCostEstimator, format_crack_cost
from passforge.analyzers.entropy import estimate_entropy
from passforge.analyzers.expiry import (
    RotationPolicyEngine,
    get_rotation_schedule,
    should_rotate_now,
)
from passforge.analyzers.patterns import PatternDetector
from passforge.analyzers.policy import PolicyValidator
from passforge.analyzers.quick_check import (
    meets_minimum_requirements,
    quick_strength_check,
)
from passforge.analyzers.strength import StrengthAnalyzer, StrengthScorer
from passforge.core.models import (
    Argon2Options,
    ExpiryOptions,
    HashAlgorithm,
    MemorableLength,
    PassphraseOptions,
    PasswordGeneratorOptions,
    PolicyConfig,
    StrengthBand,
    ValidationContext,
    ViolationSeverity,
)
from passforge.generators.passphrase import (
    generate_memorable_passphrase,
    generate_passphrase,
)
from passforge.generators.password import (
    generate_passwords,
    generate_pronounceable_password,
)
from passforge.hashing import argon2id


_STRENGTH_SEVERITY: dict[StrengthBand, Severity] = {
    StrengthBand.WEAK: Severity.HIGH,
    StrengthBand.MEDIUM: Severity.MEDIUM,
    StrengthBand.STRONG: Severity.LOW,
    StrengthBand.VERY_STRONG: Severity.INFO,
}

_NIST_REFERENCE = "NIST SP 800-63B (2017). Digital Identity Guidelines."


def _mask(password: str) -> str:
    return f"[password: {len(password)} chars]"


class ForgeEngine:
    """Orchestrates every PassForge operation behind one async interface.

    Usage::

        engine = ForgeEngine(ForgeConfig.load())
        result = await engine.analyze_password("Tr0ub4dor&3")
        result = await engine.validate_policy("correct horse", {"username": "alice"})
        result = await engine.generate(count=5)

    Attributes:
        config: PassForge configuration instance.
        logger: Logger for the engine.
    """

    def __init__(
        self,
        config: Optional[ForgeConfig] = None,
        *,
        scorer: Optional[StrengthScorer] = None,
    ) -> None:
        self.config = config or ForgeConfig()
        self.logger = ForgeLogger("engine")

        self._strength = StrengthAnalyzer(scorer)
        self._patterns = PatternDetector()
        self._crack_cost = CrackCostEstimator()
        self._rotation = RotationPolicyEngine(self._crack_cost)

    # ------------------------------------------------------------------ #
    #  Config -> option records
    # ------------------------------------------------------------------ #

    def policy_config(self, overrides: Optional[Mapping[str, Any]] = None) -> PolicyConfig:
        """Policy from the ``[policy]`` section, with *overrides* applied."""
        section = self.config.policy
        base = PolicyConfig(
            min_length=section.min_length,
            max_length=section.max_length,
            require_unicode=section.require_unicode,
            blocklists=tuple(section.blocklists),
            context_words=tuple(section.context_words),
            allowed_chars=section.allowed_chars,
            normalization=section.normalization,
            detect_patterns=section.detect_patterns,
        )
        return base.merged(overrides) if overrides else base

    def expiry_options(self, **overrides: Any) -> ExpiryOptions:
        section = self.config.expiry
        values: dict[str, Any] = {
            "risk_profile": section.risk_profile,
            "has_mfa": section.has_mfa,
            "is_privileged": section.is_privileged,
            "hash_algorithm": section.hash_algorithm,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ExpiryOptions(**values)

    def generator_options(self, **overrides: Any) -> PasswordGeneratorOptions:
        section = self.config.generator
        values: dict[str, Any] = {
            "length": section.length,
            "include_uppercase": section.include_uppercase,
            "include_lowercase": section.include_lowercase,
            "include_numbers": section.include_numbers,
            "include_symbols": section.include_symbols,
            "exclude_ambiguous": section.exclude_ambiguous,
            "custom_charset": section.custom_charset,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PasswordGeneratorOptions(**values)

    def passphrase_options(self, **overrides: Any) -> PassphraseOptions:
        section = self.config.generator
        values: dict[str, Any] = {
            "word_count": section.word_count,
            "separator": section.separator,
            "capitalize": section.capitalize,
            "include_numbers": section.passphrase_numbers,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return PassphraseOptions(**values)

    def argon2_options(self, **overrides: Any) -> Argon2Options:
        section = self.config.hashing
        values: dict[str, Any] = {
            "memory_kib": section.memory_kib,
            "iterations": section.iterations,
            "parallelism": section.parallelism,
            "hash_length": section.hash_length,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return Argon2Options(**values)

    # ------------------------------------------------------------------ #
    #  Strength analysis
    # ------------------------------------------------------------------ #

    async def analyze_password(self, password: str) -> ScanResult:
        """Composite strength analysis with pattern and crack-cost findings.

        Args:
            password: The password to analyse.

        Returns:
            ScanResult whose metadata is the serialised ``StrengthResult``
            plus ``crack_cost_usd``.
        """
        result = ScanResult(tool_name="analyze", target=_mask(password))
        self.logger.info("Starting strength analysis", length=len(password))

        try:
            strength = self._strength.analyze(password)
            algorithm = HashAlgorithm(self.config.expiry.hash_algorithm)
            cost = self._crack_cost.estimate(estimate_entropy(password), algorithm)

            result.metadata = strength.model_dump(mode="json")
            result.metadata["crack_cost_usd"] = cost
            result.metadata["hash_algorithm"] = algorithm.value
            result.risk = Risk(
                score=100 - strength.score,
                factors=list(strength.weaknesses),
            )

            result.add_finding(Finding(
                severity=_STRENGTH_SEVERITY[strength.strength],
                title=f"Password Strength: {strength.strength.value.replace('-', ' ').title()}",
                description=(
                    f"Score {strength.score}/100, nominal entropy {strength.entropy:.1f} bits, "
                    f"estimated crack time {strength.crack_time}."
                ),
                evidence={
                    "score": strength.score,
                    "entropy_bits": strength.entropy,
                    "crack_time_seconds": strength.crack_time_seconds,
                },
                references=[_NIST_REFERENCE],
            ))

            for pattern in self._patterns.detect(password):
                result.add_finding(Finding(
                    severity=Severity.MEDIUM,
                    title=f"Pattern Detected: {pattern.kind.value}",
                    description=f"Password contains {pattern.description}.",
                    recommendation="Avoid predictable sequences, repetition and dictionary words.",
                ))

            for weakness in strength.weaknesses:
                result.add_finding(Finding(
                    severity=Severity.LOW,
                    title="Weakness",
                    description=weakness,
                ))

            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Offline Crack Cost",
                description=(
                    f"Brute-forcing this password stored with {algorithm.value} "
                    f"would cost about {format_crack_cost(cost)}."
                ),
                evidence={"usd": cost, "algorithm": algorithm.value},
            ))

            if strength.feedback.warning:
                result.add_finding(Finding(
                    severity=Severity.INFO,
                    title="Scorer Warning",
                    description=strength.feedback.warning,
                ))
            for suggestion in strength.feedback.suggestions:
                result.add_finding(Finding(
                    severity=Severity.INFO,
                    title="Improvement Suggestion",
                    description=suggestion,
                ))

            result.finalize(
                f"Strength: {strength.strength.value}, score={strength.score}/100, "
                f"entropy={strength.entropy:.1f} bits"
            )

        except Exception as exc:
            self.logger.exception(f"Strength analysis failed: {exc}")
            self._record_error(result, "Strength Analysis Error", exc)

        return result

    async def quick_check(self, password: str) -> ScanResult:
        """Scorer-free 0-100 check plus the classic minimum requirements."""
        result = ScanResult(tool_name="quick", target=_mask(password))

        try:
            quick = quick_strength_check(password)
            minimum = meets_minimum_requirements(password)
            result.metadata = {
                "quick": quick.model_dump(mode="json"),
                "minimum": minimum.model_dump(mode="json"),
            }

            result.add_finding(Finding(
                severity=_STRENGTH_SEVERITY[quick.strength],
                title=f"Quick Strength: {quick.strength.value}",
                description=f"Quick score {quick.score}/100.",
            ))
            for item in minimum.missing:
                result.add_finding(Finding(
                    severity=Severity.MEDIUM,
                    title="Minimum Requirement Not Met",
                    description=f"Missing: {item}",
                ))

            result.finalize(
                f"Quick score {quick.score}/100 ({quick.strength.value}); "
                f"minimum requirements {'met' if minimum.meets else 'not met'}"
            )

        except Exception as exc:
            self.logger.exception(f"Quick check failed: {exc}")
            self._record_error(result, "Quick Check Error", exc)

        return result

    # ------------------------------------------------------------------ #
    #  Rotation
    # ------------------------------------------------------------------ #

    async def evaluate_expiry(
        self,
        password: str,
        created_at: _dt.datetime,
        options: Optional[ExpiryOptions] = None,
        *,
        now: Optional[_dt.datetime] = None,
    ) -> ScanResult:
        """Rotation recommendation for *password* created at *created_at*.

        *options* defaults to the ``[expiry]`` configuration section.
        """
        result = ScanResult(tool_name="expiry", target=_mask(password))

        try:
            opts = options if options is not None else self.expiry_options()
            estimate = self._rotation.estimate(password, created_at, opts, now=now)
            schedule = get_rotation_schedule(estimate.rotation_period_days)
            rotate = should_rotate_now(estimate)

            result.metadata = estimate.model_dump(mode="json")
            result.metadata["schedule"] = schedule
            result.metadata["rotate_now"] = rotate

            if opts.is_breached:
                severity = Severity.CRITICAL
            elif rotate:
                severity = Severity.HIGH
            else:
                severity = Severity.INFO

            result.add_finding(Finding(
                severity=severity,
                title=f"Rotation: {schedule}",
                description=estimate.reason,
                evidence={
                    "rotation_period_days": estimate.rotation_period_days,
                    "days_remaining": estimate.days_remaining,
                    "expiry_date": estimate.expiry_date.isoformat(),
                    "next_check_date": estimate.next_check_date.isoformat(),
                },
                recommendation="Rotate this password now." if rotate else "",
            ))
            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Offline Crack Cost",
                description=(
                    f"{estimate.entropy:.1f} bits with {opts.hash_algorithm.value}: "
                    f"{format_crack_cost(estimate.estimated_crack_cost)}"
                ),
            ))

            result.finalize(
                f"{schedule}; {estimate.days_remaining} days remaining"
                + (" (rotate now)" if rotate else "")
            )

        except Exception as exc:
            self.logger.exception(f"Expiry evaluation failed: {exc}")
            self._record_error(result, "Expiry Evaluation Error", exc)

        return result

    # ------------------------------------------------------------------ #
    #  Policy
    # ------------------------------------------------------------------ #

    async def validate_policy(
        self,
        password: str,
        context: Optional[Mapping[str, Any] | ValidationContext] = None,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> ScanResult:
        """Validate against the configured policy with optional *overrides*."""
        result = ScanResult(tool_name="policy", target=_mask(password))

        try:
            policy = self.policy_config(overrides)
            outcome = PolicyValidator(policy).validate(password, context)

            result.metadata = outcome.model_dump(mode="json", exclude={"normalized"})
            result.risk = Risk(score=100 - outcome.score)

            for violation in outcome.violations:
                is_error = violation.severity is ViolationSeverity.ERROR
                result.add_finding(Finding(
                    severity=Severity.HIGH if is_error else Severity.MEDIUM,
                    title=f"Policy {violation.severity.value}: {violation.field}",
                    description=violation.message,
                    evidence=violation.details or "",
                    references=[_NIST_REFERENCE],
                ))

            verdict = "valid" if outcome.valid else "invalid"
            result.finalize(
                f"Password is {verdict} (score {outcome.score}/100, "
                f"{len(outcome.errors)} errors, {len(outcome.warnings)} warnings)"
            )

        except Exception as exc:
            self.logger.exception(f"Policy validation failed: {exc}")
            self._record_error(result, "Policy Validation Error", exc)

        return result

    # ------------------------------------------------------------------ #
    #  Generation
    # ------------------------------------------------------------------ #

    async def generate(
        self,
        count: int = 1,
        options: Optional[PasswordGeneratorOptions] = None,
        *,
        pronounceable: bool = False,
    ) -> ScanResult:
        """Generate random (or pronounceable) passwords.

        Generated passwords are stored under ``metadata["passwords"]``.
        """
        result = ScanResult(tool_name="generate", target=f"{count} password(s)")

        try:
            opts = options if options is not None else self.generator_options()
            if pronounceable:
                if not 1 <= count <= 100:
                    raise ValueError("Count must be between 1 and 100")
                generated = [generate_pronounceable_password(opts.length) for _ in range(count)]
            else:
                generated = generate_passwords(count, opts)

            result.metadata = {
                "passwords": [g.model_dump(mode="json") for g in generated],
                "options": opts.model_dump(mode="json"),
                "pronounceable": pronounceable,
            }
            entropy = generated[0].entropy
            result.add_finding(Finding(
                severity=_STRENGTH_SEVERITY[generated[0].strength],
                title=f"Generated {len(generated)} password(s)",
                description=(
                    f"Each password carries {entropy:.1f} bits of entropy "
                    f"({generated[0].strength.value})."
                ),
            ))
            result.finalize(f"Generated {len(generated)} password(s) at {entropy:.1f} bits")

        except Exception as exc:
            self.logger.exception(f"Password generation failed: {exc}")
            self._record_error(result, "Generation Error", exc)

        return result

    async def passphrase(
        self,
        count: int = 1,
        options: Optional[PassphraseOptions] = None,
        *,
        memorable: Optional[MemorableLength | str] = None,
    ) -> ScanResult:
        """Generate diceware-style passphrases (or memorable ones)."""
        result = ScanResult(tool_name="passphrase", target=f"{count} passphrase(s)")

        try:
            if not 1 <= count <= 100:
                raise ValueError("Count must be between 1 and 100")
            opts = options if options is not None else self.passphrase_options()
            if memorable is not None:
                generated = [generate_memorable_passphrase(memorable) for _ in range(count)]
            else:
                generated = [generate_passphrase(opts) for _ in range(count)]

            result.metadata = {
                "passwords": [g.model_dump(mode="json") for g in generated],
                "options": opts.model_dump(mode="json"),
                "memorable": MemorableLength(memorable).value if memorable is not None else None,
            }
            entropy = generated[0].entropy
            result.add_finding(Finding(
                severity=_STRENGTH_SEVERITY[generated[0].strength],
                title=f"Generated {len(generated)} passphrase(s)",
                description=f"Each passphrase carries {entropy:.1f} bits of word entropy.",
            ))
            result.finalize(f"Generated {len(generated)} passphrase(s) at {entropy:.1f} bits")

        except Exception as exc:
            self.logger.exception(f"Passphrase generation failed: {exc}")
            self._record_error(result, "Generation Error", exc)

        return result

    # ------------------------------------------------------------------ #
    #  Hashing
    # ------------------------------------------------------------------ #

    async def hash_password(
        self,
        password: str,
        options: Optional[Argon2Options] = None,
        *,
        verify: Optional[str] = None,
    ) -> ScanResult:
        """Hash *password* with Argon2id, or check it against *verify*."""
        result = ScanResult(tool_name="hash", target=_mask(password))

        try:
            if verify is not None:
                matched = await argon2id.verify_password(password, verify)
                result.metadata = {"verified": matched}
                result.add_finding(Finding(
                    severity=Severity.INFO if matched else Severity.HIGH,
                    title="Verification " + ("succeeded" if matched else "failed"),
                    description=(
                        "The password matches the encoded hash."
                        if matched
                        else "The password does not match, or the hash is malformed."
                    ),
                ))
                result.finalize("Password verified" if matched else "Verification failed")
                return result

            opts = options if options is not None else self.argon2_options()
            hashed = await argon2id.hash_password(password, opts)
            estimate = argon2id.estimate_hashing_time(opts)
            result.metadata = {
                "encoded": hashed.encoded,
                "salt_hex": hashed.salt.hex(),
                "hash_hex": hashed.hash.hex(),
                "options": opts.model_dump(mode="json"),
                "estimate_ms": estimate.model_dump(mode="json"),
            }
            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Argon2id Hash",
                description=(
                    f"m={opts.memory_kib} KiB, t={opts.iterations}, p={opts.parallelism}; "
                    f"expected {estimate.min}-{estimate.max} ms per hash."
                ),
                references=["RFC 9106 (2021). Argon2 Memory-Hard Function."],
            ))
            result.finalize("Password hashed with Argon2id")

        except Exception as exc:
            self.logger.exception(f"Hashing failed: {exc}")
            self._record_error(result, "Hashing Error", exc)

        return result

    async def calibrate(self, target_ms: Optional[int] = None) -> ScanResult:
        """Benchmark this machine and recommend Argon2id parameters.

        *target_ms* defaults to ``[hashing] target_ms``.
        """
        target = target_ms if target_ms is not None else self.config.hashing.target_ms
        result = ScanResult(tool_name="calibrate", target=f"{target} ms")

        try:
            recommended = await argon2id.recommend_options(target)
            estimate = argon2id.estimate_hashing_time(recommended)
            result.metadata = {
                "target_ms": target,
                "options": recommended.model_dump(mode="json"),
                "estimate_ms": estimate.model_dump(mode="json"),
            }
            result.add_finding(Finding(
                severity=Severity.INFO,
                title="Recommended Argon2id Parameters",
                description=(
                    f"m={recommended.memory_kib} KiB, t={recommended.iterations}, "
                    f"p={recommended.parallelism}"
                ),
                recommendation="Copy these values into the [hashing] section of passforge.toml.",
            ))
            result.finalize(f"Calibrated for {target} ms")

        except Exception as exc:
            self.logger.exception(f"Calibration failed: {exc}")
            self._record_error(result, "Calibration Error", exc)

        return result

    # ------------------------------------------------------------------ #
    #  Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _record_error(result: ScanResult, title: str, exc: Exception) -> None:
        result.add_finding(Finding(
            severity=Severity.MEDIUM,
            title=title,
            description=f"Error during evaluation: {exc}",
        ))
        result.metadata = {"error": str(exc)}
        result.finalize(f"Error: {exc}")
