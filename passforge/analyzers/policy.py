"""
Password Policy Validator
==========================

Validates a password against a NIST SP 800-63B-style policy.  The policy
favours length and screening over composition rules:

1. Unicode normalization (NFKC by default) before any check.
2. Length bounds (default 15..128).
3. Optional character allow-list.
4. Blocklist screening against common and breached passwords.
5. Structural pattern warnings (keyboard, repetition, runs, years).
6. Context screening: service words, username, email, names.
7. Caller-supplied custom rules.

Every check runs; violations accumulate in that order.  Errors make the
password invalid, warnings only reduce the score::

    score = max(0, 100 - 20 * errors - 10 * warnings)

References:
    - NIST SP 800-63B (2017), Section 5.1.1.2: Memorized Secret Verifiers.
    - Unicode Standard Annex #15: Unicode Normalization Forms.
"""

from __future__ import annotations

import asyncio
import re
import unicodedata
from typing import Any, Mapping, Optional, Sequence, Union

from passforge.analyzers.patterns import (
    check_keyboard_patterns,
    check_repetitive_patterns,
    check_sequential_patterns,
    check_year_patterns,
)
from passforge.core.models import (
    NormalizationForm,
    PolicyConfig,
    PolicyResult,
    PolicyViolation,
    ValidationContext,
    ValidationRule,
    ViolationSeverity,
)
from shared.logger import ForgeLogger


_log = ForgeLogger("policy")


# ===================================================================== #
#  Blocklist
# ===================================================================== #

# Most common passwords from public breach compilations.
COMMON_PASSWORDS: frozenset[str] = frozenset({
    "password", "123456", "123456789", "password1", "12345678", "qwerty",
    "abc123", "111111", "monkey", "1234567890", "letmein", "1234567",
    "dragon", "master", "login", "princess", "qwertyuiop", "solo",
    "passw0rd", "starwars", "password123", "123123", "welcome", "admin",
    "iloveyou", "sunshine", "adobe123", "ashley", "bailey", "access",
    "football", "shadow", "superman", "696969", "!@#$%^&*", "charlie",
    "aa123456", "donald", "freedom", "whatever", "michael", "michelle",
    "pepper", "trustno1", "jordan23",
})

_PATTERN_CHECKS = (
    (check_keyboard_patterns, "Password contains common keyboard pattern"),
    (check_repetitive_patterns, "Password contains repetitive pattern"),
    (check_sequential_patterns, "Password contains sequential pattern"),
    (check_year_patterns, "Password contains date pattern"),
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")

ERROR_PENALTY = 20
WARNING_PENALTY = 10

PolicyInput = Union[PolicyConfig, Mapping[str, Any], None]
ContextInput = Union[ValidationContext, Mapping[str, Any], None]


# ===================================================================== #
#  Policy construction
# ===================================================================== #

_DEFAULT_POLICY = PolicyConfig()


def get_default_policy() -> PolicyConfig:
    """The default NIST-aligned policy (min 15, max 128, NFKC, blocklist on)."""
    return _DEFAULT_POLICY


def create_policy(**overrides: Any) -> PolicyConfig:
    """Build a policy from the defaults with *overrides* applied.

    Raises:
        pydantic.ValidationError: If the merged policy is malformed, e.g.
            ``max_length < min_length``.
    """
    return _DEFAULT_POLICY.merged(overrides)


def _resolve_policy(config: PolicyInput) -> PolicyConfig:
    if config is None:
        return _DEFAULT_POLICY
    if isinstance(config, PolicyConfig):
        return config
    return _DEFAULT_POLICY.merged(config)


def _resolve_context(context: ContextInput) -> Optional[ValidationContext]:
    if context is None or isinstance(context, ValidationContext):
        return context
    return ValidationContext.model_validate(dict(context))


# ===================================================================== #
#  Individual checks
# ===================================================================== #


def normalize_password(password: Any, form: NormalizationForm = NormalizationForm.NFKC) -> str:
    """Apply Unicode normalization; non-strings become ``""``.

    Strings that cannot be normalized (lone surrogates, for instance) are
    returned unchanged.
    """
    if not isinstance(password, str):
        return ""
    try:
        return unicodedata.normalize(NormalizationForm(form).value, password)
    except (ValueError, UnicodeError):
        _log.debug("Normalization failed, using input as-is", length=len(password))
        return password


def is_common_password(password: str) -> bool:
    return password.lower() in COMMON_PASSWORDS


def find_context_words(
    password: str,
    context_words: Sequence[str],
    context: Optional[ValidationContext],
) -> list[str]:
    """Labels of context items contained in *password* (case-insensitive)."""
    lowered = password.lower()
    found: list[str] = [word for word in context_words if word and word.lower() in lowered]

    if context is None:
        return found

    if context.username:
        username = context.username.lower()
        stripped = _NON_ALNUM_RE.sub("", username)
        if username in lowered or (stripped and stripped in lowered):
            found.append("username")

    if context.email:
        local_part = context.email.split("@", 1)[0]
        if local_part and local_part.lower() in lowered:
            found.append("email")

    if context.first_name and context.first_name.lower() in lowered:
        found.append("first name")
    if context.last_name and context.last_name.lower() in lowered:
        found.append("last name")

    return found


# ===================================================================== #
#  Validator
# ===================================================================== #


class PolicyValidator:
    """Validates passwords against one :class:`PolicyConfig`.

    Usage::

        validator = PolicyValidator(create_policy(min_length=12))
        result = validator.validate("correct horse battery", {"username": "alice"})
        result.valid, result.score
    """

    def __init__(self, policy: PolicyInput = None) -> None:
        self._policy = _resolve_policy(policy)

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def validate(self, password: Any, context: ContextInput = None) -> PolicyResult:
        policy = self._policy
        ctx = _resolve_context(context)
        violations: list[PolicyViolation] = []

        normalized = normalize_password(password, policy.normalization)
        length = len(normalized)

        # -- Length --
        if length < policy.min_length:
            violations.append(PolicyViolation(
                field="length",
                message=f"Password must be at least {policy.min_length} characters long",
                severity=ViolationSeverity.ERROR,
                details=f"Current length: {length}",
            ))
        if length > policy.max_length:
            violations.append(PolicyViolation(
                field="length",
                message=f"Password must not exceed {policy.max_length} characters",
                severity=ViolationSeverity.ERROR,
                details=f"Current length: {length}",
            ))

        # -- Allow-list --
        if policy.allowed_chars is not None:
            allowed = set(policy.allowed_chars)
            if any(char not in allowed for char in normalized):
                violations.append(PolicyViolation(
                    field="characters",
                    message="Password contains disallowed characters",
                    severity=ViolationSeverity.ERROR,
                ))

        # -- Blocklist --
        if policy.blocklists and is_common_password(normalized):
            violations.append(PolicyViolation(
                field="blocklist",
                message="This password has been found in data breaches and is too common",
                severity=ViolationSeverity.ERROR,
                details="Password appears in common password list",
            ))

        # -- Patterns --
        if policy.detect_patterns:
            for check, message in _PATTERN_CHECKS:
                description = check(normalized)
                if description:
                    violations.append(PolicyViolation(
                        field="pattern",
                        message=message,
                        severity=ViolationSeverity.WARNING,
                        details=f"Found {description}",
                    ))

        # -- Context --
        found = find_context_words(normalized, policy.context_words, ctx)
        if found:
            violations.append(PolicyViolation(
                field="context",
                message="Password contains personal or service-related information",
                severity=ViolationSeverity.ERROR,
                details=f"Found: {', '.join(found)}",
            ))

        # -- Custom rules --
        for rule in policy.custom_rules:
            violation = self._apply_rule(rule, normalized, ctx)
            if violation is not None:
                violations.append(violation)

        errors = sum(1 for v in violations if v.severity is ViolationSeverity.ERROR)
        warnings = len(violations) - errors
        score = max(0, 100 - ERROR_PENALTY * errors - WARNING_PENALTY * warnings)

        _log.debug(
            "Policy evaluated",
            length=length,
            errors=errors,
            warnings=warnings,
            score=score,
        )

        return PolicyResult(
            valid=errors == 0,
            violations=tuple(violations),
            score=score,
            normalized=normalized,
        )

    @staticmethod
    def _apply_rule(
        rule: ValidationRule,
        normalized: str,
        context: Optional[ValidationContext],
    ) -> Optional[PolicyViolation]:
        """Run one custom rule; a raising rule counts as a failed error-level rule."""
        try:
            passed = bool(rule.validate_fn(normalized, context))
        except Exception as exc:
            _log.warning(
                "Custom rule %s raised %s", rule.name, type(exc).__name__,
                rule=rule.name,
            )
            return PolicyViolation(
                field="custom",
                message=f"Custom rule '{rule.name}' failed to evaluate",
                severity=ViolationSeverity.ERROR,
                details=f"Rule: {rule.name} ({type(exc).__name__}: {exc})",
            )
        if passed:
            return None
        return PolicyViolation(
            field="custom",
            message=rule.message,
            severity=rule.severity,
            details=f"Rule: {rule.name}",
        )


# ===================================================================== #
#  Public async API
# ===================================================================== #


async def validate_password(
    password: Any,
    config: PolicyInput = None,
    context: ContextInput = None,
) -> PolicyResult:
    """Validate *password* against *config* (defaults merged) and *context*.

    Args:
        password: Candidate password; non-strings are treated as ``""``.
        config: A :class:`PolicyConfig` or a mapping of overrides.
        context: Personal data (:class:`ValidationContext` or mapping).
    """
    return PolicyValidator(config).validate(password, context)


async def validate_passwords_batch(
    passwords: Sequence[Any],
    config: PolicyInput = None,
    contexts: Optional[Sequence[ContextInput]] = None,
) -> list[PolicyResult]:
    """Validate passwords sequentially; ``contexts[i]`` pairs with ``passwords[i]``."""
    validator = PolicyValidator(config)
    results: list[PolicyResult] = []
    for index, password in enumerate(passwords):
        context = contexts[index] if contexts is not None and index < len(contexts) else None
        results.append(validator.validate(password, context))
        await asyncio.sleep(0)
    _log.info("Batch validation complete", count=len(results))
    return results
