"""
PassForge -- Password Generation and Evaluation Toolkit
========================================================

Stateless functions for generating passwords and passphrases and for
evaluating them: nominal entropy, composite strength, offline crack
cost, rotation recommendations and NIST SP 800-63B-style policy checks,
plus an Argon2id hashing wrapper.

Modules:
    - passforge.core.engine: ForgeEngine facade used by the CLI
    - passforge.core.models: Pydantic data models
    - passforge.analyzers: Entropy, patterns, strength, expiry, policy
    - passforge.generators: Passwords, passphrases, CSPRNG adapter
    - passforge.hashing: Argon2id hashing and calibration
    - passforge.output: Console and report output
    - passforge.cli: Click-based command-line interface

References:
    - NIST SP 800-63B (2017). Digital Identity Guidelines.
    - Wheeler, D. L. (2016). zxcvbn: Low-Budget Password Strength
      Estimation. USENIX Security '16.
    - RFC 9106 (2021). Argon2 Memory-Hard Function.
"""

__version__ = "1.0.0"
__tool_name__ = "passforge"

from passforge.analyzers.crack_cost import estimate_crack_cost, format_crack_cost
from passforge.analyzers.entropy import estimate_entropy
from passforge.analyzers.expiry import (
    calculate_expiry,
    calculate_expiry_batch,
    get_rotation_schedule,
    should_rotate_now,
)
from passforge.analyzers.patterns import detect_patterns
from passforge.analyzers.policy import (
    create_policy,
    get_default_policy,
    validate_password,
    validate_passwords_batch,
)
from passforge.analyzers.quick_check import (
    format_totp_code,
    meets_minimum_requirements,
    quick_strength_check,
)
from passforge.analyzers.strength import (
    analyze_password_strength,
    classify,
    classify_entropy,
    format_crack_time,
)
from passforge.generators import (
    generate_memorable_passphrase,
    generate_passphrase,
    generate_password,
    generate_passwords,
    generate_pronounceable_password,
)
from passforge.hashing import (
    HashingError,
    estimate_hashing_time,
    hash_password,
    recommend_options,
    verify_password,
)

__all__ = [
    "__version__",
    "analyze_password_strength",
    "calculate_expiry",
    "calculate_expiry_batch",
    "classify",
    "classify_entropy",
    "create_policy",
    "detect_patterns",
    "estimate_crack_cost",
    "estimate_entropy",
    "estimate_hashing_time",
    "format_crack_cost",
    "format_crack_time",
    "format_totp_code",
    "generate_memorable_passphrase",
    "generate_passphrase",
    "generate_password",
    "generate_passwords",
    "generate_pronounceable_password",
    "get_default_policy",
    "get_rotation_schedule",
    "hash_password",
    "HashingError",
    "meets_minimum_requirements",
    "quick_strength_check",
    "recommend_options",
    "should_rotate_now",
    "validate_password",
    "validate_passwords_batch",
    "verify_password",
]
