"""
PassForge Configuration Management
===================================

Centralized configuration for the PassForge toolkit using Python
dataclasses and TOML-based persistence.

Every section mirrors the defaults of the corresponding library
operation, so an absent or empty ``passforge.toml`` behaves exactly like
calling the library without options.

References:
    - Wiggins, A. (2011). The Twelve-Factor App. https://12factor.net/
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[no-redef]


# ---------------------------------------------------------------------------
# Default configuration file path relative to the PassForge root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "passforge.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class PolicySettings:
    """Default password policy applied by ``passforge policy``.

    Values follow NIST SP 800-63B: a generous minimum length, no
    composition rules, blocklist screening and context-word screening.

    Reference:
        NIST SP 800-63B (2017). Digital Identity Guidelines:
        Authentication and Lifecycle Management, Section 5.1.1.
    """

    min_length: int = 15
    max_length: int = 128
    require_unicode: bool = False
    blocklists: list[str] = field(default_factory=lambda: ["common-passwords"])
    context_words: list[str] = field(default_factory=list)
    allowed_chars: Optional[str] = None
    normalization: str = "NFKC"
    detect_patterns: bool = True


@dataclass(frozen=False, slots=True)
class ExpirySettings:
    """Default account attributes used for rotation estimates."""

    risk_profile: str = "medium"
    has_mfa: bool = False
    is_privileged: bool = False
    hash_algorithm: str = "argon2id"


@dataclass(frozen=False, slots=True)
class GeneratorSettings:
    """Defaults for random password and passphrase generation."""

    # Random passwords
    length: int = 16
    include_uppercase: bool = True
    include_lowercase: bool = True
    include_numbers: bool = True
    include_symbols: bool = True
    exclude_ambiguous: bool = False
    custom_charset: Optional[str] = None

    # Passphrases
    word_count: int = 5
    separator: str = "dash"
    capitalize: str = "first"
    passphrase_numbers: bool = True


@dataclass(frozen=False, slots=True)
class HashingSettings:
    """Argon2id cost parameters.

    Reference:
        OWASP Password Storage Cheat Sheet (2023): Argon2id with a
        minimum of 19 MiB memory, 2 iterations, 1 degree of parallelism.
    """

    memory_kib: int = 19_456
    iterations: int = 2
    parallelism: int = 1
    hash_length: int = 32
    target_ms: int = 300


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, output location and theme."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    output_dir: str = "output"
    report_format: str = "json"
    color_theme: str = "dark"
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ForgeConfig:
    """Master configuration aggregating all section settings.

    Usage:
        >>> config = ForgeConfig.load()                   # from default path
        >>> config = ForgeConfig.load("custom.toml")      # from custom path
        >>> config.policy.min_length
        15
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    policy: PolicySettings = field(default_factory=PolicySettings)
    expiry: ExpirySettings = field(default_factory=ExpirySettings)
    generator: GeneratorSettings = field(default_factory=GeneratorSettings)
    hashing: HashingSettings = field(default_factory=HashingSettings)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ForgeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``passforge.toml`` in
        the project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ForgeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            policy=cls._build_section(PolicySettings, raw.get("policy", {})),
            expiry=cls._build_section(ExpirySettings, raw.get("expiry", {})),
            generator=cls._build_section(GeneratorSettings, raw.get("generator", {})),
            hashing=cls._build_section(HashingSettings, raw.get("hashing", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that newer config
        files still load.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> ForgeConfig:
    """Module-level convenience wrapper around :meth:`ForgeConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = ForgeConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
