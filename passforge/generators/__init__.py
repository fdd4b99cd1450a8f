"""
PassForge Generators
=====================

Random passwords, pronounceable passwords and diceware-style passphrases,
all drawn from the operating system CSPRNG.
"""

from passforge.generators.password import (
    generate_password,
    generate_passwords,
    generate_pronounceable_password,
    get_default_options,
)
from passforge.generators.passphrase import (
    generate_memorable_passphrase,
    generate_passphrase,
    get_default_passphrase_options,
)

__all__ = [
    "generate_password",
    "generate_passwords",
    "generate_pronounceable_password",
    "get_default_options",
    "generate_memorable_passphrase",
    "generate_passphrase",
    "get_default_passphrase_options",
]
