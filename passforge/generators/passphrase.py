"""
Diceware-Style Passphrase Generator
====================================

Builds passphrases from a fixed 440-word list, with configurable
separators, capitalization and an optional run of digits.

Entropy counts only the word choices::

    H = word_count * log2(440)        (~8.78 bits per word)

Separator, capitalization and digit choices add a little unpredictability
that is deliberately left out of the figure.

References:
    - Reinhold, A. G. (1995). The Diceware Passphrase Home Page.
    - Bonneau, J. & Schechter, S. (2014). Towards Reliable Storage of
      56-bit Secrets in Human Memory. USENIX Security.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Optional, Union

from passforge.analyzers.strength import classify
from passforge.core.models import (
    CapitalizeStyle,
    GeneratedPassword,
    MemorableLength,
    PassphraseOptions,
    SeparatorStyle,
)
from passforge.generators.random_source import random_below, random_choice
from shared.math_utils import round_to


WORDLIST: tuple[str, ...] = (
    "able", "about", "account", "acid", "across", "actor", "actual", "adapt", "add",
    "address", "adjust", "admit", "adopt", "adult", "advance", "advice", "affair",
    "affect", "afford", "afraid", "after", "again", "against", "agency", "agent",
    "agree", "ahead", "aim", "alarm", "album", "alert", "alien", "alive", "allow",
    "almost", "alone", "along", "already", "also", "alter", "always", "amateur",
    "amazing", "among", "amount", "amused", "analyst", "anchor", "ancient",
    "anger", "angle", "angry", "animal", "ankle", "announce", "annual", "another",
    "answer", "antenna", "antique", "anxiety", "apart", "apology", "appear",
    "apple", "approve", "april", "arch", "arctic", "area", "arena", "argue",
    "armed", "armor", "army", "around", "arrange", "arrest", "arrival", "arrive",
    "arrow", "artist", "artwork", "asking", "aspect", "assault", "asset", "assist",
    "assume", "asthma", "athlete", "atom", "attack", "attend", "attract",
    "auction", "audit", "august", "aunt", "author", "auto", "autumn", "average",
    "avocado", "avoid", "awake", "aware", "away", "awesome", "awful", "awkward",
    "axis", "baby", "bachelor", "bacon", "badge", "balance", "balcony", "ball",
    "bamboo", "banana", "banner", "bargain", "barrel", "basic", "basket", "battle",
    "beach", "bean", "beauty", "because", "become", "beef", "before", "begin",
    "behave", "behind", "believe", "below", "belt", "bench", "benefit", "best",
    "betray", "better", "between", "beyond", "bicycle", "bind", "biology", "bird",
    "birth", "bitter", "black", "blade", "blame", "blanket", "blast", "bleak",
    "bless", "blind", "blood", "blossom", "blouse", "blue", "blur", "blush",
    "board", "boat", "body", "boil", "bomb", "bone", "bonus", "book", "boost",
    "border", "boring", "borrow", "boss", "bottom", "bounce", "bowl", "brain",
    "brand", "brass", "brave", "bread", "breeze", "brick", "bridge", "brief",
    "bright", "bring", "brisk", "broccoli", "broken", "bronze", "broom", "brother",
    "brown", "brush", "bubble", "buddy", "budget", "buffalo", "build", "bulb",
    "bulk", "bullet", "bundle", "bunker", "burden", "burger", "burst", "business",
    "busy", "butter", "buyer", "buzz", "cabbage", "cabin", "cable", "cactus",
    "cage", "cake", "call", "calm", "camera", "camp", "canal", "cancel", "candy",
    "cannon", "canoe", "canvas", "canyon", "capable", "capital", "captain",
    "carbon", "card", "cargo", "carpet", "carry", "cart", "case", "cash", "casino",
    "castle", "casual", "catalog", "catch", "category", "cattle", "caught",
    "cause", "caution", "cave", "ceiling", "celery", "cement", "census", "century",
    "cereal", "certain", "chair", "chalk", "champion", "change", "chaos",
    "chapter", "charge", "chase", "chat", "cheap", "check", "cheese", "chef",
    "cherry", "chest", "chicken", "chief", "child", "chimney", "choice", "choose",
    "chronic", "chuckle", "chunk", "churn", "cigar", "cinnamon", "circle",
    "citizen", "city", "civic", "civil", "claim", "clap", "clarify", "claw", "clay",
    "clean", "clerk", "clever", "click", "client", "cliff", "climb", "clinic",
    "clip", "clock", "clog", "close", "cloth", "cloud", "clown", "club", "clump",
    "cluster", "clutch", "coach", "coast", "coconut", "code", "coffee", "coil",
    "coin", "collect", "color", "column", "combine", "come", "comfort", "comic",
    "common", "company", "concert", "conduct", "confirm", "congress", "connect",
    "consider", "control", "convince", "cook", "cool", "copper", "copy", "coral",
    "core", "corn", "correct", "cost", "cotton", "couch", "country", "couple",
    "course", "cousin", "cover", "coyote", "crack", "cradle", "craft", "cram",
    "crane", "crash", "crater", "crawl", "crazy", "cream", "credit", "creek",
    "crew", "cricket", "crime", "crisp", "critic", "crop", "cross", "crouch",
    "crowd", "crucial", "cruel", "cruise", "crumble", "crunch", "crush", "crystal",
    "cube", "culture", "cupboard", "curious", "current", "curtain", "curve",
    "cushion", "custom", "cycle", "dad", "damage", "damp", "dance", "danger",
    "daring", "dash", "daughter", "dawn", "deal", "debate", "debris", "decade",
    "december", "decide", "decline", "decorate", "decrease", "deer", "defense",
    "define", "defy", "degree", "delay", "deliver", "demand", "demise", "denial",
    "dentist", "deny", "depart", "depend", "deposit", "depth", "deputy", "derive",
    "describe", "desert", "design",
)

MIN_WORDS = 4
MAX_WORDS = 8

SEPARATORS: Mapping[SeparatorStyle, str] = MappingProxyType({
    SeparatorStyle.DASH: "-_",
    SeparatorStyle.SPACE: " ",
    SeparatorStyle.SYMBOL: "-_.+=@#",
    SeparatorStyle.NONE: "",
})

MEMORABLE_WORD_COUNTS: Mapping[MemorableLength, int] = MappingProxyType({
    MemorableLength.SHORT: 4,
    MemorableLength.MEDIUM: 5,
    MemorableLength.LONG: 6,
})

_DIGITS = "0123456789"


def get_default_passphrase_options() -> PassphraseOptions:
    """Five words, dash separator, first word capitalized, digits included."""
    return PassphraseOptions()


def _capitalize(word: str) -> str:
    return word[:1].upper() + word[1:]


def _apply_capitalization(words: list[str], style: CapitalizeStyle) -> list[str]:
    if style is CapitalizeStyle.ALL:
        return [_capitalize(w) for w in words]
    if style is CapitalizeStyle.FIRST:
        return [_capitalize(w) if i == 0 else w for i, w in enumerate(words)]
    if style is CapitalizeStyle.RANDOM:
        return [_capitalize(w) if random_below(2) == 1 else w for w in words]
    return words


def _insert_digits(passphrase: str) -> str:
    """Insert 2-4 random digits at the start, middle or end."""
    digits = "".join(random_choice(_DIGITS) for _ in range(2 + random_below(3)))
    position = random_below(3)
    if position == 0:
        return digits + passphrase
    if position == 1:
        midpoint = len(passphrase) // 2
        return passphrase[:midpoint] + digits + passphrase[midpoint:]
    return passphrase + digits


def generate_passphrase(options: Optional[PassphraseOptions] = None) -> GeneratedPassword:
    """Generate a passphrase; one separator character is used throughout.

    Raises:
        ValueError: If the word count is outside 4..8.
    """
    opts = options if options is not None else get_default_passphrase_options()
    if not MIN_WORDS <= opts.word_count <= MAX_WORDS:
        raise ValueError(f"Word count must be between {MIN_WORDS} and {MAX_WORDS}")

    words = [random_choice(WORDLIST) for _ in range(opts.word_count)]
    words = _apply_capitalization(words, opts.capitalize)

    separators = SEPARATORS[opts.separator]
    separator = random_choice(separators) if separators else ""
    passphrase = separator.join(words)

    if opts.include_numbers:
        passphrase = _insert_digits(passphrase)

    entropy = opts.word_count * math.log2(len(WORDLIST))
    return GeneratedPassword(
        password=passphrase,
        entropy=round_to(entropy, 1),
        strength=classify(entropy),
    )


def generate_memorable_passphrase(
    length: Union[MemorableLength, str] = MemorableLength.MEDIUM,
) -> GeneratedPassword:
    """Capitalized words run together with digits, e.g. ``Tiger42JumpsOverMoon``."""
    return generate_passphrase(PassphraseOptions(
        word_count=MEMORABLE_WORD_COUNTS[MemorableLength(length)],
        separator=SeparatorStyle.NONE,
        capitalize=CapitalizeStyle.ALL,
        include_numbers=True,
    ))
