"""
PassForge Analyzers
====================

Evaluation modules: nominal entropy, structural patterns, composite
strength, quick checks, offline crack cost, rotation policy and password
policy validation.
"""

from passforge.analyzers.entropy import EntropyEstimator
from passforge.analyzers.patterns import PatternDetector
from passforge.analyzers.strength import StrengthAnalyzer, ZxcvbnScorer
from passforge.analyzers.crack_cost import CrackCostEstimator
from passforge.analyzers.expiry import RotationPolicyEngine
from passforge.analyzers.policy import PolicyValidator

__all__ = [
    "EntropyEstimator",
    "PatternDetector",
    "StrengthAnalyzer",
    "ZxcvbnScorer",
    "CrackCostEstimator",
    "RotationPolicyEngine",
    "PolicyValidator",
]
