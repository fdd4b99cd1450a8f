import asyncio
import datetime as _dt
import json

import pytest

from passforge.analyzers.crack_cost import estimate_crack_cost
from passforge.analyzers.entropy import estimate_entropy
from passforge.analyzers.strength import StrengthAnalyzer
from passforge.core.engine import ForgeEngine
from passforge.core.models import ExpiryOptions, HashAlgorithm, PasswordGeneratorOptions
from passforge.output.report import ForgeReportGenerator
from shared.config import ForgeConfig
from shared.models import Severity


SECRET = "Tr0ub4dor&3xyz"


def _leaks(result, secret):
    return secret in result.model_dump_json()


class TestAnalyze:

    def test_metadata_and_risk(self, fake_scorer):
        engine = ForgeEngine(scorer=fake_scorer)
        result = asyncio.run(engine.analyze_password(SECRET))
        expected = StrengthAnalyzer(fake_scorer).analyze(SECRET)

        assert result.tool_name == "analyze"
        assert result.target == f"[password: {len(SECRET)} chars]"
        assert result.metadata["score"] == expected.score
        assert result.metadata["hash_algorithm"] == "argon2id"
        assert result.metadata["crack_cost_usd"] > 0
        assert result.risk.score == 100 - expected.score
        assert result.end_time is not None
        assert not _leaks(result, SECRET)

    def test_crack_cost_uses_unrounded_entropy(self, fake_scorer, created_at):
        # 6 chars over a 62-symbol pool: 35.73 bits, shown as 35.7
        engine = ForgeEngine(scorer=fake_scorer)
        analysed = asyncio.run(engine.analyze_password("Tr0ub4"))
        rotation = asyncio.run(engine.evaluate_expiry("Tr0ub4", created_at, now=created_at))
        expected = estimate_crack_cost(estimate_entropy("Tr0ub4"), HashAlgorithm.ARGON2ID)
        assert analysed.metadata["crack_cost_usd"] == pytest.approx(expected)
        assert analysed.metadata["crack_cost_usd"] == pytest.approx(
            rotation.metadata["estimated_crack_cost"]
        )
        assert analysed.metadata["entropy"] == 35.7

    def test_scorer_feedback_becomes_findings(self, make_scorer):
        scorer = make_scorer(score=1, warning="This is a top-100 password",
                             suggestions=("Add another word",))
        result = asyncio.run(ForgeEngine(scorer=scorer).analyze_password(SECRET))
        titles = [f.title for f in result.findings]
        assert "Scorer Warning" in titles
        assert "Improvement Suggestion" in titles

    def test_quick_check(self):
        result = asyncio.run(ForgeEngine().quick_check("hunter22"))
        assert result.metadata["quick"]["score"] == 50
        assert result.metadata["minimum"]["meets"] is False
        assert not _leaks(result, "hunter22")


class TestPolicy:

    def test_config_overrides_flow_into_policy(self):
        config = ForgeConfig()
        config.policy.min_length = 20
        engine = ForgeEngine(config)
        assert engine.policy_config().min_length == 20
        assert engine.policy_config({"min_length": 8}).min_length == 8

    def test_invalid_password_findings(self):
        engine = ForgeEngine()
        result = asyncio.run(engine.validate_policy("zq9!x"))
        assert result.metadata["valid"] is False
        assert "normalized" not in result.metadata
        assert result.highest_severity is Severity.HIGH
        assert not _leaks(result, "zq9!x")

    def test_context_words(self):
        engine = ForgeEngine()
        result = asyncio.run(engine.validate_policy(
            "alice-loves-long-passwords", {"username": "alice"}, {"min_length": 8},
        ))
        fields = [v["field"] for v in result.metadata["violations"]]
        assert "context" in fields


class TestExpiry:

    def test_fixed_clock(self, created_at):
        engine = ForgeEngine()
        result = asyncio.run(engine.evaluate_expiry(
            "Pass123",
            created_at,
            ExpiryOptions(has_mfa=True),
            now=created_at + _dt.timedelta(days=10),
        ))
        assert result.metadata["rotation_period_days"] == 180
        assert result.metadata["days_remaining"] == 170
        assert result.metadata["rotate_now"] is False
        assert result.metadata["schedule"]
        assert not _leaks(result, "Pass123")

    def test_defaults_from_config(self):
        config = ForgeConfig()
        config.expiry.has_mfa = True
        options = ForgeEngine(config).expiry_options(risk_profile="high", is_privileged=None)
        assert options.has_mfa is True
        assert options.risk_profile.value == "high"
        assert options.is_privileged is False


class TestGeneration:

    def test_generate(self):
        engine = ForgeEngine()
        result = asyncio.run(engine.generate(3, PasswordGeneratorOptions(length=20)))
        passwords = result.metadata["passwords"]
        assert len(passwords) == 3
        assert all(len(p["password"]) == 20 for p in passwords)
        assert result.metadata["pronounceable"] is False

    def test_generate_error_is_recorded(self):
        result = asyncio.run(ForgeEngine().generate(count=0))
        assert "error" in result.metadata
        assert result.findings[-1].title == "Generation Error"
        assert result.summary.startswith("Error:")

    def test_pronounceable(self):
        result = asyncio.run(ForgeEngine().generate(2, pronounceable=True))
        assert len(result.metadata["passwords"]) == 2
        assert result.metadata["pronounceable"] is True

    def test_passphrase_memorable(self):
        result = asyncio.run(ForgeEngine().passphrase(2, memorable="long"))
        assert result.metadata["memorable"] == "long"
        assert all(p["entropy"] == 52.7 for p in result.metadata["passwords"])

    def test_generator_options_from_config(self):
        config = ForgeConfig()
        config.generator.length = 32
        options = ForgeEngine(config).generator_options(include_symbols=False)
        assert options.length == 32
        assert options.include_symbols is False


class TestHashing:

    def test_hash_then_verify(self, fast_argon2):
        engine = ForgeEngine()
        hashed = asyncio.run(engine.hash_password("s3cret!", fast_argon2))
        encoded = hashed.metadata["encoded"]
        assert encoded.startswith("$argon2id$")
        assert len(bytes.fromhex(hashed.metadata["salt_hex"])) == 16

        ok = asyncio.run(engine.hash_password("s3cret!", verify=encoded))
        bad = asyncio.run(engine.hash_password("wrong", verify=encoded))
        assert ok.metadata == {"verified": True}
        assert bad.metadata == {"verified": False}
        assert bad.highest_severity is Severity.HIGH

    def test_argon2_options_override(self):
        options = ForgeEngine().argon2_options(memory_kib=64, iterations=None)
        assert options.memory_kib == 64
        assert options.iterations == 2


def test_json_report(tmp_path, fake_scorer):
    result = asyncio.run(ForgeEngine(scorer=fake_scorer).analyze_password(SECRET))
    path = ForgeReportGenerator("1.0.0").generate_json(result, tmp_path / "out" / "report.json")
    report = json.loads(path.read_text(encoding="utf-8"))
    assert report["report_metadata"]["tool"] == "analyze"
    assert report["summary"]["total_findings"] == len(result.findings)
    assert SECRET not in path.read_text(encoding="utf-8")
