import pytest

from shared.config import ForgeConfig, GlobalConfig, PolicySettings, get_config


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr("shared.config._DEFAULT_CONFIG_PATH", tmp_path / "absent.toml")
    config = ForgeConfig.load()
    assert config.policy == PolicySettings()
    assert config.global_settings == GlobalConfig()
    assert config.hashing.memory_kib == 19_456


def test_load_sections(tmp_path):
    path = tmp_path / "passforge.toml"
    path.write_text(
        '[global]\nlog_level = "DEBUG"\n\n'
        '[policy]\nmin_length = 12\ncontext_words = ["acme"]\n\n'
        '[generator]\nlength = 24\nseparator = "space"\n\n'
        '[hashing]\niterations = 3\n',
        encoding="utf-8",
    )
    config = ForgeConfig.load(path)
    assert config.global_settings.log_level == "DEBUG"
    assert config.policy.min_length == 12
    assert config.policy.context_words == ["acme"]
    assert config.policy.max_length == 128
    assert config.generator.length == 24
    assert config.generator.separator == "space"
    assert config.hashing.iterations == 3
    assert config.expiry.risk_profile == "medium"


def test_unknown_keys_ignored(tmp_path):
    path = tmp_path / "passforge.toml"
    path.write_text('[policy]\nmin_length = 10\nfuture_option = true\n\n[extra]\nx = 1\n')
    config = ForgeConfig.load(str(path))
    assert config.policy.min_length == 10


def test_missing_explicit_path(tmp_path):
    with pytest.raises(FileNotFoundError):
        ForgeConfig.load(tmp_path / "nope.toml")


def test_to_dict():
    data = ForgeConfig().to_dict()
    assert set(data) == {"global_settings", "policy", "expiry", "generator", "hashing"}
    assert data["policy"]["blocklists"] == ["common-passwords"]
    assert data["expiry"]["hash_algorithm"] == "argon2id"


def test_get_config_caches(tmp_path):
    path = tmp_path / "passforge.toml"
    path.write_text("[hashing]\ntarget_ms = 500\n", encoding="utf-8")
    loaded = get_config(path)
    assert loaded.hashing.target_ms == 500
    assert get_config() is loaded
