"""Unit tests for blake2mac.config module."""

import pytest

from blake2mac import InvalidConfigurationError
from blake2mac.config import MacConfig, validate_parameters


class TestValidateParameters:
    """Test validate_parameters."""

    def test_valid(self):
        assert validate_parameters(64, 0, None) == []
        assert validate_parameters(1, 64, 16) == []

    def test_each_rule(self):
        assert len(validate_parameters(0, 0, None)) == 1
        assert len(validate_parameters(65, 0, None)) == 1
        assert len(validate_parameters(32, 65, None)) == 1
        assert len(validate_parameters(32, 0, 8)) == 1

    def test_all_rules_at_once(self):
        assert len(validate_parameters(0, 100, 1)) == 3


class TestMacConfig:
    """Test MacConfig dataclass."""

    def test_default_config(self):
        config = MacConfig()
        assert config.digest_length == 64
        assert config.key is None
        assert config.salt is None
        assert not config.keyed
        assert config.validate() == []

    def test_presets(self):
        assert MacConfig.hash512().digest_length == 64
        assert MacConfig.hash256().digest_length == 32
        mac = MacConfig.mac(b"k" * 32, digest_length=16, salt=bytes(16))
        assert mac.keyed
        assert mac.digest_length == 16
        assert mac.validate() == []

    def test_repr_hides_secrets(self):
        config = MacConfig.mac(b"supersecret", salt=b"s" * 16)
        assert "supersecret" not in repr(config)
        assert "digest_length=64" in repr(config)

    def test_check_raises(self):
        with pytest.raises(InvalidConfigurationError, match="salt"):
            MacConfig(salt=b"short").check()


class TestFromEnvironment:
    """Test loading configuration from the environment."""

    def test_defaults_when_unset(self, monkeypatch):
        for name in ("BLAKE2MAC_DIGEST_LENGTH", "BLAKE2MAC_KEY", "BLAKE2MAC_SALT"):
            monkeypatch.delenv(name, raising=False)
        config = MacConfig.from_environment()
        assert config.digest_length == 64
        assert config.key is None
        assert config.salt is None

    def test_reads_values(self, monkeypatch):
        monkeypatch.setenv("BLAKE2MAC_DIGEST_LENGTH", "32")
        monkeypatch.setenv("BLAKE2MAC_KEY", "00010203")
        monkeypatch.setenv("BLAKE2MAC_SALT", "aa" * 16)
        config = MacConfig.from_environment()
        assert config.digest_length == 32
        assert config.key == b"\x00\x01\x02\x03"
        assert config.salt == b"\xaa" * 16

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_DIGEST_LENGTH", "20")
        assert MacConfig.from_environment(prefix="APP").digest_length == 20

    def test_bad_digest_length(self, monkeypatch):
        monkeypatch.setenv("BLAKE2MAC_DIGEST_LENGTH", "sixty-four")
        with pytest.raises(InvalidConfigurationError, match="not an integer"):
            MacConfig.from_environment()

    def test_out_of_range_digest_length(self, monkeypatch):
        monkeypatch.setenv("BLAKE2MAC_DIGEST_LENGTH", "100")
        with pytest.raises(InvalidConfigurationError, match="digest length"):
            MacConfig.from_environment()

    def test_bad_hex_key(self, monkeypatch):
        monkeypatch.delenv("BLAKE2MAC_DIGEST_LENGTH", raising=False)
        monkeypatch.setenv("BLAKE2MAC_KEY", "not hex")
        with pytest.raises(InvalidConfigurationError, match="not valid hex"):
            MacConfig.from_environment()
