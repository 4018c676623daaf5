import pytest

from mlcc.config.system import EngineSettings, ValidationOptions
from mlcc.core.exceptions import ConfigurationError

pytestmark = pytest.mark.unit


class TestEngineSettings:
    """Test engine settings sources."""

    def test_defaults(self):
        settings = EngineSettings.from_env({})

        assert settings.validate_env_vars is True
        assert settings.offline is False
        assert settings.metadata_timeout == 5.0
        assert settings.log_level == "INFO"

    def test_from_env(self):
        settings = EngineSettings.from_env({
            "MLCC_REGISTRY_DIR": "/srv/registries",
            "MLCC_OFFLINE": "yes",
            "MLCC_KNOWN_FLAGS": "off",
            "MLCC_METADATA_TIMEOUT": "2.5",
            "MLCC_LOG_LEVEL": "debug",
        })

        assert settings.registry_dir == "/srv/registries"
        assert settings.offline is True
        assert settings.use_known_flags is False
        assert settings.metadata_timeout == 2.5
        assert settings.log_level == "DEBUG"

    def test_bad_boolean_raises(self):
        with pytest.raises(ConfigurationError) as exc_info:
            EngineSettings.from_env({"MLCC_OFFLINE": "sometimes"})
        assert exc_info.value.config_key == "MLCC_OFFLINE"

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_bad_timeout_raises(self, raw):
        with pytest.raises(ConfigurationError):
            EngineSettings.from_env({"MLCC_METADATA_TIMEOUT": raw})

    def test_from_dict_keeps_unknown_keys(self):
        settings = EngineSettings.from_dict({"offline": True, "colour": "blue"})

        assert settings.offline is True
        assert settings.extra == {"colour": "blue"}
        assert "colour" not in settings.to_dict()

    def test_validation_options(self):
        settings = EngineSettings(use_community_reports=False)

        options = settings.validation_options()

        assert options == ValidationOptions(enabled=True, use_known_flags=True, use_community_reports=False)


class TestValidationOptions:

    def test_is_enabled(self):
        options = ValidationOptions(use_known_flags=False)

        assert options.is_enabled("use_community_reports")
        assert not options.is_enabled("use_known_flags")
        assert not options.is_enabled("no_such_option")

    def test_master_switch(self):
        options = ValidationOptions(enabled=False)

        assert not options.is_enabled("use_known_flags")
