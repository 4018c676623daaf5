import json

import pytest

from mlcc.config.core import EnvironmentConfigProvider, FileConfigProvider, RuntimeConfigProvider
from mlcc.core.exceptions import ConfigurationError

pytestmark = pytest.mark.unit


class TestFileConfigProvider:
    """Test reading and writing config files."""

    def test_missing_file_is_empty(self, tmp_path):
        provider = FileConfigProvider(str(tmp_path / "absent.yaml"))

        assert provider.get_config() == {}

    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("framework: vllm\ninstance_type: ml.g5.xlarge\n")

        config = FileConfigProvider(str(path)).get_config()

        assert config == {"framework": "vllm", "instance_type": "ml.g5.xlarge"}

    def test_reads_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"framework": "sglang"}))

        assert FileConfigProvider(str(path)).get_config() == {"framework": "sglang"}

    def test_unparseable_file_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("framework: [unclosed\n")

        with pytest.raises(ConfigurationError, match="unreadable config file"):
            FileConfigProvider(str(path)).get_config()

    def test_non_mapping_document_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- vllm\n- sglang\n")

        with pytest.raises(ConfigurationError, match="must contain a mapping"):
            FileConfigProvider(str(path)).get_config()

    def test_update_writes_file(self, tmp_path):
        path = tmp_path / "nested" / "config.yaml"
        provider = FileConfigProvider(str(path))

        assert provider.update_config({"framework": "vllm"})

        assert path.exists()
        assert FileConfigProvider(str(path)).get_config() == {"framework": "vllm"}

    def test_reset_removes_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("framework: vllm\n")
        provider = FileConfigProvider(str(path))

        provider.reset_to_defaults()

        assert not path.exists()
        assert provider.get_config() == {}


class TestRuntimeConfigProvider:

    def test_get_returns_copy(self):
        provider = RuntimeConfigProvider(initial_config={"framework": "vllm"})

        config = provider.get_config()
        config["framework"] = "changed"

        assert provider.get_config() == {"framework": "vllm"}
        assert provider.source == "cli"

    def test_update_and_reset(self):
        provider = RuntimeConfigProvider()

        assert provider.update_config({"model_name": "acme/model"})
        assert provider.get_config() == {"model_name": "acme/model"}

        provider.reset_to_defaults()
        assert provider.get_config() == {}


class TestEnvironmentConfigProvider:

    def test_reads_only_mapped_variables(self):
        environ = {"AWS_REGION": "eu-west-1", "UNRELATED": "x"}
        provider = EnvironmentConfigProvider({"aws_region": "AWS_REGION", "instance_type": "ML_INSTANCE_TYPE"},
                                             environ=environ)

        assert provider.get_config() == {"aws_region": "eu-west-1"}

    def test_environment_is_not_written(self):
        environ = {}
        provider = EnvironmentConfigProvider({"aws_region": "AWS_REGION"}, environ=environ)

        assert provider.update_config({"aws_region": "us-west-2"}) is False
        assert environ == {}
