from dataclasses import replace

import pytest

from mlcc.core.enums import AcceleratorType
from mlcc.registry import AcceleratorSpec, VersionRange
from mlcc.validation import CompatibilityValidator

pytestmark = pytest.mark.unit


class TestCompatibilityValidator:
    """Test instance type checks against the shipped registries."""

    @pytest.fixture(autouse=True)
    def _validator(self, registry_store):
        self.store = registry_store
        self.validator = CompatibilityValidator(registry_store)

    def test_matching_cuda_instance_is_compatible(self):
        entry = self.store.get_framework("vllm", "0.4.0")

        verdict = self.validator.validate_instance_type("ml.g5.xlarge", entry)

        assert verdict.compatible is True
        assert verdict.error is None
        assert verdict.warning is None
        assert verdict.info is not None

    def test_neuron_instance_for_cuda_framework_is_incompatible(self):
        entry = self.store.get_framework("tensorrt-llm", "1.0.0")

        verdict = self.validator.validate_instance_type("ml.inf2.xlarge", entry)

        assert verdict.compatible is False
        assert verdict.is_blocking
        assert "Accelerator type mismatch" in verdict.error
        assert verdict.recommendations == ["ml.g5.2xlarge", "ml.g5.4xlarge", "ml.g5.12xlarge", "ml.g5.48xlarge"]

    def test_unknown_instance_is_incompatible(self):
        entry = self.store.get_framework("vllm", "0.4.0")

        verdict = self.validator.validate_instance_type("ml.x99.huge", entry)

        assert verdict.compatible is False
        assert "Unknown instance type" in verdict.error
        assert verdict.recommendations == list(entry.recommended_instance_types)

    def test_unsupported_accelerator_version_warns(self):
        # g4dn supports CUDA 11.4 and 11.8 only
        entry = self.store.get_framework("vllm", "0.4.0")

        verdict = self.validator.validate_instance_type("ml.g4dn.xlarge", entry)

        assert verdict.compatible is True
        assert "12.1" in verdict.warning
        assert "none falls within the image's accepted range 12.0 to 12.3" in verdict.warning

    def test_warning_names_instance_versions_within_range(self):
        entry = self.store.get_framework("vllm", "0.3.0")

        verdict = self.validator.validate_instance_type("ml.g4dn.xlarge", entry)

        assert "11.8 falls within the image's accepted range 11.8 to 12.2" in verdict.warning

    def test_instance_without_versions_is_compatible_with_info(self):
        entry = self.store.get_framework("vllm", "0.4.0")
        cpu_entry = replace(entry, accelerator=AcceleratorSpec(type=AcceleratorType.CPU, version="1.0"))

        verdict = self.validator.validate_instance_type("ml.m5.xlarge", cpu_entry)

        assert verdict.compatible is True
        assert verdict.warning is None
        assert "not checked" in verdict.info

    def test_compatible_instance_types(self):
        entry = self.store.get_framework("vllm", "0.4.0")

        instance_types = self.validator.compatible_instance_types(entry)

        assert "ml.g5.xlarge" in instance_types
        assert "ml.g4dn.xlarge" in instance_types
        assert "ml.inf2.xlarge" not in instance_types
        assert "ml.m5.xlarge" not in instance_types

    def test_verdict_to_dict(self):
        entry = self.store.get_framework("tensorrt-llm", "1.0.0")

        data = self.validator.validate_instance_type("ml.inf2.xlarge", entry).to_dict()

        assert data["compatible"] is False
        assert len(data["recommendations"]) == 4


class TestVersionRange:

    def test_bounds_are_inclusive(self):
        version_range = VersionRange(min="11.8", max="12.2")

        assert version_range.contains("11.8")
        assert version_range.contains("12.2")
        assert version_range.contains("12.0")
        assert not version_range.contains("11.4")
        assert not version_range.contains("12.4")

    def test_components_compare_numerically(self):
        assert not VersionRange(min="12.0", max="12.3").contains("12.10")
