import pytest

from mlcc.core.enums import Severity
from mlcc.validation import FrameworkContext, KnownFlagsStrategy

pytestmark = pytest.mark.unit


class TestKnownFlagsStrategy:
    """Test the known-flags strategy over the shipped flag table."""

    def setup_method(self):
        self.flags = {
            "vllm": {
                "0.3.0": {"VLLM_MAX_NUM_SEQS": {"type": "integer", "min": 1, "max": 1024}},
                "default": {
                    "VLLM_MAX_NUM_SEQS": {"type": "integer", "min": 1, "max": 1024},
                    "VLLM_GPU_MEMORY_UTILIZATION": {"type": "float", "min": 0.1, "max": 1.0},
                    "VLLM_ENABLE_PREFIX_CACHING": {"type": "boolean"},
                    "VLLM_DISTRIBUTED_EXECUTOR_BACKEND": {"type": "string"},
                    "VLLM_WORKER_USE_RAY": {
                        "type": "boolean", "deprecated": True,
                        "deprecationMessage": "Use the executor backend.",
                        "replacement": "VLLM_DISTRIBUTED_EXECUTOR_BACKEND",
                    },
                },
            },
            "sglang": {"all": {"SGLANG_MEM_FRACTION": {"type": "float"}}},
        }
        self.strategy = KnownFlagsStrategy(self.flags)
        self.context = FrameworkContext("vllm", "0.4.0")

    def validate(self, env_vars, context=None):
        return self.strategy.validate(context or self.context, env_vars).findings

    def test_valid_integer_passes(self):
        assert self.validate({"VLLM_MAX_NUM_SEQS": "256"}) == []

    def test_non_integer_is_a_type_error_without_range_error(self):
        findings = self.validate({"VLLM_MAX_NUM_SEQS": "2.5"})

        assert len(findings) == 1
        assert findings[0].severity is Severity.ERROR
        assert findings[0].message == "Environment variable 'VLLM_MAX_NUM_SEQS' must be an integer, got '2.5'"
        assert findings[0].source == "known-flags-registry"

    def test_range_bounds_are_inclusive(self):
        assert self.validate({"VLLM_MAX_NUM_SEQS": "1"}) == []
        assert self.validate({"VLLM_MAX_NUM_SEQS": "1024"}) == []

        low = self.validate({"VLLM_MAX_NUM_SEQS": "0"})
        high = self.validate({"VLLM_MAX_NUM_SEQS": "1025"})

        assert low[0].message == "Environment variable 'VLLM_MAX_NUM_SEQS' must be >= 1, got 0"
        assert high[0].message == "Environment variable 'VLLM_MAX_NUM_SEQS' must be <= 1024, got 1025"

    def test_float_type_and_range(self):
        assert self.validate({"VLLM_GPU_MEMORY_UTILIZATION": "0.9"}) == []
        assert self.validate({"VLLM_GPU_MEMORY_UTILIZATION": "1"}) == []

        not_float = self.validate({"VLLM_GPU_MEMORY_UTILIZATION": "high"})
        too_high = self.validate({"VLLM_GPU_MEMORY_UTILIZATION": "1.5"})

        assert "must be a float" in not_float[0].message
        assert "must be <= 1.0" in too_high[0].message

    @pytest.mark.parametrize("value", ["true", "FALSE", "0", "1", "Yes", "no"])
    def test_boolean_values_accepted(self, value):
        assert self.validate({"VLLM_ENABLE_PREFIX_CACHING": value}) == []

    def test_invalid_boolean(self):
        findings = self.validate({"VLLM_ENABLE_PREFIX_CACHING": "maybe"})

        assert findings[0].severity is Severity.ERROR
        assert "true/false, 0/1, yes/no" in findings[0].message

    def test_string_flags_accept_anything(self):
        assert self.validate({"VLLM_DISTRIBUTED_EXECUTOR_BACKEND": "ray"}) == []

    def test_unknown_variable_is_a_warning(self):
        findings = self.validate({"NOT_A_FLAG": "1"})

        assert len(findings) == 1
        assert findings[0].severity is Severity.WARNING
        assert findings[0].message == "Unknown environment variable 'NOT_A_FLAG' for vllm 0.4.0"

    def test_deprecated_variable_warns_with_replacement(self):
        findings = self.validate({"VLLM_WORKER_USE_RAY": "true"})

        messages = [f.message for f in findings]
        assert messages == [
            "Environment variable 'VLLM_WORKER_USE_RAY' is deprecated. Use the executor backend.",
            "Consider using 'VLLM_DISTRIBUTED_EXECUTOR_BACKEND' instead of 'VLLM_WORKER_USE_RAY'",
        ]
        assert all(f.severity is Severity.WARNING for f in findings)

    def test_exact_version_bucket_preferred(self):
        context = FrameworkContext("vllm", "0.3.0")

        # Only VLLM_MAX_NUM_SEQS is known for 0.3.0
        findings = self.validate({"VLLM_ENABLE_PREFIX_CACHING": "true"}, context)

        assert "Unknown environment variable" in findings[0].message

    def test_all_bucket_fallback(self):
        context = FrameworkContext("sglang", "0.2.0")

        assert self.strategy.has_data(context)
        assert self.validate({"SGLANG_MEM_FRACTION": "0.5"}, context) == []

    def test_no_data_for_framework(self):
        context = FrameworkContext("tgi", "1.0.0")

        assert not self.strategy.has_data(context)
        assert self.validate({"ANYTHING": "1"}, context) == []

    def test_inline_flags_override_registry(self):
        context = FrameworkContext("vllm", "0.4.0", known_flags={"ONLY_FLAG": {"type": "integer"}})

        findings = self.validate({"ONLY_FLAG": "x", "VLLM_MAX_NUM_SEQS": "1"}, context)

        assert [f.severity for f in findings] == [Severity.ERROR, Severity.WARNING]

    def test_shipped_table(self, registry_store):
        strategy = KnownFlagsStrategy(registry_store.known_flags)
        context = FrameworkContext("vllm", "0.4.0")

        findings = strategy.validate(context, {"VLLM_MAX_NUM_SEQS": "256", "VLLM_TENSOR_PARALLEL_SIZE": "2"}).findings

        assert findings == []
