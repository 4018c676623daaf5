import pytest

from mlcc.core.exceptions import ProfileNotFoundError
from mlcc.registry import apply_profile, get_profile, list_profiles, overlay

pytestmark = pytest.mark.unit


class TestOverlay:

    def test_patch_keys_win_and_inputs_are_untouched(self):
        base = {"A": "1", "B": "2"}
        patch = {"B": "3", "C": "4"}

        merged = overlay(base, patch)

        assert merged == {"A": "1", "B": "3", "C": "4"}
        assert base == {"A": "1", "B": "2"}
        assert patch == {"B": "3", "C": "4"}

    def test_none_inputs(self):
        assert overlay(None, None) == {}
        assert overlay({"A": "1"}, None) == {"A": "1"}


class TestApplyProfile:
    """Test profile application on framework and model entries."""

    def test_no_profile_returns_same_object(self, registry_store):
        entry = registry_store.get_framework("vllm", "0.4.0")

        assert apply_profile(entry, None) is entry
        assert apply_profile(entry, "") is entry

    def test_profile_overlays_env_vars(self, registry_store):
        entry = registry_store.get_framework("vllm", "0.4.0")

        applied = apply_profile(entry, "low-latency")

        assert applied is not entry
        assert applied.applied_profile == "low-latency"
        assert applied.env_vars["VLLM_MAX_NUM_SEQS"] == "32"
        assert applied.env_vars["VLLM_GPU_MEMORY_UTILIZATION"] == "0.85"
        # Base keys the profile does not touch survive
        assert applied.env_vars["VLLM_MAX_MODEL_LEN"] == "4096"
        assert applied.recommended_instance_types == ("ml.g5.xlarge",)

    def test_entry_and_profile_are_not_mutated(self, registry_store):
        entry = registry_store.get_framework("vllm", "0.4.0")
        profile = entry.profiles["high-throughput"]
        before_entry = dict(entry.env_vars)
        before_profile = dict(profile.env_vars)

        apply_profile(entry, "high-throughput")

        assert dict(entry.env_vars) == before_entry
        assert dict(profile.env_vars) == before_profile
        assert entry.applied_profile is None

    def test_apply_is_idempotent(self, registry_store):
        entry = registry_store.get_framework("tensorrt-llm", "1.0.0")

        once = apply_profile(entry, "int4")
        twice = apply_profile(once, "int4")

        assert dict(once.env_vars) == dict(twice.env_vars)
        assert once.recommended_instance_types == twice.recommended_instance_types

    def test_unknown_profile_raises(self, registry_store):
        entry = registry_store.get_framework("vllm", "0.4.0")

        with pytest.raises(ProfileNotFoundError) as exc_info:
            apply_profile(entry, "turbo")

        error = exc_info.value
        assert error.profile_name == "turbo"
        assert error.entry_key == "vllm@0.4.0"
        assert "low-latency" in error.available

    def test_model_profile_keeps_model_recommendations_when_absent(self, registry_store):
        entry = registry_store.get_model("mistralai/Mistral-7B-Instruct-v0.2")
        profile_name = list_profiles(entry)[0]

        applied = apply_profile(entry, profile_name)

        profile = get_profile(entry, profile_name)
        expected = profile.recommended_instance_types or entry.recommended_instance_types
        assert applied.recommended_instance_types == expected
        assert applied.key == entry.key

    def test_get_profile_miss(self, registry_store):
        entry = registry_store.get_framework("sglang", "0.2.0")

        assert get_profile(entry, "nope") is None
        assert get_profile(entry, None) is None
        assert list_profiles(entry) == ["default", "high-throughput"]
