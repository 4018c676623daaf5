import pytest

from mlcc.core.enums import AcceleratorType, MatchType, ValidationLevel
from mlcc.registry import PatternTable, compile_wildcard

pytestmark = pytest.mark.unit


class TestCompileWildcard:
    """Test wildcard key compilation."""

    def test_star_matches_any_sequence(self):
        matcher = compile_wildcard("mistralai/Mistral-*")

        assert matcher.match("mistralai/Mistral-7B-Instruct-v3.9")
        assert matcher.match("mistralai/Mistral-")
        assert not matcher.match("mistralai/Mixtral-8x7B")

    def test_literal_characters_are_escaped(self):
        matcher = compile_wildcard("acme/model.v1-*")

        assert matcher.match("acme/model.v1-large")
        assert not matcher.match("acme/modelXv1-large")

    def test_match_is_anchored_and_case_insensitive(self):
        matcher = compile_wildcard("tiiuae/falcon-*")

        assert matcher.match("TIIUAE/Falcon-7B")
        assert not matcher.match("org/tiiuae/falcon-7b")


class TestPatternTable:
    """Test exact-then-ordered-pattern lookup."""

    def setup_method(self):
        self.table = PatternTable([
            ("acme/exact", "exact-entry"),
            ("acme/*", "broad-entry"),
            ("acme/special-*", "specific-entry"),
            ("other/*", "other-entry"),
        ])

    def test_exact_key_wins_over_patterns(self):
        found = self.table.match("acme/exact")

        assert found.entry == "exact-entry"
        assert found.match_type is MatchType.EXACT
        assert found.matched_key == "acme/exact"

    def test_first_declared_pattern_wins(self):
        # The later, more specific pattern never takes precedence
        found = self.table.match("acme/special-model")

        assert found.entry == "broad-entry"
        assert found.match_type is MatchType.PATTERN
        assert found.matched_key == "acme/*"

    def test_miss_returns_none(self):
        assert self.table.match("unknown/model") is None
        assert self.table.lookup("unknown/model") is None
        assert self.table.lookup(None) is None
        assert self.table.lookup("") is None

    def test_keys_keep_declared_order(self):
        assert self.table.keys() == ["acme/exact", "acme/*", "acme/special-*", "other/*"]
        assert self.table.patterns() == ["acme/*", "acme/special-*", "other/*"]
        assert len(self.table) == 4
        assert "other/thing" in self.table


class TestRegistryStore:
    """Test lookups over the shipped registries."""

    def test_framework_lookup_is_exact(self, registry_store):
        assert registry_store.get_framework("vllm", "0.4.0") is not None
        assert registry_store.get_framework("vllm", "0.4.1") is None
        assert registry_store.get_framework("vllm", None) is None
        assert registry_store.get_framework("unknown", "1.0.0") is None

    def test_model_pattern_match(self, registry_store):
        found = registry_store.match_model("mistralai/Mistral-7B-Instruct-v3.9")

        assert found.match_type is MatchType.PATTERN
        assert found.matched_key == "mistralai/Mistral-*"
        assert found.entry.validation_level is ValidationLevel.EXPERIMENTAL

    def test_model_exact_match(self, registry_store):
        found = registry_store.match_model("mistralai/Mistral-7B-Instruct-v0.2")

        assert found.match_type is MatchType.EXACT
        assert found.entry.validation_level is ValidationLevel.TESTED

    def test_unknown_model_and_instance(self, registry_store):
        assert registry_store.get_model("nobody/nothing") is None
        assert registry_store.get_instance("ml.x99.huge") is None

    def test_list_frameworks_and_versions(self, registry_store):
        assert registry_store.list_frameworks() == ["vllm", "tensorrt-llm", "sglang"]
        assert registry_store.list_versions("tensorrt-llm") == ["0.8.0", "1.0.0"]

    def test_instances_for_accelerator(self, registry_store):
        neuron = [i.instance_type for i in registry_store.instances_for_accelerator(AcceleratorType.NEURON)]

        assert "ml.inf2.xlarge" in neuron
        assert "ml.trn1.2xlarge" in neuron
        assert "ml.g5.xlarge" not in neuron

    def test_registry_records_are_read_only(self, registry_store):
        entry = registry_store.get_framework("vllm", "0.4.0")

        with pytest.raises(TypeError):
            entry.env_vars["VLLM_MAX_NUM_SEQS"] = "1"
        with pytest.raises(AttributeError):
            entry.base_image = "other"
