import pytest

from mlcc.core.enums import Severity
from mlcc.validation import CommunityReportsStrategy, FrameworkContext, ValidationEngine, report_applies

pytestmark = pytest.mark.unit


class TestReportApplies:

    def test_variable_equality(self):
        assert report_applies({"variable": "A_FLAG"}, "A_FLAG")
        assert not report_applies({"variable": "A_FLAG"}, "A_FLAG_2")

    def test_pattern_uses_search(self):
        assert report_applies({"pattern": "_RAY"}, "VLLM_WORKER_USE_RAY")
        assert not report_applies({"pattern": "^RAY"}, "VLLM_WORKER_USE_RAY")


class TestCommunityReportsStrategy:
    """Test community report lookups and messages."""

    def setup_method(self):
        self.reports = {
            "tensorrt-llm": {
                "0.8.0": [
                    {"variable": "TRTLLM_ENABLE_CHUNKED_CONTEXT", "description": "Breaks the build",
                     "severity": "error", "reporter": "alice"},
                ],
                "all": [
                    {"pattern": "^UCX_", "message": "Keep UCX caching off", "severity": "warning"},
                ],
            }
        }
        self.strategy = CommunityReportsStrategy(self.reports)

    def test_exact_version_bucket(self):
        context = FrameworkContext("tensorrt-llm", "0.8.0")

        findings = self.strategy.validate(context, {"TRTLLM_ENABLE_CHUNKED_CONTEXT": "true"}).findings

        assert len(findings) == 1
        assert findings[0].severity is Severity.ERROR
        assert findings[0].message == "Community report: Breaks the build (reported by alice)"
        assert findings[0].source == "community-reports"

    def test_exact_bucket_replaces_all_bucket(self):
        context = FrameworkContext("tensorrt-llm", "0.8.0")

        assert self.strategy.validate(context, {"UCX_MEMTYPE_CACHE": "n"}).findings == []

    def test_all_bucket_fallback_and_default_reporter(self):
        context = FrameworkContext("tensorrt-llm", "1.0.0")

        findings = self.strategy.validate(context, {"UCX_MEMTYPE_CACHE": "n"}).findings

        assert findings[0].severity is Severity.WARNING
        assert findings[0].message == "Community report: Keep UCX caching off (reported by community)"

    def test_unreported_variables_produce_nothing(self):
        context = FrameworkContext("tensorrt-llm", "1.0.0")

        assert self.strategy.validate(context, {"TRTLLM_DTYPE": "int8"}).findings == []

    def test_no_reports_for_framework(self):
        assert not self.strategy.has_data(FrameworkContext("vllm", "0.4.0"))

    def test_shipped_reports(self, registry_store):
        strategy = CommunityReportsStrategy(registry_store.community_reports)
        context = FrameworkContext("vllm", "0.4.0")

        findings = strategy.validate(context, {"VLLM_WORKER_USE_RAY": "true"}).findings

        assert len(findings) == 1
        assert findings[0].severity is Severity.WARNING


class TestInlineReports:
    """Test reports passed with the framework configuration."""

    def test_invalid_pattern_becomes_error_finding(self):
        context = FrameworkContext("vllm", "0.4.0", community_reports=[
            {"pattern": "VLLM_[", "description": "broken"},
            {"variable": "VLLM_X", "description": "Known issue"},
        ])

        findings = CommunityReportsStrategy().validate(context, {"VLLM_X": "1"}).findings

        assert [(f.key, f.severity) for f in findings] == [
            ("communityReports", Severity.ERROR), ("VLLM_X", Severity.WARNING)
        ]
        assert "VLLM_[" in findings[0].message

    def test_engine_returns_result_for_invalid_pattern(self, registry_store):
        engine = ValidationEngine.from_store(registry_store)
        config = {"framework": "tgi", "version": "2.0.0",
                  "communityReports": [{"pattern": "VLLM_[", "description": "broken"}]}

        result = engine.validate_environment_variables({"VLLM_X": "1"}, config)

        assert not result.is_valid
        assert result.strategies_used == ["community-reports"]
