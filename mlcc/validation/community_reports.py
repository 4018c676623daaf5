"""
Community-reports strategy.
"""

from typing import Any, List, Mapping, Optional, Pattern, Tuple
import re

from mlcc.core.enums import Severity
from .base import FrameworkContext, StrategyResult, ValidationStrategy

ALL_BUCKET = 'all'


def _matches(report: Mapping[str, Any], pattern: Optional[Pattern], key: str) -> bool:
    if report.get('variable') == key:
        return True
    return pattern is not None and pattern.search(key) is not None


def report_applies(report: Mapping[str, Any], key: str) -> bool:
    """A report applies when its ``variable`` equals the key or its ``pattern`` is found in it."""
    pattern = report.get('pattern')
    return _matches(report, re.compile(pattern) if pattern else None, key)


class CommunityReportsStrategy(ValidationStrategy):
    """
    Surfaces issues the community has reported about specific variables.

    Reports are looked up for the exact framework version, else the ``all``
    bucket. Each applicable report becomes a warning, or an error when the
    report's severity is ``error``. A report whose pattern does not compile
    becomes an error finding of its own.
    """

    name = 'community-reports'
    option = 'use_community_reports'

    def __init__(self, community_reports: Optional[Mapping[str, Any]] = None):
        super().__init__()
        self.community_reports = community_reports or {}

    def reports_for(self, context: FrameworkContext) -> List[Mapping[str, Any]]:
        if context.community_reports is not None:
            return list(context.community_reports)

        buckets = self.community_reports.get(context.framework) or {}
        if context.version is not None and buckets.get(str(context.version)):
            return list(buckets[str(context.version)])
        return list(buckets.get(ALL_BUCKET) or [])

    def has_data(self, context: FrameworkContext) -> bool:
        return bool(self.reports_for(context))

    def _compiled_reports(self, context: FrameworkContext,
                          result: StrategyResult) -> List[Tuple[Mapping[str, Any], Optional[Pattern]]]:
        compiled = []
        for report in self.reports_for(context):
            pattern = report.get('pattern')
            try:
                compiled.append((report, re.compile(pattern) if pattern else None))
            except re.error as e:
                result.error('communityReports', f"Invalid community report pattern '{pattern}': {e}")
        return compiled

    def validate(self, context: FrameworkContext, env_vars: Mapping[str, str]) -> StrategyResult:
        result = StrategyResult(self.name)
        reports = self._compiled_reports(context, result)

        for key in env_vars:
            for report, pattern in reports:
                if not _matches(report, pattern, key):
                    continue
                description = report.get('description') or report.get('message')
                reporter = report.get('reporter') or 'community'
                message = f"Community report: {description} (reported by {reporter})"
                if report.get('severity') == Severity.ERROR.value:
                    result.error(key, message)
                else:
                    result.warn(key, message)

        return result
