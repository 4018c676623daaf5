"""
Exceptions that terminate a configuration run.
"""

from typing import List, Optional

from .base import MlccError


class UserAbort(MlccError):
    """
    The user declined to proceed past a blocking finding.

    Carries the findings that triggered the abort and the process exit code
    the caller should use. No output is generated once this is raised.
    """

    exit_code = 1

    def __init__(self, reason: str, findings: Optional[List] = None):
        self.reason = reason
        self.findings = list(findings or [])
        super().__init__(reason)


class CompatibilityError(UserAbort):
    """Instance type incompatibility that the user did not confirm."""

    def __init__(self, instance_type: str, reason: str, recommendations: Optional[List[str]] = None):
        self.instance_type = instance_type
        self.recommendations = list(recommendations or [])
        message = f"Instance type '{instance_type}' is not compatible: {reason}"
        if self.recommendations:
            message += f" (recommended: {', '.join(self.recommendations)})"
        super().__init__(message)
