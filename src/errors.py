# errors.py
"""
Error kinds raised by the scoring pipeline.

Every error propagates to the caller of the evaluation; nothing here is retried.
"""

from typing import Optional


class ScoreboardError(Exception):
    """Base class for all LegalScore failures"""


class OracleFailure(ScoreboardError):
    """Upstream completion call failed, timed out, or returned something that is not JSON"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedJudgment(ScoreboardError):
    """A per-criterion judgment is missing its score or the score is not numeric"""

    def __init__(self, criterion: str, message: str):
        super().__init__(f"{criterion}: {message}")
        self.criterion = criterion


class ConfigurationError(ScoreboardError):
    """Invalid weighting scheme, empty or zero-weight metric set, bad baseline"""

