"""
Errors raised by the analytics engine.

Every failure is one of these; callers catch ``AnalyticsError`` and render
without the affected overlay.
"""


class AnalyticsError(ValueError):
    """Base class for all analytics failures"""


class InsufficientData(AnalyticsError):
    """Fewer valid points than the operation needs"""

    def __init__(self, required: int, available: int, what: str = "points"):
        self.required = required
        self.available = available
        super().__init__(f"need at least {required} valid {what}, got {available}")


class DegenerateInput(AnalyticsError):
    """Input that cannot produce a finite result (zero variance, non-positive range)"""


class DegenerateFit(DegenerateInput):
    """Regression independent variable has zero variance"""


class EmptySeries(AnalyticsError):
    """Operation requested on an empty series"""


class NonPositiveData(InsufficientData, DegenerateInput):
    """Every point was excluded for a non-positive coordinate"""

    def __init__(self, required: int, available: int = 0):
        super().__init__(required, available, "positive points")
