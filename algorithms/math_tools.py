class MathTools:
    """Provides the small numeric helpers used by statistics and goals."""

    @staticmethod
    def clamp(value: float, min_value: float, max_value: float) -> float:
        """Clamp ``value`` to the inclusive range [min_value, max_value]."""
        if min_value > max_value:
            raise ValueError("min_value must not exceed max_value")
        return max(min_value, min(value, max_value))

    @staticmethod
    def ratio(value: float, total: float) -> float:
        """Return ``value / total`` or ``0.0`` when ``total`` is zero."""
        if total == 0:
            return 0.0
        return value / total

    @staticmethod
    def remaining(current: int, goal: int) -> int:
        """Return how much is left to reach ``goal``, never negative."""
        return max(goal - current, 0)
