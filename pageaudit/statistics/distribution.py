"""Log-normal distribution fitted from two scoring control points."""

import math

from pydantic import BaseModel, ConfigDict, Field


class LogNormalDistribution(BaseModel):
    """Log-normal distribution described by its location and shape.

    The distribution is fitted so that the median control point sits at the
    50th percentile and the point of diminishing returns sits at the smaller
    positive inflection point of the probability density. Measurements below
    the point of diminishing returns therefore gain very little extra score.
    """

    model_config = ConfigDict(frozen=True)

    location: float = Field(..., description="Mean of log(x)")
    shape: float = Field(..., description="Standard deviation of log(x)", gt=0.0)

    @classmethod
    def from_control_points(
        cls, median: float, diminishing_returns: float
    ) -> "LogNormalDistribution":
        """Fit the distribution from its median and diminishing-returns value.

        Args:
            median: Value that scores 0.5.
            diminishing_returns: Value past which improvements barely move
                the score. Must be positive and smaller than the median.

        Returns:
            Fitted distribution.

        Raises:
            ValueError: If the control points cannot describe a distribution.
        """
        if not (math.isfinite(median) and math.isfinite(diminishing_returns)):
            raise ValueError("Control points must be finite numbers")
        if median <= 0 or diminishing_returns <= 0:
            raise ValueError(
                f"Control points must be positive, got median={median}, "
                f"diminishing_returns={diminishing_returns}"
            )
        if diminishing_returns >= median:
            raise ValueError(
                f"diminishing_returns ({diminishing_returns}) must be smaller "
                f"than median ({median})"
            )

        location = math.log(median)
        log_ratio = math.log(diminishing_returns / median)
        shape = (
            math.sqrt(1 - 3 * log_ratio - math.sqrt((log_ratio - 3) ** 2 - 8)) / 2
        )
        return cls(location=location, shape=shape)

    def compute_complementary_percentile(self, x: float) -> float:
        """Return the probability mass above ``x``.

        Zero and negative measurements map to 1.0 and infinity maps to 0.0;
        the result is always within [0, 1].

        Raises:
            ValueError: If ``x`` is NaN.
        """
        if math.isnan(x):
            raise ValueError("Cannot compute percentile of NaN")
        if x <= 0:
            return 1.0
        if math.isinf(x):
            return 0.0

        standardized_x = (math.log(x) - self.location) / (math.sqrt(2) * self.shape)
        percentile = math.erfc(standardized_x) / 2
        return min(1.0, max(0.0, percentile))


def get_log_normal_distribution(
    median: float, diminishing_returns: float
) -> LogNormalDistribution:
    """Build a log-normal distribution from its two control points."""
    return LogNormalDistribution.from_control_points(median, diminishing_returns)
