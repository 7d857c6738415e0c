"""What-if projections from explicit assumptions or trend continuation."""

from typing import Dict, Mapping, Optional, Sequence

from .base_models import MetricAnalysis, Trend, WhatIfScenario
from . import math_utils

# Next-period multipliers when no explicit assumption is given
TREND_MULTIPLIERS = {
    Trend.INCREASING.value: 1.05,
    Trend.DECREASING.value: 0.95,
    Trend.STABLE.value: 1.0,
}
MIN_CONFIDENCE = 0.1


class WhatIfProjector:
    """
    Projects each metric's next value.

    A metric with an explicit percent assumption moves by that percent from
    its end value; other metrics continue their trend. Confidence falls as the
    average historical volatility rises, floored at 0.1.
    """

    def project(
        self,
        scenario_name: str,
        assumptions: Optional[Mapping[str, float]],
        analyses: Sequence[MetricAnalysis]
    ) -> WhatIfScenario:
        """
        Build a scenario.

        Args:
            scenario_name: Label for the scenario
            assumptions: Metric id -> percent change (e.g. 10 for +10%)
            analyses: Current analyses supplying end values, trends and volatility

        Returns:
            WhatIfScenario with one projected value per analysis
        """
        assumptions = dict(assumptions or {})
        projected_values: Dict[str, float] = {}

        for analysis in analyses:
            current_value = analysis.end_value
            if analysis.metric_id in assumptions:
                projected_values[analysis.metric_id] = (
                    current_value * (1 + assumptions[analysis.metric_id] / 100)
                )
            else:
                projected_values[analysis.metric_id] = (
                    current_value * TREND_MULTIPLIERS[analysis.trend]
                )

        avg_volatility = math_utils.average(a.volatility for a in analyses)
        confidence = max(MIN_CONFIDENCE, 1 - avg_volatility / 100)

        return WhatIfScenario(
            scenario_name=scenario_name,
            assumptions=assumptions,
            projected_values=projected_values,
            confidence=math_utils.round_to_decimals(confidence, 2)
        )
