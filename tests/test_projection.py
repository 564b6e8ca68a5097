from __future__ import annotations

import math
import unittest

import numpy as np

from pacing_lib.errors import ValidationError
from pacing_lib.models import STAGES, FunnelTargets, YtdActuals
from pacing_lib.projection import catch_up_plan, project_at_current_pace, ytd_performance
from pacing_lib.ratios import ceil_units, safe_ratio

from tests.test_funnel import make_assumptions

MID_YEAR = YtdActuals(
    calls=1250,
    engagements=420,
    appointments_set=50,
    appointments_held=45,
    contracts_written=18,
    closings=15,
    net_earned=45000,
)


class RatioHelperTests(unittest.TestCase):
    def test_safe_ratio_zero_denominator(self) -> None:
        self.assertEqual(safe_ratio(5, 0), 0.0)
        self.assertEqual(safe_ratio(5, 0, fallback=-1.0), -1.0)
        self.assertEqual(safe_ratio(5, 2), 2.5)

    def test_ceil_units_ignores_float_noise(self) -> None:
        self.assertEqual(ceil_units(278 / 0.1), 2780)
        self.assertEqual(ceil_units(11 / 4), 3)
        self.assertEqual(ceil_units(3.0000001), 4)


class PaceProjectionTests(unittest.TestCase):
    def test_linear_extrapolation(self) -> None:
        a = make_assumptions(set_to_held=0.9)
        pace = project_at_current_pace(MID_YEAR, 125, 251, a)
        self.assertIsNotNone(pace)
        scale = 251 / 125
        for stage in STAGES:
            self.assertAlmostEqual(pace.targets[stage], MID_YEAR[stage] * scale)
        self.assertAlmostEqual(pace.closings_income, 15 * scale * 3000)
        expected_income = 1250 * scale * 0.25 * 0.10 * 0.9 * 0.20 * 0.80 * 3000
        self.assertAlmostEqual(pace.income, expected_income)

    def test_no_pace_without_elapsed_workdays(self) -> None:
        self.assertIsNone(project_at_current_pace(MID_YEAR, 0, 251, make_assumptions()))

    def test_full_year_projection_equals_actuals(self) -> None:
        pace = project_at_current_pace(MID_YEAR, 251, 251, make_assumptions())
        self.assertEqual(pace.targets.closings, 15)

    def test_negative_actuals_rejected(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            project_at_current_pace(YtdActuals(calls=-1), 10, 20, make_assumptions())
        self.assertEqual(ctx.exception.field, "ytd.calls")

    def test_negative_workday_counts_rejected(self) -> None:
        for elapsed, total, field in [(10, -251, "total"), (-5, 251, "elapsed")]:
            with self.assertRaises(ValidationError) as ctx:
                project_at_current_pace(MID_YEAR, elapsed, total, make_assumptions())
            self.assertEqual(ctx.exception.field, field)


class CatchUpPlanTests(unittest.TestCase):
    def setUp(self) -> None:
        self.assumptions = make_assumptions(set_to_held=0.9)

    def test_remaining_by_stage(self) -> None:
        plan = catch_up_plan(120000, MID_YEAR, 126, 25.2, 6, self.assumptions)
        self.assertEqual(plan.income_left_to_go, 75000)
        remaining = {s: plan.metrics[s].remaining for s in STAGES}
        self.assertEqual(
            remaining,
            {
                "calls": 9870,
                "engagements": 2360,
                "appointments_set": 228,
                "appointments_held": 205,
                "contracts_written": 32,
                "closings": 25,
            },
        )
        self.assertEqual(plan.remaining_closings_needed, 25)
        closings = plan.metrics["closings"]
        self.assertAlmostEqual(closings.per_day, 25 / 126)
        self.assertAlmostEqual(closings.per_week, 25 / 25.2)
        self.assertAlmostEqual(closings.per_month, 25 / 6)

    def test_stage_already_met_owes_nothing(self) -> None:
        ahead = YtdActuals(calls=20000, closings=55, net_earned=10000)
        plan = catch_up_plan(120000, ahead, 126, 25.2, 6, self.assumptions)
        for stage in ("calls", "closings"):
            m = plan.metrics[stage]
            self.assertEqual((m.remaining, m.per_day, m.per_week, m.per_month), (0, 0.0, 0.0, 0.0))
        # still behind on income
        self.assertEqual(plan.income_left_to_go, 110000)

    def test_zero_time_left_never_divides(self) -> None:
        plan = catch_up_plan(120000, MID_YEAR, 0, 0, 0, self.assumptions)
        for stage in STAGES:
            m = plan.metrics[stage]
            self.assertGreater(m.remaining, 0)
            for v in (m.per_day, m.per_week, m.per_month):
                self.assertEqual(v, 0.0)
                self.assertTrue(math.isfinite(v))

    def test_each_denominator_guarded_independently(self) -> None:
        plan = catch_up_plan(120000, MID_YEAR, 0, 25.2, 6, self.assumptions)
        self.assertEqual(plan.metrics["calls"].per_day, 0.0)
        self.assertGreater(plan.metrics["calls"].per_week, 0.0)
        self.assertGreater(plan.metrics["calls"].per_month, 0.0)

    def test_income_left_never_negative(self) -> None:
        rich = YtdActuals(net_earned=200000)
        plan = catch_up_plan(120000, rich, 50, 10, 3, self.assumptions)
        self.assertEqual(plan.income_left_to_go, 0.0)

    def test_frame_has_one_row_per_stage(self) -> None:
        frame = catch_up_plan(120000, MID_YEAR, 126, 25.2, 6, self.assumptions).to_frame()
        self.assertEqual(list(frame["stage"]), list(STAGES))
        self.assertEqual(list(frame.columns), ["stage", "remaining", "per_day", "per_week", "per_month"])

    def test_negative_time_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            catch_up_plan(120000, MID_YEAR, -1, 0, 0, self.assumptions)


class YtdPerformanceTests(unittest.TestCase):
    def test_performance_against_prorated_target(self) -> None:
        required = FunnelTargets(calls=10000, engagements=2500, closings=40)
        perf = ytd_performance(required, YtdActuals(calls=2500, closings=25), 0.5).set_index("stage")
        self.assertAlmostEqual(perf.loc["calls", "expected_to_date"], 5000.0)
        self.assertAlmostEqual(perf.loc["calls", "performance"], 50.0)
        self.assertAlmostEqual(perf.loc["closings", "performance"], 125.0)
        # nothing required yet
        self.assertEqual(perf.loc["appointments_set", "performance"], 0.0)

    def test_zero_progress(self) -> None:
        perf = ytd_performance(FunnelTargets(calls=100), YtdActuals(calls=5), 0.0)
        np.testing.assert_allclose(perf["performance"].to_numpy(dtype=float), np.zeros(len(STAGES)))


if __name__ == "__main__":
    unittest.main()
