"""Tests for the risk estimator with a mocked prediction client."""

from unittest.mock import MagicMock

from floodcheck.config.schema import LocationConfig
from floodcheck.errors import PredictionFailure
from floodcheck.risk.estimator import RiskEstimator
from floodcheck.risk.prediction_client import PredictionClient


def _estimator(*values) -> RiskEstimator:
    client = MagicMock(spec=PredictionClient)
    client.predict.side_effect = list(values)
    return RiskEstimator(client, LocationConfig())


class TestBuildFeatures:
    def test_request_body(self, make_period):
        estimator = _estimator()
        period = make_period("2026-10-19T09:00:00", precipitation=18.7)

        assert estimator.build_features(period) == {
            "Year": 2026,
            "Month": 10,
            "Max_Temp": 25.0,
            "Min_Temp": 22.0,
            "Rainfall": 18.7,
            "Relative_Humidity": 80.0,
            "Wind_Speed": 6.0,
            "Cloud_Coverage": 90.0,
            "Bright_Sunshine": 25.5,
            "ALT": 250.0,
        }

    def test_year_and_month_are_local(self, make_period):
        # 23:00 UTC on New Year's Eve is already January in Cairo
        features = _estimator().build_features(make_period("2026-12-31T23:00:00"))
        assert features["Year"] == 2027
        assert features["Month"] == 1

    def test_custom_elevation(self, make_period):
        client = MagicMock(spec=PredictionClient)
        estimator = RiskEstimator(client, LocationConfig(elevation_meters=5.0))
        assert estimator.build_features(make_period("2026-10-19T09:00:00"))["ALT"] == 5.0


class TestEstimate:
    def test_success(self, make_period):
        period = make_period("2026-10-19T12:00:00", precipitation=6.3, condition="Rain")
        assessment = _estimator(0.7).estimate(period)

        assert assessment.risk == 0.7
        assert assessment.timestamp == period.timestamp
        assert assessment.condition == "Rain"
        assert assessment.precipitation == 6.3
        assert assessment.failed is False

    def test_failure_yields_zero(self, make_period):
        assessment = _estimator(PredictionFailure("HTTP 500", 500)).estimate(
            make_period("2026-10-19T12:00:00")
        )
        assert assessment.risk == 0.0
        assert assessment.failed is True

    def test_out_of_range_clamped(self, make_period):
        assert _estimator(1.3).estimate(make_period("2026-10-19T12:00:00")).risk == 1.0
        assert _estimator(-0.2).estimate(make_period("2026-10-19T12:00:00")).risk == 0.0

    def test_estimate_all_continues_after_failure(self, make_period):
        periods = [
            make_period("2026-10-19T09:00:00"),
            make_period("2026-10-19T12:00:00"),
            make_period("2026-10-19T15:00:00"),
        ]
        estimator = _estimator(0.2, PredictionFailure("timeout"), 0.5)

        pairs = list(estimator.estimate_all(periods))

        assert [p for p, _ in pairs] == periods
        assert [a.risk for _, a in pairs] == [0.2, 0.0, 0.5]
        assert estimator.client.predict.call_count == 3

    def test_estimate_all_is_lazy(self, make_period):
        estimator = _estimator(0.1)
        pairs = estimator.estimate_all([make_period("2026-10-19T09:00:00")])
        assert estimator.client.predict.call_count == 0
        next(pairs)
        assert estimator.client.predict.call_count == 1

    def test_unexpected_client_error_yields_zero(self, make_period):
        estimator = _estimator(RuntimeError("socket closed"), 0.4)
        periods = [make_period("2026-10-19T09:00:00"), make_period("2026-10-19T12:00:00")]

        assessments = [a for _, a in estimator.estimate_all(periods)]

        assert [a.risk for a in assessments] == [0.0, 0.4]
        assert [a.failed for a in assessments] == [True, False]
