"""Flood check pipeline: one daily fetch, estimate, aggregate, notify, record cycle."""

import logging
import uuid

from floodcheck.config.loader import config_hash
from floodcheck.config.schema import FloodCheckConfig
from floodcheck.ingest.forecast_fetcher import ForecastFetcher
from floodcheck.ingest.openweather_client import OpenWeatherClient
from floodcheck.models.common import Clock, to_pct, utc_now, utc_now_iso
from floodcheck.models.reporting import RunRecord
from floodcheck.notify.fcm_client import FcmClient
from floodcheck.notify.notifier import Notifier
from floodcheck.reporting.formatters import format_run_record_text
from floodcheck.risk.aggregator import DailyAggregator
from floodcheck.risk.estimator import RiskEstimator
from floodcheck.risk.prediction_client import PredictionClient
from floodcheck.storage import audit_repo
from floodcheck.storage.database import open_database

logger = logging.getLogger(__name__)


class FloodCheckPipeline:
    """Runs the daily check. Collaborators default to the live services."""

    def __init__(
        self,
        config: FloodCheckConfig,
        db_path: str = "data/floodcheck.db",
        fetcher: ForecastFetcher | None = None,
        prediction_client: PredictionClient | None = None,
        fcm_client: FcmClient | None = None,
        clock: Clock = utc_now,
    ):
        self.config = config
        self.db_path = db_path
        self.fetcher = fetcher or ForecastFetcher(
            OpenWeatherClient(
                api_key=config.weather.resolved_api_key(),
                base_url=config.weather.base_url,
                timeout=config.weather.timeout,
            )
        )
        self.prediction_client = prediction_client or PredictionClient(
            url=config.prediction.url, timeout=config.prediction.timeout
        )
        self.fcm_client = fcm_client or FcmClient(
            project_id=config.push.resolved_project_id(),
            credentials_file=config.push.credentials_file,
            base_url=config.push.base_url,
            timeout=config.push.timeout,
        )
        self.clock = clock

    def run(self) -> None:
        """Execute one flood check.

        Every failure is logged and contained here; the caller only ever
        sees a normal return.
        """
        run_id = str(uuid.uuid4())
        logger.info("--- Daily flood check started (run %s) ---", run_id[:8])
        conn = None
        try:
            location = self.config.location
            tz = location.tz
            threshold = self.config.risk.threshold

            # 1. FETCH
            logger.info("Fetching weather forecast for %s...", location.name)
            periods = self.fetcher.fetch(location)

            # 2. ESTIMATE + AGGREGATE
            estimator = RiskEstimator(self.prediction_client, location)
            aggregator = DailyAggregator(threshold, tz)
            aggregation = aggregator.aggregate(estimator.estimate_all(periods))
            logger.info(
                "Assessed %d periods over %d days (%d prediction failures), max risk %d%%",
                aggregation.periods_assessed,
                len(aggregation.daily),
                aggregation.prediction_failures,
                to_pct(aggregation.max_risk),
            )

            today_key = self.clock().astimezone(tz).date().isoformat()
            today_risk = aggregation.risk_for(today_key)

            # 3. NOTIFY
            conn = open_database(self.db_path)
            notifier = Notifier(
                conn, self.fcm_client, threshold, tz, self.config.push.click_action
            )
            kind = notifier.notify(aggregation, today_risk)

            # 4. RECORD
            record = RunRecord(
                run_id=run_id,
                max_risk=aggregation.max_risk,
                today_risk=today_risk,
                high_risk_periods=[p.to_dict() for p in aggregation.high_risk_periods],
                daily_risks={k: s.to_dict() for k, s in aggregation.daily.items()},
                notification_type=kind.value,
                config_hash=config_hash(self.config),
            )
            row_id = audit_repo.append_run_record(conn, record)
            logger.info("Recorded run %s as audit row %d", run_id[:8], row_id)
            logger.info("\n%s", format_run_record_text(record))

        except Exception as e:
            logger.exception(
                "!!! Daily flood check failed: %s | at=%s", e, utc_now_iso()
            )

        finally:
            if conn is not None:
                conn.close()

        logger.info("--- Daily flood check completed ---")
        return None
