"""Notifier: picks the danger or safe template and sends it best-effort."""

import logging
import sqlite3
from zoneinfo import ZoneInfo

from floodcheck.errors import NotificationDeliveryFailure
from floodcheck.models.common import to_pct
from floodcheck.models.notification import NotificationType
from floodcheck.models.risk import AggregationResult
from floodcheck.notify.fcm_client import FcmClient
from floodcheck.notify.templates import build_danger_message, build_safe_message
from floodcheck.storage import token_repo

logger = logging.getLogger(__name__)


class Notifier:
    def __init__(
        self,
        conn: sqlite3.Connection,
        client: FcmClient,
        threshold: float,
        tz: ZoneInfo,
        click_action: str = "FLUTTER_NOTIFICATION_CLICK",
    ):
        self.conn = conn
        self.client = client
        self.threshold = threshold
        self.tz = tz
        self.click_action = click_action

    def select_type(self, aggregation: AggregationResult) -> NotificationType:
        if aggregation.max_risk >= self.threshold:
            return NotificationType.DANGER
        return NotificationType.SAFE

    def notify(
        self, aggregation: AggregationResult, today_risk: float
    ) -> NotificationType:
        """Send the notification for this run. Never raises.

        Returns the template chosen, whether or not anything was sent.
        """
        kind = self.select_type(aggregation)
        if kind == NotificationType.DANGER:
            logger.info("High flood risk detected (%d%%)", to_pct(aggregation.max_risk))
        else:
            logger.info("No high flood risk detected")

        try:
            tokens = token_repo.get_device_tokens(self.conn)
            if not tokens:
                logger.warning("No valid device tokens found, skipping %s notification", kind)
                return kind

            if kind == NotificationType.DANGER:
                message = build_danger_message(
                    aggregation.high_risk_periods,
                    aggregation.max_risk,
                    self.tz,
                    tokens,
                    self.click_action,
                )
            else:
                message = build_safe_message(today_risk, tokens, self.click_action)

            logger.info("Sending %s notification to %d devices", kind, len(tokens))
            batch = self.client.send_each_for_multicast(message)
            logger.info(
                "Notification sent: %d succeeded, %d failed",
                batch.success_count, batch.failure_count,
            )
        except NotificationDeliveryFailure as e:
            logger.error("%s notification not delivered: %s", kind, e)
        except Exception:
            logger.exception("%s notification failed", kind)

        return kind
