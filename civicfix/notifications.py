"""
Notification dispatcher.

Tells the matched official about a new issue (in-app row, SMS, email) and
confirms receipt to the citizen. Delivery is best effort: every attempt is
logged and reported back, and no channel failure is raised to the caller.
"""

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests

from .config import Settings
from .db_connection import fetch_official, insert_notification
from .errors import UpstreamUnavailable
from .logging_config import get_logger
from .match_record import OfficialCandidate

logger = get_logger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"
SENDGRID_SEND_URL = "https://api.sendgrid.com/v3/mail/send"


@dataclass(frozen=True)
class IssueNotice:
    issue_id: str
    title: str
    issue_type: str
    city: Optional[str] = None
    state: Optional[str] = None
    ward: Optional[str] = None
    area: Optional[str] = None
    pincode: Optional[str] = None

    @property
    def type_label(self) -> str:
        #only the first underscore, e.g. "street_light_out" -> "street light_out"
        return self.issue_type.replace("_", " ", 1)

    @property
    def short_location(self) -> str:
        return self.area or self.city or ""

    @property
    def full_location(self) -> str:
        parts = [self.area, self.city, self.state]
        return ", ".join(p for p in parts if p)


def _sent(kind: str, recipient: str) -> Dict[str, Any]:
    return {"type": kind, "status": "sent", "recipient": recipient}


def _failed(kind: str, error: str) -> Dict[str, Any]:
    return {"type": kind, "status": "failed", "error": error}


class NotificationDispatcher:
    """Sends issue notifications using credentials from an injected Settings."""

    def __init__(self, settings: Settings, db_path: Path,
                 session: Optional[requests.Session] = None):
        self.settings = settings
        self.db_path = db_path
        self.session = session or requests.Session()

    # -----------------------------
    #  channels
    # -----------------------------

    def send_sms(self, to: str, body: str, kind: str = "sms") -> Dict[str, Any]:
        s = self.settings
        url = TWILIO_MESSAGES_URL.format(sid=s.twilio_account_sid)
        try:
            resp = self.session.post(
                url,
                auth=(s.twilio_account_sid, s.twilio_auth_token),
                data={"To": to, "From": s.twilio_phone_number, "Body": body},
                timeout=s.request_timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"SMS sending failed ({kind}): {e}")
            return _failed(kind, str(e))

        return _sent(kind, to)

    def send_email(self, to: str, subject: str, html: str) -> Dict[str, Any]:
        s = self.settings
        payload = {
            "personalizations": [{"to": [{"email": to}], "subject": subject}],
            "from": {"email": s.email_from_address, "name": s.email_from_name},
            "content": [{"type": "text/html", "value": html}],
        }
        try:
            resp = self.session.post(
                SENDGRID_SEND_URL,
                headers={"Authorization": f"Bearer {s.sendgrid_api_key}"},
                json=payload,
                timeout=s.request_timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Email sending failed: {e}")
            return _failed("email", str(e))

        return _sent("email", to)

    def record_in_app(self, user_id: str, title: str, message: str,
                      issue_id: str) -> Dict[str, Any]:
        try:
            insert_notification(
                self.db_path,
                user_id=user_id,
                title=title,
                message=message,
                notification_type="issue_assigned",
                issue_id=issue_id,
            )
        except sqlite3.Error as e:
            logger.error(f"In-app notification failed for {user_id}: {e}")
            return _failed("in_app", str(e))

        return _sent("in_app", user_id)

    # -----------------------------
    #  message bodies
    # -----------------------------

    def _email_html(self, heading: str, issue: IssueNotice) -> str:
        rows = [
            f"<p><strong>Title:</strong> {issue.title}</p>",
            f"<p><strong>Type:</strong> {issue.type_label.upper()}</p>",
            f"<p><strong>Location:</strong> {issue.full_location}</p>",
        ]
        if issue.ward:
            rows.append(f"<p><strong>Ward:</strong> {issue.ward}</p>")
        if issue.pincode:
            rows.append(f"<p><strong>Pincode:</strong> {issue.pincode}</p>")

        return (
            f"<h2>{heading}</h2>"
            f"<div>{''.join(rows)}</div>"
            "<p>Please log in to your CivicFix dashboard to review and take action on this issue.</p>"
            f"<p><a href=\"{self.settings.site_url}/dashboard\">View Dashboard</a></p>"
            "<p>This is an automated notification from CivicFix. Please do not reply to this email.</p>"
        )

    # -----------------------------
    #  entry points
    # -----------------------------

    def dispatch(self, issue: IssueNotice,
                 official_id: Optional[str] = None,
                 citizen_phone: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Notify the assigned official and confirm receipt to the citizen.

        Returns one report entry per attempted delivery. Channels without
        credentials or without a recipient are skipped silently.
        """
        notifications: List[Dict[str, Any]] = []

        official = None
        if official_id:
            try:
                official = fetch_official(self.db_path, official_id)
            except UpstreamUnavailable as e:
                logger.error(f"Could not load official {official_id}: {e.message}")
                notifications.append(_failed("official_lookup", e.message))
                official_id = None

        if official_id and official is None:
            logger.warning(f"Assigned official {official_id} not found, skipping official notifications")

        if official is not None:
            notifications.append(self.record_in_app(
                official.official_id,
                "New Issue Assigned",
                f"A new {issue.type_label} issue has been assigned to you: {issue.title}",
                issue.issue_id,
            ))

            if self.settings.sms_enabled and official.phone:
                body = (
                    f"CivicFix: New issue assigned - {issue.title} in {issue.short_location}. "
                    f"Check your dashboard: {self.settings.site_url}/dashboard"
                )
                notifications.append(self.send_sms(official.phone, body))

            if self.settings.email_enabled and official.email:
                notifications.append(self.send_email(
                    official.email,
                    f"New Issue Assigned: {issue.title}",
                    self._email_html("New Civic Issue Assigned", issue),
                ))

        if citizen_phone and self.settings.sms_enabled:
            body = (
                f"CivicFix: Your issue \"{issue.title}\" has been submitted and assigned to a local official. "
                f"Track progress at {self.settings.site_url}/track"
            )
            notifications.append(self.send_sms(citizen_phone, body, kind="citizen_sms"))

        logger.info(f"Sent {len(notifications)} notifications for issue {issue.issue_id}")
        return notifications

    def notify_area_officials(self, issue: IssueNotice,
                              officials: Sequence[OfficialCandidate]) -> Dict[str, int]:
        """Alert every official covering the issue's city and state."""
        emails_sent = 0

        for official in officials:
            self.record_in_app(
                official.official_id,
                "New Issue Reported",
                f"A new {issue.type_label} issue has been reported in your area: {issue.title}",
                issue.issue_id,
            )

            if self.settings.email_enabled and official.email:
                report = self.send_email(
                    official.email,
                    f"New Civic Issue Reported: {issue.title}",
                    self._email_html("New Civic Issue Reported in Your Area", issue),
                )
                if report["status"] == "sent":
                    emails_sent += 1

        logger.info(f"Notified {len(officials)} officials about issue {issue.issue_id}")
        return {"notified": len(officials), "emails_sent": emails_sent}
