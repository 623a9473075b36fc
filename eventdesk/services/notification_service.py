"""
Notification service: renders templated e-mails, sends them and keeps the
EmailLog trail. Centralizes every outbound message of the service.
"""

import asyncio
import logging
from datetime import datetime, UTC
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from fastapi import Depends

from eventdesk.db import models
from eventdesk.db.database import get_db
from eventdesk.db.models.base import as_utc
from eventdesk.services.email_service import EmailService, get_email_service
from eventdesk.utils.runtime import invitation_ttl_days
from eventdesk.utils.urls import (
    build_abstract_management_link,
    build_accept_invitation_link,
    build_public_event_link,
)

logger = logging.getLogger(__name__)

# Event type constants recorded on EmailLog rows
EVENT_USER_INVITATION = 'user_invitation'
EVENT_REVIEWER_INVITATION = 'reviewer_invitation'
EVENT_REGISTRATION_CONFIRMATION = 'registration_confirmation'
EVENT_REMINDER = 'event_reminder'
EVENT_CUSTOM = 'custom'
EVENT_SPEAKER_INVITATION = 'speaker_invitation'
EVENT_ABSTRACT_SUBMITTED = 'abstract_submitted'
EVENT_ABSTRACT_STATUS = 'abstract_status'

# Template name constants (match template file names)
TEMPLATE_USER_INVITATION = 'user_invitation'
TEMPLATE_REGISTRATION_CONFIRMATION = 'registration_confirmation'
TEMPLATE_EVENT_REMINDER = 'event_reminder'
TEMPLATE_CUSTOM = 'custom_notification'
TEMPLATE_SPEAKER_INVITATION = 'speaker_invitation'
TEMPLATE_ABSTRACT_SUBMITTED = 'abstract_submitted'
TEMPLATE_ABSTRACT_STATUS = 'abstract_status'

# Heading per review status for the abstract status e-mail
ABSTRACT_STATUS_HEADINGS = {
    'UNDER_REVIEW': 'Abstract Under Review',
    'ACCEPTED': 'Abstract Accepted!',
    'REJECTED': 'Abstract Decision',
    'REVISION_REQUESTED': 'Revision Requested',
}


def format_event_date(value: Optional[datetime]) -> str:
    """Render an event start such as ``Monday, March 2, 2026 at 09:00 UTC``."""
    if value is None:
        return "TBA"
    v = as_utc(value)
    return f"{v.strftime('%A, %B')} {v.day}, {v.year} at {v.strftime('%H:%M')} UTC"


def format_venue(event: models.Event) -> str:
    return ", ".join(part for part in (event.venue, event.city) if part) or "TBA"


def days_until(event: models.Event, now: Optional[datetime] = None) -> int:
    delta = as_utc(event.start_date) - (now or datetime.now(UTC))
    return max(delta.days + (1 if delta.seconds else 0), 1)


class NotificationService:
    """Service class for every outbound e-mail."""

    def __init__(self, db: Session, email_service: Optional[EmailService] = None):
        self.db = db
        self.email_service = email_service if email_service is not None else get_email_service()

    # === Email log bookkeeping ===

    def _create_log(
        self,
        *,
        recipient: str,
        event_type: str,
        subject: str,
        organization_id=None,
        event_id=None,
    ) -> models.EmailLog:
        email_log = models.EmailLog(
            recipient=recipient,
            event_type=event_type,
            subject=subject[:200],
            status='pending',
            organization_id=organization_id,
            event_id=event_id,
        )
        self.db.add(email_log)
        self.db.commit()
        self.db.refresh(email_log)
        return email_log

    def _update_log(
        self,
        email_log: models.EmailLog,
        status: str,
        provider_message_id: Optional[str] = None,
        error_message: Optional[str] = None,
    ) -> None:
        email_log.status = status
        email_log.provider_message_id = provider_message_id
        email_log.error_message = error_message
        if status == 'sent':
            email_log.sent_at = datetime.now(UTC)
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("email_log_update_failed id=%s", email_log.id)

    # === Sending ===

    async def send_email_notification(
        self,
        email_log: models.EmailLog,
        template_name: str,
        template_context: Dict[str, Any],
    ) -> Dict[str, Any]:
        """Render ``template_name`` and send it to the log's recipient.

        Returns a dict with 'success', 'email_log_id' and either 'message_id'
        or 'error'; the EmailLog row reflects the outcome.
        """
        html_content, text_content = self.email_service.render_template(template_name, template_context)
        result = await self.email_service.send_email(
            to_email=email_log.recipient,
            subject=email_log.subject,
            html_content=html_content,
            text_content=text_content,
        )
        if result.get('success'):
            self._update_log(email_log, 'sent', provider_message_id=result.get('message_id'))
            return {'success': True, 'email_log_id': email_log.id, 'message_id': result.get('message_id')}
        error = result.get('error') or 'Unknown error'
        self._update_log(email_log, 'failed', error_message=error)
        return {'success': False, 'email_log_id': email_log.id, 'error': error}

    def send(
        self,
        *,
        recipient: str,
        subject: str,
        template_name: str,
        context: Dict[str, Any],
        event_type: str,
        organization_id=None,
        event_id=None,
    ) -> Dict[str, Any]:
        email_log = self._create_log(
            recipient=recipient,
            event_type=event_type,
            subject=subject,
            organization_id=organization_id,
            event_id=event_id,
        )
        template_context = {'subject': subject, 'current_year': datetime.now(UTC).year, **context}
        return asyncio.run(self.send_email_notification(email_log, template_name, template_context))

    # === High-Level Notification Methods ===

    def notify_user_invitation(
        self,
        *,
        user: models.User,
        token: str,
        organization_name: str,
        inviter_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        days = invitation_ttl_days()
        return self.send(
            recipient=user.email,
            subject=f"You've been invited to join {organization_name}",
            template_name=TEMPLATE_USER_INVITATION,
            context={
                'recipient_name': user.first_name,
                'organization_name': organization_name,
                'inviter_name': (inviter_name or '').strip() or 'A team member',
                'role': user.role.replace('_', ' ').title(),
                'setup_link': build_accept_invitation_link(token=token, email=user.email),
                'expires_in': f"{days} day{'s' if days != 1 else ''}",
            },
            event_type=EVENT_USER_INVITATION,
            organization_id=user.organization_id,
        )

    def notify_reviewer_invitation(
        self,
        *,
        user: models.User,
        token: str,
        event: models.Event,
        inviter_name: Optional[str] = None,
    ) -> Dict[str, Any]:
        organization_name = event.organization.name if event.organization else 'EventDesk'
        days = invitation_ttl_days()
        return self.send(
            recipient=user.email,
            subject=f"You've been invited to review {event.name}",
            template_name=TEMPLATE_USER_INVITATION,
            context={
                'recipient_name': user.first_name,
                'organization_name': organization_name,
                'inviter_name': (inviter_name or '').strip() or organization_name,
                'role': 'Reviewer',
                'event_name': event.name,
                'setup_link': build_accept_invitation_link(token=token, email=user.email),
                'expires_in': f"{days} day{'s' if days != 1 else ''}",
            },
            event_type=EVENT_REVIEWER_INVITATION,
            organization_id=event.organization_id,
            event_id=event.id,
        )

    def send_registration_confirmation(self, registration: models.Registration) -> Dict[str, Any]:
        event = registration.event
        attendee = registration.attendee
        return self.send(
            recipient=attendee.email,
            subject=f"Registration Confirmed - {event.name}",
            template_name=TEMPLATE_REGISTRATION_CONFIRMATION,
            context={
                'attendee_name': attendee.first_name,
                'event_name': event.name,
                'event_date': format_event_date(event.start_date),
                'event_venue': format_venue(event),
                'ticket_type': registration.ticket_type.name if registration.ticket_type else '',
                'registration_id': str(registration.id),
                'qr_code': registration.qr_code,
                'event_link': build_public_event_link(event.slug),
            },
            event_type=EVENT_REGISTRATION_CONFIRMATION,
            organization_id=event.organization_id,
            event_id=event.id,
        )

    def send_event_reminder(
        self, registration: models.Registration, days_until_event: Optional[int] = None
    ) -> Dict[str, Any]:
        event = registration.event
        days = days_until_event if days_until_event is not None else days_until(event)
        when = "tomorrow" if days == 1 else f"in {days} days"
        return self.send(
            recipient=registration.attendee.email,
            subject=f"Reminder: {event.name} is {when}!",
            template_name=TEMPLATE_EVENT_REMINDER,
            context={
                'recipient_name': registration.attendee.first_name,
                'event_name': event.name,
                'event_date': format_event_date(event.start_date),
                'event_venue': format_venue(event),
                'event_address': event.address,
                'days_until_event': days,
            },
            event_type=EVENT_REMINDER,
            organization_id=event.organization_id,
            event_id=event.id,
        )

    def send_custom(
        self,
        *,
        recipient: str,
        recipient_name: str,
        subject: str,
        message: str,
        event: Optional[models.Event] = None,
    ) -> Dict[str, Any]:
        return self.send(
            recipient=recipient,
            subject=subject,
            template_name=TEMPLATE_CUSTOM,
            context={
                'recipient_name': recipient_name,
                'message': message,
                'event_name': event.name if event else None,
            },
            event_type=EVENT_CUSTOM,
            organization_id=event.organization_id if event else None,
            event_id=event.id if event else None,
        )

    def send_speaker_invitation(
        self,
        speaker: models.Speaker,
        *,
        organizer: Optional[models.User] = None,
        personal_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        event = speaker.event
        organizer_name = organizer.full_name if organizer else (event.organization.name if event.organization else 'EventDesk')
        return self.send(
            recipient=speaker.email,
            subject=f"Speaker Invitation - {event.name}",
            template_name=TEMPLATE_SPEAKER_INVITATION,
            context={
                'speaker_name': speaker.full_name,
                'event_name': event.name,
                'event_date': format_event_date(event.start_date),
                'event_venue': format_venue(event),
                'personal_message': personal_message,
                'organizer_name': organizer_name,
                'organizer_email': organizer.email if organizer else '',
            },
            event_type=EVENT_SPEAKER_INVITATION,
            organization_id=event.organization_id,
            event_id=event.id,
        )

    def send_abstract_submission_confirmation(self, abstract: models.Abstract, token: str) -> Dict[str, Any]:
        event = abstract.event
        speaker = abstract.speaker
        return self.send(
            recipient=speaker.email,
            subject=f"Abstract Submitted - {event.name}",
            template_name=TEMPLATE_ABSTRACT_SUBMITTED,
            context={
                'speaker_name': speaker.first_name,
                'event_name': event.name,
                'abstract_title': abstract.title,
                'management_link': build_abstract_management_link(event.slug, token),
            },
            event_type=EVENT_ABSTRACT_SUBMITTED,
            organization_id=event.organization_id,
            event_id=event.id,
        )

    def send_abstract_status_update(self, abstract: models.Abstract) -> Dict[str, Any]:
        """Tell the speaker about a review decision; statuses without a heading are not announced."""
        heading = ABSTRACT_STATUS_HEADINGS.get(abstract.status)
        if heading is None:
            return {'success': False, 'email_log_id': None, 'error': f"no notification for status {abstract.status}"}
        event = abstract.event
        speaker = abstract.speaker
        return self.send(
            recipient=speaker.email,
            subject=f"{heading} - {event.name}",
            template_name=TEMPLATE_ABSTRACT_STATUS,
            context={
                'heading': heading,
                'speaker_name': speaker.first_name,
                'event_name': event.name,
                'abstract_title': abstract.title,
                'status': abstract.status,
                'review_notes': abstract.review_notes,
            },
            event_type=EVENT_ABSTRACT_STATUS,
            organization_id=event.organization_id,
            event_id=event.id,
        )


def get_notification_service(db: Session = Depends(get_db)) -> NotificationService:
    """FastAPI dependency; tests override it to capture outbound mail."""
    return NotificationService(db)
