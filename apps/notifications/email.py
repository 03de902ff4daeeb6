# apps/notifications/email.py
"""
Транзакционные письма через HTTP API Resend.

Все методы EmailService возвращают EmailResult и никогда не бросают
исключения наружу: письмо - побочный эффект, а не часть запроса.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from django.template.loader import render_to_string
from django.utils import timezone

from asiatek.site_config import SiteConfig, get_site_config

logger = logging.getLogger(__name__)

RESEND_TIMEOUT = 10

ORDER_FROM_DEFAULT = 'orders@asiatek.pro'
RESET_FROM_DEFAULT = 'no-reply@asiatek.pro'
CONTACT_FROM_DEFAULT = 'contact-form@asiatek.pro'

MISSING_KEY_ERROR = 'Resend API key not configured.'


@dataclass
class EmailResult:
    success: bool
    error: Optional[str] = None


class EmailService:
    def __init__(self, config: SiteConfig):
        self.config = config

    def _send(self, label, payload) -> EmailResult:
        if not self.config.resend_api_key:
            logger.error(f"[EMAIL] {label}: aborting, {MISSING_KEY_ERROR}")
            return EmailResult(False, MISSING_KEY_ERROR)

        logger.info(f"[EMAIL] {label}: sending to {payload['to']}")
        try:
            response = requests.post(
                self.config.resend_api_url,
                json=payload,
                headers={
                    'Authorization': f'Bearer {self.config.resend_api_key}',
                    'Content-Type': 'application/json'
                },
                timeout=RESEND_TIMEOUT
            )
        except requests.RequestException as e:
            logger.error(f"[EMAIL] {label}: request failed: {e}")
            return EmailResult(False, str(e))

        if response.status_code not in (200, 201):
            try:
                error = response.json().get('message') or 'Resend API error'
            except ValueError:
                error = response.text or 'Resend API error'
            logger.error(f"[EMAIL] {label}: Resend API returned {response.status_code}: {error}")
            return EmailResult(False, error)

        logger.info(f"[EMAIL] {label}: sent successfully")
        return EmailResult(True)

    def _from(self, default):
        return self.config.email_from_address or default

    def send_order_confirmation(self, order) -> EmailResult:
        """Уведомление владельцу магазина о новом заказе"""
        contact_info = order.contact_info or {}
        vehicle = order.vehicle or {}
        parts = order.parts or []

        html = render_to_string('emails/order_confirmation.html', {
            'order': order,
            'vehicle': vehicle,
            'parts': parts,
            'contact': contact_info,
            'site_name': self.config.site_name,
            'year': timezone.now().year,
        })

        payload = {
            'from': self._from(ORDER_FROM_DEFAULT),
            'to': self.config.order_notification_email,
            'subject': f"Новый заказ #{order.pk} - {contact_info.get('name') or 'Клиент'}",
            'html': html,
        }
        if contact_info.get('email'):
            payload['reply_to'] = contact_info['email']

        return self._send(f"order #{order.pk}", payload)

    def send_password_reset_email(self, email, reset_token) -> EmailResult:
        token = getattr(reset_token, 'token', None)
        if not token:
            logger.error("[EMAIL] password reset: invalid reset token provided")
            return EmailResult(False, 'Invalid reset token provided.')

        reset_link = f"{self.config.base_url}/auth/reset-password?token={token}"
        html = render_to_string('emails/password_reset.html', {
            'reset_link': reset_link,
            'site_name': self.config.site_name,
            'year': timezone.now().year,
        })

        return self._send('password reset', {
            'from': self._from(RESET_FROM_DEFAULT),
            'to': email,
            'subject': 'Сброс пароля - Asiatek.pro',
            'html': html,
        })

    def send_contact_form_notification(self, message) -> EmailResult:
        html = render_to_string('emails/contact_notification.html', {
            'message': message,
            'site_name': self.config.site_name,
            'year': timezone.now().year,
        })

        payload = {
            'from': self._from(CONTACT_FROM_DEFAULT),
            'to': self.config.admin_notification_email,
            'subject': f"Новое сообщение от {message.name or 'Посетитель'}",
            'html': html,
        }
        if message.email:
            payload['reply_to'] = message.email

        return self._send(f"contact message #{message.pk}", payload)


def email_service():
    return EmailService(get_site_config())
