"""
Неизменяемая конфигурация сайта.

Собирается один раз из django.conf.settings (которые читают окружение через
decouple) и передаётся в сервис писем и в SSR/пререндер.
"""
import logging
from dataclasses import dataclass
from functools import lru_cache

from django.conf import settings

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'https://asiatek.pro'


@dataclass(frozen=True)
class SiteConfig:
    base_url: str
    resend_api_key: str
    resend_api_url: str
    email_from_address: str
    order_notification_email: str
    admin_notification_email: str
    site_name: str = 'Asiatek'


def resolve_base_url(public_base_url, replit_url):
    """
    PUBLIC_BASE_URL -> REPLIT_URL -> домен по умолчанию.
    Завершающий слэш всегда отрезается.
    """
    if public_base_url and public_base_url.strip():
        url = public_base_url.strip()
        logger.info(f"[CONFIG] Using PUBLIC_BASE_URL: {url}")
        return url.rstrip('/')

    if replit_url and replit_url.strip():
        url = replit_url.strip()
        logger.warning(f"[CONFIG] PUBLIC_BASE_URL not set, falling back to REPLIT_URL: {url}")
        if not url.startswith('https://'):
            url = f'https://{url}'
        return url.rstrip('/')

    logger.error(
        f"[CONFIG] PUBLIC_BASE_URL and REPLIT_URL not set, falling back to {DEFAULT_BASE_URL}"
    )
    return DEFAULT_BASE_URL


def build_site_config():
    if not settings.RESEND_API_KEY:
        logger.warning("[CONFIG] RESEND_API_KEY is not set. Email sending will fail.")

    return SiteConfig(
        base_url=resolve_base_url(settings.PUBLIC_BASE_URL, settings.REPLIT_URL),
        resend_api_key=settings.RESEND_API_KEY,
        resend_api_url=settings.RESEND_API_URL,
        email_from_address=settings.EMAIL_FROM_ADDRESS,
        order_notification_email=settings.ORDER_NOTIFICATION_EMAIL,
        admin_notification_email=settings.ADMIN_NOTIFICATION_EMAIL,
    )


@lru_cache(maxsize=None)
def get_site_config() -> SiteConfig:
    return build_site_config()
