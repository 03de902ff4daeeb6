# apps/users/tokens.py
import logging
import secrets
from datetime import timedelta

from django.utils import timezone

from api.storage import Storage

logger = logging.getLogger(__name__)

RESET_TOKEN_BYTES = 32
RESET_TOKEN_LIFETIME = timedelta(hours=1)


def generate_password_reset_token(user_id):
    """Создаёт токен (32 случайных байта в hex), действительный 1 час"""
    token = secrets.token_hex(RESET_TOKEN_BYTES)
    expires_at = timezone.now() + RESET_TOKEN_LIFETIME
    reset_token = Storage.create_password_reset_token(user_id, token, expires_at)
    logger.info(f"[PASSWORD_RESET] Token {token[:5]}... issued for user {user_id}")
    return reset_token


def verify_password_reset_token(token):
    """
    Возвращает запись токена, если он существует, не использован и не истёк.
    Иначе None. Состояние токена не меняется.
    """
    reset_token = Storage.get_password_reset_token(token)
    if reset_token is None:
        logger.info(f"[PASSWORD_RESET] Token {token[:5]}... not found")
        return None

    if reset_token.used:
        logger.warning(f"[PASSWORD_RESET] Token id={reset_token.pk} has already been used")
        return None

    now = timezone.now()
    if now > reset_token.expires_at:
        logger.warning(
            f"[PASSWORD_RESET_EXPIRED] Token id={reset_token.pk} expired at "
            f"{reset_token.expires_at.isoformat()}, now {now.isoformat()}"
        )
        return None

    return reset_token


def consume_password_reset_token(token):
    Storage.mark_token_as_used(token)


def clear_expired_tokens():
    """Удаляет истекшие токены. Ошибки только логируются."""
    try:
        deleted = Storage.delete_expired_tokens()
    except Exception as e:
        logger.error(f"[CLEANUP] Error clearing expired tokens: {e}", exc_info=True)
        return {'status': 'error', 'error': str(e)}

    logger.info(f"[CLEANUP] Cleared {deleted} expired password reset tokens")
    return {'status': 'success', 'expired_tokens_cleared': deleted}
