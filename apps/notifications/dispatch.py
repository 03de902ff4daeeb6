# apps/notifications/dispatch.py
import logging
from concurrent.futures import ThreadPoolExecutor

from django.conf import settings
from django.db import close_old_connections

logger = logging.getLogger(__name__)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='notifications')


def _run(label, func, args, kwargs):
    try:
        result = func(*args, **kwargs)
    except Exception:
        logger.exception(f"[NOTIFY] {label}: task raised")
        return None
    finally:
        if not settings.NOTIFICATIONS_EAGER:
            close_old_connections()

    if getattr(result, 'success', True):
        logger.info(f"[NOTIFY] {label}: done")
    else:
        logger.error(f"[NOTIFY] {label}: failed: {result.error}")
    return result


def dispatch(label, func, *args, **kwargs):
    """
    Запускает отправку уведомления в фоне, не дожидаясь результата.
    Исход (успех, ошибка, исключение) только логируется.
    При NOTIFICATIONS_EAGER задача выполняется сразу в текущем потоке.
    """
    if settings.NOTIFICATIONS_EAGER:
        return _run(label, func, args, kwargs)
    return _executor.submit(_run, label, func, args, kwargs)
