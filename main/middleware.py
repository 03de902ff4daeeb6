# main/middleware.py
import logging
import os
import re
from pathlib import Path

from django.conf import settings
from django.http import FileResponse

logger = logging.getLogger(__name__)

BOT_USER_AGENT = re.compile(
    r'bot|crawl|spider|slurp|lighthouse|prerender|screaming|yahoo|bing|google|yandex|baidu|'
    r'duckduckgo|facebookexternalhit|twitterbot|linkedinbot|pinterest|whatsapp|telegrambot',
    re.IGNORECASE
)

SKIP_PREFIXES = ('/api/', '/admin/')


def is_bot(user_agent):
    return bool(user_agent) and BOT_USER_AGENT.search(user_agent) is not None


def prerendered_path(request_path):
    """'/' -> index.html, путь с расширением как есть, иначе <путь>/index.html"""
    clean = request_path.lstrip('/')
    if not clean:
        return 'index.html'
    if os.path.splitext(clean.rstrip('/'))[1]:
        return clean
    return f"{clean.rstrip('/')}/index.html"


class SeoMiddleware:
    """
    Поисковым ботам отдаёт заранее отрендеренные файлы из PRERENDER_OUTPUT_DIR.
    Если файла нет или его не удалось открыть, запрос идёт дальше как обычно.
    """
    def __init__(self, get_response):
        self.get_response = get_response
        self.root = Path(settings.PRERENDER_OUTPUT_DIR).resolve()
        if not self.root.is_dir():
            logger.warning(f"[SEO] Prerendered directory does not exist: {self.root}")

    def __call__(self, request):
        if (request.method in ('GET', 'HEAD')
                and not request.path.startswith(SKIP_PREFIXES)
                and is_bot(request.META.get('HTTP_USER_AGENT', ''))):
            response = self.serve_prerendered(request.path)
            if response is not None:
                return response

        return self.get_response(request)

    def serve_prerendered(self, request_path):
        file_path = (self.root / prerendered_path(request_path)).resolve()
        if self.root not in file_path.parents:
            logger.warning(f"[SEO] Refusing path outside prerendered directory: {request_path}")
            return None

        try:
            handle = open(file_path, 'rb')
        except OSError as e:
            logger.warning(f"[SEO] Cannot serve {file_path} ({e.__class__.__name__}), passing to next handler")
            return None

        logger.info(f"[SEO] Served prerendered {file_path.relative_to(self.root)} to bot")
        return FileResponse(handle)
