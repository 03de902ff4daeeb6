# main/ssr.py
"""
Рендер страницы сайта в строку без HTTP-сервера.

Каждый вызов создаёт новый запрос (анонимный, с пустой сессией) и новый
коллектор head, поэтому вызовы не влияют друг на друга.
"""
import logging
from dataclasses import dataclass
from importlib import import_module
from io import BytesIO
from typing import Optional
from urllib.parse import unquote_to_bytes, urlsplit

from django.conf import settings
from django.core.handlers.wsgi import WSGIRequest
from django.urls import resolve

from asiatek.site_config import get_site_config
from .views import PageResponse

logger = logging.getLogger(__name__)

REDIRECT_CODES = (301, 302, 303, 307, 308)


@dataclass
class RenderResult:
    html: str
    head: str
    redirect: Optional[str] = None


def build_request(url):
    """Анонимный GET-запрос к сайту с пустой сессией"""
    target = urlsplit(url)
    site = urlsplit(get_site_config().base_url)
    scheme = site.scheme or 'https'
    request = WSGIRequest({
        'REQUEST_METHOD': 'GET',
        'SCRIPT_NAME': '',
        'PATH_INFO': unquote_to_bytes(target.path or '/').decode('iso-8859-1'),
        'QUERY_STRING': target.query,
        'SERVER_NAME': site.hostname or 'localhost',
        'SERVER_PORT': str(site.port or (443 if scheme == 'https' else 80)),
        'wsgi.url_scheme': scheme,
        'wsgi.input': BytesIO(),
    })
    engine = import_module(settings.SESSION_ENGINE)
    request.session = engine.SessionStore()
    request.session_user_id = None
    return request


def render_page(url) -> RenderResult:
    """
    Возвращает разметку тела страницы, собранный head и адрес редиректа,
    если страница перенаправляет. Неизвестный адрес - Http404.
    """
    request = build_request(url)
    match = resolve(request.path_info)
    response = match.func(request, *match.args, **match.kwargs)

    if response.status_code in REDIRECT_CODES:
        logger.info(f"[SSR] {url} redirects to {response['Location']}")
        return RenderResult(html='', head='', redirect=response['Location'])

    if not isinstance(response, PageResponse):
        raise ValueError(f"{url} did not render a page (status {response.status_code})")

    return RenderResult(html=response.body, head=response.head.render())
