# main/prerender.py
"""
Генерация статических HTML-снимков страниц для поисковых ботов.

Порядок: манифест статики -> рендер каждого маршрута -> sitemap.xml ->
robots.txt -> проверка, что index.html на месте. Без манифеста не
пишется ни один файл.
"""
import json
import logging
from pathlib import Path

from django.conf import settings
from django.template.loader import render_to_string
from django.utils import timezone

from .ssr import render_page
from .views import render_document

logger = logging.getLogger(__name__)

# Ключи манифеста ManifestStaticFilesStorage (staticfiles.json)
ENTRY_KEY = 'js/app.js'
STYLESHEET_KEY = 'css/site.css'

PRERENDER_BRANDS = ['sitrak', 'dfsk', 'faw', 'foton', 'howo', 'jac']
ROUTES = ['/', '/zapchasti', '/contact'] + [f'/zapchasti/{slug}' for slug in PRERENDER_BRANDS]


class PrerenderError(Exception):
    pass


def read_manifest(manifest_path):
    manifest_path = Path(manifest_path)
    logger.info(f"[PRERENDER] Reading manifest: {manifest_path}")
    try:
        with open(manifest_path, encoding='utf-8') as f:
            manifest = json.load(f)
    except OSError as e:
        raise PrerenderError(f"Cannot read static manifest {manifest_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise PrerenderError(f"Static manifest {manifest_path} is not valid JSON: {e}") from e

    paths = manifest.get('paths') if isinstance(manifest, dict) else None
    if not isinstance(paths, dict):
        raise PrerenderError(f"Static manifest {manifest_path} has no 'paths' table")
    return paths


def resolve_assets(paths):
    """(путь к JS, путь к CSS или None) с префиксом STATIC_URL"""
    entry = paths.get(ENTRY_KEY)
    if not entry:
        raise PrerenderError(f"Entry '{ENTRY_KEY}' is missing from the static manifest")

    js_path = f"{settings.STATIC_URL}{entry}"
    css_path = None
    if paths.get(STYLESHEET_KEY):
        css_path = f"{settings.STATIC_URL}{paths[STYLESHEET_KEY]}"
    else:
        logger.warning(f"[PRERENDER] '{STYLESHEET_KEY}' not found in manifest, pages will have no stylesheet")
    return js_path, css_path


def output_path_for(route, output_dir):
    relative = route.strip('/')
    return Path(output_dir) / relative / 'index.html' if relative else Path(output_dir) / 'index.html'


def sitemap_priority(route):
    if route == '/':
        return 1.0
    depth = len([segment for segment in route.split('/') if segment])
    return max(0.5, 1.0 - depth * 0.1)


def build_sitemap(routes, base_url, lastmod=None):
    lastmod = lastmod or timezone.localdate().isoformat()
    entries = []
    for route in routes:
        loc = route if route.endswith('/') else f'{route}/'
        entries.append({'loc': f'{base_url}{loc}', 'priority': f'{sitemap_priority(route):.1f}'})
    return render_to_string('main/sitemap.xml', {'entries': entries, 'lastmod': lastmod})


def build_robots(base_url):
    return render_to_string('main/robots.txt', {'base_url': base_url})


def write_file(path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding='utf-8')


def run_prerender(output_dir, manifest_path, base_url, routes=None):
    routes = list(routes or ROUTES)
    output_dir = Path(output_dir)

    js_path, css_path = resolve_assets(read_manifest(manifest_path))
    logger.info(f"[PRERENDER] Using JS {js_path}, CSS {css_path or '-'}")

    rendered, failed = [], []
    for route in routes:
        try:
            result = render_page(route)
            if result.redirect:
                raise PrerenderError(f"route redirects to {result.redirect}")
            document = render_document(result.head, result.html, js_path, css_path)
            target = output_path_for(route, output_dir)
            write_file(target, document)
        except Exception:
            logger.exception(f"[PRERENDER] Failed to render route {route}")
            failed.append(route)
            continue
        logger.info(f"[PRERENDER] Generated {target}")
        rendered.append(route)

    logger.info(f"[PRERENDER] Page generation finished: {len(rendered)} ok, {len(failed)} failed")

    try:
        write_file(output_dir / 'sitemap.xml', build_sitemap(routes, base_url))
        write_file(output_dir / 'robots.txt', build_robots(base_url))
    except OSError as e:
        logger.error(f"[PRERENDER] Failed to write sitemap/robots: {e}")

    index_path = output_dir / 'index.html'
    if not index_path.is_file():
        raise PrerenderError(f"{index_path} is missing after generation")

    return {'rendered': rendered, 'failed': failed}
