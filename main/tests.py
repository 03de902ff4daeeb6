import json
import tempfile
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.core.management.base import CommandError
from django.http import Http404, HttpResponse
from django.test import RequestFactory, TestCase, override_settings
from django.urls import reverse

from api.storage import Storage
from apps.users.decorators import SESSION_USER_KEY
from main.brands import ALL_BRANDS, get_brand_by_slug
from main.middleware import SeoMiddleware, is_bot, prerendered_path
from main.prerender import build_sitemap, run_prerender, sitemap_priority
from main.seo import Head
from main.ssr import build_request, render_page

GOOGLEBOT = 'Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)'
CHROME = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0 Safari/537.36'


class URLResolutionTest(TestCase):
    "Тест проверки правильности разрешения URL-адресов"

    def test_url_name_resolution(self):
        "все указанные имена URL-адресов должны разрешаться корректно"
        expected = {
            'home': '/',
            'order': '/order',
            'contact': '/contact',
            'auth': '/auth',
            'forgot_password': '/auth/forgot-password',
            'reset_password': '/auth/reset-password',
            'dashboard': '/dashboard',
            'catalog': '/zapchasti',
        }
        for url_name, url in expected.items():
            with self.subTest(url_name=url_name):
                self.assertEqual(reverse(url_name), url)

        self.assertEqual(reverse('brand', kwargs={'slug': 'sitrak'}), '/zapchasti/sitrak')


class PageViewsTest(TestCase):
    "Страницы сайта"

    def test_public_pages_render(self):
        "все публичные страницы должны отдаваться с кодом 200"
        for url in ['/', '/order', '/contact/', '/auth', '/auth/forgot-password',
                    '/auth/reset-password?token=abc', '/zapchasti', '/zapchasti/sitrak/']:
            with self.subTest(url=url):
                response = self.client.get(url)
                self.assertEqual(response.status_code, 200)
                self.assertContains(response, '<div id="root">')
                self.assertContains(response, '/static/js/app.js')

    def test_every_brand_has_page(self):
        for brand in ALL_BRANDS:
            with self.subTest(slug=brand.slug):
                response = self.client.get(f'/zapchasti/{brand.slug}')
                self.assertEqual(response.status_code, 200)
                self.assertContains(response, f'Запчасти для {brand.display_name}')

    def test_unknown_brand_is_404(self):
        response = self.client.get('/zapchasti/unknown-brand')

        self.assertEqual(response.status_code, 404)
        self.assertContains(response, 'noindex, nofollow', status_code=404)

    def test_unknown_path_is_404(self):
        response = self.client.get('/no/such/page')

        self.assertEqual(response.status_code, 404)

    def test_dashboard_requires_session(self):
        "без сессии личный кабинет перенаправляет на /auth"
        response = self.client.get('/dashboard')

        self.assertRedirects(response, '/auth', fetch_redirect_response=False)

    def test_dashboard_lists_orders(self):
        user = Storage.create_user(email='ivan@example.com', password_hash='x', full_name='Иван')
        Storage.create_order(
            vehicle={'type': 'chinese', 'make': 'Sitrak'},
            parts=[{'name': 'Фильтр', 'quantity': 1}],
            contact_info={'name': 'Иван'},
            user=user,
        )
        session = self.client.session
        session[SESSION_USER_KEY] = user.pk
        session.save()

        response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'ivan@example.com')

    def test_reset_password_page_escapes_token(self):
        response = self.client.get('/auth/reset-password', {'token': '"><script>x</script>'})

        self.assertNotContains(response, '<script>x</script>')

    def test_home_head(self):
        head = self.client.get('/').head

        self.assertEqual(head.title, 'АВТОЗАПЧАСТИ ОПТОМ И В РОЗНИЦУ – Asiatek')
        self.assertEqual(head.get_link('canonical'), 'https://asiatek.pro/')
        self.assertEqual(head.get_meta('og:image'), 'https://asiatek.pro/assets/Stickers.png')
        self.assertIsNone(head.get_meta('robots'))
        types = [data['@type'] for data in head.structured_data]
        self.assertEqual(types, ['FAQPage', 'AutoPartsStore'])

    def test_brand_head(self):
        head = self.client.get('/zapchasti/howo').head

        self.assertEqual(head.title, 'Запчасти для Howo – Asiatek')
        self.assertEqual(head.get_meta('og:type'), 'product')
        self.assertEqual(head.get_meta('product:brand'), 'Howo')
        self.assertEqual(head.get_link('canonical'), 'https://asiatek.pro/zapchasti/howo')
        types = [data['@type'] for data in head.structured_data]
        self.assertEqual(types, ['BreadcrumbList', 'FAQPage', 'Product', 'Product', 'Product'])

    def test_private_pages_are_noindex(self):
        for url in ['/auth/forgot-password', '/auth/reset-password']:
            with self.subTest(url=url):
                head = self.client.get(url).head
                self.assertEqual(head.get_meta('robots'), 'noindex, nofollow')
                self.assertEqual(head.get_meta('yandex'), 'noindex, nofollow')


class HeadTest(TestCase):
    "Коллектор метаданных head"

    def test_later_value_replaces_earlier(self):
        head = Head()
        head.meta('first', name='description')
        head.meta('second', name='description')
        head.link('canonical', 'https://a.example')
        head.link('canonical', 'https://b.example')

        rendered = head.render()

        self.assertEqual(rendered.count('name="description"'), 1)
        self.assertIn('content="second"', rendered)
        self.assertIn('href="https://b.example"', rendered)
        self.assertNotIn('https://a.example', rendered)

    def test_render_escapes_values(self):
        head = Head()
        head.set_title('<Asiatek>')
        head.meta('"quoted"', property='og:title')
        head.json_ld({'name': '</script><script>alert(1)</script>'})

        rendered = head.render()

        self.assertIn('<title>&lt;Asiatek&gt;</title>', rendered)
        self.assertIn('&quot;quoted&quot;', rendered)
        self.assertNotIn('</script><script>', rendered)


class RenderPageTest(TestCase):
    "Рендер страницы в строку"

    def test_render_brand(self):
        result = render_page('/zapchasti/sitrak')

        self.assertIsNone(result.redirect)
        self.assertIn('<h1>Запчасти для Sitrak</h1>', result.html)
        self.assertIn('<title>Запчасти для Sitrak – Asiatek</title>', result.head)
        self.assertIn('application/ld+json', result.head)
        self.assertNotIn('<html', result.html)

    def test_calls_are_independent(self):
        first = render_page('/zapchasti/howo')
        second = render_page('/contact')

        self.assertNotIn('Howo', second.head)
        self.assertIn('Howo', first.head)

    def test_dashboard_redirects(self):
        result = render_page('/dashboard')

        self.assertEqual(result.redirect, '/auth')
        self.assertEqual(result.html, '')

    def test_build_request(self):
        "анонимный GET-запрос с пустой сессией и адресом сайта"
        request = build_request('/auth/reset-password?token=abc')

        self.assertEqual(request.method, 'GET')
        self.assertEqual(request.path_info, '/auth/reset-password')
        self.assertEqual(request.GET['token'], 'abc')
        self.assertEqual(request.get_host(), 'asiatek.pro')
        self.assertTrue(request.is_secure())
        self.assertIsNone(request.session_user_id)
        self.assertFalse(request.session.keys())

    def test_unknown_route_raises(self):
        with self.assertRaises(Http404):
            render_page('/zapchasti/unknown-brand')
        with self.assertRaises(Http404):
            render_page('/no/such/page')


class BotDetectionTest(TestCase):
    "Определение ботов и путей к пререндеру"

    def test_is_bot(self):
        self.assertTrue(is_bot(GOOGLEBOT))
        self.assertTrue(is_bot('Mozilla/5.0 (compatible; YandexBot/3.0)'))
        self.assertTrue(is_bot('TelegramBot (like TwitterBot)'))
        self.assertFalse(is_bot(CHROME))
        self.assertFalse(is_bot(''))
        self.assertFalse(is_bot(None))

    def test_prerendered_path(self):
        self.assertEqual(prerendered_path('/'), 'index.html')
        self.assertEqual(prerendered_path('/zapchasti'), 'zapchasti/index.html')
        self.assertEqual(prerendered_path('/zapchasti/sitrak/'), 'zapchasti/sitrak/index.html')
        self.assertEqual(prerendered_path('/sitemap.xml'), 'sitemap.xml')


class SeoMiddlewareTest(TestCase):
    "Отдача пререндеренных страниц ботам"

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        root = Path(self.tmp.name)
        (root / 'zapchasti').mkdir()
        (root / 'index.html').write_text('<html>prerendered home</html>', encoding='utf-8')
        (root / 'zapchasti' / 'index.html').write_text('<html>prerendered catalog</html>', encoding='utf-8')
        (root / 'robots.txt').write_text('User-agent: *', encoding='utf-8')

        self.factory = RequestFactory()
        with override_settings(PRERENDER_OUTPUT_DIR=root):
            self.middleware = SeoMiddleware(lambda request: HttpResponse('dynamic'))

    def content(self, response):
        if response.streaming:
            return b''.join(response.streaming_content).decode('utf-8')
        return response.content.decode('utf-8')

    def test_bot_gets_prerendered_page(self):
        for path, body in [('/', 'prerendered home'), ('/zapchasti/', 'prerendered catalog'),
                           ('/robots.txt', 'User-agent: *')]:
            with self.subTest(path=path):
                response = self.middleware(self.factory.get(path, HTTP_USER_AGENT=GOOGLEBOT))
                self.assertIn(body, self.content(response))

    def test_browser_gets_dynamic_page(self):
        response = self.middleware(self.factory.get('/', HTTP_USER_AGENT=CHROME))

        self.assertEqual(self.content(response), 'dynamic')

    def test_missing_file_falls_through(self):
        response = self.middleware(self.factory.get('/contact', HTTP_USER_AGENT=GOOGLEBOT))

        self.assertEqual(self.content(response), 'dynamic')

    def test_api_and_post_are_not_intercepted(self):
        response = self.middleware(self.factory.get('/api/user', HTTP_USER_AGENT=GOOGLEBOT))
        self.assertEqual(self.content(response), 'dynamic')

        response = self.middleware(self.factory.post('/', HTTP_USER_AGENT=GOOGLEBOT))
        self.assertEqual(self.content(response), 'dynamic')

    def test_path_traversal_is_refused(self):
        response = self.middleware(self.factory.get('/../../etc/passwd', HTTP_USER_AGENT=GOOGLEBOT))

        self.assertEqual(self.content(response), 'dynamic')


class PrerenderTest(TestCase):
    "Генерация статических страниц"

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.root = Path(self.tmp.name)
        self.output = self.root / 'public'
        self.manifest = self.root / 'staticfiles.json'

    def write_manifest(self, paths):
        self.manifest.write_text(json.dumps({'version': '1.1', 'paths': paths}), encoding='utf-8')

    def test_command_generates_pages(self):
        self.write_manifest({'js/app.js': 'js/app.3f2a1b.js', 'css/site.css': 'css/site.9c8d7e.css'})

        call_command('prerender', output=str(self.output), manifest=str(self.manifest), stdout=StringIO())

        home = (self.output / 'index.html').read_text(encoding='utf-8')
        self.assertIn('/static/js/app.3f2a1b.js', home)
        self.assertIn('/static/css/site.9c8d7e.css', home)
        self.assertIn('<title>АВТОЗАПЧАСТИ ОПТОМ И В РОЗНИЦУ – Asiatek</title>', home)

        brand = (self.output / 'zapchasti' / 'jac' / 'index.html').read_text(encoding='utf-8')
        self.assertIn('Запчасти для Jac', brand)
        self.assertTrue((self.output / 'zapchasti' / 'index.html').is_file())
        self.assertTrue((self.output / 'contact' / 'index.html').is_file())

        sitemap = (self.output / 'sitemap.xml').read_text(encoding='utf-8')
        self.assertIn('<loc>https://asiatek.pro/zapchasti/sitrak/</loc>', sitemap)
        robots = (self.output / 'robots.txt').read_text(encoding='utf-8')
        self.assertIn('Sitemap: https://asiatek.pro/sitemap.xml', robots)

    def test_missing_stylesheet_is_allowed(self):
        self.write_manifest({'js/app.js': 'js/app.3f2a1b.js'})

        summary = run_prerender(self.output, self.manifest, 'https://asiatek.pro', routes=['/'])

        self.assertEqual(summary, {'rendered': ['/'], 'failed': []})
        self.assertNotIn('rel="stylesheet"', (self.output / 'index.html').read_text(encoding='utf-8'))

    def test_missing_manifest_writes_nothing(self):
        with self.assertRaises(CommandError):
            call_command('prerender', output=str(self.output), manifest=str(self.manifest))

        self.assertFalse(self.output.exists())

    def test_manifest_without_entry_writes_nothing(self):
        self.write_manifest({'css/site.css': 'css/site.css'})

        with self.assertRaises(CommandError):
            call_command('prerender', output=str(self.output), manifest=str(self.manifest))

        self.assertFalse(self.output.exists())

    def test_failed_route_is_skipped(self):
        self.write_manifest({'js/app.js': 'js/app.js'})

        with self.assertLogs('main.prerender', level='ERROR'):
            summary = run_prerender(self.output, self.manifest, 'https://asiatek.pro',
                                    routes=['/', '/zapchasti/unknown-brand', '/contact'])

        self.assertEqual(summary['rendered'], ['/', '/contact'])
        self.assertEqual(summary['failed'], ['/zapchasti/unknown-brand'])
        self.assertTrue((self.output / 'contact' / 'index.html').is_file())

    def test_sitemap_priority(self):
        self.assertEqual(sitemap_priority('/'), 1.0)
        self.assertAlmostEqual(sitemap_priority('/zapchasti'), 0.9)
        self.assertAlmostEqual(sitemap_priority('/zapchasti/sitrak'), 0.8)
        self.assertEqual(sitemap_priority('/a/b/c/d/e/f/g'), 0.5)

    def test_sitemap_entries(self):
        sitemap = build_sitemap(['/', '/contact'], 'https://asiatek.pro', lastmod='2024-05-01')

        self.assertIn('<loc>https://asiatek.pro/</loc>', sitemap)
        self.assertIn('<loc>https://asiatek.pro/contact/</loc>', sitemap)
        self.assertIn('<priority>1.0</priority>', sitemap)
        self.assertIn('<priority>0.9</priority>', sitemap)
        self.assertIn('<lastmod>2024-05-01</lastmod>', sitemap)


class BrandCatalogTest(TestCase):
    def test_lookup(self):
        self.assertEqual(get_brand_by_slug('sitrak').title, 'Sitrak (Ситрак)')
        self.assertIsNone(get_brand_by_slug('nope'))
        self.assertEqual(len({brand.slug for brand in ALL_BRANDS}), len(ALL_BRANDS))
