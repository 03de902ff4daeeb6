# main/seo.py
"""
Сбор метаданных <head> для страниц.

Head - коллектор тегов: тег с тем же ключом (name/property для meta,
rel для link) заменяет ранее заданный, поэтому страница может
переопределять значения по умолчанию.
"""
import json

from django.utils.html import format_html, format_html_join
from django.utils.safestring import mark_safe

DEFAULT_TITLE = 'Asiatek'
DEFAULT_DESCRIPTION = (
    'Оригинальные и аналоговые автозапчасти для китайских, коммерческих '
    'и легковых автомобилей. Доставка по России и СНГ.'
)
DEFAULT_IMAGE = '/assets/social-preview-banner.png'
NOINDEX = 'noindex, nofollow'

BUSINESS_PHONE = '+79802174850'
BUSINESS_EMAIL = 'asiatek.pro@outlook.com'
BUSINESS_ADDRESS = '2-й Тушинский проезд 10'

_JSON_ESCAPES = {ord('<'): '\\u003C', ord('>'): '\\u003E', ord('&'): '\\u0026'}


class Head:
    def __init__(self):
        self.title = DEFAULT_TITLE
        self._meta = {}
        self._links = {}
        self._json_ld = []

    def set_title(self, title):
        self.title = title

    def meta(self, content, name=None, property=None):
        if name:
            self._meta[('name', name)] = content
        else:
            self._meta[('property', property)] = content

    def link(self, rel, href):
        self._links[rel] = href

    def json_ld(self, data):
        self._json_ld.append(data)

    def get_meta(self, key):
        return self._meta.get(('name', key), self._meta.get(('property', key)))

    def get_link(self, rel):
        return self._links.get(rel)

    @property
    def structured_data(self):
        return list(self._json_ld)

    def render(self):
        parts = [format_html('<title>{}</title>', self.title)]
        parts.append(format_html_join(
            '\n', '<meta {}="{}" content="{}" />',
            ((attr, key, content) for (attr, key), content in self._meta.items())
        ))
        parts.append(format_html_join(
            '\n', '<link rel="{}" href="{}" />', self._links.items()
        ))
        for data in self._json_ld:
            payload = json.dumps(data, ensure_ascii=False).translate(_JSON_ESCAPES)
            parts.append(mark_safe(f'<script type="application/ld+json">{payload}</script>'))
        return mark_safe('\n'.join(str(part) for part in parts if part))


def default_head():
    head = Head()
    head.meta(DEFAULT_DESCRIPTION, name='description')
    head.meta('width=device-width, initial-scale=1.0', name='viewport')
    return head


def absolute_url(base_url, path_or_url):
    if path_or_url.startswith('http'):
        return path_or_url
    if not path_or_url.startswith('/'):
        path_or_url = '/' + path_or_url
    return f'{base_url}{path_or_url}'


def apply_seo(head, base_url, title, description, path, image=DEFAULT_IMAGE,
              type='website', brand=None, noindex=False):
    url = f'{base_url}{path}'
    image_url = absolute_url(base_url, image)

    head.set_title(title)
    head.meta(description, name='description')
    if noindex:
        head.meta(NOINDEX, name='robots')
        head.meta(NOINDEX, name='googlebot')
        head.meta(NOINDEX, name='yandex')
    head.link('canonical', url)

    head.meta(type, property='og:type')
    head.meta(url, property='og:url')
    head.meta(title, property='og:title')
    head.meta(description, property='og:description')
    head.meta(image_url, property='og:image')
    head.meta('ru_RU', property='og:locale')
    head.meta('Asiatek', property='og:site_name')

    head.meta('summary_large_image', name='twitter:card')
    head.meta(url, name='twitter:url')
    head.meta(title, name='twitter:title')
    head.meta(description, name='twitter:description')
    head.meta(image_url, name='twitter:image')

    if type == 'product' and brand:
        head.meta(brand, property='og:brand')
        head.meta(brand, property='product:brand')
        head.meta('in stock', property='product:availability')

    head.meta('RU', name='geo.region')
    head.meta('Москва', name='geo.placename')
    head.meta('Russian', name='language')
    head.meta('telephone=no', name='format-detection')
    return head


def local_business_ld(base_url):
    return {
        '@context': 'https://schema.org',
        '@type': 'AutoPartsStore',
        'name': 'Asiatek',
        'image': f'{base_url}/assets/logos/asiatek-logo.png',
        'url': base_url,
        'telephone': BUSINESS_PHONE,
        'email': BUSINESS_EMAIL,
        'address': {
            '@type': 'PostalAddress',
            'streetAddress': BUSINESS_ADDRESS,
            'addressLocality': 'Москва',
            'postalCode': '125371',
            'addressCountry': 'RU',
        },
        'openingHoursSpecification': [{
            '@type': 'OpeningHoursSpecification',
            'dayOfWeek': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday'],
            'opens': '09:00',
            'closes': '18:00',
        }],
        'geo': {'@type': 'GeoCoordinates', 'latitude': 55.8483, 'longitude': 37.4361},
    }


def breadcrumbs_ld(items):
    """items: [(название, абсолютный url или None), ...]"""
    elements = []
    for position, (name, url) in enumerate(items, start=1):
        element = {'@type': 'ListItem', 'position': position, 'name': name}
        if url:
            element['item'] = url
        elements.append(element)
    return {
        '@context': 'https://schema.org',
        '@type': 'BreadcrumbList',
        'itemListElement': elements,
    }


def faq_ld(items):
    return {
        '@context': 'https://schema.org',
        '@type': 'FAQPage',
        'mainEntity': [
            {
                '@type': 'Question',
                'name': question,
                'acceptedAnswer': {'@type': 'Answer', 'text': answer},
            }
            for question, answer in items
        ],
    }


def product_ld(url, name, brand, image=None, price=None, rating=None, review_count=None):
    data = {
        '@context': 'https://schema.org',
        '@type': 'Product',
        'name': name,
        'brand': brand,
        'url': url,
    }
    if image:
        data['image'] = image
    if price:
        data['offers'] = {
            '@type': 'Offer',
            'priceCurrency': 'RUB',
            'price': price,
            'availability': 'https://schema.org/InStock',
        }
    if rating:
        data['aggregateRating'] = {
            '@type': 'AggregateRating',
            'ratingValue': f'{rating:.1f}',
            'reviewCount': review_count or 1,
        }
    return data
