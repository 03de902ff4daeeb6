# main/views.py
import logging

from django.http import Http404, HttpResponse
from django.shortcuts import redirect
from django.template.loader import render_to_string
from django.templatetags.static import static

from api.storage import Storage
from apps.users.decorators import get_user_from_request
from asiatek.site_config import get_site_config
from .brands import brand_groups, get_brand_by_slug
from .seo import (
    apply_seo,
    breadcrumbs_ld,
    default_head,
    faq_ld,
    local_business_ld,
    product_ld,
)

logger = logging.getLogger(__name__)

HOME_FAQ = [
    ("Какие автозапчасти вы предлагаете?",
     "Мы предлагаем широкий ассортимент оригинальных и аналоговых запчастей для легковых, "
     "коммерческих и китайских автомобилей."),
    ("Как заказать запчасти в вашем магазине?",
     "Заполните форму заказа на сайте: укажите данные автомобиля, нужные запчасти и контакты. "
     "Наши специалисты свяжутся с вами для уточнения деталей заказа."),
    ("Как осуществляется доставка запчастей?",
     "Мы доставляем запчасти по всей России через транспортные компании СДЭК, Деловые Линии, ПЭК "
     "и других. Также возможен самовывоз из нашего офиса в Москве."),
]

CONTACT_FAQ = [
    ("Как заказать автозапчасти в вашем магазине?",
     "Заполните форму заказа на сайте, позвоните по телефону или отправьте заявку через форму "
     "обратной связи."),
    ("Какие гарантии вы предоставляете на запчасти?",
     "На оригинальные запчасти гарантия составляет от 6 до 12 месяцев, на аналоговые - "
     "от 1 до 6 месяцев в зависимости от производителя."),
]

POPULAR_PARTS = [
    ('p001', 'Тормозные колодки', 1200, 4.7, 12),
    ('p002', 'Масляный фильтр', 450, 4.5, 8),
    ('p003', 'Амортизатор передний', 3500, 4.9, 15),
]


class PageResponse(HttpResponse):
    """HTML-страница, которая помнит собранный head и разметку тела отдельно"""
    def __init__(self, content, head, body, *args, **kwargs):
        super().__init__(content, *args, **kwargs)
        self.head = head
        self.body = body


def asset_paths():
    return static('js/app.js'), static('css/site.css')


def render_document(head, body, js_path, css_path):
    return render_to_string('main/document.html', {
        'head': head,
        'body': body,
        'js_path': js_path,
        'css_path': css_path,
    })


def render_page_response(request, template_name, head, context=None, status=200):
    body = render_to_string(template_name, context or {}, request=request)
    js_path, css_path = asset_paths()
    document = render_document(head.render(), body, js_path, css_path)
    return PageResponse(document, head=head, body=body, status=status)


def home(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="АВТОЗАПЧАСТИ ОПТОМ И В РОЗНИЦУ – Asiatek",
        description="Купить оригинальные и аналоговые автозапчасти для китайских, коммерческих и "
                    "легковых автомобилей. Доставка по России.",
        path='/',
        image='/assets/Stickers.png',
    )
    head.json_ld(faq_ld(HOME_FAQ))
    head.json_ld(local_business_ld(config.base_url))
    return render_page_response(request, 'main/home.html', head, {
        'groups': brand_groups(),
        'faq': HOME_FAQ,
    })


def order(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Заказать автозапчасти – быстрая форма заказа – Asiatek",
        description="Заказать оригинальные и аналоговые запчасти для китайских, коммерческих и "
                    "легковых автомобилей. Доставка по России. Простая форма заказа.",
        path='/order',
    )
    return render_page_response(request, 'main/order.html', head, {
        'user': get_user_from_request(request),
    })


def contact(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Контакты – свяжитесь с нами – Asiatek",
        description="Свяжитесь с нами для заказа запчастей или консультации. Телефон, email и адрес "
                    "для связи. Быстрая обратная связь гарантирована.",
        path='/contact',
    )
    head.json_ld(faq_ld(CONTACT_FAQ))
    head.json_ld(local_business_ld(config.base_url))
    return render_page_response(request, 'main/contact.html', head, {'faq': CONTACT_FAQ})


def auth(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Вход и регистрация – личный кабинет – Asiatek",
        description="Войдите в личный кабинет или зарегистрируйтесь на сайте Asiatek. Отслеживайте "
                    "статус заказов и делайте повторные заказы быстрее.",
        path='/auth',
    )
    return render_page_response(request, 'main/auth.html', head)


def forgot_password(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Восстановление пароля – Asiatek",
        description="Восстановление доступа к личному кабинету на сайте Asiatek. Введите ваш email "
                    "для получения инструкций по сбросу пароля.",
        path='/auth/forgot-password',
        noindex=True,
    )
    return render_page_response(request, 'main/forgot_password.html', head)


def reset_password(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Сброс пароля – Asiatek",
        description="Сброс пароля на сайте Asiatek. Введите новый пароль для вашей учетной записи.",
        path='/auth/reset-password',
        noindex=True,
    )
    return render_page_response(request, 'main/reset_password.html', head, {
        'token': request.GET.get('token', ''),
    })


def dashboard(request):
    user = get_user_from_request(request)
    if user is None:
        return redirect('/auth')

    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Личный кабинет – Asiatek",
        description="Профиль и история заказов.",
        path='/dashboard',
        noindex=True,
    )
    return render_page_response(request, 'main/dashboard.html', head, {
        'user': user,
        'orders': Storage.get_orders_by_user_id(user.pk),
    })


def catalog(request):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Каталог запчастей для грузовых и легковых автомобилей – Asiatek",
        description="Широкий выбор запчастей для китайских, европейских грузовых и легковых "
                    "автомобилей. Оригинальные и аналоговые запчасти с доставкой по всей России и СНГ.",
        path='/zapchasti',
    )
    head.json_ld(breadcrumbs_ld([
        ("Главная", config.base_url),
        ("Запчасти", None),
    ]))
    return render_page_response(request, 'main/catalog.html', head, {'groups': brand_groups()})


def brand_page(request, slug):
    brand = get_brand_by_slug(slug)
    if brand is None:
        raise Http404(f"Unknown brand: {slug}")

    config = get_site_config()
    name = brand.display_name
    page_url = f"{config.base_url}/zapchasti/{brand.slug}"
    head = apply_seo(
        default_head(), config.base_url,
        title=f"Запчасти для {name} – Asiatek",
        description=f"Купить оригинальные и аналоговые запчасти для {brand.title}. Широкий "
                    f"ассортимент, гарантия качества. Доставка по СНГ.",
        path=f"/zapchasti/{brand.slug}",
        type='product',
        brand=name,
    )

    faq = [
        (f"Как узнать номер детали {name}?",
         f"Номер детали {name} можно найти в каталоге запчастей, на шильдике оригинальной детали "
         f"или связавшись с нашими специалистами, которые помогут определить деталь по VIN."),
        (f"Сколько стоят запчасти для {name}?",
         f"Стоимость запчастей {name} зависит от конкретной детали, её оригинальности и наличия. "
         f"Оставьте заявку, и менеджеры предоставят детальную информацию по ценам."),
        (f"Как заказать запчасти {name}?",
         f"Воспользуйтесь формой заказа на сайте, позвоните нам или напишите в чат."),
    ]
    head.json_ld(breadcrumbs_ld([
        ("Главная", config.base_url),
        ("Запчасти", f"{config.base_url}/zapchasti"),
        (name.upper(), None),
    ]))
    head.json_ld(faq_ld(faq))
    parts = []
    for sku, part_name, price, rating, reviews in POPULAR_PARTS:
        head.json_ld(product_ld(
            url=f"{page_url}/{sku}",
            name=f"{part_name} для {name}",
            brand=name,
            price=price,
            rating=rating,
            review_count=reviews,
        ))
        parts.append({'sku': sku.upper(), 'name': part_name, 'price': price})

    return render_page_response(request, 'main/brand.html', head, {
        'brand': brand,
        'faq': faq,
        'parts': parts,
    })


def not_found(request, exception=None):
    config = get_site_config()
    head = apply_seo(
        default_head(), config.base_url,
        title="Страница не найдена – Asiatek",
        description="Запрошенная страница не найдена.",
        path=request.path,
        noindex=True,
    )
    return render_page_response(request, 'main/not_found.html', head, status=404)
