# main/brands.py
"""Каталог марок для страниц /zapchasti"""
from dataclasses import dataclass, field
from typing import List, Optional

CATEGORY_TITLES = {
    'chinese': 'Китайские грузовики',
    'commercial': 'Европейские грузовики',
    'passenger': 'Легковые автомобили',
}


@dataclass(frozen=True)
class Brand:
    slug: str
    name: str
    description: str
    category: str
    full_name: Optional[str] = None
    models: List[str] = field(default_factory=list)

    @property
    def display_name(self):
        return self.name[:1].upper() + self.name[1:]

    @property
    def title(self):
        return self.full_name or self.display_name


CHINESE_BRANDS = [
    Brand(
        slug='sitrak', name='sitrak', full_name='Sitrak (Ситрак)', category='chinese',
        description='Sitrak - это бренд коммерческих грузовиков, созданный совместным предприятием '
                    'между немецким MAN и китайским Sinotruk. Мы предлагаем широкий ассортимент '
                    'оригинальных и аналоговых запчастей для грузовиков Sitrak всех моделей.',
        models=['C7H', 'T7H', 'A7H'],
    ),
    Brand(
        slug='howo', name='howo', full_name='HOWO (Хово)', category='chinese',
        description='HOWO - известный китайский бренд грузовых автомобилей, принадлежащий корпорации '
                    'Sinotruk. Мы поставляем качественные оригинальные и аналоговые запчасти для всех '
                    'моделей грузовиков HOWO.',
        models=['A7', 'T5G', 'T7H'],
    ),
    Brand(
        slug='shacman', name='shacman', full_name='Shacman (Шакман)', category='chinese',
        description='Shacman - один из ведущих китайских производителей грузовых автомобилей. Наша '
                    'компания предлагает полный ассортимент запчастей для грузовиков Shacman всех '
                    'моделей и годов выпуска.',
        models=['X3000', 'F2000', 'F3000', 'H3000'],
    ),
    Brand(
        slug='sinotruk', name='sinotruk', full_name='Sinotruk (Синотрак)', category='chinese',
        description='Sinotruk - крупный китайский производитель грузовых автомобилей. Мы предлагаем '
                    'широкий выбор запчастей для всех моделей грузовиков Sinotruk, включая '
                    'оригинальные детали и качественные аналоги.',
        models=['HOWO', 'HOHAN', 'SITRAK'],
    ),
    Brand(
        slug='faw', name='faw', full_name='FAW (ФАВ)', category='chinese',
        description='FAW - одна из старейших и крупнейших автомобилестроительных компаний Китая. В '
                    'нашем каталоге представлены оригинальные и аналоговые запчасти для всех моделей '
                    'грузовиков FAW.',
        models=['J6', 'Tiger V', 'Jiefang'],
    ),
    Brand(
        slug='dongfeng', name='dongfeng', full_name='Dongfeng (Донгфенг)', category='chinese',
        description='Dongfeng - один из ведущих производителей коммерческого транспорта в Китае. Мы '
                    'предлагаем полный спектр запчастей для грузовиков Dongfeng всех модификаций.',
        models=['KL', 'KR', 'DFL'],
    ),
    Brand(
        slug='dfsk', name='dfsk', full_name='DFSK', category='chinese',
        description='DFSK - китайский производитель лёгких коммерческих автомобилей и минивэнов. '
                    'Мы подбираем оригинальные и аналоговые запчасти для всех моделей DFSK.',
        models=['C31', 'C32', 'K01'],
    ),
    Brand(
        slug='foton', name='foton', full_name='Foton (Фотон)', category='chinese',
        description='Foton - крупнейший в Китае производитель коммерческой техники. В нашем '
                    'ассортименте запчасти для грузовиков и фургонов Foton всех серий.',
        models=['Auman', 'Aumark', 'Ollin'],
    ),
    Brand(
        slug='jac', name='jac', full_name='JAC (Джак)', category='chinese',
        description='JAC - китайский производитель грузовых и легковых автомобилей. Мы поставляем '
                    'запчасти для грузовиков JAC с доставкой по России и СНГ.',
        models=['N56', 'N80', 'N120'],
    ),
]

COMMERCIAL_BRANDS = [
    Brand(
        slug='mercedes', name='mercedes', full_name='Mercedes-Benz Trucks', category='commercial',
        description='Mercedes-Benz Trucks - подразделение Daimler AG, производящее грузовые автомобили '
                    'премиум-класса. Мы поставляем оригинальные и аналоговые запчасти для грузовиков '
                    'Mercedes-Benz всех моделей.',
        models=['Actros', 'Arocs', 'Atego', 'Axor'],
    ),
    Brand(
        slug='volvo', name='volvo', full_name='Volvo Trucks', category='commercial',
        description='Volvo Trucks - шведский производитель грузовых автомобилей, известный своей '
                    'безопасностью и надежностью. В нашем ассортименте представлены запчасти для '
                    'всех серий грузовиков Volvo.',
        models=['FH', 'FM', 'FMX', 'FE', 'FL'],
    ),
    Brand(
        slug='scania', name='scania', full_name='Scania', category='commercial',
        description='Scania - шведский производитель тяжелых грузовых автомобилей и автобусов. Мы '
                    'предлагаем широкий выбор запчастей для грузовиков Scania всех серий и поколений.',
        models=['R-series', 'S-series', 'G-series', 'P-series'],
    ),
    Brand(
        slug='man', name='man', full_name='MAN Truck & Bus', category='commercial',
        description='MAN - немецкий производитель коммерческих автомобилей, входящий в группу '
                    'Volkswagen AG. Наша компания поставляет запчасти для всех моделей грузовиков MAN.',
        models=['TGX', 'TGS', 'TGM', 'TGL'],
    ),
]

PASSENGER_BRANDS = [
    Brand(
        slug='bmw', name='bmw', full_name='BMW', category='passenger',
        description='BMW - немецкий производитель премиальных автомобилей и мотоциклов. Мы предлагаем '
                    'оригинальные и аналоговые запчасти для всех моделей BMW.',
        models=['3 Series', '5 Series', '7 Series', 'X5', 'X7'],
    ),
    Brand(
        slug='toyota', name='toyota', full_name='Toyota', category='passenger',
        description='Toyota - японский автопроизводитель, известный своей надежностью и '
                    'долговечностью. В нашем каталоге представлены запчасти для всех популярных '
                    'моделей Toyota.',
        models=['Camry', 'Corolla', 'Land Cruiser', 'RAV4', 'Prado'],
    ),
    Brand(
        slug='kia', name='kia', full_name='Kia', category='passenger',
        description='Kia - южнокорейский производитель автомобилей с широкой линейкой моделей. Мы '
                    'поставляем запчасти для всех современных моделей Kia.',
        models=['Rio', 'Sportage', 'Sorento', 'Cerato', 'K5'],
    ),
    Brand(
        slug='hyundai', name='hyundai', full_name='Hyundai', category='passenger',
        description='Hyundai - южнокорейский автопроизводитель с обширной линейкой автомобилей. В '
                    'нашем ассортименте представлены запчасти для всех популярных моделей Hyundai.',
        models=['Solaris', 'Creta', 'Santa Fe', 'Tucson', 'Elantra'],
    ),
]

ALL_BRANDS = CHINESE_BRANDS + COMMERCIAL_BRANDS + PASSENGER_BRANDS

_BY_SLUG = {brand.slug: brand for brand in ALL_BRANDS}


def get_brand_by_slug(slug) -> Optional[Brand]:
    return _BY_SLUG.get(slug)


def brand_groups():
    """[(заголовок группы, [марки]), ...] в порядке каталога"""
    return [
        (CATEGORY_TITLES['chinese'], CHINESE_BRANDS),
        (CATEGORY_TITLES['commercial'], COMMERCIAL_BRANDS),
        (CATEGORY_TITLES['passenger'], PASSENGER_BRANDS),
    ]
