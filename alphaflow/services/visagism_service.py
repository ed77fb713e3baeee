"""
Визажизм: подбор товаров под профиль клиента.
"""

from typing import Iterable, List

from alphaflow.models import Product, VisagismProfile


def recommend_products(profile: VisagismProfile, products: Iterable[Product]) -> List[Product]:
    """
    Товары, у которых хотя бы один тег recommended_for совпадает с чертами
    профиля (форма лица, тип волос, стиль бороды). Пустой профиль - пустой список.
    """
    traits = set(profile.traits())
    if not traits:
        return []
    return [p for p in products if p.recommended_for and traits.intersection(p.recommended_for)]
