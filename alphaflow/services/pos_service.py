"""
Касса (POS): корзина с контролем остатков и формирование продажи.

Продажа описывается как набор изменений (SaleResult), который контейнер
приложения применяет целиком: остатки товаров, запись в кассовой книге
и обновление клиента.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Union

from alphaflow.core.exceptions import InsufficientStockError, PosValidationError
from alphaflow.models import (
    CartItem,
    CartItemType,
    Client,
    FinancialRecord,
    PaymentMethod,
    Product,
    RecordType,
    Service,
)
from alphaflow.repositories.base import generate_id

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

SALES_CATEGORY = "Vendas"
WALK_IN_CUSTOMER = "Consumidor"
RECEIPT_WALK_IN_CUSTOMER = "Consumidor Final"


@dataclass
class Cart:
    """
    Корзина кассы.

    Остаток проверяется при добавлении единицы товара: если в корзине уже
    столько же единиц, сколько на складе, добавление отклоняется
    и корзина не меняется.
    """

    items: List[CartItem] = field(default_factory=list)
    client_id: Optional[str] = None

    def find(self, item_id: str) -> Optional[CartItem]:
        return next((i for i in self.items if i.id == item_id), None)

    def quantity_of(self, item_id: str) -> int:
        item = self.find(item_id)
        return item.quantity if item else 0

    @property
    def total(self) -> float:
        return sum(i.subtotal for i in self.items)

    def add_item(self, item: Union[Product, Service], item_type: CartItemType) -> CartItem:
        item_type = CartItemType(item_type)
        current_in_cart = self.quantity_of(item.id)

        if item_type == CartItemType.PRODUCT and current_in_cart + 1 > item.stock:
            logger.warning(f"⚠️ [POS] Estoque insuficiente: product_id={item.id}, stock={item.stock}, no carrinho={current_in_cart}")
            raise InsufficientStockError(item.id, item.stock, current_in_cart + 1)

        existing = self.find(item.id)
        if existing:
            existing.quantity += 1
            return existing

        cart_item = CartItem(id=item.id, name=item.name, price=item.price, quantity=1, type=item_type)
        self.items.append(cart_item)
        return cart_item

    def update_quantity(self, item_id: str, delta: int, product: Optional[Product] = None) -> Optional[CartItem]:
        """
        Меняет количество строки на delta.

        Количество меньше 1 игнорируется (строку удаляет remove_item),
        превышение остатка товара отклоняется.
        """
        item = self.find(item_id)
        if item is None:
            return None

        new_quantity = item.quantity + delta
        if new_quantity < 1:
            return item

        if item.type == CartItemType.PRODUCT and product is not None and new_quantity > product.stock:
            logger.warning(f"⚠️ [POS] Estoque máximo atingido: product_id={item_id}, stock={product.stock}")
            raise InsufficientStockError(item_id, product.stock, new_quantity)

        item.quantity = new_quantity
        return item

    def limit_to_stock(self, product: Product) -> None:
        """Урезает строку товара до нового остатка, при нулевом остатке убирает ее"""
        item = self.find(product.id)
        if item is None or item.type != CartItemType.PRODUCT or item.quantity <= product.stock:
            return
        if product.stock < 1:
            self.remove_item(product.id)
        else:
            item.quantity = product.stock
        logger.info(f"✂️ [POS] Carrinho ajustado ao estoque: product_id={product.id}, stock={product.stock}")

    def remove_item(self, item_id: str) -> None:
        self.items = [i for i in self.items if i.id != item_id]

    def clear(self) -> None:
        self.items = []
        self.client_id = None


@dataclass(frozen=True)
class SaleResult:
    """Изменения, которые нужно применить после продажи"""

    updated_products: List[Product]
    new_record: FinancialRecord
    updated_client: Optional[Client]
    total: float
    payment_method: PaymentMethod


@dataclass(frozen=True)
class Receipt:
    items: List[CartItem]
    total: float
    date: str
    client: str
    method: str


def cart_total(cart_items: Iterable[CartItem]) -> float:
    return sum(i.price * i.quantity for i in cart_items)


def finalize_sale(
    cart_items: Iterable[CartItem],
    client: Optional[Client],
    payment_method: Union[PaymentMethod, str],
    products: Iterable[Product],
    now: Optional[datetime] = None
) -> SaleResult:
    """
    Формирует продажу по корзине.

    - остаток каждого товара из корзины уменьшается на количество строки;
    - создается ровно одна доходная запись на сумму корзины;
    - у клиента (если выбран) растет total_spent и last_visit становится
      сегодняшней датой.

    Остатки здесь повторно не проверяются: корзина гарантирует их при
    добавлении товаров.
    """
    cart_items = list(cart_items)
    if not cart_items:
        raise PosValidationError("O carrinho está vazio")

    now = now or datetime.now()
    total = cart_total(cart_items)

    product_quantities = {}
    for item in cart_items:
        if item.type == CartItemType.PRODUCT:
            product_quantities[item.id] = product_quantities.get(item.id, 0) + item.quantity

    updated_products = [
        p.model_copy(update={"stock": p.stock - product_quantities[p.id]})
        if p.id in product_quantities else p
        for p in products
    ]

    new_record = FinancialRecord(
        id=generate_id(),
        date=now,
        description=f"Venda Caixa - {client.name if client else WALK_IN_CUSTOMER}",
        amount=total,
        type=RecordType.INCOME,
        category=SALES_CATEGORY,
    )

    updated_client = None
    if client is not None:
        updated_client = client.model_copy(update={
            "total_spent": client.total_spent + total,
            "last_visit": now.date(),
        })

    return SaleResult(
        updated_products=updated_products,
        new_record=new_record,
        updated_client=updated_client,
        total=total,
        payment_method=PaymentMethod(payment_method),
    )


def build_receipt(sale: SaleResult, cart_items: Iterable[CartItem], client: Optional[Client]) -> Receipt:
    """Данные для печати чека"""
    return Receipt(
        items=[i.model_copy() for i in cart_items],
        total=sale.total,
        date=sale.new_record.date.strftime("%d/%m/%Y %H:%M:%S"),
        client=client.name if client else RECEIPT_WALK_IN_CUSTOMER,
        method=sale.payment_method.value,
    )
