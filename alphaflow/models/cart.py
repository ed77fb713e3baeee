from pydantic import BaseModel, Field

from .enums import CartItemType


class CartItem(BaseModel):
    """Строка корзины кассы: товар или услуга из каталога"""

    id: str  # id товара или услуги в каталоге
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    type: CartItemType

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity
