"""
Исключения предметной области.

Ошибки валидации поднимаются синхронно и не меняют состояние,
API-слой переводит их в HTTP-ответы.
"""


class AlphaFlowError(Exception):
    """Базовое исключение приложения"""


class ValidationError(AlphaFlowError):
    """Ошибка валидации формы или действия пользователя"""


class ScheduleValidationError(ValidationError):
    pass


class FinancialValidationError(ValidationError):
    pass


class CatalogValidationError(ValidationError):
    pass


class PosValidationError(ValidationError):
    pass


class InsufficientStockError(PosValidationError):
    """Попытка положить в корзину больше товара, чем есть на складе"""

    def __init__(self, product_id: str, stock: int, requested: int):
        self.product_id = product_id
        self.stock = stock
        self.requested = requested
        super().__init__("Estoque insuficiente!")


class NotFoundError(AlphaFlowError):
    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} '{entity_id}' não encontrado")


class PermissionDeniedError(AlphaFlowError):
    pass


class AuthenticationError(AlphaFlowError):
    pass
