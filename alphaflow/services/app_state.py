"""
Контейнер состояния приложения.

Единственный владелец всех коллекций. Любое изменение проходит через
именованное действие: действие проверяет права, вызывает чистые правила
(агенда, касса, финансы) и применяет результат к репозиториям целиком.
"""

import logging
import threading
from datetime import date, datetime, timedelta
from functools import partial
from typing import Callable, Iterable, List, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel

from alphaflow.core.config import settings
from alphaflow.core.exceptions import (
    CatalogValidationError,
    NotFoundError,
    PermissionDeniedError,
    PosValidationError,
    ValidationError,
)
from alphaflow.core.logging_config import log_action_start
from alphaflow.core.seed_data import MOCK_PRODUCTS, MOCK_USERS, services_for_mode
from alphaflow.models import (
    AppMode,
    Appointment,
    AppointmentStatus,
    CartItemType,
    Client,
    FinancialRecord,
    PaymentMethod,
    Period,
    Product,
    RecordType,
    Service,
    SystemConfig,
    User,
    UserRole,
    ViewMode,
    VisagismProfile,
)
from alphaflow.repositories import (
    AppointmentRepository,
    ClientRepository,
    FinancialRecordRepository,
    ProductRepository,
    ServiceRepository,
    UserRepository,
    generate_id,
)
from alphaflow.schemas.schedule import AppointmentForm
from alphaflow.services import (
    access_policy,
    dashboard_service,
    financial_service,
    pos_service,
    schedule_service,
    visagism_service,
)
from alphaflow.services.gemini_service import CompletionResult, GeminiService
from alphaflow.services.identity_service import AuthResult, IdentityService
from alphaflow.utils.date_utils import format_hour_slot, local_now, midnight, period_window, to_date

# Получаем логгер для этого модуля
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _build_model(model_cls: Type[ModelT], data: dict, error_cls=CatalogValidationError) -> ModelT:
    """Создает модель из данных формы, переводя ошибки pydantic в ошибки предметной области"""
    try:
        return model_cls(**data)
    except pydantic.ValidationError as e:
        details = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors())
        raise error_cls(details) from e


class AppState:
    """Состояние одного заведения в памяти процесса"""

    def __init__(
        self,
        mode: Optional[AppMode] = None,
        users: Optional[Iterable[User]] = None,
        clients: Optional[Iterable[Client]] = None,
        services: Optional[Iterable[Service]] = None,
        products: Optional[Iterable[Product]] = None,
        appointments: Optional[Iterable[Appointment]] = None,
        records: Optional[Iterable[FinancialRecord]] = None,
        system_config: Optional[SystemConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
        gemini: Optional[GeminiService] = None,
        identity: Optional[IdentityService] = None
    ):
        self._lock = threading.RLock()
        self._clock = clock or partial(local_now, settings.TIMEZONE)

        self.mode = AppMode(mode or settings.APP_MODE)
        self.users = UserRepository(users if users is not None else [u.model_copy() for u in MOCK_USERS])
        self.clients = ClientRepository(clients or [])
        self.services = ServiceRepository(services if services is not None else services_for_mode(self.mode))
        self.products = ProductRepository(products if products is not None else [p.model_copy() for p in MOCK_PRODUCTS])
        self.appointments = AppointmentRepository(appointments or [])
        self.records = FinancialRecordRepository(records or [])
        self.system_config = system_config or SystemConfig(name=settings.SYSTEM_NAME, logo_url="")

        self.cart = pos_service.Cart()
        self.current_user: Optional[User] = None
        self.last_receipt: Optional[pos_service.Receipt] = None
        self.last_ai_analysis: Optional[CompletionResult] = None

        self._gemini = gemini
        self.identity = identity or IdentityService(self.users.get_by_email)

    # --- Вспомогательное ---

    def now(self) -> datetime:
        return self._clock()

    def today(self) -> date:
        return self.now().date()

    @property
    def gemini(self) -> GeminiService:
        if self._gemini is None:
            from alphaflow.services.gemini_service import get_gemini_service
            self._gemini = get_gemini_service()
        return self._gemini

    def _require(self, allowed: bool, message: str) -> None:
        if not allowed:
            raise PermissionDeniedError(message)

    # --- Аутентификация ---

    async def login(self, email: str, password: str) -> AuthResult:
        result = await self.identity.authenticate(email, password)
        if not result.success:
            return result

        with self._lock:
            user = result.user
            if user.id not in self.users:
                # Первый вход сотрудника, созданного во внешнем провайдере
                self.users.create(user)
                logger.info(f"➕ [AUTH] Добавлен пользователь из провайдера: user_id={user.id}")
            self.current_user = user
        return result

    def logout(self) -> None:
        with self._lock:
            self.current_user = None
            self.cart.clear()

    # --- Команда ---

    def add_user(self, actor: User, data: dict) -> User:
        self._require(access_policy.can_manage_team(actor.role), "Apenas administradores podem criar usuários")
        with self._lock:
            if self.users.get_by_email(data.get("email", "")):
                raise ValidationError(f"E-mail já cadastrado: {data.get('email')}")
            user = _build_model(User, {**data, "id": generate_id()}, ValidationError)
            self.users.create(user)
        log_action_start(logger, "Novo usuário", actor.name, f"user_id={user.id}, role={user.role.value}")
        return user

    def update_user(self, actor: User, user_id: str, changes: dict) -> User:
        with self._lock:
            target = self.users.get_or_raise(user_id)
            self._require(access_policy.can_edit_user(actor, target), "Sem permissão para editar este usuário")
            if "role" in changes and actor.role != UserRole.ADMIN:
                # Роль меняет только администратор
                changes = {k: v for k, v in changes.items() if k != "role"}
            updated = _build_model(User, {**target.model_dump(), **changes, "id": target.id}, ValidationError)
            self.users.update(updated)
            if self.current_user and self.current_user.id == updated.id:
                self.current_user = updated
        logger.info(f"✏️ [TEAM] Пользователь обновлен: user_id={user_id}")
        return updated

    # --- Клиенты ---

    def add_client(self, data: dict) -> Client:
        with self._lock:
            client = _build_model(Client, {**data, "id": generate_id(), "total_spent": 0.0}, ValidationError)
            self.clients.create(client)
        logger.info(f"➕ [CLIENTS] Новый клиент: client_id={client.id}, name='{client.name}'")
        return client

    def update_client(self, client_id: str, changes: dict) -> Client:
        with self._lock:
            current = self.clients.get_or_raise(client_id)
            # total_spent меняется только продажами
            changes = {k: v for k, v in changes.items() if k not in ("id", "total_spent")}
            updated = _build_model(Client, {**current.model_dump(), **changes}, ValidationError)
            self.clients.update(updated)
        return updated

    def save_visagism_profile(self, client_id: str, profile: VisagismProfile) -> Client:
        with self._lock:
            client = self.clients.get_or_raise(client_id)
            updated = client.model_copy(update={"visagism_profile": profile})
            self.clients.update(updated)
        logger.info(f"💾 [VISAGISM] Профиль сохранен: client_id={client_id}")
        return updated

    def visagism_recommendations(self, profile: VisagismProfile) -> List[Product]:
        return visagism_service.recommend_products(profile, self.products.get_all())

    # --- Каталог ---

    def add_service(self, data: dict) -> Service:
        with self._lock:
            service = _build_model(Service, {**data, "id": generate_id()})
            self.services.create(service)
        logger.info(f"➕ [CATALOG] Новая услуга: service_id={service.id}, name='{service.name}'")
        return service

    def update_service(self, service_id: str, changes: dict) -> Service:
        with self._lock:
            current = self.services.get_or_raise(service_id)
            updated = _build_model(Service, {**current.model_dump(), **changes, "id": service_id})
            self.services.update(updated)
        return updated

    def delete_service(self, service_id: str) -> None:
        with self._lock:
            if not self.services.delete(service_id):
                raise NotFoundError(self.services.entity_name, service_id)
        logger.info(f"🗑️ [CATALOG] Услуга удалена: service_id={service_id}")

    def add_product(self, data: dict) -> Product:
        with self._lock:
            product = _build_model(Product, {**data, "id": generate_id()})
            self.products.create(product)
        logger.info(f"➕ [CATALOG] Новый товар: product_id={product.id}, name='{product.name}'")
        return product

    def update_product(self, product_id: str, changes: dict) -> Product:
        with self._lock:
            current = self.products.get_or_raise(product_id)
            updated = _build_model(Product, {**current.model_dump(), **changes, "id": product_id})
            self.products.update(updated)
            self.cart.limit_to_stock(updated)
        return updated

    def delete_product(self, product_id: str) -> None:
        with self._lock:
            if not self.products.delete(product_id):
                raise NotFoundError(self.products.entity_name, product_id)
            self.cart.remove_item(product_id)
        logger.info(f"🗑️ [CATALOG] Товар удален: product_id={product_id}")

    def set_mode(self, actor: User, mode: AppMode) -> AppMode:
        self._require(access_policy.can_edit_system(actor.role), "Apenas administradores podem mudar o modo")
        with self._lock:
            self.mode = AppMode(mode)
            self.services.replace_all(services_for_mode(self.mode))
        logger.info(f"🔄 [SETTINGS] Режим заведения: {self.mode.value}")
        return self.mode

    def update_system_config(self, actor: User, changes: dict) -> SystemConfig:
        self._require(access_policy.can_edit_system(actor.role), "Apenas administradores podem alterar o sistema")
        with self._lock:
            self.system_config = _build_model(SystemConfig, {**self.system_config.model_dump(), **changes}, ValidationError)
        logger.info(f"⚙️ [SETTINGS] Настройки системы обновлены: name='{self.system_config.name}'")
        return self.system_config

    # --- Агенда ---

    def submit_appointment_form(self, form: AppointmentForm, appointment_id: Optional[str] = None) -> Appointment:
        """Создание (или редактирование, если передан appointment_id) записи или блокировки"""
        with self._lock:
            previous = self.appointments.get_or_raise(appointment_id) if appointment_id else None
            appointment = schedule_service.build_from_form(
                form,
                self.clients.get_all(),
                self.services.get_all(),
                appointment_id=appointment_id
            )
            if previous is not None:
                schedule_service.validate_transition(previous.status, appointment.status, allow_block_toggle=True)

            overlaps = schedule_service.find_overlaps(self.appointments.get_all(), appointment)
            if overlaps:
                # Пересечения разрешены, только предупреждаем
                logger.warning(
                    f"⚠️ [SCHEDULE] Пересечение записей мастера {appointment.professional_id}: "
                    f"{[a.id for a in overlaps]}"
                )

            if previous is None:
                self.appointments.create(appointment)
            else:
                self.appointments.update(appointment)

        logger.info(
            f"📝 [SCHEDULE] {'Обновлена' if previous else 'Создана'} запись: id={appointment.id}, "
            f"status={appointment.status.value}, start={appointment.start_time}, end={appointment.end_time}"
        )
        return appointment

    def change_appointment_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        with self._lock:
            appointment = self.appointments.get_or_raise(appointment_id)
            updated = schedule_service.change_status(appointment, status)
            self.appointments.update(updated)
        logger.info(f"🔁 [SCHEDULE] Статус записи {appointment_id}: {appointment.status.value} -> {updated.status.value}")
        return updated

    def delete_appointment(self, appointment_id: str) -> None:
        with self._lock:
            if not self.appointments.delete(appointment_id):
                raise NotFoundError(self.appointments.entity_name, appointment_id)
        logger.info(f"🗑️ [SCHEDULE] Запись удалена: id={appointment_id}")

    def schedule_view(
        self,
        actor: User,
        anchor: Optional[date] = None,
        view_mode: ViewMode = ViewMode.DAY,
        professional_id: Optional[str] = None
    ) -> dict:
        """Агенда в виде дня (часовые слоты), недели или месяца"""
        anchor = to_date(anchor or self.today())
        view_mode = ViewMode(view_mode)
        filter_id = access_policy.resolve_professional_filter(actor, professional_id)
        filtered = schedule_service.filter_by_professional(self.appointments.get_all(), filter_id)
        today = self.today()

        view = {
            "anchor": anchor,
            "view_mode": view_mode.value,
            "professional_id": filter_id,
            "professionals": [{"id": u.id, "name": u.name, "short_name": u.short_name} for u in self.users.get_staff()],
        }

        if view_mode == ViewMode.DAY:
            day_appointments = schedule_service.for_date(filtered, anchor)
            view["slots"] = [
                {
                    "hour": hour,
                    "label": format_hour_slot(hour),
                    "occupied": bool(items),
                    "appointments": items,
                }
                for hour, items in schedule_service.group_by_hour(day_appointments).items()
            ]
        elif view_mode == ViewMode.WEEK:
            days = schedule_service.week_days(anchor)
            view["days"] = [
                {"date": day, "is_today": day == today, "appointments": items}
                for day, items in schedule_service.group_by_day(filtered, days).items()
            ]
        else:
            grid = schedule_service.month_grid(anchor)
            by_day = schedule_service.group_by_day(filtered, grid)
            view["cells"] = [
                None if day is None else {
                    "date": day,
                    "is_today": day == today,
                    "count": len(by_day[day]),
                    "appointments": by_day[day][:3],
                }
                for day in grid
            ]
        return view

    # --- Касса ---

    def add_to_cart(self, item_id: str, item_type: CartItemType):
        with self._lock:
            item_type = CartItemType(item_type)
            repo = self.products if item_type == CartItemType.PRODUCT else self.services
            item = repo.get_or_raise(item_id)
            return self.cart.add_item(item, item_type)

    def update_cart_quantity(self, item_id: str, delta: int):
        with self._lock:
            return self.cart.update_quantity(item_id, delta, self.products.get_by_id(item_id))

    def remove_from_cart(self, item_id: str) -> None:
        with self._lock:
            self.cart.remove_item(item_id)

    def select_cart_client(self, client_id: Optional[str]) -> Optional[Client]:
        with self._lock:
            client = self.clients.get_or_raise(client_id) if client_id else None
            self.cart.client_id = client.id if client else None
            return client

    def finalize_sale(self, payment_method: PaymentMethod) -> pos_service.Receipt:
        """
        Завершает продажу: остатки, запись в кассе и клиент обновляются вместе.
        """
        with self._lock:
            if not self.cart.items:
                raise PosValidationError("O carrinho está vazio")
            client = self.clients.get_by_id(self.cart.client_id)
            sale = pos_service.finalize_sale(
                self.cart.items, client, payment_method, self.products.get_all(), now=self.now()
            )
            receipt = pos_service.build_receipt(sale, self.cart.items, client)

            self.products.replace_all(sale.updated_products)
            self.records.create(sale.new_record)
            if sale.updated_client is not None:
                self.clients.update(sale.updated_client)

            self.cart.clear()
            self.last_receipt = receipt

        log_action_start(
            logger, "Venda finalizada", client.name if client else pos_service.WALK_IN_CUSTOMER,
            f"total={sale.total:.2f}, método={sale.payment_method.value}, record_id={sale.new_record.id}"
        )
        return receipt

    # --- Финансы ---

    def add_expense(
        self,
        actor: User,
        description: str,
        amount: float,
        record_type: RecordType = RecordType.EXPENSE,
        category: str = "Geral",
        professional_id: Optional[str] = None
    ) -> FinancialRecord:
        self._require(access_policy.can_see_expenses(actor.role), "Sem permissão para lançar no caixa")
        record = financial_service.build_manual_record(
            description, amount, record_type, category, professional_id, when=self.now()
        )
        with self._lock:
            self.records.create(record)
        logger.info(f"💰 [FINANCIAL] Ручная проводка: id={record.id}, type={record.type.value}, amount={record.amount:.2f}")
        return record

    def financial_view(self, actor: User, period: Period = Period.MONTH, professional_id: Optional[str] = None) -> dict:
        period = Period(period)
        selected = access_policy.resolve_financial_filter(actor, professional_id)
        today = self.today()
        records = financial_service.visible_records(
            self.records.get_all(), actor.role, actor.id, period, selected, today
        )
        summary = financial_service.summarize(records)
        start, end = period_window(period, today)
        return {
            "period": period.value,
            "window": {"start": start, "end": end},
            "professional_id": selected,
            "income_label": "Minhas Comissões" if access_policy.uses_commission_view(actor.role) else "Entradas (Faturamento)",
            "show_expenses": access_policy.can_see_expenses(actor.role),
            "summary": summary,
            "records": records,
            "commissions": financial_service.commission_report(
                self.users.get_all(), self.appointments.get_all(), self.services.get_all(),
                period, selected, today
            ),
        }

    def dashboard_view(self, actor: User, professional_id: Optional[str] = None) -> dashboard_service.DashboardSummary:
        selected = access_policy.resolve_professional_filter(actor, professional_id)
        return dashboard_service.dashboard_summary(
            self.appointments.get_all(), self.services.get_all(), self.clients.get_all(),
            actor, selected, self.today()
        )

    # --- AI ---

    async def financial_analysis(self, actor: User, period: Period = Period.MONTH, professional_id: Optional[str] = None) -> CompletionResult:
        records = self.financial_view(actor, period, professional_id)["records"]
        self.last_ai_analysis = CompletionResult.pending()
        result = await self.gemini.get_financial_analysis(records)
        # Последний пришедший ответ перезаписывает только свой слот
        self.last_ai_analysis = result
        return result

    async def scheduling_suggestion(self, actor: User, day: Optional[date] = None) -> CompletionResult:
        day = day or self.today()
        filter_id = access_policy.resolve_professional_filter(actor, None)
        day_appointments = self.appointments.get_appointments_by_date_range(
            midnight(day), midnight(day + timedelta(days=1))
        )
        appointments = schedule_service.filter_by_professional(day_appointments, filter_id)
        return await self.gemini.get_smart_scheduling_suggestion(appointments, day)

    async def chat(self, actor: User, message: str) -> CompletionResult:
        context = f"Modo atual: {self.mode.value}. O usuário é {actor.role.value}."
        return await self.gemini.chat(message, context)


# Единственный экземпляр состояния процесса
_app_state: Optional[AppState] = None


def get_app_state() -> AppState:
    """Получить или создать состояние приложения"""
    global _app_state
    if _app_state is None:
        _app_state = AppState()
    return _app_state


def reset_app_state(state: Optional[AppState] = None) -> AppState:
    """Заменяет состояние процесса (используется при старте и в тестах)"""
    global _app_state
    _app_state = state or AppState()
    return _app_state
