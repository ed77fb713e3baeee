#!/usr/bin/env python3
"""
Скрипт для заполнения состояния демонстрационными данными.
Создает команду, клиентов и реалистичную агенду на две недели вокруг сегодняшнего дня.
"""

import random
from datetime import timedelta
from typing import Optional

from faker import Faker

from alphaflow.core.logging_config import get_logger
from alphaflow.models import AppointmentStatus, RecordType, UserRole
from alphaflow.schemas.schedule import AppointmentForm
from alphaflow.services.app_state import AppState, get_app_state
from alphaflow.services.schedule_service import BUSINESS_HOURS

logger = get_logger(__name__)

# Инициализация Faker для генерации бразильских данных
fake = Faker('pt_BR')

EXPENSES = [
    ("Aluguel", "Infraestrutura", 1800.0),
    ("Conta de luz", "Infraestrutura", 320.0),
    ("Fornecedor de cosméticos", "Estoque", 650.0),
]


def seed_demo_data(state: AppState, days: int = 7, seed: Optional[int] = None) -> dict:
    """
    Заполняет состояние через именованные действия.

    Args:
        state: Состояние приложения
        days: Сколько дней назад и вперед от сегодня заполнять агенду
        seed: Зерно генератора для воспроизводимых данных

    Returns:
        Количество созданных записей по типам
    """
    rng = random.Random(seed)
    if seed is not None:
        fake.seed_instance(seed)

    admin = next(u for u in state.users.get_all() if u.role == UserRole.ADMIN)

    # --- Команда ---
    professionals = []
    for i in range(3):
        name = fake.name()
        professionals.append(state.add_user(admin, {
            "name": name,
            "email": f"prof{i + 1}@alphaflow.com",
            "password": "123456",
            "role": UserRole.PROFESSIONAL,
        }))
    state.add_user(admin, {
        "name": fake.name(),
        "email": "recepcao@alphaflow.com",
        "password": "123456",
        "role": UserRole.RECEPTIONIST,
    })

    # --- Клиенты ---
    clients = [
        state.add_client({
            "name": fake.name(),
            "phone": fake.cellphone_number(),
            "email": fake.email(),
            "cpf": fake.cpf(),
        })
        for _ in range(15)
    ]

    # --- Агенда ---
    services = state.services.get_all()
    today = state.today()
    appointments = 0
    for offset in range(-days, days + 1):
        day = today + timedelta(days=offset)
        for professional in professionals:
            # 2-5 записей на мастера в день, без повторов часа
            hours = rng.sample(list(BUSINESS_HOURS), rng.randint(2, 5))
            for hour in hours:
                service = rng.choice(services)
                appointment = state.submit_appointment_form(AppointmentForm(
                    client_id=rng.choice(clients).id,
                    service_id=service.id,
                    professional_id=professional.id,
                    date=day.isoformat(),
                    start_time=f"{hour:02d}:00",
                    duration=service.duration_minutes,
                ))
                if offset < 0:
                    status = AppointmentStatus.COMPLETED if rng.random() < 0.85 else AppointmentStatus.CANCELLED
                    state.change_appointment_status(appointment.id, status)
                appointments += 1

        # Обеденный перерыв одного из мастеров
        state.submit_appointment_form(AppointmentForm(
            professional_id=rng.choice(professionals).id,
            date=day.isoformat(),
            start_time="12:00",
            duration=60,
            notes="Almoço",
            is_blocking=True,
        ))

    # --- Расходы ---
    for description, category, amount in EXPENSES:
        state.add_expense(admin, description, amount, RecordType.EXPENSE, category)

    counts = {
        "users": len(state.users),
        "clients": len(clients),
        "appointments": appointments,
        "records": len(state.records),
    }
    logger.info(f"🌱 [SEED] Демо-данные созданы: {counts}")
    return counts


if __name__ == "__main__":
    from alphaflow.core.config import settings
    from alphaflow.core.logging_config import setup_logging

    setup_logging(level=settings.LOG_LEVEL, enable_colors=settings.LOG_COLORS)
    print("Starting seeding process...")
    result = seed_demo_data(get_app_state())
    for key, value in result.items():
        print(f"✓ {key}: {value}")
    print("Seeding finished successfully.")
