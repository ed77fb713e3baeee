"""
Статические данные, которыми заполняется состояние при старте процесса.
"""

from alphaflow.models import AppMode, Product, Service, User, UserRole

MOCK_USERS = [
    User(
        id="u1",
        name="Admin Master",
        email="admin@alphaflow.com",
        password="admin",
        role=UserRole.ADMIN,
        avatar_url="https://ui-avatars.com/api/?name=Admin+Master&background=10b981&color=fff",
    ),
]

MOCK_SERVICES_BARBER = [
    Service(id="s1", name="Corte Masculino", duration_minutes=30, price=50.0, category="Cabelo", commission_percentage=40),
    Service(id="s2", name="Barba Completa", duration_minutes=30, price=35.0, category="Barba", commission_percentage=40),
    Service(id="s3", name="Corte + Barba", duration_minutes=60, price=80.0, category="Combo", commission_percentage=45),
    Service(id="s4", name="Pigmentação", duration_minutes=45, price=60.0, category="Cabelo"),
]

MOCK_SERVICES_CLINIC = [
    Service(id="c1", name="Limpeza de Pele", duration_minutes=60, price=150.0, category="Estética", commission_percentage=30),
    Service(id="c2", name="Avaliação Dermatológica", duration_minutes=30, price=200.0, category="Consulta", commission_percentage=20),
    Service(id="c3", name="Drenagem Linfática", duration_minutes=50, price=120.0, category="Corporal", commission_percentage=30),
]

MOCK_PRODUCTS = [
    Product(id="p1", name="Pomada Modeladora Matte", price=35.00, stock=15, category="Cabelo",
            commission_percentage=10, recommended_for=["Liso", "Ondulado"]),
    Product(id="p2", name="Óleo para Barba Premium", price=45.00, stock=8, category="Barba",
            commission_percentage=15, recommended_for=["Barba Cheia", "Lenhador"]),
    Product(id="p3", name="Shampoo Anti-queda", price=55.00, stock=12, category="Cabelo",
            commission_percentage=10, recommended_for=["Crespo", "Cacheado"]),
    Product(id="p4", name="Gel Fixador Extra Forte", price=25.00, stock=20, category="Cabelo",
            commission_percentage=5, recommended_for=["Oval", "Quadrado"]),
    Product(id="p5", name="Balm Hidratante", price=30.00, stock=10, category="Barba",
            commission_percentage=10, recommended_for=["Cavanhaque", "Barba Cheia"]),
]


def services_for_mode(mode: AppMode) -> list:
    """Каталог услуг по умолчанию для режима заведения"""
    source = MOCK_SERVICES_BARBER if AppMode(mode) == AppMode.BARBER else MOCK_SERVICES_CLINIC
    return [s.model_copy() for s in source]
