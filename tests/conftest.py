"""
Shared pytest fixtures — in‑memory SQLite + FastAPI TestClient.
"""
import pathlib

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.sales.database import Base, get_db
from app.sales.models import SaleRecordModel  # noqa: F401  — register model
from app.main import app

FIXTURES = pathlib.Path(__file__).resolve().parent.parent / "fixtures"

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


# Report layout: title, tour name, header, orders with an extra ticket line,
# per-tour footer, second tour, document footer, end marker, trailer.
REPORT_GRID = [
    ["Отчёт агента за период 01.03.2024 - 31.03.2024"],
    [],
    ["Обзорная экскурсия по Волгограду"],
    ["Дата", "Время", "ID заказа", "Участник", "Категория", "Цена", "Кол-во",
     "Оплачено", "", "Комиссия, %", "Гиду", "Спутнику", "Комментарий"],
    ["21.03.2024", "12:00", "5113680", "Анна", "Взрослый", "1500", "2",
     "3000", "", "20", "2400", "600", "Без пересадок"],
    ["", "Детский", "500", "1"],
    ["", "гиду", "спутнику"],
    ["22.03.2024", "10:30", "5113700", "Пётр", "Взрослый", "1500", "1",
     "1500", "", "20", "1200", "300"],
    ["Комиссия за все заказы данной экскурсии в указанном периоде:", "", "", "900.0"],
    ["Прогулка на теплоходе"],
    ["45383", "18:00", "5113800", "Ольга", "Стандарт", "2000", "3",
     "6000", "", "15", "5100", "900"],
    ["Всего реализовано билетов: 3069 на сумму 7556750.0 RUB"],
    ['Суммарная комиссия ООО "СПУТНИК" за период: 1603210.0 RUB'],
    ["Итого к перечислению: 5953540.0 RUB"],
    ["23.03.2024", "09:00", "5113999", "Хвост", "Взрослый", "1000", "1", "1000"],
]



@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(db):
    def _override():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = _override
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def report_grid():
    return [list(row) for row in REPORT_GRID]


@pytest.fixture()
def sample_order_text():
    return (FIXTURES / "sample_order.txt").read_text(encoding="utf-8")


@pytest.fixture()
def orders_batch_text():
    return (FIXTURES / "sample_orders_batch.txt").read_text(encoding="utf-8")
