"""
Pytest 配置和共享 fixtures
"""
import os

# 在导入 app 之前指定数据库，避免测试写入本地文件
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from decimal import Decimal
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.database import Base, get_db, enable_sqlite_foreign_keys
from app.models import ontology  # noqa
from app.models.ontology import Guest, Room, Meal, RatePlan, Folio
from app.services.event_bus import EventBus
from app.main import app


@pytest.fixture(scope="function")
def db_engine():
    """创建内存数据库引擎"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    # 内存库随引擎释放而销毁
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """创建数据库会话"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """创建测试客户端"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def bus():
    """独立的事件总线，避免污染全局实例"""
    return EventBus()


# ============== 实体相关 Fixtures ==============

@pytest.fixture
def sample_guest(db_session):
    """创建带全部关联对象的测试客人"""
    guest = Guest(
        name="Alex",
        room=Room(room_number="101", floor=1),
        main_rate_plan=RatePlan(name="BAR", price=Decimal("288.00")),
        main_folio=Folio(folio_no="F-001"),
    )
    guest.add_meal(Meal(name="breakfast", price=Decimal("38.00")))
    guest.add_meal(Meal(name="dinner", price=Decimal("98.00")))
    guest.add_additional_rate_plan(RatePlan(name="weekend", price=Decimal("328.00")))
    guest.add_additional_folio(Folio(folio_no="F-002"))
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest


@pytest.fixture
def bare_guest(db_session):
    """创建没有任何关联对象的测试客人"""
    guest = Guest(name="Bare")
    db_session.add(guest)
    db_session.commit()
    db_session.refresh(guest)
    return guest
