"""
Shared fixtures: an in-memory SQLite database per test, a fee store over
its session and helpers that seed families, students, offerings and
subscriptions.
"""

import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_FORMAT", "text")

from datetime import date
from decimal import Decimal
from typing import Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from school_fees.config.settings import Settings
from school_fees.db.init_db import drop_db, init_db
from school_fees.models import (
    BillingCycle,
    Course,
    Family,
    FeeStructure,
    Service,
    Student,
    Subscription,
)
from school_fees.repositories.store import SqlAlchemyFeeStore


@pytest.fixture(autouse=True)
def info_logging():
    """
    Run every test with INFO enabled, as in production, and put the root
    logger back afterwards so that setup_logging() in one test cannot
    change what the next one sees.
    """
    root = logging.getLogger()
    level = root.level
    root.setLevel(logging.INFO)
    yield
    for handler in list(root.handlers):
        if getattr(handler, "_school_fees", False):
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    drop_db(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def store(session):
    return SqlAlchemyFeeStore(session)


@pytest.fixture
def snapshot_settings():
    return Settings(FAMILY_DISCOUNT_POLICY="snapshot", ALLOCATION_DUE_DAY=15, MATERIALIZE_BATCH_SIZE=2)


@pytest.fixture
def retroactive_settings():
    return Settings(FAMILY_DISCOUNT_POLICY="retroactive", ALLOCATION_DUE_DAY=15, MATERIALIZE_BATCH_SIZE=2)


class Seeder:
    """Creates committed rows for tests."""

    def __init__(self, session):
        self.session = session

    def _add(self, entity):
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def family(self, name: str = "Sharma", discount: str = "0") -> Family:
        return self._add(Family(name=name, discount_amount=Decimal(discount)))

    def student(self, family: Family, name: str = "Asha", grade: str = "5") -> Student:
        return self._add(Student(family_id=family.id, name=name, grade=grade))

    def course(
        self,
        name: str = "Mathematics",
        amount: Optional[str] = "5000",
        cycle: BillingCycle = BillingCycle.MONTHLY,
    ) -> Course:
        course = self._add(Course(name=name))
        if amount is not None:
            self._add(FeeStructure(course_id=course.id, amount=Decimal(amount), billing_cycle=cycle))
        return course

    def service(
        self,
        name: str = "Transport",
        amount: Optional[str] = "12000",
        cycle: BillingCycle = BillingCycle.YEARLY,
    ) -> Service:
        service = self._add(Service(name=name))
        if amount is not None:
            self._add(FeeStructure(service_id=service.id, amount=Decimal(amount), billing_cycle=cycle))
        return service

    def subscription(
        self,
        student: Student,
        course: Optional[Course] = None,
        service: Optional[Service] = None,
        start: date = date(2024, 1, 1),
        end: Optional[date] = None,
        discount: str = "0",
    ) -> Subscription:
        return self._add(
            Subscription(
                student_id=student.id,
                course_id=course.id if course else None,
                service_id=service.id if service else None,
                start_date=start,
                end_date=end,
                discount_amount=Decimal(discount),
            )
        )

    def standard_student(self, family: Family, name: str = "Asha") -> Student:
        """
        Student with a MONTHLY 5000 course discounted by 500 and a YEARLY
        12000 service: 4500 + 1000 = 5500 a month.
        """
        student = self.student(family, name=name)
        self.subscription(student, course=self.course(f"{name} course"), discount="500")
        self.subscription(student, service=self.service(f"{name} transport"))
        return student


@pytest.fixture
def seed(session):
    return Seeder(session)
