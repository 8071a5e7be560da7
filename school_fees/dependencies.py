"""
FastAPI dependencies: database session, fee store and service factories.

A store is built per request from the request's session, so no service
ever reaches for a global connection.
"""
from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from school_fees.config.settings import Settings, get_settings
from school_fees.db.session import get_db
from school_fees.repositories.store import FeeStore, SqlAlchemyFeeStore
from school_fees.services.billing import AllocationMaterializerService, FeeAllocationService
from school_fees.services.fee_structure import FeeCalculationService
from school_fees.services.payment import PaymentService
from school_fees.services.subscription import SubscriptionService


# ------------------------------------------------------------------ #
# DB / store
# ------------------------------------------------------------------ #
def get_store(db: Session = Depends(get_db)) -> FeeStore:
    """
    Provide the fee store for the current request's session.
    """
    return SqlAlchemyFeeStore(db)


def get_app_settings() -> Settings:
    return get_settings()


# ------------------------------------------------------------------ #
# Service factories
# ------------------------------------------------------------------ #
def get_fee_calculation_service(
    store: FeeStore = Depends(get_store),
    config: Settings = Depends(get_app_settings),
) -> FeeCalculationService:
    return FeeCalculationService(store, config)


def get_materializer_service(
    store: FeeStore = Depends(get_store),
    config: Settings = Depends(get_app_settings),
) -> AllocationMaterializerService:
    return AllocationMaterializerService(store, config)


def get_allocation_service(
    store: FeeStore = Depends(get_store),
    config: Settings = Depends(get_app_settings),
) -> FeeAllocationService:
    return FeeAllocationService(store, config)


def get_payment_service(
    store: FeeStore = Depends(get_store),
    config: Settings = Depends(get_app_settings),
) -> PaymentService:
    return PaymentService(store, config)


def get_subscription_service(
    store: FeeStore = Depends(get_store),
    config: Settings = Depends(get_app_settings),
) -> SubscriptionService:
    return SubscriptionService(store, config)
