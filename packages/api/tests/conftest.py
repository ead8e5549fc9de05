# This project was developed with assistance from AI tools.
"""Shared fixtures: an in-memory registry with three clients and their users.

Simulated for demonstration purposes -- not real people or cases.
"""

from collections import namedtuple

import pytest
from db.enums import BillingType, RecordType, UserRole

from src.core.ports import Actor, UserProfile

from .fakes import InMemoryDatabase, InMemoryRecordStore

World = namedtuple(
    "World",
    [
        "db",
        "alpha",
        "beta",
        "gamma",
        "admin",
        "super_admin",
        "maria",
        "carlo",
        "jose",
        "ana",
        "juan",
        "pedro",
        "sunrise",
    ],
)


def actor_for(user: UserProfile) -> Actor:
    return Actor(user_id=user.id, role=user.role, client_id=user.client_id)


@pytest.fixture
def world() -> World:
    db = InMemoryDatabase()
    alpha = db.add_client("Alpha Lending Corp.", BillingType.PREPAID, "10.00")
    beta = db.add_client("Beta Credit Cooperative", BillingType.POSTPAID, "0.00")
    gamma = db.add_client("Gamma Microfinance", BillingType.PREPAID, "1.00")

    admin = db.add_user("Rosa", "Villanueva", role=UserRole.ADMIN)
    super_admin = db.add_user("System", "Admin", role=UserRole.SUPER_ADMIN)
    maria = db.add_user("Maria", "Santos", client=alpha, mobile_number="+63 917 555 0101")
    carlo = db.add_user("Carlo", "Mendoza", client=alpha)
    jose = db.add_user("Jose", "Reyes", client=beta, telephone="+63 2 8765 4321")
    ana = db.add_user("Ana", "Cruz", client=gamma)

    juan = db.add_record(
        RecordType.INDIVIDUAL,
        first_name="Juan",
        middle_name="Perez",
        last_name="Dela Cruz",
        case_no="CV-2023-0142",
        details="Unpaid personal loan",
        source="Court docket",
    )
    pedro = db.add_record(
        RecordType.INDIVIDUAL,
        first_name="Pedro",
        last_name="Garcia",
        details="Dishonored checks",
        source="Affiliate report",
    )
    sunrise = db.add_record(
        RecordType.COMPANY,
        company_name="Sunrise Trading Inc.",
        details="Defaulted credit line",
        source="Court docket",
    )
    return World(
        db, alpha, beta, gamma, admin, super_admin, maria, carlo, jose, ana, juan, pedro, sunrise
    )


@pytest.fixture
def store(world) -> InMemoryRecordStore:
    return InMemoryRecordStore(world.db)
