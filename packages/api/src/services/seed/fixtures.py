# This project was developed with assistance from AI tools.
"""
Demo fixture data for the negative records registry.

All fixture data is defined as Python dicts so enums can be referenced directly
and type-checked. Keycloak user IDs are deterministic UUIDs so seeded profiles
link to the realm's demo accounts; the super admin also answers to the
``dev-user`` subject used when AUTH_DISABLED=true.

Simulated for demonstration purposes -- not real people or cases.
"""

import hashlib
import json
from datetime import date
from decimal import Decimal

from db.enums import BillingType, RecordType, UserRole

# ---------------------------------------------------------------------------
# Keycloak user references (deterministic UUIDs)
# ---------------------------------------------------------------------------

SUPER_ADMIN_ID = "dev-user"
ADMIN_ID = "6f1c2a9e-4b3d-4e8a-9c71-0a5b2d3e4f01"
ALPHA_AFFILIATE_ID = "6f1c2a9e-4b3d-4e8a-9c71-0a5b2d3e4f02"
BETA_AFFILIATE_ID = "6f1c2a9e-4b3d-4e8a-9c71-0a5b2d3e4f03"
GAMMA_AFFILIATE_ID = "6f1c2a9e-4b3d-4e8a-9c71-0a5b2d3e4f04"

# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------

CLIENTS = [
    {
        "client_code": "ALPHA",
        "name": "Alpha Lending Corp.",
        "email": "billing@alpha-lending.example",
        "telephone": "+63 2 8123 4567",
        "billing_type": BillingType.PREPAID,
        "credit_balance": Decimal("25.00"),
        "credit_limit": Decimal("500.00"),
    },
    {
        "client_code": "BETA",
        "name": "Beta Credit Cooperative",
        "email": "ops@beta-coop.example",
        "telephone": "+63 2 8765 4321",
        "billing_type": BillingType.POSTPAID,
        "credit_balance": Decimal("0.00"),
        "credit_limit": None,
    },
    {
        "client_code": "GAMMA",
        "name": "Gamma Microfinance",
        "email": "accounts@gamma-mf.example",
        "telephone": "+63 32 255 0101",
        "billing_type": BillingType.PREPAID,
        "credit_balance": Decimal("1.00"),
        "credit_limit": Decimal("100.00"),
    },
]

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

USERS = [
    {
        "keycloak_user_id": SUPER_ADMIN_ID,
        "email": "admin@negrect.example",
        "role": UserRole.SUPER_ADMIN,
        "client_ref": None,
        "first_name": "System",
        "last_name": "Admin",
    },
    {
        "keycloak_user_id": ADMIN_ID,
        "email": "reviewer@negrect.example",
        "role": UserRole.ADMIN,
        "client_ref": None,
        "first_name": "Rosa",
        "last_name": "Villanueva",
    },
    {
        "keycloak_user_id": ALPHA_AFFILIATE_ID,
        "email": "maria.santos@alpha-lending.example",
        "role": UserRole.AFFILIATE,
        "client_ref": "ALPHA",
        "first_name": "Maria",
        "last_name": "Santos",
        "mobile_number": "+63 917 555 0101",
    },
    {
        "keycloak_user_id": BETA_AFFILIATE_ID,
        "email": "jose.reyes@beta-coop.example",
        "role": UserRole.AFFILIATE,
        "client_ref": "BETA",
        "first_name": "Jose",
        "middle_name": "Lim",
        "last_name": "Reyes",
        "mobile_number": "+63 918 555 0202",
    },
    {
        "keycloak_user_id": GAMMA_AFFILIATE_ID,
        "email": "ana.cruz@gamma-mf.example",
        "role": UserRole.AFFILIATE,
        "client_ref": "GAMMA",
        "first_name": "Ana",
        "last_name": "Cruz",
        "telephone": "+63 32 255 0102",
    },
]

# ---------------------------------------------------------------------------
# Negative records
# ---------------------------------------------------------------------------

RECORDS = [
    {
        "type": RecordType.INDIVIDUAL,
        "first_name": "Juan",
        "middle_name": "Perez",
        "last_name": "Dela Cruz",
        "case_no": "CV-2023-0142",
        "plaintiff": "Alpha Lending Corp.",
        "case_type": "Collection of Sum of Money",
        "court_type": "RTC",
        "branch": "Branch 12",
        "city": "Makati",
        "date_filed": date(2023, 3, 14),
        "details": "Unpaid personal loan of PHP 250,000 plus interest.",
        "source": "Court docket, March 2023",
        "bounce": "3",
    },
    {
        "type": RecordType.INDIVIDUAL,
        "first_name": "Pedro",
        "last_name": "Garcia",
        "case_no": "BP22-2022-0788",
        "plaintiff": "Beta Credit Cooperative",
        "case_type": "Violation of BP 22",
        "court_type": "MTC",
        "branch": "Branch 4",
        "city": "Quezon City",
        "date_filed": date(2022, 11, 2),
        "details": "Two dishonored checks totalling PHP 80,000.",
        "source": "Affiliate report",
        "bounce": "2",
    },
    {
        "type": RecordType.INDIVIDUAL,
        "first_name": "Lorna",
        "last_name": "Bautista",
        "alias": "Lorie Bautista",
        "case_type": "Estafa",
        "court_type": "RTC",
        "branch": "Branch 33",
        "city": "Cebu City",
        "date_filed": date(2024, 1, 22),
        "details": "Misappropriation of consigned goods.",
        "source": "Newspaper publication",
        "watch": "Y",
    },
    {
        "type": RecordType.COMPANY,
        "company_name": "Sunrise Trading Inc.",
        "case_no": "CV-2021-0301",
        "plaintiff": "Gamma Microfinance",
        "case_type": "Collection of Sum of Money",
        "court_type": "RTC",
        "branch": "Branch 7",
        "city": "Pasig",
        "date_filed": date(2021, 6, 8),
        "details": "Defaulted on a PHP 1.2M working capital line.",
        "source": "Court docket, June 2021",
        "delinquent": "Y",
    },
    {
        "type": RecordType.COMPANY,
        "company_name": "Northpoint Telecom Resellers",
        "case_type": "Unpaid telecom accounts",
        "city": "Davao City",
        "date_filed": date(2023, 9, 30),
        "details": "Multiple postpaid accounts written off.",
        "source": "Telco consortium list",
        "telecom": "Y",
    },
]


def compute_config_hash() -> str:
    """Compute a SHA-256 hash of the fixture data for idempotency checks."""
    content = json.dumps(
        {
            "client_codes": [c["client_code"] for c in CLIENTS],
            "user_ids": [u["keycloak_user_id"] for u in USERS],
            "record_cases": [
                r.get("case_no") or r.get("company_name") or r.get("last_name") for r in RECORDS
            ],
        },
        sort_keys=True,
    )
    return hashlib.sha256(content.encode()).hexdigest()
