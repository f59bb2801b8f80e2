"""Seed a demo user, company and bookkeeping data."""

import logging
from datetime import date, timedelta

from contabilito.core.config import Settings
from contabilito.db.store import CredentialStore, Ok, StoreHandle
from contabilito.models import Account, Category, EntryTypeEnum, Transaction
from contabilito.schemas.schemas import RegisterRequest
from contabilito.services.registration_service import registration_service

logger = logging.getLogger(__name__)

DEMO_ACCOUNTS = [
    ("Checking", 12500.0),
    ("Cash", 850.0),
]

DEMO_CATEGORIES = [
    ("Sales", EntryTypeEnum.income),
    ("Consulting", EntryTypeEnum.income),
    ("Rent", EntryTypeEnum.expense),
    ("Supplies", EntryTypeEnum.expense),
]

# (days ago, account, category, amount, description)
DEMO_TRANSACTIONS = [
    (1, "Checking", "Sales", 1200.0, "Invoice #1042"),
    (3, "Checking", "Rent", 950.0, "Office rent"),
    (6, "Cash", "Supplies", 42.5, "Printer paper"),
    (9, "Checking", "Consulting", 600.0, "Workshop"),
    (12, "Cash", "Supplies", 18.9, "Coffee"),
    (20, "Checking", "Sales", 2300.0, "Invoice #1037"),
]


def seed_sample_data(store: CredentialStore, settings: Settings) -> None:
    """Register the demo owner and fill their company, skipping what already exists."""
    if store.find_user_by_identifier(settings.DEMO_USERNAME) is not None:
        logger.info("Demo user '%s' already exists, skipping", settings.DEMO_USERNAME)
        return
    if store.find_company_by_name(settings.DEMO_COMPANY) is not None:
        logger.info("Company '%s' already exists, skipping demo seed", settings.DEMO_COMPANY)
        return

    result = registration_service.register(
        store,
        RegisterRequest(
            first_name="Demo",
            last_name="Owner",
            username=settings.DEMO_USERNAME,
            email=settings.DEMO_EMAIL,
            password=settings.DEMO_PASSWORD,
            terms_accepted=True,
            company_name=settings.DEMO_COMPANY,
        ),
        settings,
    )

    def work(handle: StoreHandle):
        db = handle.session
        accounts = {}
        for name, balance in DEMO_ACCOUNTS:
            account = Account(company_id=result.company_id, account_name=name, initial_balance=balance)
            db.add(account)
            accounts[name] = account

        categories = {}
        for name, entry_type in DEMO_CATEGORIES:
            category = Category(company_id=result.company_id, category_name=name, type=entry_type)
            db.add(category)
            categories[name] = category
        db.flush()

        today = date.today()
        for days_ago, account_name, category_name, amount, description in DEMO_TRANSACTIONS:
            category = categories[category_name]
            db.add(Transaction(
                company_id=result.company_id,
                user_id=result.user_id,
                account_id=accounts[account_name].id,
                category_id=category.id,
                type=category.type,
                amount=amount,
                description=description,
                transaction_date=today - timedelta(days=days_ago),
            ))
        return Ok(len(DEMO_TRANSACTIONS))

    store.run_in_transaction(work)
    logger.info(
        "Seeded demo user '%s' with company '%s'",
        settings.DEMO_USERNAME, settings.DEMO_COMPANY,
    )
