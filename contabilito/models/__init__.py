"""Models package — import all models so ``Base.metadata`` sees every table."""

from contabilito.models.user import User, UserSettings
from contabilito.models.company import (
    CollaborationRequest, CollaborationStatusEnum, Company, CompanyRoleEnum, UserCompanyRole,
)
from contabilito.models.ledger import Account, Category, EntryTypeEnum, Transaction

__all__ = [
    "User", "UserSettings",
    "Company", "CompanyRoleEnum", "UserCompanyRole",
    "CollaborationRequest", "CollaborationStatusEnum",
    "Account", "Category", "EntryTypeEnum", "Transaction",
]
