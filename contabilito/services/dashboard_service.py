"""Dashboard service — read-only company summary."""

from typing import Any, Dict

from sqlalchemy import func

from contabilito.core.exceptions import AuthorizationError, ResourceNotFoundError
from contabilito.db.store import CredentialStore
from contabilito.models import Account, Company, Transaction, UserCompanyRole

LATEST_TRANSACTIONS = 5


class DashboardService:
    """Aggregates balances and recent activity for one company."""

    @staticmethod
    def summary(store: CredentialStore, company_id: int, user_id: int) -> Dict[str, Any]:
        """Total balance over live accounts and the latest live transactions.

        Raises:
            ResourceNotFoundError: company missing or soft-deleted.
            AuthorizationError: the user holds no role in the company.
        """
        with store.session() as db:
            company = db.query(Company).filter(
                Company.id == company_id,
                Company.deleted_at.is_(None),
            ).first()
            if not company:
                raise ResourceNotFoundError(f"Company {company_id} not found")

            membership = db.query(UserCompanyRole).filter(
                UserCompanyRole.company_id == company_id,
                UserCompanyRole.user_id == user_id,
            ).first()
            if not membership:
                raise AuthorizationError("You do not belong to this company")

            total_balance = db.query(
                func.coalesce(func.sum(Account.initial_balance), 0.0)
            ).filter(
                Account.company_id == company_id,
                Account.deleted_at.is_(None),
            ).scalar()

            transactions = (
                db.query(Transaction)
                .filter(
                    Transaction.company_id == company_id,
                    Transaction.deleted_at.is_(None),
                )
                .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
                .limit(LATEST_TRANSACTIONS)
                .all()
            )

            return {
                "company_id": company_id,
                "total_balance": float(total_balance or 0.0),
                "transactions": [
                    {
                        "id": t.id,
                        "amount": t.amount,
                        "description": t.description,
                        "type": t.type.value,
                        "transaction_date": t.transaction_date,
                    }
                    for t in transactions
                ],
            }


dashboard_service = DashboardService()
