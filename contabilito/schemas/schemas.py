"""Pydantic schemas for API request/response serialization.

JSON uses camelCase keys (``firstName``, ``userId``); snake_case is accepted
on input as well.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# ---- Auth ----
# Fields are optional so missing values surface as domain validation errors
# (400) instead of FastAPI's generic 422.
class RegisterRequest(CamelModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    terms_accepted: Optional[bool] = None
    company_name: Optional[str] = None

class RegisterResponse(CamelModel):
    message: str
    user_id: int
    company_id: Optional[int] = None

class LoginRequest(CamelModel):
    identifier: Optional[str] = None
    password: Optional[str] = None


# ---- User ----
class MembershipOut(CamelModel):
    company_id: int
    company_name: str
    role: str

class UserOut(CamelModel):
    """User view safe to return to clients (no hash, no reset token)."""
    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    created_at: Optional[datetime] = None
    companies: List[MembershipOut] = []

class LoginResponse(CamelModel):
    message: str
    user: UserOut
    access_token: str
    token_type: str = "bearer"


# ---- Dashboard ----
class TransactionOut(CamelModel):
    id: int
    amount: float
    description: Optional[str] = None
    type: str
    transaction_date: date

class DashboardData(CamelModel):
    company_id: int
    total_balance: float = 0.0
    transactions: List[TransactionOut] = []

class DashboardResponse(CamelModel):
    message: str
    data: DashboardData
