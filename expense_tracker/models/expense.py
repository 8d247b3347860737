from datetime import date as date_type
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


def utc_today() -> date_type:
    """Current day on the same UTC clock the dashboard and reports use."""
    return datetime.utcnow().date()


class Category(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    SHOPPING = "Shopping"
    OTHER = "Other"


class ExpenseBase(BaseModel):
    title: str = Field(min_length=1)
    amount: float = Field(gt=0)
    date: date_type
    description: Optional[str] = ""
    category: Category

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title must not be blank")
        return value


class ExpenseCreate(ExpenseBase):
    @field_validator("date")
    @classmethod
    def date_not_in_future(cls, value: date_type) -> date_type:
        if value > utc_today():
            raise ValueError("Expense date cannot be in the future")
        return value


class ExpenseUpdate(ExpenseBase):
    """Edits replace the whole record, so every field is required."""


class ExpenseInDB(ExpenseBase):
    id: str = Field(default_factory=lambda: str(uuid4()))

    def to_item(self) -> dict:
        item = self.model_dump(mode="json")
        item["description"] = item.get("description") or ""
        return item


class ExpensePublic(BaseModel):
    id: str
    title: str
    amount: float
    date: str
    description: Optional[str] = ""
    category: str


class ClassifyRequest(BaseModel):
    title: str = ""
    # "manual" keeps the user's pick until a new draft is started
    mode: str = Field(default="auto", pattern="^(auto|manual)$")
    category: Optional[Category] = None


class ClassifyResponse(BaseModel):
    category: Category
    mode: str
