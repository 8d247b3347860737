from datetime import datetime

from pydantic import BaseModel, Field

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class BudgetUpsert(BaseModel):
    amount: float = Field(gt=0)


class BudgetInDB(BaseModel):
    month: str = Field(pattern=MONTH_PATTERN)
    amount: float = Field(gt=0)
    updated_at: str = Field(default_factory=lambda: datetime.utcnow().isoformat())


class BudgetPublic(BaseModel):
    month: str
    amount: float
