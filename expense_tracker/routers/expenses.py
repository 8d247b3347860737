import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query, status

from expense_tracker.core.config import settings
from expense_tracker.db import dynamo
from expense_tracker.models.expense import (
    ClassifyRequest,
    ClassifyResponse,
    ExpenseCreate,
    ExpenseInDB,
    ExpensePublic,
    ExpenseUpdate,
)
from expense_tracker.utils.classifier import KeywordClassifier
from expense_tracker.utils.filters import ALL_CATEGORIES, MODE_ALL, filter_expenses, sort_newest_first

router = APIRouter()
logger = logging.getLogger(__name__)
classifier = KeywordClassifier.from_json(settings.CATEGORY_KEYWORDS_JSON)


@router.get("/", response_model=List[ExpensePublic])
def list_expenses(
    search: Optional[str] = Query(default=""),
    mode: str = Query(default=MODE_ALL),
    category: Optional[str] = Query(default=ALL_CATEGORIES),
):
    """
    All expenses, newest date first.
    mode is "all" or "byCategory"; category is ignored in "all" mode.
    """
    expenses = sort_newest_first(dynamo.list_expenses())
    try:
        return filter_expenses(expenses, search, mode, category)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/", response_model=ExpensePublic, status_code=status.HTTP_201_CREATED)
def create_expense(expense: ExpenseCreate):
    expense_db = ExpenseInDB(**expense.model_dump())
    item = expense_db.to_item()
    success = dynamo.put_expense(item)
    if not success:
        raise HTTPException(status_code=500, detail="Failed to save expense")
    logger.info(f"Created expense {expense_db.id} ({item['category']}, {item['amount']})")
    return ExpensePublic(**item)


@router.post("/classify", response_model=ClassifyResponse)
def classify_title(request: ClassifyRequest):
    """Category suggestion for a draft expense while its title is being typed."""
    category = classifier.suggest(request.title, request.mode, request.category)
    return ClassifyResponse(category=category, mode=request.mode)


@router.get("/{expense_id}", response_model=ExpensePublic)
def get_expense(expense_id: str):
    expense = dynamo.get_expense(expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpensePublic(**expense)


@router.put("/{expense_id}", response_model=ExpensePublic)
def update_expense(expense_id: str, expense_update: ExpenseUpdate):
    item = ExpenseInDB(id=expense_id, **expense_update.model_dump()).to_item()
    updated = dynamo.replace_expense(expense_id, item)
    if not updated:
        raise HTTPException(status_code=404, detail="Expense not found")
    return ExpensePublic(**updated)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: str):
    deleted = dynamo.delete_expense(expense_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Expense not found")
    logger.info(f"Deleted expense {expense_id}")
    return None
