import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from expense_tracker.core.config import settings

logger = logging.getLogger(__name__)

# Initialize DynamoDB resource
dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)

# Get table references
expenses_table = dynamodb.Table(settings.DYNAMO_EXPENSES_TABLE)
budgets_table = dynamodb.Table(settings.DYNAMO_BUDGETS_TABLE)


def list_expenses() -> List[Dict[str, Any]]:
    """Full scan of the Expenses table, following pagination."""
    items: List[Dict[str, Any]] = []
    scan_kwargs: Dict[str, Any] = {}
    try:
        while True:
            response = expenses_table.scan(**scan_kwargs)
            items.extend(_from_dynamo(item) for item in response.get("Items", []))
            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            scan_kwargs["ExclusiveStartKey"] = last_key
    except ClientError as e:
        logger.error(f"list_expenses failed: {e.response['Error']['Message']}")
        return []
    return items


def get_expense(expense_id: str) -> Optional[Dict[str, Any]]:
    """Fetch a single expense item."""
    try:
        response = expenses_table.get_item(Key={"id": expense_id})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_expense failed: {e.response['Error']['Message']}")
        return None


def put_expense(expense_item: dict) -> bool:
    """Insert a new expense."""
    try:
        expenses_table.put_item(Item=_convert_for_dynamo(expense_item))
        return True
    except ClientError as e:
        logger.error(f"put_expense failed: {e.response['Error']['Message']}")
        return False


def replace_expense(expense_id: str, expense_item: dict) -> Optional[Dict[str, Any]]:
    """
    Replace every field of an existing expense. The id is kept.
    Returns the stored item, or None if the expense does not exist.
    """
    item = dict(expense_item, id=expense_id)
    try:
        expenses_table.put_item(
            Item=_convert_for_dynamo(item),
            ConditionExpression="attribute_exists(id)",
        )
        return item
    except ClientError as e:
        if e.response["Error"]["Code"] != "ConditionalCheckFailedException":
            logger.error(f"replace_expense failed: {e.response['Error']['Message']}")
        return None


def delete_expense(expense_id: str) -> bool:
    """Delete a specific expense item."""
    try:
        response = expenses_table.delete_item(
            Key={"id": expense_id},
            ReturnValues="ALL_OLD",
        )
        return "Attributes" in response
    except ClientError as e:
        logger.error(f"delete_expense failed: {e.response['Error']['Message']}")
        return False


def get_budget(month: str) -> Optional[Dict[str, Any]]:
    """Budget record for a YYYY-MM month key."""
    try:
        response = budgets_table.get_item(Key={"month": month})
        item = response.get("Item")
        return _from_dynamo(item) if item else None
    except ClientError as e:
        logger.error(f"get_budget failed: {e.response['Error']['Message']}")
        return None


def upsert_budget(budget_item: dict) -> bool:
    """
    Create the month's budget, or overwrite it in place.
    The month is the table key, so repeated submissions never duplicate.
    """
    try:
        budgets_table.put_item(Item=_convert_for_dynamo(budget_item))
        return True
    except ClientError as e:
        logger.error(f"upsert_budget failed: {e.response['Error']['Message']}")
        return False


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal for DynamoDB compatibility.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj


def _from_dynamo(obj: Any):
    """
    Recursively convert Decimal instances back to native Python numeric types.
    """
    if isinstance(obj, list):
        return [_from_dynamo(item) for item in obj]
    if isinstance(obj, dict):
        return {k: _from_dynamo(v) for k, v in obj.items()}
    if isinstance(obj, Decimal):
        if obj % 1 == 0:
            return int(obj)
        return float(obj)
    return obj
