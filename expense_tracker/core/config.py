from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "SmartExpenseTracker"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_EXPENSES_TABLE: str = Field(default="smart-expense-expenses")
    DYNAMO_BUDGETS_TABLE: str = Field(default="smart-expense-budgets")

    # Classifier keyword table (category -> keywords)
    CATEGORY_KEYWORDS_JSON: str = Field(default="config/category_keywords.json")

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
