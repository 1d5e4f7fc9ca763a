"""Application settings."""

import os
from typing import Literal, Optional
from pydantic import BaseModel, Field


class Settings(BaseModel):
    """Application configuration settings."""

    # CSV data source
    csv_path: str = "data/online_courses.csv"
    columns_config_path: Optional[str] = None  # Defaults to config/columns.yaml

    # Parsing
    date_format: str = "%m/%d/%Y"
    on_bad_rows: Literal["abort", "skip"] = "abort"

    # Query defaults
    recommendation_limit: int = Field(10, ge=0)
    top_k: int = Field(10, ge=0)

    # Logging
    verbose: bool = False

    def __init__(self, **data):
        # Fall back to the environment for the dataset location
        if data.get("csv_path") is None:
            data.pop("csv_path", None)
            env_path = os.environ.get("COURSES_CSV_PATH")
            if env_path:
                data["csv_path"] = env_path

        super().__init__(**data)
