# Pydantic data models for offenses: Offense, Location.

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class Location(BaseModel):
    """Where in the source an offense was reported (file, line, column)."""

    path: Path
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)
    snippet: Optional[str] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}


class Offense(BaseModel):
    """A single finding reported by a rule (e.g. Time.zone.now in a class body at line 3)."""

    rule_id: str
    message: str
    location: Location
    severity: str = Field(default="warning", description="info, refactor, convention, warning, error, fatal")

    model_config = {"arbitrary_types_allowed": True, "frozen": True}
