# inputgate/app/schemas.py

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SearchRequest(BaseModel):
    # Any type is accepted here; the validator rejects non-strings itself
    search_term: Any = Field(default=None, alias="searchTerm")
    model_config = ConfigDict(populate_by_name=True)


class SearchResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    sanitizedTerm: Optional[str] = None
    errors: Optional[List[str]] = None
    type: Optional[str] = None
