"""Pydantic API contracts for the catalog HTTP endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CatalogVersionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tenant_id: Optional[str] = None
    version: datetime


class CatalogResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    tenant_id: Optional[str] = None
    catalog_name: str
    effective_date: datetime
    plan_count: int = Field(ge=0)
    catalog: dict[str, Any]


class RefreshResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    status: Literal["ok"] = "ok"
    message: str
    tenant_id: Optional[str] = None
    version: datetime
