"""Optional FastAPI server exposing catalog version, snapshot and refresh routes."""

from __future__ import annotations

from typing import Optional

from amberflo_catalog.api_models import CatalogResponse, CatalogVersionResponse, RefreshResponse
from amberflo_catalog.config import PLUGIN_NAME
from amberflo_catalog.errors import DecodeError, TransportError
from amberflo_catalog.plugin_api import CatalogPluginApi, TenantContext


def create_app(plugin_api: Optional[CatalogPluginApi] = None):
    """Create FastAPI app lazily so base package has no hard FastAPI dependency."""
    try:
        from fastapi import FastAPI, HTTPException
    except ImportError as exc:  # pragma: no cover
        raise RuntimeError(
            "FastAPI is not installed. Install with: "
            "pip install 'fastapi>=0.110,<1.0' 'uvicorn>=0.30,<1.0'"
        ) from exc

    api = plugin_api or CatalogPluginApi()
    app = FastAPI(title="Amberflo Catalog API", version="0.1.0")

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/v1/catalog/version", response_model=CatalogVersionResponse)
    def catalog_version(tenant_id: str | None = None) -> CatalogVersionResponse:
        version = api.get_latest_catalog_version([], TenantContext(tenant_id))
        return CatalogVersionResponse(tenant_id=tenant_id, version=version)

    @app.get("/api/v1/catalog", response_model=CatalogResponse)
    def catalog(tenant_id: str | None = None) -> CatalogResponse:
        try:
            snapshot = api.get_versioned_plugin_catalog([], TenantContext(tenant_id))
        except (TransportError, DecodeError) as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        return CatalogResponse(
            tenant_id=tenant_id,
            catalog_name=snapshot.catalog_name,
            effective_date=snapshot.effective_date,
            plan_count=len(snapshot.current.plans),
            catalog=snapshot.to_dict(),
        )

    @app.post(f"/plugins/{PLUGIN_NAME}/refresh", response_model=RefreshResponse)
    def refresh(tenant_id: str | None = None) -> RefreshResponse:
        context = TenantContext(tenant_id)
        try:
            message = api.refresh(context)
        except (TransportError, DecodeError) as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            raise HTTPException(status_code=500, detail=str(exc)) from exc
        version = api.get_latest_catalog_version([], context)
        return RefreshResponse(message=message, tenant_id=tenant_id, version=version)

    return app
