"""Export a translated catalog snapshot as schema-validated JSON."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from amberflo_catalog.catalog.assembler import build_catalog
from amberflo_catalog.catalog.client import VendorClient
from amberflo_catalog.catalog.schema import VersionedCatalog
from amberflo_catalog.config import CatalogSettings

SNAPSHOT_SCHEMA_PATH = Path(__file__).resolve().parents[1] / "data" / "catalog_snapshot.schema.json"
SCHEMA_VERSION = "1.0.0"


def validate_catalog_payload(catalog_payload: dict[str, Any]) -> None:
    """Raise ValueError when a serialized catalog does not match the snapshot schema."""
    try:
        from jsonschema import Draft202012Validator
    except ImportError as exc:
        raise RuntimeError(
            "The 'jsonschema' package is required for snapshot validation. "
            "Install it with: pip install jsonschema"
        ) from exc

    schema = json.loads(SNAPSHOT_SCHEMA_PATH.read_text(encoding="utf-8"))
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(catalog_payload), key=lambda e: list(e.path))
    if errors:
        first = errors[0]
        location = ".".join(str(token) for token in first.path) or "<root>"
        raise ValueError(f"catalog snapshot failed schema validation at {location}: {first.message}")


def snapshot_payload(catalog: VersionedCatalog) -> dict[str, object]:
    catalog_payload = catalog.to_dict()
    validate_catalog_payload(catalog_payload)
    current = catalog.current
    return {
        "schema_version": SCHEMA_VERSION,
        "generated_at_utc": datetime.now(timezone.utc).isoformat(),
        "effective_date": current.effective_date.isoformat(),
        "plan_count": len(current.plans),
        "product_count": len(current.products),
        "unit_count": len(current.units),
        "catalog": catalog_payload,
    }


def sync_catalog(
    settings: Optional[CatalogSettings] = None,
    output_path: Optional[Path] = None,
    client: Optional[VendorClient] = None,
) -> dict[str, object]:
    """Build a catalog from the vendor API and optionally write it to ``output_path``."""
    client = client or VendorClient(settings or CatalogSettings.from_sources())
    payload = snapshot_payload(build_catalog(client))
    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    return payload
