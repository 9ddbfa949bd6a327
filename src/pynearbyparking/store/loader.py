"""Store discovery and manifest loading."""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from importlib import resources
from importlib.metadata import PackageNotFoundError
from importlib.resources.abc import Traversable

from ..exceptions import ConfigError
from ..models import StoreInfo

MANIFEST_FILENAME = "manifest.json"
SCHEMA_FILENAME = "manifest.schema.json"
_MANIFEST_KEYS = ("id", "name", "native_geo_index", "requires_session")
_MANIFEST_CACHE: tuple[StoreManifest, ...] | None = None


@dataclass(frozen=True, slots=True)
class StoreManifest:
    id: str
    name: str
    native_geo_index: bool
    requires_session: bool


def _store_root() -> Traversable:
    return resources.files("pynearbyparking.store")


def load_manifest_schema() -> dict:
    schema_path = _store_root() / SCHEMA_FILENAME
    return json.loads(schema_path.read_text(encoding="utf-8"))


def _build_manifest(data: dict, folder_name: str) -> StoreManifest:
    if not isinstance(data, dict):
        raise ConfigError("Store manifest must be a JSON object.")
    missing = [key for key in _MANIFEST_KEYS if key not in data]
    if missing:
        raise ConfigError(f"Store manifest missing keys: {', '.join(missing)}.")
    store_id = data["id"]
    name = data["name"]
    if not isinstance(store_id, str) or not store_id:
        raise ConfigError("Store manifest id must be a non-empty string.")
    if store_id != folder_name:
        raise ConfigError("Store manifest id must match its folder name.")
    if not isinstance(name, str) or not name:
        raise ConfigError("Store manifest name must be a non-empty string.")
    for key in ("native_geo_index", "requires_session"):
        if not isinstance(data[key], bool):
            raise ConfigError(f"Store manifest {key} must be a boolean.")
    return StoreManifest(
        id=store_id,
        name=name,
        native_geo_index=data["native_geo_index"],
        requires_session=data["requires_session"],
    )


def iter_manifest_files() -> Iterable[tuple[str, Traversable]]:
    root = _store_root()
    for entry in root.iterdir():
        if not entry.is_dir():
            continue
        manifest_path = entry / MANIFEST_FILENAME
        if manifest_path.is_file():
            yield entry.name, manifest_path


def load_manifests() -> list[StoreManifest]:
    global _MANIFEST_CACHE
    if _MANIFEST_CACHE is not None:
        return list(_MANIFEST_CACHE)
    manifests: list[StoreManifest] = []
    try:
        for folder_name, manifest_path in iter_manifest_files():
            try:
                data = json.loads(manifest_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise ConfigError("Store manifest is not valid JSON.") from exc
            manifests.append(_build_manifest(data, folder_name))
    except (ModuleNotFoundError, PackageNotFoundError) as exc:
        _MANIFEST_CACHE = None
        raise ConfigError("Store package was not found.") from exc
    manifests.sort(key=lambda manifest: manifest.id)
    _MANIFEST_CACHE = tuple(manifests)
    return list(_MANIFEST_CACHE)


def clear_manifest_cache() -> None:
    """Clear cached store manifests (used in tests)."""
    global _MANIFEST_CACHE
    _MANIFEST_CACHE = None


def list_stores() -> list[StoreInfo]:
    return [
        StoreInfo(id=manifest.id, native_geo_index=manifest.native_geo_index)
        for manifest in load_manifests()
    ]


def get_manifest(store_id: str) -> StoreManifest:
    for manifest in load_manifests():
        if manifest.id == store_id:
            return manifest
    raise ConfigError("Store not found.")
