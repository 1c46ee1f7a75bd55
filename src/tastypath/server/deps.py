"""Dependency definitions for the TastyPath API server."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from tastypath.config import Settings, get_settings
from tastypath.shopping.heuristics import Heuristics, load_heuristics
from tastypath.shopping.store import ShoppingListStore


_stores: dict[tuple[Path, Optional[Path]], ShoppingListStore] = {}
_stores_lock = threading.Lock()


def _store_for(path: Path, heuristics_path: Optional[Path]) -> ShoppingListStore:
    with _stores_lock:
        store = _stores.get((path, heuristics_path))
        if store is None:
            store = ShoppingListStore.load(path, heuristics=load_heuristics(heuristics_path))
            _stores[(path, heuristics_path)] = store
        return store


def reset_stores() -> None:
    """Close cached stores so the next request reopens the database."""

    with _stores_lock:
        for store in _stores.values():
            store.close()
        _stores.clear()


def get_store(settings: Settings = Depends(get_settings)) -> ShoppingListStore:
    """Return the process-wide store for the configured shopping list database."""

    return _store_for(settings.database_path, settings.heuristics_path)


def get_heuristics(settings: Settings = Depends(get_settings)) -> Heuristics:
    return load_heuristics(settings.heuristics_path)


def require_api_token(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> None:
    """Ensure requests carry the configured API token when one is set."""

    token = settings.api_token
    if not token:
        return

    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.split("Bearer ")[-1].strip() == token:
        return

    if request.headers.get("X-API-Key") == token:
        return

    if request.query_params.get("api_token") == token:
        return

    raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


__all__ = ["get_store", "get_heuristics", "reset_stores", "require_api_token"]
