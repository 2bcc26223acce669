from __future__ import annotations

from typing import Any


def normalize_listing(payload: Any, *, items_key: str, page: int = 1, page_size: int = 50) -> dict[str, Any]:
    """Flatten the list envelopes the admin API has used over time.

    Accepts ``{<items_key>: [...], pagination: {page, limit, total, pages}}``,
    ``{items: [...], total, page, pageSize}`` and a bare list.
    """
    safe_page = max(1, int(page or 1))
    safe_page_size = max(1, int(page_size or 50))
    rows: list[Any] = []
    total: int | None = None
    stats: dict[str, Any] = {}

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        for key in (items_key, "items", "rows", "data"):
            if isinstance(payload.get(key), list):
                rows = payload[key]
                break

        if isinstance(payload.get("stats"), dict):
            stats = payload["stats"]

        meta: dict[str, Any] = {}
        for key in ("pagination", "meta"):
            if isinstance(payload.get(key), dict):
                meta = payload[key]
                break

        total = _first_int(payload.get("total"), meta.get("total"), meta.get("count"))
        safe_page = _first_int(payload.get("page"), meta.get("page")) or safe_page
        safe_page_size = (
            _first_int(
                payload.get("pageSize"),
                payload.get("page_size"),
                payload.get("limit"),
                meta.get("pageSize"),
                meta.get("page_size"),
                meta.get("limit"),
            )
            or safe_page_size
        )

    if total is None:
        total = (safe_page - 1) * safe_page_size + len(rows)

    return {
        "rows": [row for row in rows if isinstance(row, dict)],
        "stats": stats,
        "page": max(1, safe_page),
        "page_size": max(1, safe_page_size),
        "total": max(0, total),
    }


def _first_int(*values: Any) -> int | None:
    for value in values:
        converted = _to_int(value)
        if converted is not None:
            return converted
    return None


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
