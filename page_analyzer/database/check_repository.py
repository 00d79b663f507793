import logging
from datetime import datetime

from sqlalchemy import DateTime, bindparam, text

from ..models import UrlCheck

logger = logging.getLogger(__name__)

_CHECK_COLUMNS = "id, url_id, status_code, title, h1, description, created_at"
_NEWEST_FIRST = "ORDER BY created_at DESC, id DESC"

_INSERT_CHECK = text(
    """
    INSERT INTO url_checks (
        url_id, status_code, title, h1, description, created_at
    )
    VALUES (:url_id, :status_code, :title, :h1, :description, :created_at)
    RETURNING id;
    """
).bindparams(bindparam("created_at", type_=DateTime))

_LATEST_PER_URL = text(
    f"""
    SELECT {_CHECK_COLUMNS}
    FROM (
        SELECT
            {_CHECK_COLUMNS},
            ROW_NUMBER() OVER (
                PARTITION BY url_id {_NEWEST_FIRST}
            ) AS rank_in_url
        FROM url_checks
    ) ranked
    WHERE rank_in_url = 1;
    """
).columns(created_at=DateTime)


def _select(where: str, suffix: str = ""):
    return text(
        f"SELECT {_CHECK_COLUMNS} FROM url_checks {where} {suffix}".strip()
    ).columns(created_at=DateTime)


def _to_check(row) -> UrlCheck:
    return UrlCheck(
        id=row.id,
        url_id=row.url_id,
        status_code=row.status_code,
        title=row.title or "",
        h1=row.h1 or "",
        description=row.description or "",
        created_at=row.created_at,
    )


def insert_check(db, check: UrlCheck) -> int:
    with db.connect() as conn:
        new_id = conn.execute(
            _INSERT_CHECK,
            {
                "url_id": check.url_id,
                "status_code": check.status_code,
                "title": check.title or "",
                "h1": check.h1 or "",
                "description": check.description or "",
                "created_at": check.created_at or datetime.now(),
            },
        ).scalar_one()

    logger.info(
        "Saved check %s for url %s: status %s",
        new_id, check.url_id, check.status_code,
    )
    return new_id


def get_checks_for_url(db, url_id: int) -> list:
    with db.connect() as conn:
        rows = conn.execute(
            _select("WHERE url_id = :url_id", _NEWEST_FIRST),
            {"url_id": url_id},
        ).all()
    return [_to_check(row) for row in rows]


def get_latest_check(db, url_id: int):
    with db.connect() as conn:
        row = conn.execute(
            _select("WHERE url_id = :url_id", f"{_NEWEST_FIRST} LIMIT 1"),
            {"url_id": url_id},
        ).first()
    return _to_check(row) if row else None


def get_check_by_id(db, id: int):
    with db.connect() as conn:
        row = conn.execute(_select("WHERE id = :id"), {"id": id}).first()
    return _to_check(row) if row else None


def get_latest_checks(db) -> dict:
    with db.connect() as conn:
        rows = conn.execute(_LATEST_PER_URL).all()
    return {row.url_id: _to_check(row) for row in rows}
