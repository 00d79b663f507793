import logging
from datetime import datetime

from sqlalchemy import DateTime, bindparam, text

from ..models import Url

logger = logging.getLogger(__name__)

_INSERT_URL = text(
    """
    INSERT INTO urls (name, created_at)
    VALUES (:name, :created_at)
    RETURNING id;
    """
).bindparams(bindparam("created_at", type_=DateTime))

_SELECT_URLS = "SELECT id, name, created_at FROM urls"


def _select(where: str = "", order_by: str = ""):
    sql = " ".join(part for part in (_SELECT_URLS, where, order_by) if part)
    return text(sql).columns(created_at=DateTime)


def _to_url(row) -> Url:
    return Url(id=row.id, name=row.name, created_at=row.created_at)


def insert_url(db, normalized_url: str) -> int:
    with db.connect() as conn:
        new_id = conn.execute(
            _INSERT_URL,
            {"name": normalized_url, "created_at": datetime.now()},
        ).scalar_one()

    logger.info("Saved url %s with id %s", normalized_url, new_id)
    return new_id


def get_url_by_name(db, name: str):
    with db.connect() as conn:
        row = conn.execute(
            _select("WHERE name = :name"), {"name": name}
        ).first()
    return _to_url(row) if row else None


def url_exists(db, name: str) -> bool:
    with db.connect() as conn:
        row = conn.execute(
            text("SELECT 1 FROM urls WHERE name = :name"), {"name": name}
        ).first()
    return row is not None


def get_url_by_id(db, id: int):
    with db.connect() as conn:
        row = conn.execute(_select("WHERE id = :id"), {"id": id}).first()
    return _to_url(row) if row else None


def get_all_urls(db) -> list:
    with db.connect() as conn:
        rows = conn.execute(
            _select(order_by="ORDER BY created_at DESC, id DESC")
        ).all()
    return [_to_url(row) for row in rows]
