from dataclasses import dataclass
from datetime import datetime
from typing import Optional

DATE_FORMAT = "%d/%m/%Y %H:%M"


def format_date(value: Optional[datetime]) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


@dataclass(frozen=True)
class Url:
    id: int
    name: str
    created_at: datetime

    @property
    def formatted_created_at(self) -> str:
        return format_date(self.created_at)


@dataclass(frozen=True)
class UrlCheck:
    url_id: int
    status_code: int
    title: str = ""
    h1: str = ""
    description: str = ""
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def formatted_created_at(self) -> str:
        return format_date(self.created_at)
