from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import Url, UrlCheck

SUCCESS = "success"
INFO = "info"
DANGER = "danger"


@dataclass(frozen=True)
class Flash:
    message: str
    kind: str = INFO


URL_ADDED = Flash("Страница успешно добавлена", SUCCESS)
URL_EXISTS = Flash("Страница уже существует", INFO)
URL_INVALID = Flash("Некорректный URL", DANGER)
CHECK_SUCCEEDED = Flash("Страница успешно проверена", SUCCESS)
CHECK_FAILED = Flash("Произошла ошибка при проверке", DANGER)


@dataclass
class IndexPage:
    url_input: str = ""
    flash: Optional[Flash] = None


@dataclass
class UrlsPage:
    urls: List[Url]
    latest_checks: Dict[int, UrlCheck] = field(default_factory=dict)
    flash: Optional[Flash] = None

    def latest_check(self, url_id: int) -> Optional[UrlCheck]:
        return self.latest_checks.get(url_id)


@dataclass
class UrlPage:
    url: Url
    checks: List[UrlCheck] = field(default_factory=list)
    flash: Optional[Flash] = None
