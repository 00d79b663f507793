import logging
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from .errors import FetchFailure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5
NO_RESPONSE = 0
EMPTY_FIELDS = {"title": "", "h1": "", "description": ""}


@dataclass(frozen=True)
class PageCheck:
    status_code: int
    title: str = ""
    h1: str = ""
    description: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status_code != NO_RESPONSE


def is_parsable_status(status_code: int) -> bool:
    return 200 <= status_code < 400


def _is_description(name) -> bool:
    return bool(name) and name.strip().lower() == "description"


def _extract(html_text: str) -> dict:
    soup = BeautifulSoup(html_text, "html.parser")
    title_tag = soup.find("title")
    h1_tag = soup.find("h1")
    desc_tag = soup.find("meta", attrs={"name": _is_description})
    title = title_tag.get_text().strip() if title_tag else ""
    h1 = h1_tag.get_text().strip() if h1_tag else ""
    description = (
        desc_tag.get("content").strip()
        if desc_tag and desc_tag.get("content")
        else ""
    )
    return {"title": title, "h1": h1, "description": description}


def parse_page(html_text: str) -> dict:
    try:
        return _extract(html_text or "")
    except Exception:
        logger.warning("Could not parse page, keeping empty fields",
                       exc_info=True)
        return dict(EMPTY_FIELDS)


def fetch_page(url: str, connect_timeout=DEFAULT_TIMEOUT,
               read_timeout=DEFAULT_TIMEOUT) -> requests.Response:
    try:
        return requests.get(url, timeout=(connect_timeout, read_timeout))
    except requests.RequestException as e:
        raise FetchFailure(f"{url}: {e}") from e


def check_page(url: str, connect_timeout=DEFAULT_TIMEOUT,
               read_timeout=DEFAULT_TIMEOUT) -> PageCheck:
    try:
        response = fetch_page(url, connect_timeout, read_timeout)
    except FetchFailure as e:
        logger.warning("Request failed: %s", e)
        return PageCheck(status_code=NO_RESPONSE)

    if not is_parsable_status(response.status_code):
        logger.info("%s answered %s, skipping extraction",
                    url, response.status_code)
        return PageCheck(status_code=response.status_code)

    parsed = parse_page(response.text)
    return PageCheck(status_code=response.status_code, **parsed)
