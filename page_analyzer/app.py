import logging

from flask import (
    Blueprint,
    Flask,
    current_app,
    render_template,
    request,
)

from .config import load_settings
from .database import Database
from .database.check_repository import (
    get_checks_for_url,
    get_latest_checks,
    insert_check,
)
from .database.url_repository import (
    get_all_urls,
    get_url_by_id,
    get_url_by_name,
    insert_url,
    url_exists,
)
from .errors import InvalidUrl, NotFound, StorageError, UrlAlreadyExists
from .log import setup_logging
from .models import UrlCheck
from .parser import check_page
from .url_normalizer import normalize_url
from .views import (
    CHECK_FAILED,
    CHECK_SUCCEEDED,
    URL_ADDED,
    URL_EXISTS,
    URL_INVALID,
    IndexPage,
    UrlPage,
    UrlsPage,
)

logger = logging.getLogger(__name__)

DB_EXTENSION = "page_analyzer.db"
SETTINGS_EXTENSION = "page_analyzer.settings"

bp = Blueprint("pages", __name__)


def get_db() -> Database:
    return current_app.extensions[DB_EXTENSION]


def get_settings():
    return current_app.extensions[SETTINGS_EXTENSION]


def _find_url(id: int):
    url = get_url_by_id(get_db(), id)
    if url is None:
        raise NotFound(f"url {id} not found")
    return url


def _render_url_page(url, flash=None):
    page = UrlPage(url=url, checks=get_checks_for_url(get_db(), url.id),
                   flash=flash)
    return render_template("url.html", page=page)


@bp.route("/")
def index():
    return render_template("index.html", page=IndexPage())


@bp.post("/urls")
def add_url():
    raw_url = request.form.get("url", "")

    try:
        normalized = normalize_url(raw_url)
    except InvalidUrl as e:
        logger.info("Rejected url input: %s", e)
        page = IndexPage(url_input=raw_url, flash=URL_INVALID)
        return render_template("index.html", page=page)

    db = get_db()
    if url_exists(db, normalized):
        return _render_url_page(get_url_by_name(db, normalized), URL_EXISTS)

    try:
        new_id = insert_url(db, normalized)
    except UrlAlreadyExists:
        logger.info("%s was added concurrently", normalized)
        return _render_url_page(get_url_by_name(db, normalized), URL_EXISTS)

    return _render_url_page(get_url_by_id(db, new_id), URL_ADDED)


@bp.route("/urls")
def list_urls():
    db = get_db()
    page = UrlsPage(urls=get_all_urls(db), latest_checks=get_latest_checks(db))
    return render_template("urls.html", page=page)


@bp.route("/urls/<int:id>")
def show_url(id):
    return _render_url_page(_find_url(id))


@bp.post("/urls/<int:id>/checks")
def add_check(id):
    url = _find_url(id)
    settings = get_settings()

    result = check_page(
        url.name,
        connect_timeout=settings.connect_timeout,
        read_timeout=settings.read_timeout,
    )
    insert_check(get_db(), UrlCheck(
        url_id=url.id,
        status_code=result.status_code,
        title=result.title,
        h1=result.h1,
        description=result.description,
    ))

    flash = CHECK_SUCCEEDED if result.succeeded else CHECK_FAILED
    return _render_url_page(url, flash)


@bp.app_errorhandler(404)
@bp.app_errorhandler(NotFound)
def page_not_found(error):
    return render_template("errors/404.html"), 404


@bp.app_errorhandler(StorageError)
def storage_failed(error):
    logger.error("Storage failure: %s", error)
    return render_template("errors/500.html"), 500


def create_app(overrides=None, db=None) -> Flask:
    settings = load_settings(overrides)
    setup_logging(settings.log_level)

    if db is None:
        if settings.uses_in_memory_db:
            logger.warning(
                "DATABASE_URL is not set, using an in-memory SQLite database"
            )
        db = Database(settings.sqlalchemy_url)
    db.init_schema()

    app = Flask(__name__)
    app.extensions[DB_EXTENSION] = db
    app.extensions[SETTINGS_EXTENSION] = settings

    app.register_blueprint(bp)

    return app
