import requests

from page_analyzer import app as app_module
from page_analyzer.database.check_repository import get_checks_for_url
from page_analyzer.database.url_repository import (
    get_all_urls,
    get_url_by_name,
    insert_url,
)
from page_analyzer.errors import StorageError

PAGE_HTML = """\
<!DOCTYPE html>
<html>
<head>
    <title>Test Page</title>
    <meta name="description" content="Test description">
</head>
<body>
    <h1>Test Header</h1>
</body>
</html>
"""


def _body(response):
    return response.get_data(as_text=True)


class TestPages:
    def test_main_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Анализатор страниц" in _body(response)
        assert "Бесплатно проверяйте сайты на SEO пригодность" in _body(response)

    def test_urls_page(self, client, db):
        insert_url(db, "https://www.example.com")
        response = client.get("/urls")
        assert response.status_code == 200
        body = _body(response)
        assert "Сайты" in body
        assert "https://www.example.com" in body

    def test_show_page(self, client, db):
        url_id = insert_url(db, "https://www.example.com")
        url = get_url_by_name(db, "https://www.example.com")

        response = client.get(f"/urls/{url_id}")

        assert response.status_code == 200
        body = _body(response)
        assert "Сайт: https://www.example.com" in body
        assert url.formatted_created_at in body

    def test_show_page_not_found(self, client):
        response = client.get("/urls/999")
        assert response.status_code == 404
        assert "Страница не найдена" in _body(response)

    def test_routes_are_registered_on_pages_blueprint(self, app):
        rules = {
            (rule.rule, rule.endpoint, method)
            for rule in app.url_map.iter_rules()
            for method in rule.methods - {"HEAD", "OPTIONS"}
        }
        assert ("/", "pages.index", "GET") in rules
        assert ("/urls", "pages.add_url", "POST") in rules
        assert ("/urls", "pages.list_urls", "GET") in rules
        assert ("/urls/<int:id>", "pages.show_url", "GET") in rules
        assert ("/urls/<int:id>/checks", "pages.add_check", "POST") in rules

    def test_unknown_route_uses_not_found_page(self, client):
        response = client.get("/no-such-page")
        assert response.status_code == 404
        assert "Страница не найдена" in _body(response)


class TestAddUrl:
    def test_add_valid_url(self, client, db):
        response = client.post("/urls", data={"url": "https://www.example.com"})

        assert response.status_code == 200
        assert "Страница успешно добавлена" in _body(response)
        assert [url.name for url in get_all_urls(db)] == ["https://www.example.com"]

    def test_url_is_normalized(self, client, db):
        client.post("/urls",
                    data={"url": "https://www.example.com:443/path?q=1"})

        assert [url.name for url in get_all_urls(db)] == ["https://www.example.com"]

    def test_duplicate_url(self, client, db):
        client.post("/urls", data={"url": "https://www.example.com"})
        response = client.post("/urls",
                               data={"url": "https://www.example.com/other"})

        assert response.status_code == 200
        assert "Страница уже существует" in _body(response)
        assert len(get_all_urls(db)) == 1

    def test_concurrent_duplicate_is_reported_as_existing(
            self, client, db, monkeypatch):
        client.post("/urls", data={"url": "https://www.example.com"})
        monkeypatch.setattr(app_module, "url_exists", lambda db, name: False)

        response = client.post("/urls", data={"url": "https://www.example.com"})

        assert response.status_code == 200
        assert "Страница уже существует" in _body(response)
        assert len(get_all_urls(db)) == 1

    def test_empty_url(self, client, db):
        for value in ("", "   "):
            response = client.post("/urls", data={"url": value})
            assert response.status_code == 200
            assert "Некорректный URL" in _body(response)
        assert get_all_urls(db) == []

    def test_missing_form_field(self, client, db):
        response = client.post("/urls", data={})
        assert "Некорректный URL" in _body(response)
        assert get_all_urls(db) == []

    def test_invalid_url_keeps_input(self, client, db):
        response = client.post("/urls", data={"url": "not a url"})

        assert response.status_code == 200
        assert 'value="not a url"' in _body(response)
        assert get_all_urls(db) == []

    def test_malformed_host_is_rejected(self, client, db):
        response = client.post("/urls", data={"url": "http://exa mple.com"})

        assert response.status_code == 200
        assert "Некорректный URL" in _body(response)
        assert get_all_urls(db) == []


class TestChecks:
    def test_successful_check(self, client, db, requests_mock):
        requests_mock.get("https://example.com", text=PAGE_HTML)
        url_id = insert_url(db, "https://example.com")

        response = client.post(f"/urls/{url_id}/checks")

        assert response.status_code == 200
        body = _body(response)
        assert "Страница успешно проверена" in body
        assert "Test Header" in body
        [check] = get_checks_for_url(db, url_id)
        assert check.status_code == 200
        assert check.title == "Test Page"
        assert check.h1 == "Test Header"
        assert check.description == "Test description"

    def test_missing_elements(self, client, db, requests_mock):
        requests_mock.get("https://example.com",
                          text="<html><body><p>Test</p></body></html>")
        url_id = insert_url(db, "https://example.com")

        client.post(f"/urls/{url_id}/checks")

        [check] = get_checks_for_url(db, url_id)
        assert check.status_code == 200
        assert (check.title, check.h1, check.description) == ("", "", "")

    def test_server_error(self, client, db, requests_mock):
        requests_mock.get("https://example.com", status_code=500, text="")
        url_id = insert_url(db, "https://example.com")

        response = client.post(f"/urls/{url_id}/checks")

        assert response.status_code == 200
        assert "Страница успешно проверена" in _body(response)
        [check] = get_checks_for_url(db, url_id)
        assert check.status_code == 500
        assert (check.title, check.h1, check.description) == ("", "", "")

    def test_unreachable_host(self, client, db, requests_mock):
        requests_mock.get("https://nonexistent-domain-12345.test",
                          exc=requests.exceptions.ConnectionError)
        url_id = insert_url(db, "https://nonexistent-domain-12345.test")

        response = client.post(f"/urls/{url_id}/checks")

        assert response.status_code == 200
        assert "Произошла ошибка при проверке" in _body(response)
        [check] = get_checks_for_url(db, url_id)
        assert check.status_code == 0
        assert (check.title, check.h1, check.description) == ("", "", "")

    def test_uses_configured_timeouts(self, db, requests_mock):
        app = app_module.create_app(
            {"connect_timeout": 1.5, "read_timeout": 2.5}, db=db,
        )
        requests_mock.get("https://example.com", text=PAGE_HTML)
        url_id = insert_url(db, "https://example.com")

        app.test_client().post(f"/urls/{url_id}/checks")

        assert requests_mock.last_request.timeout == (1.5, 2.5)

    def test_check_for_unknown_url(self, client, db, requests_mock):
        response = client.post("/urls/999/checks")

        assert response.status_code == 404
        assert not requests_mock.called
        assert get_checks_for_url(db, 999) == []

    def test_history_and_latest_check(self, client, db, requests_mock):
        requests_mock.get("https://example.com", [
            {"status_code": 200, "text": PAGE_HTML},
            {"status_code": 201, "text": "<title>Second</title>"},
        ])
        url_id = insert_url(db, "https://example.com")

        client.post(f"/urls/{url_id}/checks")
        client.post(f"/urls/{url_id}/checks")

        checks = get_checks_for_url(db, url_id)
        assert [check.status_code for check in checks] == [201, 200]
        body = _body(client.get("/urls"))
        assert "201" in body
        assert "https://example.com" in body

    def test_storage_failure_is_server_error(
            self, client, db, requests_mock, monkeypatch):
        requests_mock.get("https://example.com", text=PAGE_HTML)
        url_id = insert_url(db, "https://example.com")

        def broken_insert(db, check):
            raise StorageError("database is down")

        monkeypatch.setattr(app_module, "insert_check", broken_insert)
        response = client.post(f"/urls/{url_id}/checks")

        assert response.status_code == 500
        assert "Внутренняя ошибка сервера" in _body(response)
