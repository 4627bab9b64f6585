"""
Theme and locale session flags.
"""
from fastapi import Request

from app.core.i18n import missing_keys, translate
from app.core.session import RequestContext, back_url

DARK_HTML = '<html lang="es" class="dark">'


class TestThemeToggle:
    """POST /toggle_theme flips the dark_theme flag."""

    def test_first_toggle_turns_dark_on(self, client):
        assert DARK_HTML not in client.get("/posts").text

        resp = client.post("/toggle_theme", follow_redirects=False)

        assert resp.status_code == 303
        assert resp.headers["location"] == "/"
        assert DARK_HTML in client.get("/posts").text

    def test_toggle_twice_restores_original(self, client):
        client.post("/toggle_theme")
        client.post("/toggle_theme")

        assert DARK_HTML not in client.get("/posts").text

    def test_redirects_back_to_referer(self, client):
        resp = client.post("/toggle_theme", headers={"Referer": "http://testserver/posts/new"}, follow_redirects=False)

        assert resp.headers["location"] == "http://testserver/posts/new"

    def test_ignores_foreign_referer(self, client):
        resp = client.post("/toggle_theme", headers={"Referer": "https://evil.example/phish"}, follow_redirects=False)

        assert resp.headers["location"] == "/"


class TestLocale:
    """POST /toggle_locale and /set_locale/{locale}."""

    def test_default_locale_is_spanish(self, client):
        assert 'lang="es"' in client.get("/posts").text

    def test_toggle_switches_to_english_and_back(self, client):
        client.post("/toggle_locale")
        page = client.get("/posts", params={"search": "nothing-matches"})
        assert 'lang="en"' in page.text
        assert "No posts found" in page.text

        client.post("/toggle_locale")
        assert 'lang="es"' in client.get("/posts").text

    def test_set_locale(self, client):
        client.post("/set_locale/en")

        assert 'lang="en"' in client.get("/posts").text

    def test_set_unknown_locale_is_ignored(self, client):
        client.post("/set_locale/fr")

        assert 'lang="es"' in client.get("/posts").text


class TestRequestContext:
    def test_theme_classes(self):
        assert RequestContext(dark_theme=True).theme_classes("light", "dark") == "dark"
        assert RequestContext(dark_theme=False).theme_classes("light", "dark") == "light"

    def test_translate_uses_context_locale(self):
        assert RequestContext(locale="en").t("posts.no_results") == "No posts found"
        assert RequestContext(locale="es").t("posts.no_results") == "No se encontraron posts"

    def test_flash_kinds_become_toast_categories(self):
        ctx = RequestContext(flash=[{"type": "notice", "message": "ok"}, {"type": "alert", "message": "bad"}])

        assert [t.category.value for t in ctx.toasts()] == ["success", "error"]

    def test_back_url_without_referer(self):
        request = Request({"type": "http", "method": "POST", "path": "/", "headers": [], "server": ("testserver", 80), "scheme": "http", "query_string": b""})

        assert back_url(request, "/posts") == "/posts"


class TestTranslations:
    def test_catalogs_have_the_same_keys(self):
        assert missing_keys() == {}

    def test_unknown_key_falls_back_to_key(self):
        assert translate("does.not.exist", "en") == "does.not.exist"

    def test_unknown_locale_falls_back_to_default(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_LOCALE", "es")

        assert translate("posts.no_results", "fr") == "No se encontraron posts"

    def test_params_are_interpolated(self):
        assert translate("errors.too_short", "en", count=5) == "is too short (minimum is 5 characters)"
