import json

from linkedin_profile_scraper.cookies_auth import (
    check_login_status,
    is_login_url,
    load_session_cookie,
    session_cookie,
)


def test_session_cookie_shape():
    cookie = session_cookie("AQEDabc")
    assert cookie["name"] == "li_at"
    assert cookie["value"] == "AQEDabc"
    assert cookie["domain"] == ".www.linkedin.com"
    assert cookie["path"] == "/"


def test_is_login_url():
    assert is_login_url("https://www.linkedin.com/login")
    assert is_login_url("https://www.linkedin.com/login/")
    assert is_login_url("https://www.linkedin.com/login?fromSignIn=true")
    assert not is_login_url("https://www.linkedin.com/feed/")
    assert not is_login_url("https://www.linkedin.com/in/login-expert/")


class UrlPage:
    def __init__(self, url):
        self.url = url


def test_check_login_status():
    assert check_login_status(UrlPage("https://www.linkedin.com/feed/")) is True
    assert check_login_status(UrlPage("https://www.linkedin.com/login")) is False


def test_load_session_cookie_from_list(tmp_path):
    path = tmp_path / "cookies.json"
    path.write_text(json.dumps([
        {"name": "JSESSIONID", "value": "x", "domain": ".www.linkedin.com"},
        {"name": "li_at", "value": "other", "domain": ".example.com"},
        {"name": "li_at", "value": "AQED\n abc ", "domain": "www.linkedin.com"},
    ]), encoding="utf-8")
    assert load_session_cookie(str(path)) == "AQEDabc"


def test_load_session_cookie_from_storage_state(tmp_path):
    path = tmp_path / "auth_state.json"
    path.write_text(json.dumps({"cookies": [{"name": "li_at", "value": "tok", "domain": ".linkedin.com"}]}),
                    encoding="utf-8")
    assert load_session_cookie(str(path)) == "tok"


def test_load_session_cookie_missing_or_broken(tmp_path):
    assert load_session_cookie(str(tmp_path / "nope.json")) is None
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert load_session_cookie(str(broken)) is None
