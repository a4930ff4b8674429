"""Unit tests for redirect handling and error mapping in HttpTransport."""

import pytest
import requests

from atcoder_py.client.cookies import CookieStore
from atcoder_py.client.errors import (
    CrossHostRedirectError,
    RedirectError,
    StatusError,
    TooManyRedirectsError,
    TransportError,
)
from atcoder_py.client.transport import MAX_REDIRECTS, USER_AGENT, HttpTransport
from tests.unit.fakes import FakeSession, make_response


ORIGIN = "https://atcoder.jp"


def redirect(location, status=302, set_cookies=()):
    return make_response(status, headers={"Location": location}, set_cookies=set_cookies, reason="Found")


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def transport(session):
    return HttpTransport(ORIGIN, CookieStore(), session=session)


def test_get_returns_body(transport, session):
    session.queue(make_response(200, "<html>home</html>"))

    assert transport.get("/") == "<html>home</html>"

    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://atcoder.jp/"
    assert call["allow_redirects"] is False
    assert "Cookie" not in call["headers"]
    assert session.headers["User-Agent"] == USER_AGENT


def test_redirect_chain_within_budget(transport, session):
    hops = [redirect(f"/hop{i}") for i in range(MAX_REDIRECTS)]
    session.queue(*hops, make_response(200, "final"))

    assert transport.get("/start") == "final"
    assert len(session.calls) == MAX_REDIRECTS + 1
    assert session.calls[-1]["url"] == f"https://atcoder.jp/hop{MAX_REDIRECTS - 1}"


def test_redirect_chain_over_budget(transport, session):
    hops = [redirect(f"/hop{i}") for i in range(MAX_REDIRECTS + 1)]
    session.queue(*hops, make_response(200, "final"))

    with pytest.raises(TooManyRedirectsError):
        transport.get("/start")
    assert len(session.calls) == MAX_REDIRECTS + 1


def test_cross_host_redirect_is_refused(transport, session):
    session.queue(redirect("https://evil.example.com/steal"))

    with pytest.raises(CrossHostRedirectError):
        transport.get("/login")
    assert len(session.calls) == 1


def test_cross_host_redirect_later_in_chain(transport, session):
    session.queue(redirect("/a"), redirect("//other.jp/b"))

    with pytest.raises(CrossHostRedirectError):
        transport.get("/")


def test_redirect_without_location(transport, session):
    session.queue(make_response(302, reason="Found"))

    with pytest.raises(RedirectError, match="Location"):
        transport.get("/")


def test_post_redirect_downgrades_to_get(transport, session):
    session.queue(redirect("/home", status=303), make_response(200, "welcome"))

    assert transport.post_form("/login", {"username": "u", "password": "p"}) == "welcome"

    post, follow = session.calls
    assert post["method"] == "POST"
    assert post["data"] == {"username": "u", "password": "p"}
    assert follow["method"] == "GET"
    assert follow["data"] is None
    assert follow["url"] == "https://atcoder.jp/home"


def test_cookies_from_redirect_are_sent_on_next_hop(transport, session):
    session.queue(
        redirect("/home", set_cookies=["REVEL_SESSION=token; Path=/"]),
        make_response(200, "ok"),
    )

    transport.post_form("/login", {})

    assert "Cookie" not in session.calls[0]["headers"]
    assert session.calls[1]["headers"]["Cookie"] == "REVEL_SESSION=token"
    assert transport.cookies.cookie_header("https://atcoder.jp/") == "REVEL_SESSION=token"


def test_cookies_absorbed_from_error_response(transport, session):
    session.queue(make_response(404, set_cookies=["a=1; Path=/"], reason="Not Found"))

    with pytest.raises(StatusError):
        transport.get("/contests/nope/tasks")
    assert transport.cookies.cookie_header("https://atcoder.jp/") == "a=1"


def test_not_found_is_status_error(transport, session):
    session.queue(make_response(404, reason="Not Found"))

    with pytest.raises(StatusError) as excinfo:
        transport.get("/contests/abc999/tasks")

    err = excinfo.value
    assert err.code == 404
    assert err.not_found
    assert err.url == "https://atcoder.jp/contests/abc999/tasks"


def test_server_error_is_not_not_found(transport, session):
    session.queue(make_response(503, reason="Service Unavailable"))

    with pytest.raises(StatusError) as excinfo:
        transport.get("/")
    assert excinfo.value.code == 503
    assert not excinfo.value.not_found


def test_transport_failure_is_chained(transport, session):
    cause = requests.ConnectionError("Name or service not known")
    session.queue(cause)

    with pytest.raises(TransportError, match="Name or service not known") as excinfo:
        transport.get("/")
    assert excinfo.value.__cause__ is cause


def test_redirect_hop_cookies_follow_domain_rules(transport, session):
    session.queue(
        redirect(
            "/home",
            set_cookies=[
                "REVEL_SESSION=token; Path=/",
                "REVEL_FLASH=hi; Path=/",
                "tracker=1; Domain=evil.example; Path=/",
            ],
        ),
        make_response(200, "ok"),
    )

    transport.post_form("/login", {})

    sent = session.calls[1]["headers"]["Cookie"]
    assert sorted(sent.split("; ")) == ["REVEL_FLASH=hi", "REVEL_SESSION=token"]
    assert "tracker" not in {c.name for c in transport.cookies}
