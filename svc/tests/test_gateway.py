import pytest
import requests

from foodtech.errors import HttpStatusError, NetworkError
from foodtech.gateway import GatewayHTTP


def test_url_joins_with_single_slash(stub_session):
    gw = GatewayHTTP(base_url="http://gw.local/", session=stub_session({}))
    assert gw.url("/tapo/login") == "http://gw.local/tapo/login"
    assert gw.url("tapo/login") == "http://gw.local/tapo/login"


def test_request_carries_timeout(stub_session, make_response):
    session = stub_session({("GET", "/ping"): [make_response(200)]})
    gw = GatewayHTTP(base_url="http://gw.local", timeout_s=5, session=session)

    gw.get("/ping")

    args, kwargs = session.request.call_args
    assert args == ("GET", "http://gw.local/ping")
    assert kwargs["timeout"] == 5


def test_non_2xx_raises_http_status_error(stub_session, make_response):
    session = stub_session({("POST", "/tapo/login"): [make_response(401, text="bad password")]})
    gw = GatewayHTTP(base_url="http://gw.local", session=session)

    with pytest.raises(HttpStatusError) as exc:
        gw.post("/tapo/login", json={"password": "x"})
    assert exc.value.status_code == 401
    assert exc.value.body == "bad password"


@pytest.mark.parametrize(
    "error",
    [requests.exceptions.ConnectionError("refused"), requests.exceptions.Timeout("slow")],
)
def test_transport_failures_become_network_error(stub_session, error):
    session = stub_session({("GET", "/ping"): [error]})
    gw = GatewayHTTP(base_url="http://gw.local", session=session)

    with pytest.raises(NetworkError):
        gw.get("/ping")


def test_close_closes_session(stub_session):
    session = stub_session({})
    GatewayHTTP(session=session).close()
    session.close.assert_called_once()


def test_without_session_each_call_uses_requests_request(monkeypatch, make_response):
    calls = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs["timeout"]))
        return make_response(200)

    monkeypatch.setattr("foodtech.gateway.requests.request", fake_request)
    gw = GatewayHTTP(base_url="http://gw.local", timeout_s=5)

    gw.get("/esphome/sensor/temperature")
    gw.post("/tapo/login", json={"password": "x"})
    gw.close()

    assert gw.session is None
    assert calls == [
        ("GET", "http://gw.local/esphome/sensor/temperature", 5),
        ("POST", "http://gw.local/tapo/login", 5),
    ]
