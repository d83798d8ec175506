# tests/core/http/test_http_client.py
"""
Testes do cliente HTTP de saída (uma tentativa por chamada).

Os testes asseguram que:
- respostas 2xx são devolvidas ao chamador
- respostas fora de 2xx viram `HttpResponseError` com {status, headers, data}
- falhas sem resposta viram `HttpTransportError` com {code, message}
- redirects não são seguidos
- timeout, headers e User-Agent chegam à requisição

Limites explícitos:
    - Sem rede: todas as respostas vêm de `httpx.MockTransport`
"""

import json

import httpx
import pytest

from triggerflow.core.exceptions import HttpResponseError, HttpTransportError
from triggerflow.core.http.client import RequestSpec, send_request


def test_success_returns_response(make_client, http_recorder):
    handler = http_recorder(lambda req: httpx.Response(200, json={"ok": True}))
    client = make_client(handler)

    resp = send_request(client, RequestSpec(method="GET", url="https://example.com/ping"))

    assert resp.status_code == 200
    assert handler.count == 1
    req = handler.requests[0]
    assert req.method == "GET"
    assert req.headers["user-agent"] == "triggerflow/0.1"
    assert req.content == b""


def test_body_is_sent_as_json_with_headers_and_timeout(make_client, http_recorder):
    handler = http_recorder(lambda req: httpx.Response(201))
    client = make_client(handler)

    send_request(
        client,
        RequestSpec(
            method="POST",
            url="https://example.com/hook",
            headers={"X-Token": "abc"},
            body={"a": [1, 2], "b": None},
            timeout_ms=1500,
        ),
    )

    req = handler.requests[0]
    assert json.loads(req.content) == {"a": [1, 2], "b": None}
    assert req.headers["x-token"] == "abc"
    assert req.headers["content-type"] == "application/json"
    assert req.extensions["timeout"]["read"] == 1.5


def test_non_2xx_raises_response_error_with_json_data(make_client):
    client = make_client(lambda req: httpx.Response(404, json={"error": "not found"}, headers={"X-Req": "1"}))

    with pytest.raises(HttpResponseError) as exc:
        send_request(client, RequestSpec(method="GET", url="https://example.com/x"))

    err = exc.value
    assert err.status == 404
    assert err.retryable is False
    assert err.message == "Request failed with status code 404"
    assert err.details["data"] == {"error": "not found"}
    assert err.details["headers"]["x-req"] == "1"


def test_non_json_error_body_is_kept_as_text(make_client):
    client = make_client(lambda req: httpx.Response(503, text="unavailable"))

    with pytest.raises(HttpResponseError) as exc:
        send_request(client, RequestSpec(method="GET", url="https://example.com/x"))

    assert exc.value.retryable is True
    assert exc.value.details["data"] == "unavailable"


def test_empty_error_body_is_none(make_client):
    client = make_client(lambda req: httpx.Response(500))

    with pytest.raises(HttpResponseError) as exc:
        send_request(client, RequestSpec(method="DELETE", url="https://example.com/x"))

    assert exc.value.details["data"] is None


def test_redirect_is_not_followed(make_client, http_recorder):
    handler = http_recorder(lambda req: httpx.Response(302, headers={"Location": "https://elsewhere.example.com/"}))
    client = make_client(handler)

    with pytest.raises(HttpResponseError) as exc:
        send_request(client, RequestSpec(method="GET", url="https://example.com/x"))

    assert exc.value.status == 302
    assert handler.count == 1


@pytest.mark.parametrize(
    "error_cls",
    [httpx.ConnectError, httpx.ReadTimeout, httpx.RemoteProtocolError],
)
def test_transport_failures_raise_transport_error(make_client, error_cls):
    def handler(request):
        raise error_cls("boom", request=request)

    client = make_client(handler)

    with pytest.raises(HttpTransportError) as exc:
        send_request(client, RequestSpec(method="GET", url="https://example.com/x"))

    assert exc.value.code == error_cls.__name__
    assert exc.value.details == {"code": error_cls.__name__, "message": "boom"}
    assert isinstance(exc.value.__cause__, httpx.TransportError)
