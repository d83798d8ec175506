# src/triggerflow/core/http/client.py
"""
Cliente HTTP de saída do TriggerFlow.

Este módulo isola o uso de `httpx` do restante do Engine:

    - `RequestSpec`   → requisição já resolvida (URL, headers e corpo renderizados)
    - `build_client`  → cliente compartilhável entre runs (thread-safe)
    - `send_request`  → uma única tentativa, traduzindo falhas para exceções tipadas

Classificação de falhas (por tentativa):
    - nenhuma resposta obtida (conexão, timeout, protocolo) → `HttpTransportError`
      com details `{code, message}`
    - resposta fora de 2xx → `HttpResponseError` com details
      `{status, headers, data}`
    - 2xx → resposta devolvida ao chamador

Limites explícitos:
    - Não faz retry (responsabilidade de `retry.send_with_retry`)
    - Não segue redirects: 3xx é uma resposta como outra qualquer
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from triggerflow.core.config.settings import EngineSettings
from triggerflow.core.exceptions import HttpResponseError, HttpTransportError


_NO_BODY = object()


@dataclass
class RequestSpec:
    """Requisição pronta para envio. `body` é serializado como JSON no momento do envio."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = _NO_BODY
    timeout_ms: float = 2000

    @property
    def has_body(self) -> bool:
        return self.body is not _NO_BODY

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0


def build_client(
    settings: Optional[EngineSettings] = None,
    *,
    transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """Cria o cliente HTTP compartilhado do processo.

    `transport` permite injetar um `httpx.MockTransport` em testes.
    """
    settings = settings or EngineSettings()
    headers = {}
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent
    return httpx.Client(headers=headers, follow_redirects=False, transport=transport)


def _response_data(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def send_request(client: httpx.Client, spec: RequestSpec) -> httpx.Response:
    """Executa exatamente uma tentativa HTTP.

    Raises:
        HttpTransportError: nenhuma resposta obtida.
        HttpResponseError: resposta recebida com status fora de 2xx.
    """
    kwargs: Dict[str, Any] = {
        "headers": spec.headers,
        "timeout": spec.timeout_s,
    }
    if spec.has_body:
        kwargs["json"] = spec.body

    try:
        response = client.request(spec.method, spec.url, **kwargs)
    except httpx.TransportError as e:
        code = e.__class__.__name__
        message = str(e) or code
        raise HttpTransportError(
            message,
            details={"code": code, "message": message},
        ) from e

    if not response.is_success:
        raise HttpResponseError(
            f"Request failed with status code {response.status_code}",
            details={
                "status": response.status_code,
                "headers": dict(response.headers),
                "data": _response_data(response),
            },
        )

    return response
