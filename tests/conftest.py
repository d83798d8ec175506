"""
Fixtures compartilhados para testes do TriggerFlow.

Este módulo define fixtures reutilizáveis que fornecem:
- settings determinísticos do Engine
- store de runs em memória
- cliente HTTP sobre `httpx.MockTransport` (sem rede)
- sleeper que registra esperas em vez de dormir
- fábrica de Runners já ligados aos itens acima

Decisões arquiteturais:
    - Nenhuma fixture acessa rede ou relógio real de espera
    - Handlers HTTP são funções simples `request -> Response`
    - Imports do core são realizados de forma lazy para
      melhorar a clareza de erros durante falhas

Invariantes:
    - Cada teste recebe instâncias novas (sem estado compartilhado)
    - Todas as fixtures são seguras para execução em paralelo

Limites explícitos:
    - Não substituir testes de integração com servidores reais
"""

from datetime import datetime, timezone

import pytest


# =====================================================
# Config
# =====================================================

@pytest.fixture
def defaults_yaml() -> str:
    """YAML de defaults equivalente ao `config/triggerflow.defaults.yaml`."""
    return """\
engine:
  record_events: true
http:
  timeout_ms: 2000
  retries: 3
  user_agent: "triggerflow/0.1"
retry:
  base_delay_ms: 100
  factor: 2
"""


@pytest.fixture
def local_yaml() -> str:
    return """\
http:
  retries: 1
retry:
  base_delay_ms: 10
"""


@pytest.fixture
def settings():
    from triggerflow.core.config.settings import EngineSettings

    return EngineSettings()


# =====================================================
# Run store / tempo
# =====================================================

@pytest.fixture
def run_store():
    from triggerflow.persistence.run_store import InMemoryRunStore

    return InMemoryRunStore()


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 1, 16, 12, 0, 0, tzinfo=timezone.utc)


class _RecordingSleeper:
    """Substitui `time.sleep`: apenas registra os delays solicitados."""

    def __init__(self):
        self.calls = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def sleeper():
    return _RecordingSleeper()


# =====================================================
# HTTP
# =====================================================

class _Recorder:
    """Handler de `MockTransport` que registra cada requisição recebida."""

    def __init__(self, respond):
        self.respond = respond
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        return self.respond(request)

    @property
    def count(self) -> int:
        return len(self.requests)


@pytest.fixture
def http_recorder():
    """
    Fábrica de handlers HTTP registradores.

    Uso:
        handler = http_recorder(lambda req: httpx.Response(200, json={}))
        ...
        assert handler.count == 1
    """
    return _Recorder


@pytest.fixture
def make_client(settings):
    """Fábrica de `httpx.Client` sobre `MockTransport` (fechados ao final do teste)."""
    import httpx

    from triggerflow.core.http.client import build_client

    clients = []

    def _make(handler):
        client = build_client(settings, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _make

    for c in clients:
        c.close()


@pytest.fixture
def make_runner(run_store, settings, sleeper, make_client):
    """Fábrica de `PipelineRunner` ligado ao store em memória e ao sleeper registrador."""
    from triggerflow.core.engine.engine import PipelineRunner

    def _make(handler=None, **kwargs):
        if handler is None:
            import httpx

            def handler(request):
                return httpx.Response(200, json={"ok": True})

        kwargs.setdefault("recorder", run_store)
        kwargs.setdefault("settings", settings)
        kwargs.setdefault("sleep", sleeper)
        return PipelineRunner(client=make_client(handler), **kwargs)

    return _make
