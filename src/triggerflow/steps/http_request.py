"""
Step: http_request
==================

Executa uma chamada HTTP de saída com retry/backoff.

Sequência:
----------
1. Renderiza `url` via template
2. Renderiza cada valor de header (chaves não são templadas)
3. Resolve o corpo:
   - `ctx`    → o contexto vivo da run, por referência, no momento do envio
   - `custom` → `value` com templates resolvidos recursivamente (novo objeto)
   - ausente  → requisição sem corpo
4. Envia com método, timeout e headers resolvidos
5. Delega retries ao controlador (`send_with_retry`) com `step.retries`

Efeitos colaterais:
-------------------
Exatamente uma chamada de rede por tentativa. O contexto nunca é mutado:
a resposta não é gravada de volta no contexto.
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import httpx

from triggerflow.core.http.client import RequestSpec, build_client, send_request
from triggerflow.core.http.retry import BackoffPolicy, RetryCallback, Sleeper, send_with_retry
from triggerflow.core.pipeline.step import CtxBody, CustomBody, HttpRequestStep
from triggerflow.core.templating import apply_template, resolve_object_templates


def build_request(step: HttpRequestStep, ctx: Any) -> RequestSpec:
    """Materializa a requisição resolvendo templates de URL, headers e corpo."""
    headers: Dict[str, str] = {
        name: apply_template(value, ctx) for name, value in (step.headers or {}).items()
    }

    spec = RequestSpec(
        method=step.method.value,
        url=apply_template(step.url, ctx),
        headers=headers,
        timeout_ms=step.timeout_ms,
    )

    if isinstance(step.body, CtxBody):
        spec.body = ctx
    elif isinstance(step.body, CustomBody):
        spec.body = resolve_object_templates(step.body.value, ctx)

    return spec


class HttpRequestExecutor:
    """Executor de Steps `http_request` sobre um cliente `httpx` compartilhado."""

    def __init__(
        self,
        *,
        client: Optional[httpx.Client] = None,
        policy: Optional[BackoffPolicy] = None,
        sleep: Sleeper = time.sleep,
    ):
        self.client = client if client is not None else build_client()
        self.policy = policy or BackoffPolicy()
        self.sleep = sleep

    def execute(
        self,
        step: HttpRequestStep,
        ctx: Any,
        *,
        on_retry: Optional[RetryCallback] = None,
    ) -> httpx.Response:
        spec = build_request(step, ctx)
        return send_with_retry(
            lambda: send_request(self.client, spec),
            step.retries,
            policy=self.policy,
            sleep=self.sleep,
            on_retry=on_retry,
        )
