# src/triggerflow/core/http/retry.py
"""
Controlador de retry/backoff das chamadas HTTP de saída.

Política (v1):
    - falha de transporte (sem resposta)  → retentável
    - resposta com status >= 500          → retentável
    - qualquer outra resposta não-2xx     → não retentável, propagada imediatamente
    - espera antes do retry n (n >= 1): `base_delay_ms * factor ** n`
      (defaults: 200 ms, 400 ms, 800 ms, ...)
    - total de tentativas quando todas falham de forma retentável: `1 + max_retries`

Decisões arquiteturais:
    - A função `sleep` é injetável; testes nunca esperam tempo real
    - O callback `on_retry` permite ao chamador registrar cada nova tentativa
    - Erros fora da taxonomia HTTP (ex.: corpo não serializável) não são
      retentados e propagam como estão

Limites explícitos:
    - Não limita o tempo total do pipeline, apenas o número de tentativas
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar

from triggerflow.core.config.settings import EngineSettings
from triggerflow.core.exceptions import HttpResponseError, HttpTransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleeper = Callable[[float], None]
RetryCallback = Callable[[int, Exception, float], None]


@dataclass(frozen=True)
class BackoffPolicy:
    base_delay_ms: float = 100
    factor: float = 2

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> "BackoffPolicy":
        return cls(base_delay_ms=settings.backoff_base_ms, factor=settings.backoff_factor)

    def delay_seconds(self, attempt: int) -> float:
        """Espera (em segundos) antes do retry número `attempt` (1-based)."""
        return self.base_delay_ms * (self.factor ** attempt) / 1000.0


def is_retryable(exc: Exception) -> bool:
    if isinstance(exc, HttpTransportError):
        return True
    if isinstance(exc, HttpResponseError):
        return exc.retryable
    return False


def send_with_retry(
    send: Callable[[], T],
    max_retries: int,
    *,
    policy: Optional[BackoffPolicy] = None,
    sleep: Sleeper = time.sleep,
    on_retry: Optional[RetryCallback] = None,
) -> T:
    """Executa `send` com até `max_retries` novas tentativas.

    Args:
        send: uma tentativa; levanta `HttpTransportError`/`HttpResponseError` em falha.
        max_retries: número máximo de retries (0 = tentativa única).
        policy: política de backoff (default 100 ms, fator 2).
        sleep: função de espera injetável.
        on_retry: chamado como `on_retry(attempt, exc, delay_s)` antes de cada espera.

    Returns:
        O retorno da primeira tentativa bem-sucedida.

    Raises:
        A última exceção, quando não retentável ou quando o orçamento se esgota.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    policy = policy or BackoffPolicy()
    attempt = 0
    while True:
        try:
            return send()
        except (HttpTransportError, HttpResponseError) as exc:
            if not is_retryable(exc) or attempt >= max_retries:
                raise
            attempt += 1
            delay = policy.delay_seconds(attempt)
            logger.warning(
                "HTTP attempt failed (%s), retrying %d/%d in %.3fs",
                exc,
                attempt,
                max_retries,
                delay,
            )
            if on_retry is not None:
                on_retry(attempt, exc, delay)
            sleep(delay)
