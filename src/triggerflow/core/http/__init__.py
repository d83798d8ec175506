"""HTTP de saída do TriggerFlow: cliente (uma tentativa) e controlador de retry/backoff."""

from .client import RequestSpec, build_client, send_request  # noqa: F401
from .retry import BackoffPolicy, is_retryable, send_with_retry  # noqa: F401
