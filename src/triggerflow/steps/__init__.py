"""
Executores de Steps do TriggerFlow.

Um módulo por tipo de Step:
    - filter        → evaluate_filter
    - transform     → apply_transform
    - http_request  → HttpRequestExecutor / build_request
    - log           → execute_log

Executores não conhecem o Runner: recebem o Step (imutável) e o contexto
corrente, e devolvem o resultado que o Runner interpreta.
"""

from .filter import evaluate_filter, strict_equals  # noqa: F401
from .http_request import HttpRequestExecutor, build_request  # noqa: F401
from .log import execute_log  # noqa: F401
from .transform import apply_transform  # noqa: F401
