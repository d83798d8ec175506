# src/triggerflow/core/engine/__init__.py
"""
Engine do TriggerFlow.

Componentes principais:
    - engine  → `PipelineRunner`: executa Steps em ordem sobre o contexto da run
    - trigger → `TriggerService`: resolve trigger → workflow e aciona o Runner

Invariantes:
    - Cada Step é executado no máximo uma vez por run
    - Toda run aberta é encerrada exatamente uma vez
    - Falhas de Step nunca escapam do Runner; viram run `failed`
"""

from .engine import PipelineRunner, execute_workflow  # noqa: F401
from .trigger import TriggerService  # noqa: F401
