# src/triggerflow/core/pipeline/context.py
"""
Contexto de execução de uma run do TriggerFlow.

Este módulo define o `RunContext`, a estrutura que o Runner cria para cada
invocação de trigger e passa, por referência exclusiva, a todos os Steps.

O RunContext consolida:
    - identidade da execução (run_id, workflow_id, created_at)
    - o payload em trânsito (o "contexto" JSON-like mutado pelos Steps)
    - logs estruturados de execução
    - warnings não fatais associados a Steps

Princípios fundamentais:
    - Isolamento por execução (cada run possui seu próprio contexto)
    - O payload nunca é compartilhado entre runs concorrentes
    - Substituição do payload (ex.: `pick`) é explícita via `replace_payload`

Invariantes:
    - Logs sempre incluem `run_id` e `step_id`
    - Warnings são agrupados por `step_id`
    - O payload nunca é persistido; apenas status/erro terminais o são

Limites explícitos:
    - Não executa Steps
    - Não decide políticas de execução
    - Não persiste dados automaticamente
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


@dataclass
class RunContext:
    """
    Contexto de execução de uma run.

    Campos canônicos:
        - run_id: identificador devolvido pelo store ao abrir a run
        - created_at: timestamp UTC de início
        - payload: contexto mutável (dict/list/escalares aninhados)
        - workflow_id: workflow de origem, quando conhecido
        - meta: metadados livres (ex.: trigger_path)
        - record_events: quando falso, `log` não acumula eventos
    """
    run_id: str
    created_at: datetime
    payload: Any
    workflow_id: Optional[str] = None
    meta: Dict[str, Any] = field(default_factory=dict)
    record_events: bool = True

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)

    # -----------------------------
    # Payload
    # -----------------------------
    def replace_payload(self, payload: Any) -> None:
        """Troca o payload ativo da run por um novo valor."""
        self.payload = payload

    # -----------------------------
    # Eventos e warnings
    # -----------------------------
    def log(self, *, step_id: str, level: str, message: str, **extra: Any) -> None:
        """Acumula um evento estruturado da run (no-op com `record_events=False`)."""
        if self.record_events:
            self.events.append(
                dict(
                    extra,
                    run_id=self.run_id,
                    workflow_id=self.workflow_id,
                    step_id=step_id,
                    level=level,
                    message=message,
                    ts=datetime.now(timezone.utc).isoformat(),
                )
            )

    def add_warning(self, *, step_id: str, message: str) -> None:
        self.warnings.setdefault(step_id, []).append(message)
