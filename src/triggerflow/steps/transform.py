"""
Step: transform
===============

Aplica operações em ordem sobre o contexto da run.

Operações:
----------
- default  → grava `value` em `path` somente se o valor atual for ausente,
             `None` ou `""` (um `0` ou `False` presente conta como definido)
- template → renderiza `template` (somente leitura) e grava o texto em `to`
- pick     → constrói um novo objeto contendo apenas os `paths` listados
             (na mesma forma aninhada) e o torna o contexto corrente

Contrato com o Runner:
----------------------
`apply_transform` devolve o contexto resultante. `default` e `template`
mutam o contexto corrente in-place; `pick` produz um valor novo, e o
Runner troca o payload ativo da run por ele (`RunContext.replace_payload`).

Colisões em `pick`:
-------------------
Os paths são copiados na ordem da lista; um path posterior grava dentro
dos containers criados por paths anteriores.

Erros:
------
Nenhum em tempo de execução. Operações desconhecidas são rejeitadas na
validação do workflow.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Dict, Sequence

from triggerflow.core.pipeline.step import DefaultOp, PickOp, TemplateOp, TransformStep
from triggerflow.core.templating import MISSING, apply_template, get_path, set_path


def _is_empty(value: Any) -> bool:
    return value is MISSING or value is None or value == ""


def apply_default(op: DefaultOp, ctx: Any) -> None:
    if _is_empty(get_path(ctx, op.path)):
        # valor da definição é copiado: Steps são read-only entre runs
        set_path(ctx, op.path, deepcopy(op.value))


def apply_template_op(op: TemplateOp, ctx: Any) -> None:
    set_path(ctx, op.to, apply_template(op.template, ctx))


def pick_paths(ctx: Any, paths: Sequence[str]) -> Dict[str, Any]:
    picked: Dict[str, Any] = {}
    for path in paths:
        value = get_path(ctx, path)
        if value is not MISSING:
            set_path(picked, path, value)
    return picked


def apply_transform(step: TransformStep, ctx: Any) -> Any:
    """Aplica as operações de `step` e devolve o contexto resultante."""
    current = ctx
    for op in step.ops:
        if isinstance(op, DefaultOp):
            apply_default(op, current)
        elif isinstance(op, TemplateOp):
            apply_template_op(op, current)
        elif isinstance(op, PickOp):
            current = pick_paths(current, op.paths)
        else:
            raise TypeError(f"Unknown transform operation: {type(op).__name__}")
    return current
