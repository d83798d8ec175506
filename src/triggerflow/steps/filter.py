"""
Step: filter
============

Avalia condições ANDed sobre o contexto da run. Um resultado `False`
encerra a run como `skipped` (decisão do Runner); não é erro.

Igualdade estrita (sem coerção):
--------------------------------
- `"1"` ≠ `1`
- `True` ≠ `1` e `False` ≠ `0`
- ausente (`MISSING`) ≠ `None`
- `1` = `1.0` (JSON possui um único tipo numérico)
- dicts/listas nunca são iguais a nada (comparação por identidade de objeto;
  o valor da condição e o do contexto são sempre objetos distintos)

Operadores:
-----------
- eq  → a condição falha se o valor não for estritamente igual
- neq → a condição falha se o valor for estritamente igual
"""

from __future__ import annotations

from typing import Any

from triggerflow.core.pipeline.step import FilterStep
from triggerflow.core.pipeline.types import FilterOperator
from triggerflow.core.templating import MISSING, get_path


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def strict_equals(left: Any, right: Any) -> bool:
    """Igualdade sem coerção de tipos entre valores JSON-like."""
    if left is MISSING or right is MISSING:
        return left is right
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def evaluate_filter(step: FilterStep, ctx: Any) -> bool:
    """Retorna `True` apenas se todas as condições passarem (short-circuit na primeira falha)."""
    for condition in step.conditions:
        value = get_path(ctx, condition.path)
        equal = strict_equals(value, condition.value)

        if condition.op == FilterOperator.EQ and not equal:
            return False
        if condition.op == FilterOperator.NEQ and equal:
            return False

    return True
