# src/triggerflow/core/templating.py
"""
Resolução de paths e templates sobre o contexto de uma run.

Este módulo implementa as quatro primitivas de acesso ao contexto
(payload JSON-like em trânsito) utilizadas por todos os Steps:

    - get_path                 → leitura de um path pontuado (nunca levanta)
    - set_path                 → escrita in-place, criando containers intermediários
    - apply_template           → substituição de `{{ path }}` em strings
    - resolve_object_templates → aplicação recursiva de templates (sem mutação)

Sintaxe de path:
    - segmentos separados por ponto: `user.address.city`
    - índices de lista como segmentos numéricos: `items.0.sku`
    - notação com colchetes aceita e normalizada: `items[0].sku`

Sintaxe de template:
    - exatamente `{{` + path (espaços ao redor opcionais) + `}}`
    - valores ausentes ou nulos são renderizados como string vazia

Decisões arquiteturais:
    - Ausência é representada pelo sentinel `MISSING`, distinto de `None`
      (um `null` presente no payload é um valor; um path ausente não é)
    - A conversão valor → string é determinística e independente de locale
    - Leitura e templating nunca mutam o contexto

Limites explícitos:
    - Não avalia expressões (apenas paths)
    - Não valida schema do contexto
"""

from __future__ import annotations

import json
import math
import re
from decimal import Decimal
from typing import Any, List


class _Missing:
    """Sentinel de ausência retornado por `get_path`."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()

_TEMPLATE_RE = re.compile(r"\{\{([^}]+)\}\}")
_BRACKET_RE = re.compile(r"\[(\d+)\]")


def split_path(path: str) -> List[str]:
    """Normaliza um path (`a[0].b` → `["a", "0", "b"]`), descartando segmentos vazios."""
    normalized = _BRACKET_RE.sub(r".\1", str(path))
    return [seg for seg in normalized.split(".") if seg != ""]


def _is_index(segment: str) -> bool:
    """Só inteiros canônicos em ASCII (`0`, `7`, `12`) indexam listas; `01` e `²` não."""
    if not (segment.isascii() and segment.isdigit()):
        return False
    return segment == "0" or not segment.startswith("0")


def get_path(ctx: Any, path: str) -> Any:
    """
    Lê o valor em `path` dentro de `ctx`.

    Retorna `MISSING` quando qualquer segmento está ausente, é nulo ou
    não é indexável. Nunca levanta exceção.

    Args:
        ctx: contexto (dict/list/escalares aninhados).
        path: path pontuado.

    Returns:
        O valor encontrado ou `MISSING`.
    """
    segments = split_path(path)
    if not segments:
        return MISSING

    current = ctx
    for seg in segments:
        if isinstance(current, dict):
            if seg not in current:
                return MISSING
            current = current[seg]
        elif isinstance(current, list):
            if not _is_index(seg):
                return MISSING
            idx = int(seg)
            if idx >= len(current):
                return MISSING
            current = current[idx]
        else:
            return MISSING

    return current


def set_path(ctx: Any, path: str, value: Any) -> None:
    """
    Atribui `value` em `path`, mutando `ctx` in-place.

    Containers intermediários ausentes (ou não-containers) são criados:
    lista quando o próximo segmento é numérico, dict caso contrário.
    Um `ctx` raiz escalar não pode receber chaves e permanece inalterado.
    """
    segments = split_path(path)
    if not segments or not isinstance(ctx, (dict, list)):
        return

    current = ctx
    for i, seg in enumerate(segments):
        is_last = i == len(segments) - 1
        if isinstance(current, list):
            if not _is_index(seg):
                return
            idx = int(seg)
            while len(current) <= idx:
                current.append(None)
            if is_last:
                current[idx] = value
                return
            nxt = current[idx]
            if not isinstance(nxt, (dict, list)):
                nxt = [] if _is_index(segments[i + 1]) else {}
                current[idx] = nxt
            current = nxt
        else:
            if is_last:
                current[seg] = value
                return
            nxt = current.get(seg)
            if not isinstance(nxt, (dict, list)):
                nxt = [] if _is_index(segments[i + 1]) else {}
                current[seg] = nxt
            current = nxt


def _format_float(value: float) -> str:
    """
    Texto de um float no formato numérico do JSON/ECMAScript.

    Usa os dígitos mínimos de `repr` e posiciona o ponto decimal:
    notação fixa para expoentes decimais em [-6, 21), científica fora
    disso (`1e-7`, `1.5e+21`), sem zeros à esquerda no expoente.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    stripped = digits.rstrip("0")
    exponent += len(digits) - len(stripped)
    digits = stripped

    k = len(digits)
    n = exponent + k
    prefix = "-" if sign else ""

    if k <= n <= 21:
        return prefix + digits + "0" * (n - k)
    if 0 < n <= 21:
        return prefix + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return prefix + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits[0] + ("." + digits[1:] if k > 1 else "")
    return f"{prefix}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def stringify(value: Any) -> str:
    """
    Converte um valor do contexto em texto para templates.

    Regras (v1):
        - MISSING / None → ""
        - bool           → "true" / "false"
        - int            → decimal
        - float          → formato numérico JSON (`2.0` → "2", `1e-07` → "1e-7")
        - dict / list    → JSON compacto
        - str            → o próprio valor
    """
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)


def apply_template(template: str, ctx: Any) -> str:
    """Substitui cada `{{ path }}` de `template` pelo valor correspondente em `ctx`."""
    return _TEMPLATE_RE.sub(lambda m: stringify(get_path(ctx, m.group(1).strip())), template)


def resolve_object_templates(value: Any, ctx: Any) -> Any:
    """
    Aplica `apply_template` a toda folha string de uma estrutura aninhada.

    Retorna uma nova estrutura; `value` e `ctx` não são mutados.
    Folhas não-string são preservadas como estão.
    """
    if isinstance(value, str):
        return apply_template(value, ctx)
    if isinstance(value, list):
        return [resolve_object_templates(item, ctx) for item in value]
    if isinstance(value, dict):
        return {key: resolve_object_templates(item, ctx) for key, item in value.items()}
    return value
