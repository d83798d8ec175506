# src/triggerflow/core/config/merge.py
"""
Combinação de configuração base + overrides do TriggerFlow.

Regras (v1):
    - mapping sobre mapping  → combinação chave a chave, recursiva
    - lista no override      → substitui a lista base inteira
    - escalar no override    → substitui o valor base
    - `None` no override     → limpa o valor base (override explícito)
    - tipos incompatíveis    → `ConfigTypeConflictError`, sem resultado parcial

Compatibilidade de tipos:
    - int e float são intercambiáveis (YAML/JSON não distinguem)
    - bool só é compatível com bool (`true` nunca vira `1`)
"""

from copy import deepcopy
from typing import Any, Dict, List

from .errors import ConfigTypeConflictError


def _compatible(current: Any, incoming: Any) -> bool:
    if current is None or incoming is None:
        return True
    if isinstance(current, bool) or isinstance(incoming, bool):
        return isinstance(current, bool) and isinstance(incoming, bool)
    numeric = (int, float)
    if isinstance(current, numeric) and isinstance(incoming, numeric):
        return True
    return type(current) is type(incoming)


def _merge_into(target: Dict[str, Any], override: Dict[str, Any], trail: List[str]) -> None:
    for key, incoming in override.items():
        where = ".".join(trail + [str(key)])
        current = target.get(key)

        if isinstance(current, dict) and isinstance(incoming, dict):
            _merge_into(current, incoming, trail + [str(key)])
        elif key not in target or isinstance(incoming, list) or _compatible(current, incoming):
            target[key] = deepcopy(incoming)
        else:
            raise ConfigTypeConflictError(
                f"Tipos incompatíveis em '{where}': "
                f"{type(current).__name__} (base) vs {type(incoming).__name__} (override)"
            )


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Devolve uma nova configuração: `base` com `override` aplicado por cima.

    Nenhum dos argumentos é mutado; o resultado não compartilha objetos
    com as entradas.

    Raises:
        ConfigTypeConflictError: raiz não-mapping ou tipos incompatíveis em
            alguma chave (a mensagem traz o caminho pontuado, ex.: `http.retries`).
    """
    if not isinstance(base, dict) or not isinstance(override, dict):
        raise ConfigTypeConflictError(
            f"deep_merge espera mappings na raiz, recebeu "
            f"{type(base).__name__} e {type(override).__name__}"
        )

    merged = deepcopy(base)
    _merge_into(merged, override, [])
    return merged
