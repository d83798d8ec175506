# tests/core/config/test_config_merge.py
"""
Testes da política de deep-merge de configuração.

Os testes asseguram que:
- valores escalares são sobrescritos
- dicionários são mesclados recursivamente
- listas são sobrescritas integralmente
- conflitos de tipo são rejeitados explicitamente
- objetos de entrada não são mutados

Decisões arquiteturais:
    - int e float são o mesmo tipo numérico (YAML/JSON)
    - bool nunca é número
    - `None` no override é sobrescrita explícita
"""

import pytest

try:
    from triggerflow.core.config.merge import deep_merge
    from triggerflow.core.config.errors import ConfigTypeConflictError
except Exception as e:  # noqa: BLE001
    deep_merge = None
    ConfigTypeConflictError = None
    _IMPORT_ERR = e
else:
    _IMPORT_ERR = None


def _require():
    if deep_merge is None:
        pytest.fail(f"Missing deep_merge. Import error: {_IMPORT_ERR}")


def test_merge_simple_override():
    _require()
    base = {"a": 1, "b": 2}
    override = {"b": 3}

    out = deep_merge(base, override)

    assert out == {"a": 1, "b": 3}
    assert base == {"a": 1, "b": 2}
    assert override == {"b": 3}


def test_merge_nested_dicts():
    _require()
    base = {"http": {"timeout_ms": 2000, "retries": 3}}
    out = deep_merge(base, {"http": {"retries": 0}, "extra": {"x": 1}})

    assert out == {"http": {"timeout_ms": 2000, "retries": 0}, "extra": {"x": 1}}


def test_merge_lists_are_replaced():
    _require()
    out = deep_merge({"xs": [1, 2, 3]}, {"xs": [9]})
    assert out == {"xs": [9]}


def test_merge_int_and_float_are_compatible():
    _require()
    out = deep_merge({"retry": {"factor": 2}}, {"retry": {"factor": 1.5}})
    assert out["retry"]["factor"] == 1.5


def test_merge_bool_vs_number_conflict():
    """`true` no lugar de um número é conflito, não coerção."""
    _require()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"http": {"retries": 3}}, {"http": {"retries": True}})


def test_merge_dict_vs_scalar_conflict():
    _require()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"http": {"retries": 3}}, {"http": "fast"})


def test_merge_none_override_is_explicit():
    _require()
    out = deep_merge({"http": {"user_agent": "ua"}}, {"http": {"user_agent": None}})
    assert out["http"]["user_agent"] is None


def test_merge_requires_dict_roots():
    _require()
    with pytest.raises(ConfigTypeConflictError):
        deep_merge({"a": 1}, ["not", "a", "dict"])
