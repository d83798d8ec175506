# src/triggerflow/core/config/settings.py
"""
EngineSettings: visão tipada da configuração efetiva.

O dicionário produzido por `load_config` é livre; o Engine, o validador de
workflows e o controlador de retry consomem apenas esta estrutura imutável,
já validada.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import InvalidSettingError
from .loader import DEFAULT_CONFIG


def _section(config: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = (config or {}).get(name) or {}
    if not isinstance(value, dict):
        raise InvalidSettingError(f"config['{name}'] deve ser um mapping")
    return value


def _number(section: Dict[str, Any], key: str, default: Any, where: str) -> Any:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSettingError(f"{where}.{key} deve ser numérico, recebido: {value!r}")
    return value


@dataclass(frozen=True)
class EngineSettings:
    """Parâmetros resolvidos do Engine (defaults de steps HTTP e política de backoff)."""

    default_timeout_ms: int = 2000
    default_retries: int = 3
    user_agent: Optional[str] = "triggerflow/0.1"
    backoff_base_ms: float = 100
    backoff_factor: float = 2
    record_events: bool = True

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]] = None) -> "EngineSettings":
        """Materializa settings a partir de uma configuração efetiva (ou dos defaults)."""
        cfg = config if config is not None else DEFAULT_CONFIG
        http = _section(cfg, "http")
        retry = _section(cfg, "retry")
        engine = _section(cfg, "engine")

        timeout_ms = _number(http, "timeout_ms", 2000, "http")
        retries = _number(http, "retries", 3, "http")
        base_ms = _number(retry, "base_delay_ms", 100, "retry")
        factor = _number(retry, "factor", 2, "retry")

        if timeout_ms <= 0:
            raise InvalidSettingError("http.timeout_ms deve ser > 0")
        if retries < 0 or int(retries) != retries:
            raise InvalidSettingError("http.retries deve ser inteiro >= 0")
        if base_ms < 0:
            raise InvalidSettingError("retry.base_delay_ms deve ser >= 0")
        if factor < 1:
            raise InvalidSettingError("retry.factor deve ser >= 1")

        user_agent = http.get("user_agent", cls.user_agent)
        if user_agent is not None and not isinstance(user_agent, str):
            raise InvalidSettingError("http.user_agent deve ser string")

        return cls(
            default_timeout_ms=timeout_ms,
            default_retries=int(retries),
            user_agent=user_agent,
            backoff_base_ms=base_ms,
            backoff_factor=factor,
            record_events=bool(engine.get("record_events", True)),
        )
