# src/triggerflow/core/config/loader.py
"""
Resolução da configuração efetiva do TriggerFlow.

Camadas, da mais fraca para a mais forte:
    1. `DEFAULT_CONFIG` (embutido no pacote)
    2. arquivo de defaults do projeto (`config/triggerflow.defaults.yaml`),
       quando informado, obrigatório
    3. arquivo local (`config/triggerflow.local.yaml`), quando existir

Cada camada é aplicada com `deep_merge`. O resultado é um dict puro; a
validação de domínio fica com `EngineSettings.from_config`.
"""

from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Dict, IO, Optional

import json
import yaml  # PyYAML

from .errors import (
    DefaultsNotFoundError,
    InvalidConfigRootTypeError,
    UnsupportedConfigFormatError,
)
from .merge import deep_merge


DEFAULT_CONFIG: Dict[str, Any] = {
    "engine": {
        "record_events": True,
    },
    "http": {
        "timeout_ms": 2000,
        "retries": 3,
        "user_agent": "triggerflow/0.1",
    },
    "retry": {
        "base_delay_ms": 100,
        "factor": 2,
    },
}

_READERS: Dict[str, Callable[[IO[str]], Any]] = {
    ".yaml": yaml.safe_load,
    ".yml": yaml.safe_load,
    ".json": json.load,
}


def _read_mapping(path: Path) -> Dict[str, Any]:
    """
    Lê um arquivo YAML/JSON cuja raiz deve ser um mapping.

    Arquivo vazio equivale a `{}`.

    Raises:
        DefaultsNotFoundError: arquivo inexistente.
        UnsupportedConfigFormatError: extensão sem leitor registrado.
        InvalidConfigRootTypeError: raiz diferente de mapping.
    """
    if not path.exists():
        raise DefaultsNotFoundError(f"Arquivo de configuração ausente: {path}")

    reader = _READERS.get(path.suffix.lower())
    if reader is None:
        raise UnsupportedConfigFormatError(
            f"Extensão '{path.suffix}' não suportada (use .yaml, .yml ou .json)"
        )

    with path.open("r", encoding="utf-8") as fh:
        content = reader(fh)

    content = {} if content is None else content
    if not isinstance(content, dict):
        raise InvalidConfigRootTypeError(
            f"{path.name}: a raiz precisa ser um mapping, veio {type(content).__name__}"
        )
    return content


def load_config(
    *,
    defaults_path: Optional[str] = None,
    local_path: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Monta a configuração efetiva aplicando as camadas em ordem.

    Args:
        defaults_path: arquivo de defaults do projeto; se informado, precisa existir.
        local_path: overrides locais; ignorado quando o arquivo não existe.

    Returns:
        Novo dict (nunca o próprio `DEFAULT_CONFIG`).

    Raises:
        DefaultsNotFoundError, UnsupportedConfigFormatError,
        InvalidConfigRootTypeError, ConfigTypeConflictError
    """
    config = deepcopy(DEFAULT_CONFIG)

    if defaults_path is not None:
        config = deep_merge(config, _read_mapping(Path(defaults_path)))

    if local_path is not None and Path(local_path).exists():
        config = deep_merge(config, _read_mapping(Path(local_path)))

    return config
