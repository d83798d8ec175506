"""TriggerFlow — definições de workflow.

Componentes canônicos:
 - validação estrutural e materialização de Steps tipados
 - carregamento de definições a partir de YAML/JSON
"""

from .loader import load_workflow  # noqa: F401
from .schema import WorkflowDefinition, parse_step, parse_steps, parse_workflow  # noqa: F401
