# src/triggerflow/core/__init__.py
"""
Core do TriggerFlow.

Componentes principais:
    - config     → defaults, merge e settings do Engine
    - templating → resolução de caminhos e templates `{{path}}`
    - pipeline   → tipos, definições de Step e contexto de run
    - workflow   → validação e carregamento de definições
    - http       → cliente `httpx` e controlador de retry/backoff
    - engine     → Runner e serviço de trigger

Limites explícitos:
    - Não expõe rotas HTTP
    - Não persiste contexto de runs
"""
