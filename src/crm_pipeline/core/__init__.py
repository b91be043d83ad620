# src/crm_pipeline/core/__init__.py
"""
Core do CRM Pipeline.

O core é projetado para ser:
    - determinístico (o mesmo snapshot e gesto produzem as mesmas linhas)
    - testável de forma isolada (a escrita passa por uma porta injetada)
    - livre de estado global

Componentes principais:
    - config    → configuração (YAML/JSON) e `ReorderSettings`
    - pipeline  → `PipelineItem`, colunas do board, `ReorderContext`
    - engine    → `compute_reorder` / `handle_reorder` e rank esparso
    - errors    → payload canônico de erro e catálogo de códigos
"""
