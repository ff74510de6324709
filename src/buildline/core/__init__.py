# src/buildline/core/__init__.py
"""
Core do buildline.

Componentes principais:
    - pipeline → Task, PayloadKind, TransformRegistry, BuildContext
    - engine   → Engine (apply/chain), fork/join, Build fluente
    - config   → carregamento, merge e hashing de configuração
    - errors / exceptions → taxonomia de erros tipados

O core não contém leaf effects concretos; eles vivem em `buildline.effects`
e são registrados por nome no TransformRegistry.
"""
