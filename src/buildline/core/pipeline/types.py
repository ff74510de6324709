# src/buildline/core/pipeline/types.py
"""
Tipos canônicos do pipeline do buildline.

Este módulo define os enums fundamentais que padronizam a comunicação
entre Tasks, Transforms, Engine e o coordenador de Fork/Join.

Os tipos aqui definidos representam:
    - a forma do dado que flui pelo pipeline (PayloadKind)
    - o estado final de um branch de fork (BranchStatus)
    - o estado de uma instância de fork (ForkState)

Princípios fundamentais:
    - Tipos são estáveis e serializáveis
    - Nenhuma lógica de execução vive neste módulo

Invariantes:
    - Enums possuem valores textuais canônicos
    - O conjunto de PayloadKind é fechado

Limites explícitos:
    - Não cria Tasks
    - Não executa transforms
    - Não coordena branches
"""

from __future__ import annotations

from enum import Enum


class PayloadKind(str, Enum):
    """
    Forma do dado carregado por uma Task.

    Tipos definidos:
        - FILES: sequência ordenada de caminhos de arquivo (sempre sequência,
          mesmo com um único arquivo)
        - STRINGS: sequência ordenada de blocos de texto
        - STRING: um único bloco de texto

    Invariantes:
        - O conjunto é fechado; transforms declaram quais kinds aceitam
        - O valor textual do enum é estável e canônico
    """
    FILES = "FILES"
    STRINGS = "STRINGS"
    STRING = "STRING"


class BranchStatus(str, Enum):
    """Estado final de um branch de fork."""
    SUCCESS = "success"
    FAILED = "failed"


class ForkState(str, Enum):
    """
    Estados de uma instância de fork.

    - RUNNING: branches em andamento
    - ALL_COMPLETE: todos os branches reportaram conclusão (terminal)
    """
    RUNNING = "running"
    ALL_COMPLETE = "all_complete"
