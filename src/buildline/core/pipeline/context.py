# src/buildline/core/pipeline/context.py
"""
Contexto de execução compartilhado de um build.

Este módulo define o `BuildContext`, a estrutura canônica passada ao
Engine, ao coordenador de fork e a todos os leaf effects durante um
build do buildline.

O BuildContext atua como o único meio permitido de:
    - acesso à configuração resolvida
    - registro de logs estruturados de execução
    - coleta de warnings não fatais associados a transforms/branches
    - saída humana (via `Reporter` injetado)

Princípios fundamentais:
    - Isolamento por build (cada build possui seu próprio contexto)
    - Nenhum canal de saída global implícito (sem print/console direto)
    - Seguro para uso concorrente por branches de fork

Invariantes:
    - Logs sempre incluem `run_id` e `source`
    - Warnings são agrupados por `source`
    - Eventos e warnings são registrados sob lock

Limites explícitos:
    - Não executa transforms
    - Não coordena branches
    - Não persiste dados automaticamente
"""

from __future__ import annotations

import sys
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol, TextIO, runtime_checkable

from buildline.core.config.defaults import DEFAULT_CONFIG
from buildline.core.config.hashing import compute_config_hash
from buildline.core.config.merge import deep_merge


@runtime_checkable
class Reporter(Protocol):
    """Colaborador de saída humana (lint reports, transform `log`)."""

    def report(self, *, source: str, message: str, **extra: Any) -> None:
        ...


@dataclass
class MemoryReporter:
    """Reporter que apenas acumula mensagens (default do BuildContext)."""

    records: List[Dict[str, Any]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    def report(self, *, source: str, message: str, **extra: Any) -> None:
        record = {"source": source, "message": message}
        record.update(extra)
        with self._lock:
            self.records.append(record)

    def messages(self) -> List[str]:
        with self._lock:
            return [r["message"] for r in self.records]


class StreamReporter:
    """Reporter que escreve uma linha por mensagem em um stream explícito."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream: TextIO = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()

    def report(self, *, source: str, message: str, **extra: Any) -> None:
        with self._lock:
            self.stream.write(f"[{source}] {message}\n")
            self.stream.flush()


@dataclass
class BuildContext:
    """
    Contexto de execução compartilhado de um build.

    Campos canônicos:
    - run_id: identificador único do build
    - created_at: timestamp UTC de criação do contexto
    - config: configuração efetiva (defaults + overrides)
    - reporter: colaborador de saída humana
    - meta: metadados livres (ex.: config_hash)
    - events: log estruturado de eventos
    - warnings: warnings por source
    """
    run_id: str
    created_at: datetime
    config: Dict[str, Any]
    reporter: Reporter = field(default_factory=MemoryReporter)
    meta: Dict[str, Any] = field(default_factory=dict)

    events: List[Dict[str, Any]] = field(default_factory=list, init=False)
    warnings: Dict[str, List[str]] = field(default_factory=dict, init=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    # -----------------------------
    # Config
    # -----------------------------
    def section(self, name: str) -> Dict[str, Any]:
        value = (self.config or {}).get(name, {}) or {}
        return dict(value) if isinstance(value, dict) else {}

    # -----------------------------
    # Logging & warnings
    # -----------------------------
    def log(self, *, source: str, level: str, message: str, **extra: Any) -> None:
        event = {
            "run_id": self.run_id,
            "source": source,
            "level": level,
            "message": message,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        event.update(extra)
        with self._lock:
            self.events.append(event)

    def add_warning(self, *, source: str, message: str) -> None:
        with self._lock:
            if source not in self.warnings:
                self.warnings[source] = []
            self.warnings[source].append(message)

    def events_for(self, source: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [e for e in self.events if e.get("source") == source]


def new_context(
    *,
    config: Optional[Dict[str, Any]] = None,
    reporter: Optional[Reporter] = None,
    run_id: Optional[str] = None,
) -> BuildContext:
    """
    Cria um BuildContext com configuração resolvida sobre DEFAULT_CONFIG.

    O hash canônico da configuração efetiva é registrado em
    `meta["config_hash"]` para rastreabilidade.
    """
    effective = deep_merge(DEFAULT_CONFIG, config or {})
    return BuildContext(
        run_id=run_id or f"build-{uuid.uuid4().hex[:12]}",
        created_at=datetime.now(timezone.utc),
        config=effective,
        reporter=reporter if reporter is not None else MemoryReporter(),
        meta={"config_hash": compute_config_hash(effective)},
    )
