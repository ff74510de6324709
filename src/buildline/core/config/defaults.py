# src/buildline/core/config/defaults.py
"""Configuração embutida, base de todo merge."""

from typing import Any, Dict

DEFAULT_CONFIG: Dict[str, Any] = {
    "engine": {"strict_completion": True},
    "fork": {"mode": "thread", "max_workers": 4},
    "transforms": {},
}
