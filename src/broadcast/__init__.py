"""
Broadcast package.

Contiene:
- channels: normalizzazione dei nomi dei canali
- matching: confronto fuzzy squadre/orario tra fonti diverse
- reconcile: unione dei canali trovati nei pool delle fonti di palinsesto
"""
from .channels import apply_channel_precedence, normalize_channels  # noqa: F401
from .matching import matches, normalize_team_name  # noqa: F401
from .reconcile import reconcile, reconcile_all  # noqa: F401


__all__ = [
    "apply_channel_precedence",
    "normalize_channels",
    "matches",
    "normalize_team_name",
    "reconcile",
    "reconcile_all",
]
