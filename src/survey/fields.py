"""Field-name resolution for raw KoboToolbox submissions.

The survey form went through two schema generations, so the same answer can
appear under a legacy name (``attentes_session``) or a newer one
(``Satisfaction_attentes``).  Each logical metric declares its aliases in the
order they are tried; the first non-empty value wins.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

__all__ = ["FIELD_ALIASES", "resolve_field"]

FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "sessionId": ("numero_session", "Session"),
    "date": ("_submission_time",),
    "attentes": ("attentes_session", "Satisfaction_attentes"),
    "pertinence": ("thematique_session_pertinence", "Pertinence_thematique"),
    "qualitePresentations": (
        "qualite_presentations_session",
        "Qualite_presentations",
    ),
    "satisfactionIntervenants": (
        "intervenants_session_satisfaction",
        "Satisfaction_intervenants",
    ),
    "utiliteConnaissances": (
        "connaissances_session_acquise_utilite",
        "Utilite_connaissances",
    ),
    "qualiteModeration": ("qualite_moderation_session", "Qualite_moderation"),
    "qualiteEchanges": ("echanges_session", "Qualite_echanges"),
    "qualiteLogistique": ("logistique_session", "Qualite_logistique"),
    "recommandation": ("recommandation_session", "Recommandation"),
    # Spellings accumulated across form revisions, typos included.
    "defiPays": (
        "thematique_session_defi_pays",
        "Difi_pays",
        "Difi",
        "Défi",
        "Défi_pays",
    ),
}


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def resolve_field(raw: Mapping[str, Any], metric: str) -> Optional[Any]:
    """Return the first non-empty value among the aliases of *metric*.

    ``None`` means none of the aliases carried a value.  An unknown *metric*
    raises ``KeyError``.
    """

    for alias in FIELD_ALIASES[metric]:
        value = raw.get(alias)
        if not _is_empty(value):
            return value
    return None
