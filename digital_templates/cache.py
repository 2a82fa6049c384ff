"""
Cache des vues rendues (in-process) + signal d'invalidation.

invalidate() est un signal « fire-and-forget » : un listener en échec est loggé,
jamais propagé à l'appelant (la mutation est déjà commitée).
"""
import logging
from typing import Callable, Dict, List, Optional

log = logging.getLogger(__name__)

_VIEW_CACHE: Dict[str, str] = {}
_LISTENERS: List[Callable[[str], None]] = []

LIST_PATH = "/admin/digital-templates"


def template_paths(template_id: str, block_id: Optional[str] = None) -> List[str]:
    """Vues affectées par une mutation du template (et du bloc)."""
    paths = [LIST_PATH, f"{LIST_PATH}/{template_id}", f"/preview/templates/{template_id}"]
    if block_id:
        paths.append(f"/admin/editor/{block_id}")
    return paths


def cached_view(path: str, build: Callable[[], str]) -> str:
    if path not in _VIEW_CACHE:
        _VIEW_CACHE[path] = build()
    return _VIEW_CACHE[path]


def on_invalidate(listener: Callable[[str], None]) -> None:
    _LISTENERS.append(listener)


def invalidate(*paths: str) -> None:
    for path in paths:
        _VIEW_CACHE.pop(path, None)
        for listener in list(_LISTENERS):
            try:
                listener(path)
            except Exception as e:
                log.warning("Invalidation %s : listener en échec (%s)", path, e)


def clear() -> None:
    """Vide cache et listeners (tests)."""
    _VIEW_CACHE.clear()
    _LISTENERS.clear()
