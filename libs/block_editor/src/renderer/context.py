"""État d'affichage passé explicitement au rendu (pas d'état global d'UI)."""
from typing import Literal, Optional

from pydantic import BaseModel


class RenderContext(BaseModel):
    mode: Literal["edit", "preview"] = "preview"
    selected_id: Optional[str] = None   # bloc ou élément sélectionné dans le canvas
    open_panel: Optional[str] = None    # panneau de réglages ouvert (ex: "style", "advanced")

    @property
    def editing(self) -> bool:
        return self.mode == "edit"
