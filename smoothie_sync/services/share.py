# smoothie_sync/services/share.py
from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from smoothie_sync.app.domain.models import Recipe


@dataclass
class ShareLink:
    title: str
    text: str
    url: str

    @property
    def clipboard_text(self) -> str:
        return f"{self.text}\n{self.url}"


def share_link(recipe: Recipe, base_url: str) -> ShareLink:
    """Monta o link de compartilhamento `?recipe=<id codificado>`."""
    encoded_id = quote(str(recipe.id), safe="")
    url = f"{base_url.split('?', 1)[0]}?recipe={encoded_id}"
    text = f"Check out this smoothie recipe: {recipe.name} {recipe.emoji} by {recipe.contributor}"
    return ShareLink(title=f"{recipe.name} - Smoothie Recipe", text=text, url=url)
