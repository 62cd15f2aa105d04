from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class WebSearchSource:
    link: str
    title: str
    hostname: str


@dataclass(frozen=True, slots=True)
class WebSearchUpdate:
    type: str
    message: str | None = None
    args: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class WebSearch:
    updates: tuple[WebSearchUpdate, ...] = ()
    sources: tuple[WebSearchSource, ...] = ()

    def merged(self, other: WebSearch) -> WebSearch:
        """Append ``other``'s updates and any sources whose link is new."""
        known = {s.link for s in self.sources}
        fresh = tuple(s for s in other.sources if s.link not in known)
        return WebSearch(
            updates=self.updates + other.updates,
            sources=self.sources + fresh,
        )
