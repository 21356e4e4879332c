"""Protocols for the collaborators the wiki core depends on."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class RendererProtocol(Protocol):
    """Protocol for markdown renderers."""

    def render(self, markdown: str, document_path: str) -> str:
        """Render markdown belonging to ``document_path`` as HTML."""
        ...


@runtime_checkable
class TitleFilter(Protocol):
    """Protocol for title preprocessing, e.g. emoji shortcode expansion."""

    def __call__(self, title: str) -> str:
        """Return the display form of a raw heading."""
        ...


@runtime_checkable
class AdminCheck(Protocol):
    """Protocol for the authorization capability consumed by comment deletion."""

    def is_admin(self, user: str) -> bool:
        """Return True if ``user`` may delete comments."""
        ...
