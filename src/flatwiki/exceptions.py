"""Exceptions raised by the wiki core."""

from flatwiki.models.node import NavNode


class WikiError(Exception):
    """Base class for wiki errors."""


class NavigationBuildError(WikiError):
    """The documents tree could not be walked completely.

    ``partial`` holds whatever part of the tree was built before the failure,
    so the caller can decide whether it is still usable.
    """

    def __init__(self, message: str, *, partial: NavNode) -> None:
        super().__init__(message)
        self.partial = partial


class CommentPermissionError(WikiError):
    """A comment operation needs admin rights the caller does not have."""


class InvalidCommentIdError(WikiError, ValueError):
    """A comment id does not follow the ``<timestamp>_<author>.md`` format."""


class InvalidVersionError(WikiError, ValueError):
    """A version stamp is not a 14-digit ``YYYYMMDDhhmmss`` string."""


class VersionNotFoundError(WikiError, LookupError):
    """The requested version file does not exist."""
