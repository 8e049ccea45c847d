"""Authentication and content policy exceptions."""


class AuthenticationError(Exception):
    """Raised when a request carries no valid session."""


class BlockedContentError(Exception):
    """Raised when a prompt contains a blocked keyword.

    Attributes:
        keyword: The keyword that matched.
    """

    def __init__(self, keyword: str) -> None:
        super().__init__("Your message contains blocked content")
        self.keyword = keyword


__all__ = ["AuthenticationError", "BlockedContentError"]
