"""Engine-level exceptions."""


class ImgselError(Exception):
    """Base exception for imgsel operations."""


class EmptyCollection(ImgselError):
    """Raised when a collection holds no eligible media items."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Collection '{name}' has no images or videos.")
        self.name = name


class QuotaDenied(ImgselError):
    """Raised when an identity has no upload permission."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' has no upload permission.")
        self.user_id = user_id


class PromptTimeout(ImgselError):
    """Raised when an interactive prompt receives no reply in time."""
