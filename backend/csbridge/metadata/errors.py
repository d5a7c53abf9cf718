from __future__ import annotations


class MetadataServiceError(OSError):
    """
    The metadata service could not be reached or answered with garbage.
    """


class RemoteError(OSError):
    """
    A failure raised on the metadata service side and relayed to us.

    `class_name` is the service's own classification of the failure
    (e.g. "java.io.FileNotFoundException"), kept verbatim.
    """

    def __init__(self, class_name: str, message: str):
        self.class_name = class_name
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"RemoteError({self.class_name!r}, {self.message!r})"
