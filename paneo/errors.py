"""Error taxonomy for file manager operations.

Every error carries the HTTP status the API layer answers with, so services can
raise them without knowing about FastAPI.
"""


class FileManagerError(Exception):
    status_code: int = 400
    default_message: str = "File manager error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class UnknownRoot(FileManagerError):
    def __init__(self, root_id: str):
        self.root_id = root_id
        super().__init__(f"Unknown root: {root_id}")


class RootsNotConfigured(FileManagerError):
    status_code = 500
    default_message = "PANEO_ROOTS is empty"


class InvalidPath(FileManagerError):
    default_message = "Invalid path"


class InvalidName(FileManagerError):
    default_message = "Invalid target name"


class NotADirectory(FileManagerError):
    default_message = "Target is not a directory"


class PathNotFound(FileManagerError):
    status_code = 404
    default_message = "Path not found"


class DestinationIsSameAsSource(FileManagerError):
    default_message = "Destination is the same as source"


class DestinationInsideSource(FileManagerError):
    default_message = "Cannot copy or move a directory into itself"


class DestinationExists(FileManagerError):
    status_code = 409
    default_message = "Destination already exists"


class CopyCanceled(FileManagerError):
    status_code = 409
    default_message = "Copy canceled"


class CopyFailed(FileManagerError):
    status_code = 500
    default_message = "Copy failed"


class JobNotFound(FileManagerError):
    status_code = 404
    default_message = "Copy job not found"
