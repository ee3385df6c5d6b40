"""Error tracking data models."""

from pydantic import BaseModel


class FileError(BaseModel):
    """A file the batch run could not process."""

    file_path: str
    phase: str
    error_type: str
    message: str
