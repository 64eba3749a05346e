import os

class UserFacingError(Exception):
    """Error whose message can be shown to the user as is."""

class InvalidInput(UserFacingError):
    """Malformed upload or option; rejected before anything is mutated."""

class NotFound(UserFacingError):
    pass

class MissingTemplate(UserFacingError):
    pass

class ExternalToolFailure(UserFacingError):
    """PDF or DOCX processing failed. Not retried."""

def is_pdf(path: str) -> bool:
    return path.lower().endswith(".pdf")

def is_docx(path: str) -> bool:
    return path.lower().endswith(".docx")

def title_from_filename(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]
