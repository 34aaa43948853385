import math

from filedrop.core.config import settings
from filedrop.models.upload import FileInfo, FileValidationResult

MIB = 1024 * 1024


def file_extension(filename: str) -> str:
    """
    Lower-cased substring from the last '.'.
    A name without any '.' returns the whole lower-cased name.
    """
    return filename.lower()[max(filename.rfind("."), 0) :]


def validate_file(file: FileInfo, max_size: int = 100 * MIB) -> FileValidationResult:
    """
    All checks run; errors come back in check order (size, name length, type).
    """
    errors: list[str] = []

    if file.size > max_size:
        errors.append(f"File size must be less than {math.floor(max_size / MIB + 0.5)}MB")

    if len(file.name) > settings.MAX_FILENAME_CHARS:
        errors.append(
            f"File name is too long (max {settings.MAX_FILENAME_CHARS} characters)"
        )

    if file_extension(file.name) in settings.BLOCKED_EXTENSIONS:
        errors.append("File type not allowed for security reasons")

    return FileValidationResult(is_valid=not errors, errors=errors)
