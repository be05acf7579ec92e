from .io import FileReadError, safe_read_file
from .paths import safe_file_path

__all__ = ["FileReadError", "safe_read_file", "safe_file_path"]
