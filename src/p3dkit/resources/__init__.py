from .manager import (
    CATEGORIES,
    LoadSummary,
    Material,
    ResourceManager,
    make_fallback_texture,
)

__all__ = [
    "CATEGORIES",
    "LoadSummary",
    "Material",
    "ResourceManager",
    "make_fallback_texture",
]
