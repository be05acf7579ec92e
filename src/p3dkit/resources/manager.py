"""Resource manager: owner of decoded resources.

Keeps one name-keyed table per category. Loads replace existing entries
(last load wins). Texture lookups never come back empty: a 2x2 fallback
checkerboard stands in for anything missing. Shader lookups rebind the
shader's diffuse texture by name on every call, so a texture loaded after
the shader is picked up on the next lookup.
"""

from __future__ import annotations

import random
import struct
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..assets.decoders import resolve_set
from ..assets.models import (
    Animation,
    Font,
    ImageFormat,
    Mesh,
    ShaderMaterial,
    Sprite,
    Texture,
    TextureSet,
)
from ..assets.registry import (
    RAW,
    DecodeFailure,
    DecodeResult,
    DecoderRegistry,
    decode_known_chunks,
)
from ..format.chunks import load_file
from ..format.constants import (
    FALLBACK_TEXTURE_NAME,
    FALLBACK_TEXTURE_SIZE,
    FALLBACK_TEXTURE_TEXELS,
)
from ..format.cursor import Buffer
from ..logging import get_logger

__all__ = [
    "CATEGORIES",
    "Material",
    "LoadSummary",
    "ResourceManager",
    "make_fallback_texture",
]

CATEGORIES = ("texture", "shader", "mesh", "font", "animation")

_log = get_logger("resources")


def make_fallback_texture() -> Texture:
    width, height = FALLBACK_TEXTURE_SIZE
    data = struct.pack(
        f"<{len(FALLBACK_TEXTURE_TEXELS)}I", *FALLBACK_TEXTURE_TEXELS
    )
    return Texture(
        name=FALLBACK_TEXTURE_NAME,
        width=width,
        height=height,
        format=ImageFormat.RAW,
        data=data,
        bpp=32,
        alpha_depth=8,
    )


class Material:
    """Runtime shader: a ShaderMaterial plus its currently bound texture."""

    __slots__ = ("definition", "diffuse_texture")

    def __init__(self, definition: ShaderMaterial) -> None:
        self.definition = definition
        self.diffuse_texture: Optional[Texture] = None

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def diffuse_texture_name(self) -> str:
        return self.definition.diffuse_texture_name

    def __repr__(self) -> str:
        bound = self.diffuse_texture.name if self.diffuse_texture else None
        return f"Material({self.name!r}, diffuse={bound!r})"


@dataclass(slots=True)
class LoadSummary:
    label: str
    size: int
    decoded: Dict[str, int] = field(default_factory=dict)
    failures: List[DecodeFailure] = field(default_factory=list)

    @property
    def raw_chunks(self) -> int:
        return self.decoded.get(RAW, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "file": self.label,
            "size": self.size,
            "decoded": dict(self.decoded),
            "failures": [
                {"chunk": f.name, "offset": f.offset, **f.error.to_dict()}
                for f in self.failures
            ],
        }


class ResourceManager:
    def __init__(
        self, rng: random.Random | None = None, *, seed: int | None = None
    ) -> None:
        self._rng = rng if rng is not None else random.Random(seed)
        self._fallback = make_fallback_texture()
        self._textures: Dict[str, Texture] = {}
        self._shaders: Dict[str, Material] = {}
        self._meshes: Dict[str, Mesh] = {}
        self._fonts: Dict[str, Font] = {}
        self._animations: Dict[str, Animation] = {}
        self._loaders: Dict[str, Callable[[Any], None]] = {
            "texture": self.load_texture,
            "sprite": self.load_sprite,
            "set": self.load_set,
            "shader": self.load_shader,
            "mesh": self.load_mesh,
            "font": self.load_font,
            "animation": self.load_animation,
        }

    # Loading ---------------------------------------------------------------
    def load_texture(self, texture: Texture) -> None:
        self._textures[texture.name] = texture

    add_texture = load_texture

    def load_sprite(self, sprite: Sprite) -> None:
        image = sprite.images[0]
        self._textures[sprite.name] = Texture(
            name=sprite.name,
            width=image.width,
            height=image.height,
            format=image.format,
            data=image.data,
            bpp=image.bpp,
            extra_images=list(sprite.images[1:]),
        )

    def load_set(self, texture_set: TextureSet) -> None:
        """Resolve the set once, now, and store the pick under its name."""
        choice = resolve_set(texture_set, self._rng)
        _log.debug("set %s resolved to %s", texture_set.name, choice.name)
        self._textures[texture_set.name] = choice

    def load_shader(self, shader: ShaderMaterial) -> None:
        self._shaders[shader.name] = Material(shader)

    def load_mesh(self, mesh: Mesh) -> None:
        self._meshes[mesh.name] = mesh

    def load_font(self, font: Font) -> None:
        self._fonts[font.name] = font

    def load_animation(self, animation: Animation) -> None:
        self._animations[animation.name] = animation

    def load(self, category: str, asset: Any) -> bool:
        """Insert a decoded asset; returns False when no table takes it."""
        loader = self._loaders.get(category)
        if loader is None:
            return False
        loader(asset)
        return True

    def load_decoded(self, result: DecodeResult) -> int:
        stored = 0
        for category, asset in result:
            if self.load(category, asset):
                stored += 1
        return stored

    def load_bytes(
        self,
        data: Buffer,
        *,
        label: str = "<memory>",
        strict: bool = False,
        registry: DecoderRegistry | None = None,
    ) -> LoadSummary:
        """Parse, decode and insert one P3D file.

        ``ParseError`` is raised for an unusable file before anything is
        inserted. Decode failures skip the chunk unless ``strict`` is set;
        in strict mode nothing from the file is inserted.
        """
        root = load_file(data)
        result = decode_known_chunks(root, registry, strict=strict)
        stored = self.load_decoded(result)
        summary = LoadSummary(
            label=label,
            size=len(memoryview(data)),
            decoded=result.counts(),
            failures=list(result.failures),
        )
        _log.debug(
            "%s: %d chunks decoded, %d stored, %d failed",
            label,
            len(result),
            stored,
            len(result.failures),
        )
        return summary

    # Lookup ----------------------------------------------------------------
    @property
    def fallback_texture(self) -> Texture:
        return self._fallback

    def is_fallback(self, texture: Texture) -> bool:
        return texture is self._fallback

    def get_texture(self, name: str) -> Texture:
        return self._textures.get(name, self._fallback)

    def get_shader(self, name: str) -> Optional[Material]:
        material = self._shaders.get(name)
        if material is None:
            _log.debug("could not find shader %s", name)
            return None
        material.diffuse_texture = self._textures.get(
            material.diffuse_texture_name, self._fallback
        )
        return material

    def get_mesh(self, name: str) -> Optional[Mesh]:
        return self._meshes.get(name)

    def get_font(self, name: str) -> Optional[Font]:
        return self._fonts.get(name)

    def get_animation(self, name: str) -> Optional[Animation]:
        return self._animations.get(name)

    # Introspection ---------------------------------------------------------
    def _table(self, category: str) -> Dict[str, Any]:
        tables: Dict[str, Dict[str, Any]] = {
            "texture": self._textures,
            "shader": self._shaders,
            "mesh": self._meshes,
            "font": self._fonts,
            "animation": self._animations,
        }
        try:
            return tables[category]
        except KeyError:
            raise ValueError(f"Unknown resource category: {category}") from None

    def has(self, category: str, name: str) -> bool:
        return name in self._table(category)

    def names(self, category: str) -> List[str]:
        return sorted(self._table(category))

    def counts(self) -> Dict[str, int]:
        return {c: len(self._table(c)) for c in CATEGORIES}

    def describe(self) -> Dict[str, Any]:
        return {
            "counts": self.counts(),
            "textures": [
                {
                    "name": key,
                    "width": t.width,
                    "height": t.height,
                    "format": t.format.name,
                    "memory_size": t.memory_size,
                }
                for key, t in sorted(self._textures.items())
            ],
            "shaders": [
                {"name": m.name, "diffuse": m.diffuse_texture_name}
                for _, m in sorted(self._shaders.items())
            ],
            "meshes": self.names("mesh"),
            "fonts": self.names("font"),
            "animations": self.names("animation"),
        }

    def clear(self) -> None:
        """Release every owned resource; the fallback texture stays."""
        for category in CATEGORIES:
            self._table(category).clear()
