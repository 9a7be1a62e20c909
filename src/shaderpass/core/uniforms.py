# どこで: `src/shaderpass/core/uniforms.py`。
# 何を: シェーダへ渡す uniform 値の型付きモデル（15 種）と、辞書表現からの変換を提供する。
# なぜ: binder 側で閉じた分岐として扱えるよう、type タグを dataclass の型で表現するため。

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar, Union

import numpy as np

from shaderpass.core.errors import InvalidUniformTypeError
from shaderpass.core.image import Image

TEXTURE_FILTERS = ("nearest", "linear")
TEXTURE_WRAPS = ("clamp", "repeat", "mirror")


def _check_name(name: object) -> str:
    if not isinstance(name, str) or not name:
        raise ValueError(f"uniform name は空でない文字列である必要がある: got={name!r}")
    return name


def _as_components(value: Any, *, length: int, cast: type, tag: str) -> tuple:
    try:
        seq = list(value)
    except TypeError as exc:
        raise ValueError(f"{tag} の値は長さ {length} の数値列である必要がある: got={value!r}") from exc
    if len(seq) != length:
        raise ValueError(f"{tag} の値は長さ {length} の数値列である必要がある: got={len(seq)} 要素")
    return tuple(cast(v) for v in seq)


def _check_sampling(filter: str, wrap: str) -> None:
    if filter not in TEXTURE_FILTERS:
        raise ValueError(f"filter は {TEXTURE_FILTERS} のいずれか: got={filter!r}")
    if wrap not in TEXTURE_WRAPS:
        raise ValueError(f"wrap は {TEXTURE_WRAPS} のいずれか: got={wrap!r}")


@dataclass(frozen=True, slots=True)
class FloatUniform:
    name: str
    value: float

    type_tag: ClassVar[str] = "float"

    def __post_init__(self) -> None:
        _check_name(self.name)
        object.__setattr__(self, "value", float(self.value))


@dataclass(frozen=True, slots=True)
class IntUniform:
    name: str
    value: int

    type_tag: ClassVar[str] = "int"

    def __post_init__(self) -> None:
        _check_name(self.name)
        object.__setattr__(self, "value", int(self.value))


@dataclass(frozen=True, slots=True)
class _FixedLengthUniform:
    """固定長の数値列を持つ uniform の共通実装（vec/ivec/mat）。"""

    name: str
    value: tuple

    type_tag: ClassVar[str] = ""
    length: ClassVar[int] = 0
    component: ClassVar[type] = float

    def __post_init__(self) -> None:
        _check_name(self.name)
        components = _as_components(
            self.value, length=self.length, cast=self.component, tag=self.type_tag
        )
        object.__setattr__(self, "value", components)


@dataclass(frozen=True, slots=True)
class Vec2Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "vec2"
    length: ClassVar[int] = 2


@dataclass(frozen=True, slots=True)
class Vec3Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "vec3"
    length: ClassVar[int] = 3


@dataclass(frozen=True, slots=True)
class Vec4Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "vec4"
    length: ClassVar[int] = 4


@dataclass(frozen=True, slots=True)
class IVec2Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "ivec2"
    length: ClassVar[int] = 2
    component: ClassVar[type] = int


@dataclass(frozen=True, slots=True)
class IVec3Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "ivec3"
    length: ClassVar[int] = 3
    component: ClassVar[type] = int


@dataclass(frozen=True, slots=True)
class IVec4Uniform(_FixedLengthUniform):
    type_tag: ClassVar[str] = "ivec4"
    length: ClassVar[int] = 4
    component: ClassVar[type] = int


@dataclass(frozen=True, slots=True)
class Mat2Uniform(_FixedLengthUniform):
    """列優先で平坦化した 2x2 行列。"""

    type_tag: ClassVar[str] = "mat2"
    length: ClassVar[int] = 4


@dataclass(frozen=True, slots=True)
class Mat3Uniform(_FixedLengthUniform):
    """列優先で平坦化した 3x3 行列。"""

    type_tag: ClassVar[str] = "mat3"
    length: ClassVar[int] = 9


@dataclass(frozen=True, slots=True)
class Mat4Uniform(_FixedLengthUniform):
    """列優先で平坦化した 4x4 行列。"""

    type_tag: ClassVar[str] = "mat4"
    length: ClassVar[int] = 16


@dataclass(frozen=True, slots=True)
class FloatArrayUniform:
    name: str
    value: tuple[float, ...]

    type_tag: ClassVar[str] = "float[]"

    def __post_init__(self) -> None:
        _check_name(self.name)
        object.__setattr__(self, "value", tuple(float(v) for v in self.value))


@dataclass(frozen=True, slots=True)
class IntArrayUniform:
    name: str
    value: tuple[int, ...]

    type_tag: ClassVar[str] = "int[]"

    def __post_init__(self) -> None:
        _check_name(self.name)
        object.__setattr__(self, "value", tuple(int(v) for v in self.value))


@dataclass(frozen=True, slots=True)
class TextureUniform:
    """インライン画像をテクスチャとして束縛する uniform。"""

    name: str
    image: Image
    filter: str = "nearest"
    wrap: str = "clamp"

    type_tag: ClassVar[str] = "texture"

    def __post_init__(self) -> None:
        _check_name(self.name)
        if not isinstance(self.image, Image):
            raise ValueError(f"texture の値は Image である必要がある: got={type(self.image).__name__}")
        _check_sampling(self.filter, self.wrap)


@dataclass(frozen=True, slots=True)
class PassUniform:
    """先行パスの出力画像をテクスチャとして束縛する uniform。"""

    name: str
    source: str
    filter: str = "nearest"
    wrap: str = "clamp"

    type_tag: ClassVar[str] = "pass"

    def __post_init__(self) -> None:
        _check_name(self.name)
        if not isinstance(self.source, str) or not self.source:
            raise ValueError(f"pass の値は参照先パス名である必要がある: got={self.source!r}")
        _check_sampling(self.filter, self.wrap)


Uniform = Union[
    FloatUniform,
    IntUniform,
    Vec2Uniform,
    Vec3Uniform,
    Vec4Uniform,
    IVec2Uniform,
    IVec3Uniform,
    IVec4Uniform,
    Mat2Uniform,
    Mat3Uniform,
    Mat4Uniform,
    FloatArrayUniform,
    IntArrayUniform,
    TextureUniform,
    PassUniform,
]

UNIFORM_TYPES: dict[str, type] = {
    cls.type_tag: cls
    for cls in (
        FloatUniform,
        IntUniform,
        Vec2Uniform,
        Vec3Uniform,
        Vec4Uniform,
        IVec2Uniform,
        IVec3Uniform,
        IVec4Uniform,
        Mat2Uniform,
        Mat3Uniform,
        Mat4Uniform,
        FloatArrayUniform,
        IntArrayUniform,
        TextureUniform,
        PassUniform,
    )
}


def _image_from_value(value: Any) -> Image:
    if isinstance(value, Image):
        return value
    if isinstance(value, Mapping):
        try:
            width = value["width"]
            height = value["height"]
            data = value["data"]
        except KeyError as exc:
            raise ValueError(
                f"texture の値は {{width, height, data}} を含む必要がある: missing={exc.args[0]!r}"
            ) from exc
        return Image(width=width, height=height, pixels=np.asarray(data))
    raise ValueError(f"texture の値は Image か mapping である必要がある: got={type(value).__name__}")


def uniform_from_mapping(data: Mapping[str, Any]) -> Uniform:
    """`{name, type, value, filter?, wrap?}` 形式の辞書を型付き uniform に変換する。

    Parameters
    ----------
    data : Mapping[str, Any]
        uniform の辞書表現。

    Returns
    -------
    Uniform
        対応する uniform dataclass。

    Raises
    ------
    InvalidUniformTypeError
        type が既知のタグでない場合。
    ValueError
        name / value / filter / wrap が不正な場合。
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"uniform は mapping である必要がある: got={type(data).__name__}")

    tag = data.get("type")
    cls = UNIFORM_TYPES.get(tag) if isinstance(tag, str) else None
    if cls is None:
        raise InvalidUniformTypeError(tag)

    name = data.get("name")
    if "value" not in data:
        raise ValueError(f"uniform {name!r} に value がない")
    value = data["value"]

    if cls is TextureUniform:
        return TextureUniform(
            name=name,
            image=_image_from_value(value),
            filter=data.get("filter", "nearest"),
            wrap=data.get("wrap", "clamp"),
        )
    if cls is PassUniform:
        return PassUniform(
            name=name,
            source=value,
            filter=data.get("filter", "nearest"),
            wrap=data.get("wrap", "clamp"),
        )
    if cls in (FloatArrayUniform, IntArrayUniform) and not isinstance(value, Sequence):
        value = list(np.asarray(value).reshape(-1))
    return cls(name=name, value=value)


def coerce_uniform(obj: Uniform | Mapping[str, Any]) -> Uniform:
    """dataclass ならそのまま、mapping なら変換して返す。"""
    if isinstance(obj, tuple(UNIFORM_TYPES.values())):
        return obj  # type: ignore[return-value]
    if isinstance(obj, Mapping):
        return uniform_from_mapping(obj)
    raise InvalidUniformTypeError(type(obj).__name__)


__all__ = [
    "FloatArrayUniform",
    "FloatUniform",
    "IVec2Uniform",
    "IVec3Uniform",
    "IVec4Uniform",
    "IntArrayUniform",
    "IntUniform",
    "Mat2Uniform",
    "Mat3Uniform",
    "Mat4Uniform",
    "PassUniform",
    "TEXTURE_FILTERS",
    "TEXTURE_WRAPS",
    "TextureUniform",
    "UNIFORM_TYPES",
    "Uniform",
    "Vec2Uniform",
    "Vec3Uniform",
    "Vec4Uniform",
    "coerce_uniform",
    "uniform_from_mapping",
]
