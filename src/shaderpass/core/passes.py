"""
どこで: `src/shaderpass/core/passes.py`。
何を: 1 パス分の描画記述 `Pass` と、その検証・辞書表現からの変換を提供する。
なぜ: GPU に触れる前に寸法やシェーダの欠落を検出し、executor を GPU 手順だけに集中させるため。
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from shaderpass.core.errors import InvalidDimensionsError, MissingShaderError, ShaderPassError
from shaderpass.core.uniforms import Uniform, coerce_uniform


@dataclass(frozen=True, slots=True)
class Pass:
    """1 つの名前付き出力画像を生成する描画パスの記述。

    Parameters
    ----------
    name : str
        出力を格納するキー。後続パスの pass 参照もこの名前で行う。
    fragment_source : str
        フラグメントシェーダのソース。
    width, height : int
        出力フレームバッファの画素寸法。
    vertex_source : str or None
        頂点シェーダのソース。None なら既定の全画面クアッド用シェーダを使う。
    uniforms : tuple[Uniform, ...]
        描画前にリスト順で束縛する uniform 列。

    Notes
    -----
    Pass は純粋な記述であり GPU リソースを所有しない。
    寸法とシェーダの検証は `validate_pass` が実行時に行う。
    """

    name: str
    fragment_source: Any
    width: Any
    height: Any
    vertex_source: str | None = None
    uniforms: tuple[Uniform, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "uniforms", tuple(self.uniforms))


def _as_dimension(field_name: str, value: object) -> int:
    # bool は int のサブクラスだが寸法としては受け付けない。
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidDimensionsError(field_name, value)
    as_float = float(value)
    if not math.isfinite(as_float) or as_float != math.floor(as_float) or as_float <= 0:
        raise InvalidDimensionsError(field_name, value)
    return int(as_float)


def validate_pass(pass_: Pass) -> tuple[int, int]:
    """寸法とフラグメントシェーダを検証し、整数化した (width, height) を返す。

    Raises
    ------
    InvalidDimensionsError
        width / height が正の有限整数でない場合。
    MissingShaderError
        fragment_source が無い、または文字列でない場合。
        空文字列や空白のみのソースは通し、コンパイル時の ShaderCompileError に任せる。
    """
    width = _as_dimension("width", pass_.width)
    height = _as_dimension("height", pass_.height)
    source = pass_.fragment_source
    if not isinstance(source, str):
        raise MissingShaderError(source)
    return width, height


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def pass_from_mapping(data: Mapping[str, Any]) -> Pass:
    """`{name, frag, vert?, width, height, uniforms?}` 形式の辞書を Pass に変換する。

    Notes
    -----
    `fragment_source` / `vertex_source` の長い名前も受け付ける。
    寸法は検証せずにそのまま保持する（`validate_pass` の責務）。
    """
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise ValueError(f"pass name は空でない文字列である必要がある: got={name!r}")

    raw_uniforms = data.get("uniforms") or ()
    if isinstance(raw_uniforms, (str, bytes)) or not isinstance(raw_uniforms, Sequence):
        raise ValueError(f"uniforms は列である必要がある: pass={name!r}")

    try:
        uniforms = tuple(coerce_uniform(u) for u in raw_uniforms)
    except ShaderPassError as exc:
        exc.attach_pass(name)
        raise

    return Pass(
        name=name,
        fragment_source=_first_present(data, "frag", "fragment_source"),
        vertex_source=_first_present(data, "vert", "vertex_source"),
        width=data.get("width"),
        height=data.get("height"),
        uniforms=uniforms,
    )


def coerce_pass(obj: Pass | Mapping[str, Any]) -> Pass:
    """Pass ならそのまま（uniform は正規化して）、mapping なら変換して返す。"""
    if isinstance(obj, Pass):
        try:
            uniforms = tuple(coerce_uniform(u) for u in obj.uniforms)
        except ShaderPassError as exc:
            exc.attach_pass(obj.name)
            raise
        if all(a is b for a, b in zip(uniforms, obj.uniforms)):
            return obj
        return Pass(
            name=obj.name,
            fragment_source=obj.fragment_source,
            vertex_source=obj.vertex_source,
            width=obj.width,
            height=obj.height,
            uniforms=uniforms,
        )
    if isinstance(obj, Mapping):
        return pass_from_mapping(obj)
    raise TypeError(f"Pass か mapping である必要がある: got={type(obj).__name__}")


__all__ = ["Pass", "coerce_pass", "pass_from_mapping", "validate_pass"]
