# どこで: `src/shaderpass/gl/binder.py`。
# 何を: 型付き uniform を ModernGL の uniform 設定・テクスチャ束縛へ振り分ける。
# なぜ: 15 種の uniform を閉じた分岐で扱い、テクスチャスロットの消費を 1 パス内で一元管理するため。

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Never, NoReturn

import numpy as np

from shaderpass.core.errors import (
    InvalidUniformTypeError,
    TooManyTexturesError,
    UniformBindError,
    UnresolvedPassReferenceError,
)
from shaderpass.core.image import Image
from shaderpass.core.uniforms import (
    FloatArrayUniform,
    FloatUniform,
    IntArrayUniform,
    IntUniform,
    IVec2Uniform,
    IVec3Uniform,
    IVec4Uniform,
    Mat2Uniform,
    Mat3Uniform,
    Mat4Uniform,
    PassUniform,
    TextureUniform,
    Uniform,
    Vec2Uniform,
    Vec3Uniform,
    Vec4Uniform,
)
from shaderpass.gl.context import RenderContext
from shaderpass.gl.utils import apply_sampling

_logger = logging.getLogger(__name__)

DEFAULT_MAX_TEXTURE_SLOTS = 8


class TextureSlots:
    """1 パス内のテクスチャスロット消費数を数える。"""

    def __init__(self, limit: int = DEFAULT_MAX_TEXTURE_SLOTS) -> None:
        if int(limit) <= 0:
            raise ValueError(f"limit は正の値である必要がある: got={limit}")
        self.limit = int(limit)
        self.used = 0

    def acquire(self, uniform_name: str) -> int:
        """次のスロット番号を返して消費する。上限到達なら TooManyTexturesError。"""
        if self.used >= self.limit:
            raise TooManyTexturesError(self.limit, uniform_name)
        slot = self.used
        self.used += 1
        return slot


def _unknown_uniform(uniform: Never) -> NoReturn:
    # 型検査上は到達不能。Uniform に型を足して分岐を更新し忘れると静的にエラーになる。
    tag = getattr(uniform, "type_tag", type(uniform).__name__)
    raise InvalidUniformTypeError(tag)


class UniformBinder:
    """プログラムへ uniform をリスト順に束縛する。

    Notes
    -----
    プログラム中で有効でない名前への束縛は何もしない（GL の location = -1 と同じ扱い）。
    テクスチャ系 uniform は名前が無効でもスロットを消費し、アップロードも行う。
    """

    def __init__(
        self,
        context: RenderContext,
        program: Any,
        results: Mapping[str, Image],
        slots: TextureSlots | None = None,
    ) -> None:
        self.context = context
        self.program = program
        self.results = results
        self.slots = slots if slots is not None else TextureSlots()

    def bind_all(self, uniforms: Iterable[Uniform]) -> None:
        for uniform in uniforms:
            self.bind(uniform)

    def bind(self, uniform: Uniform) -> None:
        """uniform を type に応じた設定呼び出しへ振り分ける。"""
        if isinstance(uniform, FloatUniform):
            self._set_value(uniform, float(uniform.value))
        elif isinstance(uniform, IntUniform):
            self._set_value(uniform, int(uniform.value))
        elif isinstance(uniform, (Vec2Uniform, Vec3Uniform, Vec4Uniform)):
            self._set_value(uniform, tuple(float(v) for v in uniform.value))
        elif isinstance(uniform, (IVec2Uniform, IVec3Uniform, IVec4Uniform)):
            self._set_value(uniform, tuple(int(v) for v in uniform.value))
        elif isinstance(uniform, (Mat2Uniform, Mat3Uniform, Mat4Uniform)):
            # 列優先のまま転置せずに書き込む。
            self._write(uniform, np.asarray(uniform.value, dtype="f4").tobytes())
        elif isinstance(uniform, FloatArrayUniform):
            self._write_array(uniform, np.float32)
        elif isinstance(uniform, IntArrayUniform):
            self._write_array(uniform, np.int32)
        elif isinstance(uniform, TextureUniform):
            self._bind_texture(uniform, uniform.image)
        elif isinstance(uniform, PassUniform):
            self._bind_texture(uniform, self._resolve(uniform))
        else:
            _unknown_uniform(uniform)

    # ---------- 個別処理 ----------
    def _member(self, uniform: Uniform) -> Any | None:
        member = self.program.get(uniform.name, None)
        if member is None:
            _logger.debug("uniform %r はプログラム中で有効でないため無視する", uniform.name)
        return member

    def _set_value(self, uniform: Uniform, value: Any) -> None:
        member = self._member(uniform)
        if member is None:
            return
        try:
            member.value = value
        except Exception as exc:
            raise UniformBindError(uniform.name, uniform.type_tag, str(exc)) from exc
        _logger.debug("uniform %r (%s) = %r", uniform.name, uniform.type_tag, value)

    def _write(self, uniform: Uniform, data: bytes) -> None:
        member = self._member(uniform)
        if member is None:
            return
        try:
            member.write(data)
        except Exception as exc:
            raise UniformBindError(uniform.name, uniform.type_tag, str(exc)) from exc
        _logger.debug("uniform %r (%s) <- %d bytes", uniform.name, uniform.type_tag, len(data))

    def _write_array(self, uniform: FloatArrayUniform | IntArrayUniform, dtype: Any) -> None:
        member = self._member(uniform)
        if member is None:
            return
        # GLSL 側の配列長に合わせる（超過分は捨て、不足分は 0 で埋める）。
        length = max(int(getattr(member, "array_length", len(uniform.value)) or 1), 1)
        values = np.zeros(length, dtype=dtype)
        n = min(length, len(uniform.value))
        if n:
            values[:n] = np.asarray(uniform.value[:n], dtype=dtype)
        try:
            member.write(values.tobytes())
        except Exception as exc:
            raise UniformBindError(uniform.name, uniform.type_tag, str(exc)) from exc
        _logger.debug("uniform %r (%s) <- %d elements", uniform.name, uniform.type_tag, n)

    def _resolve(self, uniform: PassUniform) -> Image:
        image = self.results.get(uniform.source)
        if image is None:
            raise UnresolvedPassReferenceError(uniform.source, self.results.keys())
        return image

    def _bind_texture(self, uniform: TextureUniform | PassUniform, image: Image) -> None:
        slot = self.slots.acquire(uniform.name)
        texture = self.context.texture(image)
        try:
            apply_sampling(texture, filter=uniform.filter, wrap=uniform.wrap, location=slot)
        except Exception as exc:
            # mirror は PyOpenGL 経由なので OpenGL.error.GLError もここで包む。
            raise UniformBindError(uniform.name, uniform.type_tag, str(exc)) from exc
        self._set_value(uniform, slot)
        _logger.debug(
            "texture %r -> slot %d (%dx%d, filter=%s, wrap=%s)",
            uniform.name,
            slot,
            image.width,
            image.height,
            uniform.filter,
            uniform.wrap,
        )


__all__ = ["DEFAULT_MAX_TEXTURE_SLOTS", "TextureSlots", "UniformBinder"]
