# どこで: `src/shaderpass/gl/context.py`。
# 何を: 1 パス専用のオフスクリーン ModernGL コンテキストと、その生成/破棄を担うファクトリを提供する。
# なぜ: パス内で確保した GPU オブジェクトをコンテキスト単位で確実に解放し、パス間でリークさせないため。

from __future__ import annotations

import contextlib
import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Iterator
from typing import Any

import moderngl
import numpy as np

from shaderpass.core.errors import RenderError, ResourceCreationError
from shaderpass.core.image import Image

_logger = logging.getLogger(__name__)


class RenderContext:
    """1 パス分の GL 状態（コンテキスト・フレームバッファ・確保済みオブジェクト）を束ねる。"""

    def __init__(self, ctx: Any, width: int, height: int) -> None:
        """
        ctx: moderngl のスタンドアロンコンテキスト。
        width / height: オフスクリーンフレームバッファの画素寸法。
        確保したオブジェクトは `track` で登録し、`release` で逆順に解放する。
        """
        self.ctx = ctx
        self.width = int(width)
        self.height = int(height)
        self._objects: list[Any] = []
        self._released = False
        try:
            framebuffer = ctx.simple_framebuffer((self.width, self.height), components=4)
        except moderngl.Error as exc:
            raise ResourceCreationError("framebuffer", str(exc)) from exc
        self.framebuffer = self.track(framebuffer)

    def track(self, obj: Any) -> Any:
        """GPU オブジェクトを解放対象に登録して、そのまま返す。"""
        self._objects.append(obj)
        return obj

    def buffer(self, data: bytes) -> Any:
        """静的な頂点バッファを確保する。"""
        try:
            return self.track(self.ctx.buffer(data))
        except moderngl.Error as exc:
            raise ResourceCreationError("buffer", str(exc)) from exc

    def texture(self, image: Image) -> Any:
        """Image の画素をアップロードした RGBA テクスチャを確保する。"""
        dtype = "f4" if image.is_float else "f1"
        try:
            texture = self.ctx.texture(
                (image.width, image.height),
                4,
                data=image.pixels.tobytes(),
                alignment=1,
                dtype=dtype,
            )
        except moderngl.Error as exc:
            raise ResourceCreationError("texture", str(exc)) from exc
        return self.track(texture)

    def clear(self) -> None:
        """フレームバッファを透明な黒でクリアする。"""
        try:
            self.framebuffer.use()
            self.ctx.clear(0.0, 0.0, 0.0, 0.0)
        except moderngl.Error as exc:
            raise RenderError("clear", str(exc)) from exc

    def read_pixels(self) -> np.ndarray:
        """フレームバッファを詰めた RGBA uint8 配列（長さ width*height*4）として読み戻す。"""
        try:
            data = self.framebuffer.read(components=4, alignment=1)
        except moderngl.Error as exc:
            raise RenderError("read-back", str(exc)) from exc
        return np.frombuffer(data, dtype=np.uint8).copy()

    def release(self) -> None:
        """確保済みオブジェクトを逆順に解放し、最後にコンテキストを破棄する。"""
        if self._released:
            return
        self._released = True
        try:
            while self._objects:
                obj = self._objects.pop()
                obj.release()
        finally:
            # 途中の release が失敗してもコンテキスト本体は必ず破棄する。
            self.ctx.release()


class ContextFactory(ABC):
    """パスごとに RenderContext を生成・破棄するファクトリの基底。"""

    @abstractmethod
    def acquire(self, width: int, height: int) -> RenderContext:
        """width x height のフレームバッファを持つ新しいコンテキストを返す。"""

    def destroy(self, context: RenderContext) -> None:
        context.release()


class StandaloneContextFactory(ContextFactory):
    """`moderngl.create_standalone_context` でウィンドウ無しのコンテキストを作る。"""

    def __init__(self, *, backend: str | None = None, require: int = 330) -> None:
        self.backend = backend
        self.require = int(require)
        if backend == "egl":
            # mirror ラップで使う PyOpenGL も同じプラットフォームに揃える。
            os.environ.setdefault("PYOPENGL_PLATFORM", "egl")

    def acquire(self, width: int, height: int) -> RenderContext:
        kwargs: dict[str, Any] = {"require": self.require}
        if self.backend is not None:
            kwargs["backend"] = self.backend
        try:
            ctx = moderngl.create_standalone_context(**kwargs)
        except Exception as exc:
            raise ResourceCreationError("context", str(exc)) from exc

        try:
            return RenderContext(ctx, width, height)
        except BaseException:
            ctx.release()
            raise


@contextlib.contextmanager
def acquired_context(factory: ContextFactory, width: int, height: int) -> Iterator[RenderContext]:
    """コンテキストを確保し、成功・失敗を問わず終了時に破棄するコンテキストマネージャ。"""

    context = factory.acquire(width, height)
    _logger.debug("context acquired: %dx%d", width, height)
    try:
        yield context
    finally:
        factory.destroy(context)
        _logger.debug("context destroyed: %dx%d", width, height)


__all__ = ["ContextFactory", "RenderContext", "StandaloneContextFactory", "acquired_context"]
