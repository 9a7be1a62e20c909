"""
どこで: `src/shaderpass/gl/quad.py`。
何を: 全画面クアッドの VBO/VAO を確保し、TRIANGLE_STRIP 1 回で描画する。
なぜ: 頂点属性の張り方を executor から切り離し、Position/UV の規約を一箇所にまとめるため。
"""

from __future__ import annotations

from typing import Any

import moderngl
import numpy as np

from shaderpass.core.errors import RenderError, ResourceCreationError
from shaderpass.gl.context import RenderContext


class FullscreenQuad:
    """
    正規化デバイス座標の矩形全体を覆う 4 頂点のクアッド
    """

    # 1 頂点 = position(2) + uv(2)
    VERTICES = np.array(
        [
            [-1.0, -1.0, 0.0, 0.0],
            [1.0, -1.0, 1.0, 0.0],
            [-1.0, 1.0, 0.0, 1.0],
            [1.0, 1.0, 1.0, 1.0],
        ],
        dtype=np.float32,
    )
    VERTEX_COUNT = 4

    def __init__(self, context: RenderContext, program: Any) -> None:
        """
        context: VBO/VAO を確保するコンテキスト（解放はコンテキスト破棄時）。
        program: 属性 `Position` / `UV` を持つ（持たなければ無視される）プログラム。
        """
        self.vbo = context.buffer(self.VERTICES.tobytes())
        try:
            vao = context.ctx.vertex_array(
                program,
                [(self.vbo, "2f 2f", "Position", "UV")],
                skip_errors=True,
            )
        except moderngl.Error as exc:
            raise ResourceCreationError("vertex array", str(exc)) from exc
        self.vao = context.track(vao)

    def render(self) -> None:
        """クアッドを 1 回の draw call で描画する。"""
        try:
            self.vao.render(mode=moderngl.TRIANGLE_STRIP, vertices=self.VERTEX_COUNT)
        except moderngl.Error as exc:
            raise RenderError("draw", str(exc)) from exc


__all__ = ["FullscreenQuad"]
