# どこで: `src/shaderpass/gl/utils.py`。
# 何を: テクスチャのサンプリング設定（filter / wrap）を GL へ反映する小さなユーティリティ。
# なぜ: ModernGL が持たない MIRRORED_REPEAT を含め、wrap 名と GL 定数の対応を一箇所に集約するため。

from __future__ import annotations

from typing import Any

import moderngl

TEXTURE_FILTERS: dict[str, tuple[int, int]] = {
    "nearest": (moderngl.NEAREST, moderngl.NEAREST),
    "linear": (moderngl.LINEAR, moderngl.LINEAR),
}


def _apply_mirrored_repeat(texture: Any) -> None:
    # ModernGL の repeat_x/repeat_y は REPEAT / CLAMP_TO_EDGE しか表せないため、
    # バインド済みのテクスチャへ直接 texParameteri を発行する。
    from OpenGL import GL

    GL.glBindTexture(GL.GL_TEXTURE_2D, texture.glo)
    GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_S, GL.GL_MIRRORED_REPEAT)
    GL.glTexParameteri(GL.GL_TEXTURE_2D, GL.GL_TEXTURE_WRAP_T, GL.GL_MIRRORED_REPEAT)


def apply_sampling(texture: Any, *, filter: str, wrap: str, location: int) -> None:
    """filter / wrap を両軸に設定し、テクスチャをスロット `location` に束縛する。"""
    texture.filter = TEXTURE_FILTERS[filter]
    if wrap == "clamp":
        texture.repeat_x = False
        texture.repeat_y = False
    elif wrap == "repeat":
        texture.repeat_x = True
        texture.repeat_y = True
    elif wrap == "mirror":
        texture.use(location=location)
        _apply_mirrored_repeat(texture)
    else:
        raise ValueError(f"未対応の wrap: {wrap!r}")
    texture.use(location=location)
