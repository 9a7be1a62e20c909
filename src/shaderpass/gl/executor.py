"""
どこで: `src/shaderpass/gl/executor.py`。
何を: 1 パスのライフサイクル（検証 → コンテキスト確保 → プログラム → クアッド → uniform → 描画 → 読み戻し → 破棄）を実行する。
なぜ: パスごとに新しいコンテキストを使い切り、失敗時も含めて GPU リソースを必ず解放するため。
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from shaderpass.core.errors import ShaderPassError
from shaderpass.core.image import Image
from shaderpass.core.passes import Pass, validate_pass
from shaderpass.gl.binder import DEFAULT_MAX_TEXTURE_SLOTS, TextureSlots, UniformBinder
from shaderpass.gl.context import ContextFactory, acquired_context
from shaderpass.gl.program import DEFAULT_VERTEX_SHADER, compile_program
from shaderpass.gl.quad import FullscreenQuad

_logger = logging.getLogger(__name__)


def execute_pass(
    pass_: Pass,
    results: Mapping[str, Image],
    *,
    factory: ContextFactory,
    max_texture_slots: int = DEFAULT_MAX_TEXTURE_SLOTS,
) -> Image:
    """パスを描画し、出力画像を返す。

    Parameters
    ----------
    pass_ : Pass
        描画するパス。
    results : Mapping[str, Image]
        これまでに描画済みのパス出力。pass 参照 uniform の解決に使う。
    factory : ContextFactory
        コンテキストの確保/破棄を担うファクトリ。
    max_texture_slots : int
        このパスで束縛できるテクスチャ数の上限。

    Returns
    -------
    Image
        width*height*4 の RGBA uint8 画像（行は下から上）。

    Raises
    ------
    ShaderPassError
        いずれかの段階で失敗した場合。`pass_name` にパス名が入る。
    """
    try:
        width, height = validate_pass(pass_)
        vertex_source = pass_.vertex_source if pass_.vertex_source is not None else DEFAULT_VERTEX_SHADER

        with acquired_context(factory, width, height) as context:
            program = compile_program(context, vertex_source, pass_.fragment_source)
            quad = FullscreenQuad(context, program)
            context.clear()

            binder = UniformBinder(
                context,
                program,
                results,
                TextureSlots(max_texture_slots),
            )
            binder.bind_all(pass_.uniforms)

            quad.render()
            pixels = context.read_pixels()
    except ShaderPassError as exc:
        exc.attach_pass(pass_.name)
        raise

    _logger.debug(
        "pass %r rendered: %dx%d, %d uniforms, %d textures",
        pass_.name,
        width,
        height,
        len(pass_.uniforms),
        binder.slots.used,
    )
    return Image(width=width, height=height, pixels=pixels)


__all__ = ["execute_pass"]
