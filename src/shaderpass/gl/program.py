"""
どこで: `src/shaderpass/gl/program.py`。
何を: 頂点/フラグメントシェーダをコンパイル・リンクし、失敗を段階付きの例外に変換する。
なぜ: ModernGL は失敗を単一の `moderngl.Error` で返すため、呼び出し側が段階を判別できる形に揃えるため。
"""

from __future__ import annotations

from typing import Any

import moderngl

from shaderpass.core.errors import (
    ResourceCreationError,
    ShaderCompileError,
    ShaderLinkError,
    ShaderPassError,
)
from shaderpass.gl.context import RenderContext

# 全画面クアッド用の既定頂点シェーダ。Position/UV 属性を受け取り texCoord を渡す。
DEFAULT_VERTEX_SHADER = """
#version 330

in vec2 Position;
in vec2 UV;
out vec2 texCoord;

void main() {
    texCoord = UV;
    gl_Position = vec4(Position, 0.0, 1.0);
}
"""

_STAGE_TITLES = (
    ("vertex_shader", "vertex"),
    ("fragment_shader", "fragment"),
)

# 診断本文の前に付くバナー見出し。リンク失敗時は "Program" になる。
_BANNER_TITLES = tuple(title for title, _ in _STAGE_TITLES) + ("Program",)


def _strip_header(message: str, header: str) -> str:
    body = message[len(header):].strip()
    for title in _BANNER_TITLES:
        if body.startswith(title):
            lines = body.splitlines()
            # タイトル行と下線 (=====) を落として診断本文だけにする。
            rest = [ln for ln in lines[1:] if ln.strip("= ")]
            return "\n".join(rest).strip()
    return body


def translate_program_error(message: str) -> ShaderPassError:
    """`moderngl.Error` のメッセージを ShaderCompileError / ShaderLinkError に変換する。

    Notes
    -----
    ModernGL は "GLSL Compiler failed" の後にステージ名（vertex_shader 等）を、
    "GLSL Linker failed" の後にリンカのログを出力する。
    いずれにも当たらない場合はプログラムの確保失敗として扱う。
    """
    text = str(message).strip()
    if text.startswith("GLSL Compiler failed"):
        body = text[len("GLSL Compiler failed"):].strip()
        stage = "fragment"
        for title, name in _STAGE_TITLES:
            if body.startswith(title):
                stage = name
                break
        return ShaderCompileError(stage, _strip_header(text, "GLSL Compiler failed"))
    if text.startswith("GLSL Linker failed"):
        return ShaderLinkError(_strip_header(text, "GLSL Linker failed"))
    return ResourceCreationError("program", text)


def compile_program(context: RenderContext, vertex_source: str, fragment_source: str) -> Any:
    """シェーダをコンパイル・リンクしたプログラムを返す。

    Parameters
    ----------
    context : RenderContext
        プログラムを確保するコンテキスト。解放はコンテキスト破棄時に行われる。
    vertex_source, fragment_source : str
        GLSL ソース。

    Returns
    -------
    moderngl.Program
        リンク済みプログラム。

    Raises
    ------
    ShaderCompileError
        いずれかのステージのコンパイルに失敗した場合（stage を保持）。
    ShaderLinkError
        リンクに失敗した場合。
    ResourceCreationError
        プログラムオブジェクトを確保できなかった場合。
    """
    try:
        program = context.ctx.program(
            vertex_shader=vertex_source,
            fragment_shader=fragment_source,
        )
    except moderngl.Error as exc:
        raise translate_program_error(str(exc)) from exc
    return context.track(program)


__all__ = ["DEFAULT_VERTEX_SHADER", "compile_program", "translate_program_error"]
