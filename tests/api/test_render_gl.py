"""実 GL（スタンドアロン ModernGL コンテキスト）で `render` の描画結果をテスト。"""

from __future__ import annotations

import moderngl
import numpy as np
import pytest

from shaderpass import (
    FloatArrayUniform,
    IntUniform,
    Mat4Uniform,
    Pass,
    PassUniform,
    ShaderCompileError,
    TextureUniform,
    TooManyTexturesError,
    Vec4Uniform,
    render,
)
from shaderpass.core.image import Image
from shaderpass.gl.context import StandaloneContextFactory


def _standalone_backend() -> tuple[bool, str | None]:
    # 既定 (X11 等) で作れなければヘッドレス向けの EGL を試す。
    for backend in (None, "egl"):
        kwargs = {"require": 330} if backend is None else {"require": 330, "backend": backend}
        try:
            ctx = moderngl.create_standalone_context(**kwargs)
        except Exception:
            continue
        ctx.release()
        return True, backend
    return False, None


HAS_GL, BACKEND = _standalone_backend()

pytestmark = pytest.mark.skipif(not HAS_GL, reason="OpenGL 3.3 コンテキストを作れない")

HEADER = "#version 330\nin vec2 texCoord;\nout vec4 fragColor;\n"


def _frag(body: str, decls: str = "") -> str:
    return f"{HEADER}{decls}\nvoid main() {{\n{body}\n}}\n"


def _render(passes, **kwargs):
    return render(passes, context_factory=StandaloneContextFactory(backend=BACKEND, require=330), max_texture_slots=8, **kwargs)


def test_solid_red_pass() -> None:
    results = _render([Pass(name="red", fragment_source=_frag("fragColor = vec4(1.0, 0.0, 0.0, 1.0);"), width=2, height=2)])
    assert results["red"].pixels.tolist() == [255, 0, 0, 255] * 4


def test_copy_pass_reproduces_previous_output() -> None:
    gradient = _frag("fragColor = vec4(gl_FragCoord.x / 4.0, gl_FragCoord.y / 4.0, 0.0, 1.0);")
    copy = _frag("fragColor = texture(Prev, texCoord);", "uniform sampler2D Prev;")
    results = _render(
        [
            Pass(name="a", fragment_source=gradient, width=4, height=4),
            Pass(name="b", fragment_source=copy, width=4, height=4, uniforms=[PassUniform("Prev", "a")]),
        ]
    )
    assert results["a"] == results["b"]
    # 行は下から上: 先頭行は y が最小
    rows = results["a"].to_array()
    assert rows[0, 0, 1] < rows[-1, 0, 1]


def test_typed_uniforms_reach_the_shader() -> None:
    decls = "uniform vec4 Color;\nuniform int Mode;\nuniform mat4 M;\nuniform float W[4];"
    passes = [
        Pass(name="vec", fragment_source=_frag("fragColor = Color;", decls), width=1, height=1,
             uniforms=[Vec4Uniform("Color", (0, 1, 0, 1))]),
        Pass(name="int", fragment_source=_frag("fragColor = Mode == 3 ? vec4(1.0) : vec4(0.0);", decls),
             width=1, height=1, uniforms=[IntUniform("Mode", 3)]),
        Pass(name="mat", fragment_source=_frag("fragColor = M * vec4(1.0, 0.0, 0.0, 0.0);", decls),
             width=1, height=1, uniforms=[Mat4Uniform("M", (0, 0, 1, 1) + (0,) * 12)]),
        Pass(name="arr", fragment_source=_frag("fragColor = vec4(W[0], W[1], W[2], W[3]);", decls),
             width=1, height=1, uniforms=[FloatArrayUniform("W", (0.0, 1.0))]),
    ]
    results = _render(passes)
    assert results["vec"].pixels.tolist() == [0, 255, 0, 255]
    assert results["int"].pixels.tolist() == [255, 255, 255, 255]
    assert results["mat"].pixels.tolist() == [0, 0, 255, 255]
    assert results["arr"].pixels.tolist() == [0, 255, 0, 0]


def test_inline_texture_is_sampled() -> None:
    texel = Image(width=1, height=1, pixels=[10, 20, 30, 255])
    frag = _frag("fragColor = texture(Tex, texCoord);", "uniform sampler2D Tex;")
    results = _render([Pass(name="t", fragment_source=frag, width=2, height=2, uniforms=[TextureUniform("Tex", texel)])])
    assert results["t"].pixels.tolist() == [10, 20, 30, 255] * 4


def test_ninth_texture_exceeds_default_slots() -> None:
    texel = Image(width=1, height=1, pixels=[0, 0, 0, 255])
    frag = _frag("fragColor = vec4(1.0);")
    ok = [TextureUniform(f"T{i}", texel) for i in range(8)]
    _render([Pass(name="eight", fragment_source=frag, width=1, height=1, uniforms=ok)])

    with pytest.raises(TooManyTexturesError) as excinfo:
        _render([Pass(name="nine", fragment_source=frag, width=1, height=1, uniforms=ok + [TextureUniform("T8", texel)])])
    assert excinfo.value.pass_name == "nine"


def test_compile_error_reports_fragment_stage() -> None:
    with pytest.raises(ShaderCompileError) as excinfo:
        _render([Pass(name="broken", fragment_source="#version 330\nvoid main() { nope }\n", width=1, height=1)])
    assert excinfo.value.stage == "fragment"
    assert excinfo.value.pass_name == "broken"


def test_float_texture_is_uploaded_as_float() -> None:
    texel = Image(width=1, height=1, pixels=np.array([0.5, 0.25, 1.0, 1.0], dtype=np.float32))
    frag = _frag("fragColor = texture(Tex, texCoord);", "uniform sampler2D Tex;")
    results = _render([Pass(name="f", fragment_source=frag, width=1, height=1, uniforms=[TextureUniform("Tex", texel)])])
    r, g, b, a = results["f"].pixels.tolist()
    assert abs(r - 128) <= 1 and abs(g - 64) <= 1 and (b, a) == (255, 255)


RED = [255, 0, 0, 255]
GREEN = [0, 255, 0, 255]


@pytest.mark.parametrize(
    ("wrap", "expected"),
    [
        ("clamp", [RED, GREEN, GREEN, GREEN]),
        ("repeat", [RED, GREEN, RED, GREEN]),
        ("mirror", [RED, GREEN, GREEN, RED]),
    ],
)
def test_wrap_modes_outside_unit_range(wrap, expected) -> None:
    texels = Image(width=2, height=1, pixels=RED + GREEN)
    frag = _frag("fragColor = texture(Tex, vec2(texCoord.x * 2.0, 0.5));", "uniform sampler2D Tex;")
    results = _render(
        [Pass(name=wrap, fragment_source=frag, width=4, height=1, uniforms=[TextureUniform("Tex", texels, wrap=wrap)])]
    )
    assert results[wrap].to_array()[0].tolist() == expected


def test_linear_filter_blends_neighbouring_texels() -> None:
    texels = Image(width=2, height=1, pixels=RED + GREEN)
    frag = _frag("fragColor = texture(Tex, vec2(0.5, 0.5));", "uniform sampler2D Tex;")
    results = _render(
        [
            Pass(name="nearest", fragment_source=frag, width=1, height=1, uniforms=[TextureUniform("Tex", texels)]),
            Pass(name="linear", fragment_source=frag, width=1, height=1,
                 uniforms=[TextureUniform("Tex", texels, filter="linear")]),
        ]
    )
    r, g, b, a = results["linear"].pixels.tolist()
    assert abs(r - 128) <= 1 and abs(g - 128) <= 1 and (b, a) == (0, 255)
    assert results["nearest"].pixels.tolist() in (RED, GREEN)


def test_blank_fragment_source_fails_in_the_compiler() -> None:
    with pytest.raises(ShaderCompileError) as excinfo:
        _render([Pass(name="blank", fragment_source="   \n", width=1, height=1)])
    assert excinfo.value.pass_name == "blank"
