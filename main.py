"""
どこで: リポジトリ直下 `main.py`。
何を: グラデーション → 横ぼかし → 縦ぼかしの 3 パスを描画し、PNG に保存する。
なぜ: 動作確認用の最小エントリポイントとして利用するため。
"""

import logging

from shaderpass import FloatArrayUniform, Pass, PassUniform, Vec2Uniform, render
from shaderpass.export.image import export_results

WIDTH = 256
HEIGHT = 256

GRADIENT = """
#version 330
in vec2 texCoord;
out vec4 fragColor;

void main() {
    float d = step(0.25, distance(texCoord, vec2(0.5)));
    fragColor = vec4(texCoord, d, 1.0);
}
"""

BLUR = """
#version 330
in vec2 texCoord;
out vec4 fragColor;

uniform sampler2D Source;
uniform vec2 Direction;
uniform float Weights[5];

void main() {
    vec2 texel = Direction / vec2(textureSize(Source, 0));
    vec4 acc = texture(Source, texCoord) * Weights[0];
    for (int i = 1; i < 5; ++i) {
        acc += texture(Source, texCoord + texel * float(i)) * Weights[i];
        acc += texture(Source, texCoord - texel * float(i)) * Weights[i];
    }
    fragColor = acc;
}
"""

# 9 タップのガウス重み（中心 + 片側 4）
WEIGHTS = (0.227027, 0.1945946, 0.1216216, 0.054054, 0.016216)


def passes() -> list[Pass]:
    return [
        Pass(name="gradient", fragment_source=GRADIENT, width=WIDTH, height=HEIGHT),
        Pass(
            name="blur_h",
            fragment_source=BLUR,
            width=WIDTH,
            height=HEIGHT,
            uniforms=[
                PassUniform("Source", "gradient", filter="linear"),
                Vec2Uniform("Direction", (1.0, 0.0)),
                FloatArrayUniform("Weights", WEIGHTS),
            ],
        ),
        Pass(
            name="blur_v",
            fragment_source=BLUR,
            width=WIDTH,
            height=HEIGHT,
            uniforms=[
                PassUniform("Source", "blur_h", filter="linear"),
                Vec2Uniform("Direction", (0.0, 1.0)),
                FloatArrayUniform("Weights", WEIGHTS),
            ],
        ),
    ]


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    for name, path in export_results(render(passes())).items():
        print(f"{name}: {path}")
