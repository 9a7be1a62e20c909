# どこで: `src/shaderpass/__init__.py`。
# 何を: ルート `shaderpass` パッケージを定義し、render と記述用の型を再エクスポートする。
# なぜ: import 起点を `shaderpass` に統一するため。

from __future__ import annotations

from shaderpass.api import Pipeline, load_pipeline, render
from shaderpass.core.errors import (
    DuplicatePassNameError,
    InvalidDimensionsError,
    InvalidUniformTypeError,
    MissingShaderError,
    RenderError,
    ResourceCreationError,
    ShaderCompileError,
    ShaderLinkError,
    ShaderPassError,
    TooManyTexturesError,
    UniformBindError,
    UnresolvedPassReferenceError,
)
from shaderpass.core.image import Image
from shaderpass.core.passes import Pass
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
    Vec2Uniform,
    Vec3Uniform,
    Vec4Uniform,
)

__all__ = [
    "DuplicatePassNameError",
    "FloatArrayUniform",
    "FloatUniform",
    "IVec2Uniform",
    "IVec3Uniform",
    "IVec4Uniform",
    "Image",
    "IntArrayUniform",
    "IntUniform",
    "InvalidDimensionsError",
    "InvalidUniformTypeError",
    "Mat2Uniform",
    "Mat3Uniform",
    "Mat4Uniform",
    "MissingShaderError",
    "Pass",
    "PassUniform",
    "Pipeline",
    "RenderError",
    "ResourceCreationError",
    "ShaderCompileError",
    "ShaderLinkError",
    "ShaderPassError",
    "TextureUniform",
    "TooManyTexturesError",
    "UniformBindError",
    "UnresolvedPassReferenceError",
    "Vec2Uniform",
    "Vec3Uniform",
    "Vec4Uniform",
    "load_pipeline",
    "render",
]
