"""GPU 無しで gl / api 層をテストするための ModernGL 風フェイク。"""

from __future__ import annotations

from typing import Any

import moderngl

from shaderpass.gl.context import ContextFactory, RenderContext


class FakeGLObject:
    def __init__(self, kind: str, log: list, *, release_error: str | None = None) -> None:
        self.kind = kind
        self.released = False
        self._log = log
        self.release_error = release_error

    def release(self) -> None:
        if self.release_error is not None:
            raise moderngl.Error(self.release_error)
        self.released = True
        self._log.append(("release", self.kind))


class FakeFramebuffer(FakeGLObject):
    def __init__(self, size: tuple[int, int], log: list, fill: tuple[int, int, int, int]) -> None:
        super().__init__("framebuffer", log)
        self.size = size
        self.fill = fill
        self.read_error: str | None = None

    def use(self) -> None:
        self._log.append(("use", "framebuffer"))

    def read(self, components: int = 4, alignment: int = 1) -> bytes:
        if self.read_error is not None:
            raise moderngl.Error(self.read_error)
        w, h = self.size
        return bytes(self.fill) * (w * h)


class FakeTexture(FakeGLObject):
    def __init__(self, size, components, data, dtype, log: list) -> None:
        super().__init__("texture", log)
        self.size = size
        self.components = components
        self.data = data
        self.dtype = dtype
        self.filter = None
        self.repeat_x = True
        self.repeat_y = True
        self.glo = 1
        self.locations: list[int] = []

    def use(self, location: int = 0) -> None:
        self.locations.append(location)


class FakeMember:
    """プログラム中の 1 uniform。"""

    def __init__(self, array_length: int = 1, *, reject: bool = False) -> None:
        self.array_length = array_length
        self.writes: list[bytes] = []
        self.reject = reject
        self._value: Any = None

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, value: Any) -> None:
        if self.reject:
            raise moderngl.Error("invalid value")
        self._value = value

    def write(self, data: bytes) -> None:
        if self.reject:
            raise moderngl.Error("invalid data size")
        self.writes.append(data)


class FakeProgram(FakeGLObject):
    def __init__(self, members: dict[str, FakeMember], log: list) -> None:
        super().__init__("program", log)
        self.members = members

    def get(self, name: str, default: Any) -> Any:
        return self.members.get(name, default)


class FakeVertexArray(FakeGLObject):
    def __init__(self, log: list, *, draw_error: str | None = None) -> None:
        super().__init__("vertex_array", log)
        self.draw_error = draw_error

    def render(self, mode: int, vertices: int) -> None:
        if self.draw_error is not None:
            raise moderngl.Error(self.draw_error)
        self._log.append(("render", mode, vertices))


class FakeModernGLContext:
    """`moderngl.Context` のうち RenderContext / compile_program / FullscreenQuad が使う部分。"""

    def __init__(
        self,
        *,
        members: dict[str, FakeMember] | None = None,
        program_error: str | None = None,
        draw_error: str | None = None,
        read_error: str | None = None,
        fill: tuple[int, int, int, int] = (0, 0, 0, 0),
    ) -> None:
        self.members = {} if members is None else members
        self.program_error = program_error
        self.draw_error = draw_error
        self.read_error = read_error
        self.fill = fill
        self.log: list = []
        self.released = False
        self.textures: list[FakeTexture] = []
        self.shader_sources: list[tuple[str, str]] = []

    def simple_framebuffer(self, size, components: int = 4) -> FakeFramebuffer:
        framebuffer = FakeFramebuffer(tuple(size), self.log, self.fill)
        framebuffer.read_error = self.read_error
        return framebuffer

    def buffer(self, data: bytes) -> FakeGLObject:
        return FakeGLObject("buffer", self.log)

    def texture(self, size, components, data=None, alignment=1, dtype="f1") -> FakeTexture:
        texture = FakeTexture(tuple(size), components, data, dtype, self.log)
        self.textures.append(texture)
        return texture

    def program(self, vertex_shader: str, fragment_shader: str) -> FakeProgram:
        self.shader_sources.append((vertex_shader, fragment_shader))
        if self.program_error is not None:
            raise moderngl.Error(self.program_error)
        return FakeProgram(self.members, self.log)

    def vertex_array(self, program, content, skip_errors: bool = False) -> FakeVertexArray:
        return FakeVertexArray(self.log, draw_error=self.draw_error)

    def clear(self, r: float, g: float, b: float, a: float) -> None:
        self.log.append(("clear", (r, g, b, a)))

    def release(self) -> None:
        self.released = True
        self.log.append(("release", "context"))


class FakeContextFactory(ContextFactory):
    """確保/破棄を記録するファクトリ。コンテキストの生成引数はそのまま渡す。"""

    def __init__(self, **context_kwargs: Any) -> None:
        self.context_kwargs = context_kwargs
        self.acquired: list[RenderContext] = []
        self.destroyed: list[RenderContext] = []

    def acquire(self, width: int, height: int) -> RenderContext:
        context = RenderContext(FakeModernGLContext(**self.context_kwargs), width, height)
        self.acquired.append(context)
        return context

    def destroy(self, context: RenderContext) -> None:
        self.destroyed.append(context)
        super().destroy(context)
