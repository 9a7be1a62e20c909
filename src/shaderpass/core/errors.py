# どこで: `src/shaderpass/core/errors.py`。
# 何を: パイプライン実行で送出する例外の分類を定義する。
# なぜ: どのパスのどの段階で失敗したかを、呼び出し側が型と属性で判別できるようにするため。

from __future__ import annotations

from collections.abc import Iterable


class ShaderPassError(RuntimeError):
    """パイプライン実行中の失敗を表す基底例外。

    Notes
    -----
    `pass_name` は実行側（executor / pipeline）が後から付与する。
    例外の型自体は差し替えずに伝播させる。
    """

    def __init__(self, message: str, *, pass_name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.pass_name = pass_name

    def attach_pass(self, pass_name: str) -> None:
        """未設定なら失敗したパス名を記録する。"""
        if self.pass_name is None:
            self.pass_name = str(pass_name)

    def __str__(self) -> str:
        if self.pass_name is None:
            return self.message
        return f"[pass={self.pass_name!r}] {self.message}"


class InvalidDimensionsError(ShaderPassError):
    """width / height が正の有限整数でない。"""

    def __init__(self, field: str, value: object, **kwargs) -> None:
        super().__init__(f"{field} は正の有限整数である必要がある: got={value!r}", **kwargs)
        self.field = field
        self.value = value


class MissingShaderError(ShaderPassError):
    """フラグメントシェーダが無い、または文字列でない。"""

    def __init__(self, value: object = None, **kwargs) -> None:
        super().__init__(
            f"フラグメントシェーダが未指定、または文字列ではない: got={type(value).__name__}",
            **kwargs,
        )


class ShaderCompileError(ShaderPassError):
    """シェーダのコンパイルに失敗した。"""

    def __init__(self, stage: str, log: str, **kwargs) -> None:
        detail = log.strip() or "(no diagnostic)"
        super().__init__(f"{stage} shader のコンパイルに失敗した:\n{detail}", **kwargs)
        self.stage = stage
        self.log = log


class ShaderLinkError(ShaderPassError):
    """プログラムのリンクに失敗した。"""

    def __init__(self, log: str, **kwargs) -> None:
        detail = log.strip() or "(no diagnostic)"
        super().__init__(f"シェーダプログラムのリンクに失敗した:\n{detail}", **kwargs)
        self.log = log


class InvalidUniformTypeError(ShaderPassError):
    """認識できない uniform の type タグ。"""

    def __init__(self, type_tag: object, **kwargs) -> None:
        super().__init__(f"Invalid uniform type: {type_tag!r}", **kwargs)
        self.type_tag = type_tag


class TooManyTexturesError(ShaderPassError):
    """1 パスで使えるテクスチャスロット数を超えた。"""

    def __init__(self, limit: int, uniform_name: str, **kwargs) -> None:
        super().__init__(
            f"テクスチャスロットが不足している（上限 {limit}）: uniform={uniform_name!r}",
            **kwargs,
        )
        self.limit = limit
        self.uniform_name = uniform_name


class ResourceCreationError(ShaderPassError):
    """バックエンドが GPU オブジェクトを確保できなかった。"""

    def __init__(self, resource: str, detail: str = "", **kwargs) -> None:
        message = f"{resource} の作成に失敗した"
        if detail.strip():
            message = f"{message}: {detail.strip()}"
        super().__init__(message, **kwargs)
        self.resource = resource
        self.detail = detail


class RenderError(ShaderPassError):
    """描画や読み戻しなど、確保済みオブジェクトに対する GL 操作が失敗した。"""

    def __init__(self, operation: str, detail: str = "", **kwargs) -> None:
        message = f"{operation} に失敗した"
        if detail.strip():
            message = f"{message}: {detail.strip()}"
        super().__init__(message, **kwargs)
        self.operation = operation
        self.detail = detail


class UnresolvedPassReferenceError(ShaderPassError):
    """pass 参照 uniform が、まだ描画されていないパス名を指している。"""

    def __init__(self, reference: str, available: Iterable[str] = (), **kwargs) -> None:
        names = sorted(str(n) for n in available)
        super().__init__(
            f"参照先のパスが見つからない: {reference!r}（描画済み: {names}）",
            **kwargs,
        )
        self.reference = reference
        self.available = tuple(names)


class DuplicatePassNameError(ShaderPassError):
    """同じ名前のパスが複数ある。"""

    def __init__(self, name: str, **kwargs) -> None:
        super().__init__(f"パス名が重複している: {name!r}", **kwargs)
        self.name = name


class UniformBindError(ShaderPassError):
    """解決済み uniform への値の設定をバックエンドが拒否した。"""

    def __init__(self, uniform_name: str, type_tag: str, detail: str = "", **kwargs) -> None:
        message = f"uniform {uniform_name!r} ({type_tag}) の設定に失敗した"
        if detail.strip():
            message = f"{message}: {detail.strip()}"
        super().__init__(message, **kwargs)
        self.uniform_name = uniform_name
        self.type_tag = type_tag


__all__ = [
    "DuplicatePassNameError",
    "InvalidDimensionsError",
    "InvalidUniformTypeError",
    "MissingShaderError",
    "RenderError",
    "ResourceCreationError",
    "ShaderCompileError",
    "ShaderLinkError",
    "ShaderPassError",
    "TooManyTexturesError",
    "UniformBindError",
    "UnresolvedPassReferenceError",
]
