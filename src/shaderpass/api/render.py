"""
どこで: `src/shaderpass/api/render.py`。
何を: パス列を宣言順に実行し、パス名 → 出力画像の辞書を組み立てる `Pipeline` / `render` を提供する。
なぜ: 後続パスが参照できるのは描画済みのパスだけ、という前方向のみの依存順序を一箇所で保証するため。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any

from shaderpass.core.errors import (
    DuplicatePassNameError,
    ShaderPassError,
    UnresolvedPassReferenceError,
)
from shaderpass.core.image import Image
from shaderpass.core.passes import Pass, coerce_pass
from shaderpass.core.runtime_config import runtime_config
from shaderpass.core.uniforms import PassUniform
from shaderpass.gl.context import ContextFactory, StandaloneContextFactory
from shaderpass.gl.executor import execute_pass

_logger = logging.getLogger(__name__)

PassLike = Pass | Mapping[str, Any]


def check_pass_order(passes: Iterable[Pass]) -> None:
    """パス名の重複と、未描画パスへの参照を GPU 処理の前に検出する。

    Raises
    ------
    DuplicatePassNameError
        同名のパスが 2 つ以上ある場合。
    UnresolvedPassReferenceError
        pass 参照が自分自身・後続パス・存在しない名前を指している場合。
    """
    seen: list[str] = []
    for pass_ in passes:
        if pass_.name in seen:
            raise DuplicatePassNameError(pass_.name, pass_name=pass_.name)
        for uniform in pass_.uniforms:
            if isinstance(uniform, PassUniform) and uniform.source not in seen:
                raise UnresolvedPassReferenceError(uniform.source, seen, pass_name=pass_.name)
        seen.append(pass_.name)


class Pipeline:
    """パス列を逐次実行するオーケストレータ。

    Notes
    -----
    テクスチャスロット上限はバックエンドの能力値として構築時に確定する。
    未指定なら runtime_config の `gl.max_texture_slots` を使う。
    """

    def __init__(
        self,
        *,
        context_factory: ContextFactory | None = None,
        max_texture_slots: int | None = None,
    ) -> None:
        if context_factory is None or max_texture_slots is None:
            cfg = runtime_config()
            if context_factory is None:
                context_factory = StandaloneContextFactory(
                    backend=cfg.gl_backend,
                    require=cfg.gl_require,
                )
            if max_texture_slots is None:
                max_texture_slots = cfg.max_texture_slots

        if isinstance(max_texture_slots, bool) or int(max_texture_slots) <= 0:
            raise ValueError(f"max_texture_slots は正の整数である必要がある: got={max_texture_slots!r}")

        self.context_factory = context_factory
        self.max_texture_slots = int(max_texture_slots)

    def run(self, passes: Iterable[PassLike]) -> dict[str, Image]:
        """全パスを宣言順に描画して、パス名 → Image の辞書を返す。

        いずれかのパスが失敗した時点で中断し、例外をそのまま伝播させる。
        """
        resolved = [coerce_pass(p) for p in passes]
        check_pass_order(resolved)

        results: dict[str, Image] = {}
        # 後続パスには読み取り専用ビューを渡し、書き込みはここだけで行う。
        view = MappingProxyType(results)
        for index, pass_ in enumerate(resolved):
            _logger.info(
                "pass %d/%d %r: %sx%s",
                index + 1,
                len(resolved),
                pass_.name,
                pass_.width,
                pass_.height,
            )
            try:
                image = execute_pass(
                    pass_,
                    view,
                    factory=self.context_factory,
                    max_texture_slots=self.max_texture_slots,
                )
            except ShaderPassError as exc:
                exc.attach_pass(pass_.name)
                _logger.info("pass %r failed: %s", pass_.name, exc.message)
                raise
            results[pass_.name] = image
            _logger.info("pass %r done", pass_.name)

        return results


def render(
    passes: Iterable[PassLike],
    *,
    context_factory: ContextFactory | None = None,
    max_texture_slots: int | None = None,
) -> dict[str, Image]:
    """パス列を描画し、パス名 → Image の辞書を返す（唯一の公開エントリポイント）。

    Parameters
    ----------
    passes : Iterable[Pass | Mapping]
        描画するパス列。辞書形式 `{name, frag, vert?, width, height, uniforms?}` も受け付ける。
    context_factory : ContextFactory or None
        コンテキストの確保/破棄を担うファクトリ。None なら設定に従うスタンドアロン GL。
    max_texture_slots : int or None
        1 パスのテクスチャスロット上限。None なら設定値。

    Returns
    -------
    dict[str, Image]
        各パスの出力画像。
    """
    pipeline = Pipeline(context_factory=context_factory, max_texture_slots=max_texture_slots)
    return pipeline.run(passes)


__all__ = ["Pipeline", "check_pass_order", "render"]
