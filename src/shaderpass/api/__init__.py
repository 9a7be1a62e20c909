# どこで: `src/shaderpass/api/__init__.py`。
# 何を: 公開 API として render / Pipeline とパイプラインファイルの読み込みを再エクスポートする。
# なぜ: ユーザーコードが gl 実装の配置を意識せずに import できるようにするため。

from __future__ import annotations

from .pipeline_file import load_pipeline
from .render import Pipeline, render

__all__ = ["Pipeline", "load_pipeline", "render"]
