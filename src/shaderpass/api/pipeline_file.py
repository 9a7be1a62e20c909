# どこで: `src/shaderpass/api/pipeline_file.py`。
# 何を: YAML で書かれたパイプライン記述を読み込み、Pass 列に変換する。
# なぜ: シェーダや入力画像をファイルで管理し、CLI から同じ記述で再描画できるようにするため。

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from shaderpass.core.passes import Pass, pass_from_mapping
from shaderpass.export.image import read_png


def _resolve(base_dir: Path, value: Any) -> Path:
    p = Path(str(value)).expanduser()
    return p if p.is_absolute() else base_dir / p


def _expand_uniform(data: Any, *, base_dir: Path) -> Any:
    if not isinstance(data, Mapping) or data.get("type") != "texture":
        return data
    value = data.get("value")
    if isinstance(value, Mapping) and "path" in value:
        out = dict(data)
        out["value"] = read_png(_resolve(base_dir, value["path"]))
        return out
    return data


def _expand_pass(data: Any, *, base_dir: Path) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise RuntimeError(f"passes の要素は mapping である必要があります: got={data!r}")
    out = dict(data)
    if "frag_path" in out:
        out["frag"] = _resolve(base_dir, out.pop("frag_path")).read_text(encoding="utf-8")
    if "vert_path" in out:
        out["vert"] = _resolve(base_dir, out.pop("vert_path")).read_text(encoding="utf-8")
    uniforms = out.get("uniforms")
    if isinstance(uniforms, list):
        out["uniforms"] = [_expand_uniform(u, base_dir=base_dir) for u in uniforms]
    return out


def passes_from_document(document: Any, *, base_dir: Path) -> list[Pass]:
    """`{passes: [...]}` 形式のドキュメントを Pass 列に変換する。"""
    if not isinstance(document, Mapping):
        raise RuntimeError("pipeline ファイルは mapping である必要があります")
    raw = document.get("passes")
    if not isinstance(raw, list) or not raw:
        raise RuntimeError("pipeline ファイルには空でない passes 配列が必要です")
    return [pass_from_mapping(_expand_pass(p, base_dir=base_dir)) for p in raw]


def load_pipeline(path: str | Path) -> list[Pass]:
    """YAML のパイプライン記述を読み込む。

    Notes
    -----
    `frag_path` / `vert_path`、texture の `value: {path: ...}` は
    ファイルのあるディレクトリからの相対パスとして解決する。
    """
    import yaml  # type: ignore[import-untyped]

    _path = Path(path)
    text = _path.read_text(encoding="utf-8")
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise RuntimeError(f"pipeline ファイルの読み込みに失敗しました: source={_path}") from exc
    return passes_from_document(document, base_dir=_path.parent)


__all__ = ["load_pipeline", "passes_from_document"]
