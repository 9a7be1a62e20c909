"""
どこで: `src/shaderpass/export/image.py`。
何を: パス出力の Image を PNG として保存する／PNG から Image を読み込む関数を提供する。
なぜ: レンダリング結果をファイルで確認・再利用できるよう、GL の行順と画像ファイルの行順の変換を一箇所にまとめるため。
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import numpy as np
from PIL import Image as PILImage

from shaderpass.core.image import Image
from shaderpass.core.runtime_config import output_root_dir, runtime_config


def _to_rgba8(image: Image) -> np.ndarray:
    arr = image.to_array()
    if image.is_float:
        # float 画像は 0..1 を 8bit へ量子化する。
        arr = np.clip(arr, 0.0, 1.0) * 255.0 + 0.5
        return arr.astype(np.uint8)
    return np.asarray(arr, dtype=np.uint8)


def export_png(
    image: Image,
    path: str | Path,
    *,
    flip_vertical: bool | None = None,
) -> Path:
    """Image を PNG として保存する。

    Parameters
    ----------
    image : Image
        保存する画像。
    path : str or Path
        出力 PNG パス。親ディレクトリは必要なら作成する。
    flip_vertical : bool or None
        True なら行順を上下反転して保存する（GL の下→上を画像の上→下へ）。
        None なら runtime_config の `export.png.flip_vertical` に従う。

    Returns
    -------
    Path
        出力 PNG パス。
    """
    _path = Path(path)
    if _path.suffix.lower() != ".png":
        raise ValueError(f"未対応の画像フォーマット: {_path.suffix!r}")
    if flip_vertical is None:
        flip_vertical = runtime_config().png_flip_vertical

    rgba = _to_rgba8(image)
    if flip_vertical:
        rgba = rgba[::-1]

    _path.parent.mkdir(parents=True, exist_ok=True)
    PILImage.fromarray(np.ascontiguousarray(rgba), "RGBA").save(str(_path))
    return _path


def export_results(
    results: Mapping[str, Image],
    output_dir: str | Path | None = None,
    *,
    flip_vertical: bool | None = None,
) -> dict[str, Path]:
    """パス出力をまとめて `{output_dir}/{name}.png` に保存する。

    Notes
    -----
    output_dir が None なら `{output_root}/png` に保存する。
    """
    out_dir = Path(output_dir) if output_dir is not None else output_root_dir() / "png"
    written: dict[str, Path] = {}
    for name, image in results.items():
        written[name] = export_png(image, out_dir / f"{name}.png", flip_vertical=flip_vertical)
    return written


def read_png(path: str | Path, *, flip_vertical: bool | None = None) -> Image:
    """画像ファイルを RGBA の Image として読み込む。

    Notes
    -----
    `flip_vertical` の既定は保存時と同じ設定値で、テクスチャとして GL の行順に揃える。
    """
    if flip_vertical is None:
        flip_vertical = runtime_config().png_flip_vertical
    with PILImage.open(str(path)) as img:
        rgba = np.asarray(img.convert("RGBA"), dtype=np.uint8)
    if flip_vertical:
        rgba = rgba[::-1]
    return Image.from_array(np.ascontiguousarray(rgba))


__all__ = ["export_png", "export_results", "read_png"]
