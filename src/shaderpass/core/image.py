# src/shaderpass/core/image.py
# パスの出力、およびテクスチャ入力として使う RGBA 画像のモデルと検証ロジック。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, slots=True, eq=False)
class Image:
    """RGBA 画素バッファを表現する。

    Parameters
    ----------
    width : int
        画素幅（正）。
    height : int
        画素高さ（正）。
    pixels : np.ndarray
        長さ width*height*4 の 1 次元配列。uint8 もしくは float32。

    Notes
    -----
    行は GL の規約どおり下から上に並ぶ（先頭行が画像の最下段）。
    不変性を契約とし、配列は writeable=False で保持する。
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self) -> None:
        """寸法と配列長の整合性を検証し、不変条件を満たす形に固定する。"""
        width = int(self.width)
        height = int(self.height)
        if width <= 0 or height <= 0:
            raise ValueError(f"Image の寸法は正である必要がある: got=({width}, {height})")

        pixels = np.asarray(self.pixels)
        if pixels.ndim != 1:
            pixels = pixels.reshape(-1)

        if np.issubdtype(pixels.dtype, np.floating):
            if pixels.dtype != np.float32:
                pixels = pixels.astype(np.float32)
        elif pixels.dtype != np.uint8:
            if not np.issubdtype(pixels.dtype, np.integer):
                raise ValueError(f"pixels は数値配列である必要がある: dtype={pixels.dtype}")
            if pixels.size and (pixels.min() < 0 or pixels.max() > 255):
                raise ValueError("整数 pixels は 0..255 の範囲である必要がある")
            pixels = pixels.astype(np.uint8)

        expected = width * height * 4
        if pixels.size != expected:
            raise ValueError(
                f"pixels の長さは width*height*4 と一致する必要がある: "
                f"expected={expected}, got={pixels.size}"
            )

        # 呼び出し側の配列を凍結しないようコピーしてから writeable=False にする。
        if pixels.flags.writeable or not pixels.flags.c_contiguous:
            pixels = np.array(pixels, copy=True)
        pixels.setflags(write=False)

        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)
        object.__setattr__(self, "pixels", pixels)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.pixels.dtype == other.pixels.dtype
            and bool(np.array_equal(self.pixels, other.pixels))
        )

    @property
    def is_float(self) -> bool:
        return self.pixels.dtype == np.float32

    def to_array(self) -> np.ndarray:
        """shape (height, width, 4) の読み取り専用ビューを返す。"""
        return self.pixels.reshape(self.height, self.width, 4)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "Image":
        """shape (height, width, 4) の配列から Image を作る。"""
        arr = np.asarray(array)
        if arr.ndim != 3 or arr.shape[2] != 4:
            raise ValueError(f"array は shape (H, W, 4) である必要がある: got={arr.shape}")
        height, width = int(arr.shape[0]), int(arr.shape[1])
        return cls(width=width, height=height, pixels=arr.reshape(-1))


__all__ = ["Image"]
