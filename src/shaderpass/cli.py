"""
どこで: `src/shaderpass/cli.py`。
何を: パイプライン YAML を描画して各パスの出力を PNG に保存するコマンドラインを提供する。
なぜ: ライブラリを組み込まずに、シェーダの記述だけで描画結果を確認できるようにするため。
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from shaderpass.api import load_pipeline, render
from shaderpass.core.errors import ShaderPassError
from shaderpass.core.runtime_config import output_root_dir, set_config_path
from shaderpass.export.image import export_results

_logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shaderpass",
        description="Render a sequence of fragment-shader passes to PNG images",
    )
    parser.add_argument("pipeline", type=Path, help="Pipeline description (.yaml)")
    parser.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Output directory (default: <paths.output_dir>/png)",
    )
    parser.add_argument("--config", type=Path, default=None, help="Explicit config.yaml")
    parser.add_argument(
        "--max-texture-slots", type=int, default=None,
        help="Texture slots per pass (default: gl.max_texture_slots)",
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="-v for INFO, -vv for DEBUG",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format=DEFAULT_FORMAT)

    if args.config is not None:
        set_config_path(args.config)

    if not args.pipeline.is_file():
        print(f"Error: pipeline file not found: {args.pipeline}", file=sys.stderr)
        return 1

    try:
        passes = load_pipeline(args.pipeline)
        results = render(passes, max_texture_slots=args.max_texture_slots)
    except (ShaderPassError, ValueError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    output_dir = args.output if args.output is not None else output_root_dir() / "png"
    written = export_results(results, output_dir)
    for name, path in written.items():
        image = results[name]
        _logger.info("saved %r (%dx%d) -> %s", name, image.width, image.height, path)
        print(f"{name}: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
