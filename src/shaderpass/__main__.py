# どこで: `src/shaderpass/__main__.py`。
# 何を: `python -m shaderpass` を CLI へ委譲する。

from shaderpass.cli import main

raise SystemExit(main())
