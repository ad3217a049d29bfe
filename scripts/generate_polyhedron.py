#!/usr/bin/env python3
"""Headless entry point for the Conway polyhedron generator.

Example::

    python scripts/generate_polyhedron.py dkD --apex-dist 0.2 --out dkD.json
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
import sys
from typing import Any, Dict, List

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from conway_poly.parameters import load_parameters, parse_cli_overrides
from conway_poly.pipeline import PipelineContext, PolyhedronPipeline


def configure_logging() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def main() -> None:
    configure_logging()
    overrides, cli = parse_cli_overrides(_sanitized_args())
    config_path = _resolve_config_path(cli.config)
    params = load_parameters(config_path, overrides)
    logging.info(
        "Parameters: recipe=%s apex=%.3f inset=%.3f parallel_kis=%s",
        params.recipe,
        params.apex_dist,
        params.inset_dist,
        params.parallel_kis,
    )

    ctx = PolyhedronPipeline().run(PipelineContext(params=params))
    summary = _summary(ctx)
    text = json.dumps(summary, indent=2)
    if cli.out:
        out_path = Path(cli.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        logging.info("Wrote %s", out_path)
    else:
        print(text)


def _summary(ctx: PipelineContext) -> Dict[str, Any]:
    poly = ctx.polyhedron
    return {
        "name": poly.name,
        "vertices": [list(p) for p in poly.vertices],
        "faces": [list(f) for f in poly.faces],
        "colors": [list(c) for c in ctx.colors],
        "report": ctx.report,
    }


def _sanitized_args() -> List[str]:
    return [arg for arg in sys.argv[1:] if arg not in {"--", "-"}]


def _resolve_config_path(cli_config: str | None) -> str | None:
    if cli_config:
        path = Path(cli_config)
        if path.exists():
            return str(path)
        logging.warning("Config file %s not found; trying project default", path)
    candidate = REPO_ROOT / "configs" / "base.json"
    if candidate.exists():
        return str(candidate)
    logging.info("No configuration file available; using built-in defaults")
    return None


if __name__ == "__main__":
    main()
