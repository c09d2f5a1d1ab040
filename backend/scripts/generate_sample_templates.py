"""
Write placeholder Observer 180 templates (one per combo) so the fill
service can run locally without the real artwork.

Usage:
  cd backend
  python3 scripts/generate_sample_templates.py [out_dir]
"""
from __future__ import annotations

from pathlib import Path
import sys

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

import config
from engine.bands import VALID_COMBOS
from templates import render_placeholder_template, template_name


def main() -> None:
    out_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else config.template_dir()
    out_dir.mkdir(parents=True, exist_ok=True)
    for combo in sorted(VALID_COMBOS):
        path = out_dir / template_name(combo)
        if path.exists():
            print(f"[template] keep {path.name}")
            continue
        path.write_bytes(render_placeholder_template(combo))
        print(f"[template] wrote {path.name}")
    print(f"[template] complete. Outputs in {out_dir}")


if __name__ == "__main__":
    main()
