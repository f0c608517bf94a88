#!/usr/bin/env python3
from __future__ import annotations

"""
Deployment Artifact Sequencer

Liquidity deployments are recorded as numbered JSON files inside an
environment-scoped directory:

    <output-dir>/<env-scope>/uniBootstrap<N>.json

- "existing" is the highest-numbered artifact already present.
- "next" is that number plus one (0 for an empty or missing directory).
  Gaps are never filled: {0, 2} gives next = 3.

Full deploy runs write to "next"; liquidity-only runs reuse "existing".

The scan and the write are separate steps, so two runs writing to the same
scope at the same time can pick the same index. This is not guarded.

CLI examples:
- Show the current and next artifact for an env scope:
    python -m src.setup.deployments --env development
"""

import argparse
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


logger = logging.getLogger(__name__)

ARTIFACT_PREFIX = "uniBootstrap"
ARTIFACT_RE = re.compile(rf"^{ARTIFACT_PREFIX}(\d+)\.json$")


@dataclass
class DeploymentResult:
    """What a liquidity deployment routine hands back to the driver."""

    deployment: dict[str, Any] = field(default_factory=dict)
    signed_txs: list[str] = field(default_factory=list)


def artifact_name(index: int) -> str:
    return f"{ARTIFACT_PREFIX}{index}.json"


class ArtifactSequencer:
    def __init__(self, output_dir: Path | str, env_scope: str):
        self.output_dir = Path(output_dir)
        self.env_scope = env_scope

    @property
    def directory(self) -> Path:
        return self.output_dir / self.env_scope

    def indices(self) -> list[int]:
        """Sorted artifact numbers present; unrelated files are ignored."""
        if not self.directory.is_dir():
            return []
        found = []
        for p in self.directory.iterdir():
            m = ARTIFACT_RE.match(p.name)
            if m and p.is_file():
                found.append(int(m.group(1)))
        return sorted(found)

    def resolve_existing(self) -> Path | None:
        indices = self.indices()
        if not indices:
            return None
        return self.directory / artifact_name(indices[-1])

    def resolve_next(self) -> Path:
        indices = self.indices()
        next_index = indices[-1] + 1 if indices else 0
        return self.directory / artifact_name(next_index)

    def resolve_liquidity(self) -> Path:
        return self.resolve_existing() or self.resolve_next()

    def save(self, path: Path, result: DeploymentResult) -> Path:
        payload = {
            "deployment": result.deployment,
            "signedTxs": list(result.signed_txs),
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(payload, f, indent=2)
        logger.info("wrote %d signed txs to %s", len(result.signed_txs), path)
        return path


def main() -> int:
    from src.config.settings import load_settings

    p = argparse.ArgumentParser(description="Show deployment artifacts for an env scope")
    p.add_argument("--env", dest="env_scope", default=None, help="Env scope (default: DEPLOY_ENV)")
    p.add_argument("--output-dir", default=None, help="Output root (default: OUTPUT_DIR)")
    args = p.parse_args()

    settings = load_settings()
    seq = ArtifactSequencer(args.output_dir or settings.output_dir, args.env_scope or settings.deploy_env)
    existing = seq.resolve_existing()
    print(f"directory: {seq.directory}")
    print(f"existing:  {existing or '-'}")
    print(f"next:      {seq.resolve_next()}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
