"""Command Line Interface for seed_predictor.

Provides convenient commands:
  seed-predictor status
  seed-predictor mines <client_seed> <server_seed_hash> <nonce>
  seed-predictor coinflip <client_seed> <server_seed_hash> <nonce>

Optional flags:
  --device auto|cpu|cuda (default from SEED_PREDICTOR_DEVICE or auto)
  --vector-size N, --sequence-length N, --safety P
  --simulate  (skip the accelerated backend)
  --no-pacing (no delay between coinflip calls)

Example:
  seed-predictor mines abc def 0
  seed-predictor coinflip abc def 42 --no-pacing
"""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from .backends import GameKind
from .commons.seed_utils import SeedTriple
from .config import EngineConfig
from .errors import SeedPredictorError
from .pipeline import asyncio_delay, no_delay
from .predictor import SeedPredictor


def _print_json(data: Any):  # pretty print helper
    print(json.dumps(data, indent=2, default=str))


def _make_predictor(args) -> SeedPredictor:
    config = EngineConfig.from_env(
        device=args.device,
        seed_vector_size=args.vector_size,
        coinflip_sequence_length=args.sequence_length,
        mines_grid_safety_probability=args.safety,
    )
    kwargs = {"delay": no_delay if args.no_pacing else asyncio_delay}
    if args.simulate:
        kwargs["accelerated"] = None
    return SeedPredictor(config, **kwargs)


async def _status(args):
    predictor = _make_predictor(args)
    await predictor.start()
    _print_json(predictor.status())


async def _predict(args):
    seeds = SeedTriple.from_text(args.client_seed, args.server_seed_hash, args.nonce)
    predictor = _make_predictor(args)
    await predictor.start()
    result = await predictor.predict(GameKind(args.command), seeds)
    _print_json(result.to_dict())


def cmd_status(args):
    asyncio.run(_status(args))


def cmd_predict(args):
    asyncio.run(_predict(args))


def build_parser():
    p = argparse.ArgumentParser(prog="seed-predictor", description="Seed Predictor CLI")
    p.add_argument("--device", default=None, help="Accelerated backend device (auto|cpu|cuda)")
    p.add_argument("--vector-size", type=int, default=None, help="Feature vector length")
    p.add_argument("--sequence-length", type=int, default=None, help="Coinflip calls per sequence")
    p.add_argument("--safety", type=float, default=None, help="Mines cell safety probability")
    p.add_argument("--simulate", action="store_true", help="Skip the accelerated backend")
    p.add_argument("--no-pacing", action="store_true", help="Do not pause between coinflip calls")
    sub = p.add_subparsers(dest="command", required=True)

    ps = sub.add_parser("status", help="Initialize the engine and print backend status")
    ps.set_defaults(func=cmd_status)

    for kind in GameKind:
        pg = sub.add_parser(kind.value, help=f"Run the {kind.value} prediction pipeline")
        pg.add_argument("client_seed")
        pg.add_argument("server_seed_hash")
        pg.add_argument("nonce")
        pg.set_defaults(func=cmd_predict)

    return p


def main(argv: list[str] | None = None):
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.func(args)
    except SeedPredictorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
