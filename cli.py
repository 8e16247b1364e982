#!/usr/bin/env python3
"""
cli.py — iCOW engine CLI entry point.

Provides a command-line interface for evaluating a configured policy,
checking integrator convergence and inspecting city parameters.

Usage:
    # Evaluate the policy in a config file
    python cli.py evaluate --config configs/default.yaml

    # Same, saving the yearly records
    python cli.py evaluate --config configs/default.yaml --output runs/default.json

    # Monte Carlo vs quadrature for the configured policy and surge climate
    python cli.py convergence --config configs/default.yaml --sample-sizes 1000 10000

    # Print the parameter set (defaults, or with config overrides)
    python cli.py params --config configs/default.yaml
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from icow_engine.analysis.convergence import integrator_convergence
from icow_engine.analysis.logging import StepLogger
from icow_engine.core.parameters import CityParameters
from icow_engine.core.defenses import is_feasible
from icow_engine.loader import (
    build_parameters,
    build_policy,
    build_surge_distribution,
    load_config,
    load_simulation,
)
from icow_engine.simulation.runner import SimulationRunner


def cmd_evaluate(args: argparse.Namespace) -> None:
    """Run the configured policy and print discounted totals."""
    sim = load_simulation(args.config)
    seed = args.seed if args.seed is not None else sim.seed

    runner = SimulationRunner(params=sim.params)
    step_log = StepLogger()
    runner.register_post_hook(step_log.hook)
    outcome, _ = runner.run(sim.policy, sim.scenario, seed=seed)

    levers = sim.policy.to_defenses(sim.params)
    print(f"\n  Policy levers: {levers.to_dict()}")
    print(f"  Years: {len(step_log)}, Seed: {seed}")
    print(f"  Investment (PV): {outcome.investment:,.4g}")
    print(f"  Damage (PV):     {outcome.damage:,.4g}")
    print(f"  Total cost:      {outcome.total_cost:,.4g}")
    infeasible = step_log.infeasible_years()
    if infeasible:
        print(f"  Infeasible from year {infeasible[0]}")
    print()

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            json.dump(
                {"outcome": outcome.to_dict(), "records": step_log.to_dicts()},
                f,
                indent=2,
                default=str,
            )
        print(f"  Results saved to {output_path}")


def cmd_convergence(args: argparse.Namespace) -> None:
    """Tabulate Monte Carlo estimates against quadrature."""
    config = load_config(args.config)
    params = build_parameters(config)
    levers = build_policy(config).to_defenses(params)
    if not is_feasible(levers, params):
        print(f"ERROR: configured levers are infeasible: {levers.to_dict()}")
        sys.exit(1)

    rows = integrator_convergence(
        params,
        levers,
        build_surge_distribution(config),
        sample_sizes=args.sample_sizes,
        seed=args.seed,
    )
    print(f"\n  Quadrature EAD: {rows[0]['quadrature']:,.6g}")
    print(f"  {'N':>10s}  {'Monte Carlo':>14s}  {'rel. error':>10s}")
    for row in rows:
        print(
            f"  {row['n_samples']:>10d}  {row['monte_carlo']:>14.6g}  "
            f"{row['relative_error']:>10.4%}"
        )
    print()


def cmd_params(args: argparse.Namespace) -> None:
    """Print the city parameter set."""
    if args.config:
        params = build_parameters(load_config(args.config))
    else:
        params = CityParameters()
    if args.json:
        print(json.dumps(params.to_dict(), indent=2))
        return
    print()
    for name, value in params.to_dict().items():
        print(f"    {name:<14s} {value:>14.6g}")
    print()


def main():
    parser = argparse.ArgumentParser(
        prog="icow",
        description="iCOW engine — coastal flood-defense cost and damage valuation",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # ── evaluate ─────────────────────────────────────────────────── #
    p_eval = subparsers.add_parser("evaluate", help="Evaluate a configured policy")
    p_eval.add_argument("--config", type=str, required=True,
                        help="Path to simulation config YAML")
    p_eval.add_argument("--seed", type=int, default=None,
                        help="Override simulation.seed")
    p_eval.add_argument("--output", type=str, default=None,
                        help="Save outcome and yearly records JSON to this path")
    p_eval.set_defaults(func=cmd_evaluate)

    # ── convergence ──────────────────────────────────────────────── #
    p_conv = subparsers.add_parser("convergence",
                                   help="Compare Monte Carlo with quadrature")
    p_conv.add_argument("--config", type=str, required=True)
    p_conv.add_argument("--sample-sizes", type=int, nargs="+",
                        default=[1_000, 10_000, 100_000])
    p_conv.add_argument("--seed", type=int, default=0)
    p_conv.set_defaults(func=cmd_convergence)

    # ── params ───────────────────────────────────────────────────── #
    p_params = subparsers.add_parser("params", help="Show city parameters")
    p_params.add_argument("--config", type=str, default=None)
    p_params.add_argument("--json", action="store_true")
    p_params.set_defaults(func=cmd_params)

    args = parser.parse_args()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    if not args.command:
        parser.print_help()
        sys.exit(0)

    args.func(args)


if __name__ == "__main__":
    main()
