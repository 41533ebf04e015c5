"""
Scenario runner CLI: run FIFO stimulus through the Python model, the
Amaranth simulation, or both in lockstep.

Usage:
  python -m bench.scenario_runner --scenario random --cycles 2000 --mode both
  python -m bench.scenario_runner --scenario all --word-width 9 --address-width 2
  python -m bench.scenario_runner --trace my_trace.json --mode hw_sim --unguarded
"""

import argparse
import json
import os
import sys
import time
from dataclasses import asdict

from .fifo_model import FIFOConfig, FIFOModel, DEFAULT_WORD_WIDTH, DEFAULT_ADDRESS_WIDTH
from .stimulus import SCENARIOS, build_scenario, load_trace

RESULTS_DIR = os.path.join(os.path.dirname(__file__), "results")

MAX_REPORTED_MISMATCHES = 10


def run_model(config, trace):
    """Run the Python cycle model. Returns (outputs, result dict)."""
    model = FIFOModel(config)
    t0 = time.perf_counter()
    outputs = model.run(trace)
    elapsed = time.perf_counter() - t0

    c = model.counters
    return outputs, {
        "mode": "model",
        "cycles": c.cycles,
        "time_s": round(elapsed, 6),
        "resets": c.resets,
        "writes_accepted": c.writes_accepted,
        "writes_dropped": c.writes_dropped,
        "reads_accepted": c.reads_accepted,
        "reads_ignored": c.reads_ignored,
        "error_cycles": c.error_cycles,
        "max_occupancy": c.max_occupancy,
        "final_occupancy": model.occupancy,
    }


def run_hw_sim(config, trace, vcd_path=None, verbose=False):
    """Run the trace through SyncFIFO in Amaranth simulation. Returns (outputs, result dict)."""
    from .fifo_sim import FIFOSimulator

    sim = FIFOSimulator(config, vcd_path=vcd_path, verbose=verbose)
    t0 = time.perf_counter()
    outputs, counters = sim.run(trace)
    elapsed = time.perf_counter() - t0

    result = {"mode": "hw_sim", "sim_time_s": round(elapsed, 3)}
    result.update(asdict(counters))
    return outputs, result


def run_scenario(name, config, trace, mode, verbose=False):
    """Run one trace in the requested mode. Returns result dict."""
    result = {
        "scenario": name,
        "word_width": config.word_width,
        "address_width": config.address_width,
        "capacity": config.capacity,
        "guard_simultaneous": config.guard_simultaneous,
        "cycles": len(trace),
    }

    model_out = hw_out = None
    if mode in ("model", "both"):
        model_out, result["model"] = run_model(config, trace)
    if mode in ("hw_sim", "both"):
        hw_out, result["hw"] = run_hw_sim(config, trace, verbose=verbose)

    if mode == "both":
        from .fifo_sim import compare_outputs

        mismatches = compare_outputs(model_out, hw_out)
        result["match"] = not mismatches
        result["num_mismatches"] = len(mismatches)
        result["mismatches"] = mismatches[:MAX_REPORTED_MISMATCHES]

    return result


def print_summary_table(results, mode):
    """Print a summary table to stdout."""
    print()
    if mode in ("model", "both"):
        print(f"{'Scenario':<14} {'Cap':>4} {'Cyc':>6} {'WrOK':>6} {'WrDrop':>6} "
              f"{'RdOK':>6} {'RdIgn':>6} {'MaxOcc':>6} {'Time(s)':>10}")
        print("-" * 76)
        for r in results:
            md = r.get("model")
            if md:
                print(f"{r['scenario']:<14} {r['capacity']:>4} {md['cycles']:>6} "
                      f"{md['writes_accepted']:>6} {md['writes_dropped']:>6} "
                      f"{md['reads_accepted']:>6} {md['reads_ignored']:>6} "
                      f"{md['max_occupancy']:>6} {md['time_s']:>10.4f}")

    if mode in ("hw_sim", "both"):
        print()
        print(f"{'Scenario':<14} {'Cap':>4} {'Cyc':>6} {'Rst':>5} {'Full':>6} "
              f"{'Empty':>6} {'Err':>5} {'Match':>6} {'SimTime':>10}")
        print("-" * 72)
        for r in results:
            hw = r.get("hw")
            if hw:
                match = {True: "yes", False: "NO"}.get(r.get("match"), "-")
                print(f"{r['scenario']:<14} {r['capacity']:>4} {hw['total_cycles']:>6} "
                      f"{hw['reset_cycles']:>5} {hw['full_cycles']:>6} "
                      f"{hw['empty_cycles']:>6} {hw['error_cycles']:>5} "
                      f"{match:>6} {hw['sim_time_s']:>10.3f}")
    print()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Run FIFO stimulus through the cycle model and/or Amaranth simulation")
    parser.add_argument("--scenario", default="random",
                        choices=sorted(SCENARIOS) + ["all"],
                        help="Named scenario (default: random)")
    parser.add_argument("--trace", default=None,
                        help="JSON trace file; overrides --scenario")
    parser.add_argument("--mode", choices=["model", "hw_sim", "both"],
                        default="both", help="Run mode (default: both)")
    parser.add_argument("--word-width", type=int, default=DEFAULT_WORD_WIDTH)
    parser.add_argument("--address-width", type=int, default=DEFAULT_ADDRESS_WIDTH)
    parser.add_argument("--unguarded", action="store_true",
                        help="Advance both pointers on every simultaneous write+read")
    parser.add_argument("--cycles", type=int, default=1000,
                        help="Cycles for the random scenario (default: 1000)")
    parser.add_argument("--seed", type=int, default=0)
    parser.add_argument("--no-save", action="store_true",
                        help="Do not write a JSON results file")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    config = FIFOConfig(word_width=args.word_width,
                        address_width=args.address_width,
                        guard_simultaneous=not args.unguarded)

    if args.trace is not None:
        runs = [(os.path.basename(args.trace), load_trace(args.trace))]
    else:
        names = sorted(SCENARIOS) if args.scenario == "all" else [args.scenario]
        runs = [(n, build_scenario(n, config, cycles=args.cycles, seed=args.seed))
                for n in names]

    print(f"Running {len(runs)} scenario(s) on a {config.capacity}-deep, "
          f"{config.word_width}-bit FIFO (mode={args.mode}, "
          f"{'guarded' if config.guard_simultaneous else 'unguarded'})")

    results = []
    failed = False
    for i, (name, trace) in enumerate(runs):
        print(f"  [{i+1}/{len(runs)}] {name} ...", end=" ", flush=True)
        try:
            result = run_scenario(name, config, trace, args.mode, args.verbose)
            results.append(result)
            if "match" in result:
                if result["match"]:
                    print("MATCH")
                else:
                    failed = True
                    first = result["mismatches"][0]
                    print(f"MISMATCH ({result['num_mismatches']} fields, first at "
                          f"cycle {first['cycle']}: {first['field']} "
                          f"expected {first['expected']} got {first['got']})")
            else:
                print("done")
        except Exception as e:
            failed = True
            print(f"ERROR: {e}")
            results.append({"scenario": name, "error": str(e)})

    print_summary_table(results, args.mode)

    if not args.no_save:
        os.makedirs(RESULTS_DIR, exist_ok=True)
        ts = time.strftime("%Y%m%d_%H%M%S")
        label = "trace" if args.trace is not None else args.scenario
        out_path = os.path.join(RESULTS_DIR, f"{label}_{args.mode}_{ts}.json")
        with open(out_path, "w") as f:
            json.dump({
                "mode": args.mode,
                "config": asdict(config),
                "num_runs": len(results),
                "results": results,
            }, f, indent=2)
        print(f"Results saved to {out_path}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
