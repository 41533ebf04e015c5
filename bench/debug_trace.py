"""Debug a single FIFO scenario with VCD trace output."""

import sys, os

from .fifo_model import FIFOConfig, FIFOModel
from .fifo_sim import FIFOSimulator, compare_outputs
from .stimulus import build_scenario, load_trace


def debug_trace(trace, config=None, vcd_path="sync_fifo.vcd"):
    """Run one trace through the hardware with VCD tracing and diff against the model."""
    config = config or FIFOConfig()
    print(f"Simulating {len(trace)} cycles on a {config.capacity}-deep, "
          f"{config.word_width}-bit FIFO")

    sim = FIFOSimulator(config, vcd_path=vcd_path, verbose=True)
    print(f"Writing VCD to: {vcd_path}")
    try:
        hw_out, counters = sim.run(trace)
    except RuntimeError as e:
        print(f"ERROR: {e}")
        print(f"VCD written up to the point of failure, open {vcd_path} to inspect.")
        return None

    mismatches = compare_outputs(FIFOModel(config).run(trace), hw_out)
    for mm in mismatches:
        print(f"  cycle {mm['cycle']}: {mm['field']} expected {mm['expected']} "
              f"got {mm['got']}")
    print(f"Result: {'MATCH' if not mismatches else 'MISMATCH'} "
          f"({counters.total_cycles} cycles, {counters.reset_cycles} in reset)")
    return mismatches


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: python -m bench.debug_trace <scenario name | trace.json> [output.vcd]")
        sys.exit(1)
    source = sys.argv[1]
    vcd = sys.argv[2] if len(sys.argv) > 2 else None

    cfg = FIFOConfig()
    if source.endswith(".json"):
        trace = load_trace(source)
    else:
        trace = build_scenario(source, cfg, cycles=200)
    if vcd is None:
        vcd = os.path.splitext(os.path.basename(source))[0] + ".vcd"
    debug_trace(trace, cfg, vcd)
