"""
Hardware FIFO simulation bridge: drives SyncFIFO with a stimulus trace.

Each StepInput becomes one clock cycle in an Amaranth testbench. Inputs are
applied, read_data is sampled before the edge (it is combinational from the
committed read pointer), then the flags are sampled after the edge. That
produces the same StepOutput stream as bench.fifo_model.FIFOModel.
"""

import sys
import os
from dataclasses import dataclass, asdict

# Add hardware source to path
_hw_dir = os.path.join(os.path.dirname(__file__), "..", "src", "hardware")
if _hw_dir not in sys.path:
    sys.path.insert(0, _hw_dir)

from amaranth import *
from amaranth.sim import Simulator

from modules.sync_fifo import SyncFIFO

from .fifo_model import FIFOConfig, StepOutput


@dataclass
class SimCounters:
    total_cycles: int = 0   # sync clock ticks driven
    reset_cycles: int = 0   # ticks with rst asserted
    full_cycles: int = 0    # ticks ending with full asserted
    empty_cycles: int = 0   # ticks ending with empty asserted
    error_cycles: int = 0


class FIFOSimulator:
    """Run a stimulus trace through SyncFIFO in Amaranth simulation."""

    def __init__(self, config: FIFOConfig = None, vcd_path=None, verbose=False):
        self.config = config or FIFOConfig()
        self.vcd_path = vcd_path
        self.verbose = verbose
        self.counters = SimCounters()

    def build(self):
        cfg = self.config
        return SyncFIFO(word_width=cfg.word_width, address_width=cfg.address_width,
                        guard_simultaneous=cfg.guard_simultaneous)

    def run(self, trace):
        """Simulate the whole trace. Returns (outputs, counters) for this run only."""
        trace = list(trace)
        self.counters = SimCounters()
        dut = self.build()
        outputs = []

        sim = Simulator(dut)
        sim.add_clock(1e-8)  # 100 MHz

        async def testbench(ctx):
            for cycle, inp in enumerate(trace):
                ctx.set(dut.rst, int(inp.reset))
                ctx.set(dut.read_request, int(inp.read_request))
                ctx.set(dut.write_request, int(inp.write_request))
                ctx.set(dut.write_data, inp.write_data & self.config.data_mask)

                read_data = ctx.get(dut.read_data)
                await ctx.tick()

                out = StepOutput(
                    read_data=read_data,
                    empty=bool(ctx.get(dut.empty)),
                    full=bool(ctx.get(dut.full)),
                    error=bool(ctx.get(dut.error)),
                )
                outputs.append(out)
                self._count(inp, out)

                if self.verbose:
                    print(f"  [{cycle:5d}] rst={int(inp.reset)} "
                          f"wr={int(inp.write_request)} rd={int(inp.read_request)} "
                          f"wdata=0x{inp.write_data:x} -> rdata=0x{out.read_data:x} "
                          f"empty={int(out.empty)} full={int(out.full)} "
                          f"err={int(out.error)}")

            ctx.set(dut.rst, 0)

        sim.add_testbench(testbench)

        if self.vcd_path is not None:
            with sim.write_vcd(self.vcd_path):
                sim.run()
        else:
            sim.run()

        if len(outputs) != len(trace):
            raise RuntimeError(
                f"Simulation produced {len(outputs)} outputs for {len(trace)} cycles")

        return outputs, self.counters

    def _count(self, inp, out):
        c = self.counters
        c.total_cycles += 1
        c.reset_cycles += int(inp.reset)
        c.full_cycles += int(out.full)
        c.empty_cycles += int(out.empty)
        c.error_cycles += int(out.error)


def compare_outputs(expected, actual):
    """Cycle-by-cycle diff of two StepOutput streams. Returns a list of mismatches."""
    mismatches = []
    if len(expected) != len(actual):
        mismatches.append({
            "cycle": min(len(expected), len(actual)),
            "field": "length",
            "expected": len(expected),
            "got": len(actual),
        })
    for cycle, (exp, got) in enumerate(zip(expected, actual)):
        exp_d, got_d = asdict(exp), asdict(got)
        for name, value in exp_d.items():
            if got_d[name] != value:
                mismatches.append({
                    "cycle": cycle,
                    "field": name,
                    "expected": value,
                    "got": got_d[name],
                })
    return mismatches
