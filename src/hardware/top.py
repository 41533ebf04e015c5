"""
Synchronous FIFO Top-Level netlist export.

Elaborates a SyncFIFO with the requested geometry and writes it out as
RTLIL (always available) or Verilog (needs the amaranth-yosys backend).

    rst ──────────┐
    write_request ┤
    write_data ───┼──► SyncFIFO ──► read_data / empty / full / error
    read_request ─┘

Usage:
  python top.py --word-width 9 --address-width 2 -o sync_fifo.il
  python top.py --format verilog -o sync_fifo.v
"""

import argparse
import sys

from amaranth.back import rtlil

from memory.fifo_storage import DEFAULT_WORD_WIDTH, DEFAULT_ADDRESS_WIDTH
from modules.sync_fifo import SyncFIFO


def export(word_width=DEFAULT_WORD_WIDTH, address_width=DEFAULT_ADDRESS_WIDTH,
           guard_simultaneous=True, fmt="rtlil", name="sync_fifo"):
    """Return the netlist text for one SyncFIFO configuration."""
    dut = SyncFIFO(word_width=word_width, address_width=address_width,
                   guard_simultaneous=guard_simultaneous)

    if fmt == "rtlil":
        return rtlil.convert(dut, name=name, ports=dut.ports())
    if fmt == "verilog":
        from amaranth.back import verilog
        return verilog.convert(dut, name=name, ports=dut.ports())
    raise ValueError(f"Unknown netlist format '{fmt}' (expected rtlil or verilog)")


def main():
    parser = argparse.ArgumentParser(
        description="Export the synchronous FIFO controller netlist")
    parser.add_argument("--word-width", type=int, default=DEFAULT_WORD_WIDTH,
                        help=f"Data word width in bits (default: {DEFAULT_WORD_WIDTH})")
    parser.add_argument("--address-width", type=int, default=DEFAULT_ADDRESS_WIDTH,
                        help=f"Address width; capacity = 2**N (default: {DEFAULT_ADDRESS_WIDTH})")
    parser.add_argument("--unguarded", action="store_true",
                        help="Advance both pointers on every simultaneous write+read")
    parser.add_argument("--format", choices=["rtlil", "verilog"], default="rtlil")
    parser.add_argument("--name", default="sync_fifo")
    parser.add_argument("-o", "--output", default=None,
                        help="Output file (default: stdout)")
    args = parser.parse_args()

    text = export(args.word_width, args.address_width,
                  guard_simultaneous=not args.unguarded,
                  fmt=args.format, name=args.name)

    if args.output is None:
        sys.stdout.write(text)
    else:
        with open(args.output, "w") as f:
            f.write(text)
        print(f"Wrote {args.format} netlist to {args.output}")


if __name__ == "__main__":
    main()
