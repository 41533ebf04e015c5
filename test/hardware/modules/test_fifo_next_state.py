"""
Testbench for the FIFO Next-State Logic (combinational).

Verifies, with capacity 4:
  1. No-op carries the state forward unchanged.
  2. Read only: advances rd_ptr, clears full, sets empty on catch-up.
  3. Read from empty is ignored without error.
  4. Write only: advances wr_ptr, asserts wr_en, sets full on wrap.
  5. Write to full is ignored without error.
  6. Simultaneous write+read, all four occupancy cases (guarded).
  7. Simultaneous write+read with the unguarded policy advances both
     pointers regardless of occupancy.
  8. Command codes outside 0..3 (cmd_width=3) raise error only.
"""

import sys, os

# Add src/ to the path so we can import the module
sys.path.insert(
    0,
    os.path.join(os.path.dirname(__file__), "..", "..", "..", "src", "hardware"),
)

import pytest
from amaranth import *
from amaranth.sim import Simulator

from modules.fifo_next_state import (
    FIFONextState, CMD_NOP, CMD_READ, CMD_WRITE, CMD_READ_WRITE,
)


ADDRESS_WIDTH = 2


def apply(ctx, dut, wr_ptr, rd_ptr, full, empty, cmd):
    ctx.set(dut.wr_ptr, wr_ptr)
    ctx.set(dut.rd_ptr, rd_ptr)
    ctx.set(dut.full, full)
    ctx.set(dut.empty, empty)
    ctx.set(dut.cmd, cmd)
    return (
        ctx.get(dut.wr_ptr_next),
        ctx.get(dut.rd_ptr_next),
        ctx.get(dut.full_next),
        ctx.get(dut.empty_next),
        ctx.get(dut.error_next),
        ctx.get(dut.wr_en),
    )


def test_fifo_next_state():
    dut = FIFONextState(address_width=ADDRESS_WIDTH)
    sim = Simulator(dut)

    async def testbench(ctx):
        # Result tuple: (wr_ptr', rd_ptr', full', empty', error', wr_en)

        # ---- Test 1: No-op ----
        for state in [(0, 0, 0, 1), (2, 1, 0, 0), (3, 3, 1, 0)]:
            got = apply(ctx, dut, *state, CMD_NOP)
            assert got == (*state, 0, 0), f"Test 1 FAIL: {state} -> {got}"
        print("Test 1 PASSED: No-op carries state forward.")

        # ---- Test 2: Read only ----
        got = apply(ctx, dut, 2, 0, 0, 0, CMD_READ)
        assert got == (2, 1, 0, 0, 0, 0), f"Test 2 FAIL: partial read -> {got}"
        got = apply(ctx, dut, 2, 1, 0, 0, CMD_READ)
        assert got == (2, 2, 0, 1, 0, 0), f"Test 2 FAIL: last read -> {got}"
        got = apply(ctx, dut, 1, 1, 1, 0, CMD_READ)
        assert got == (1, 2, 0, 0, 0, 0), f"Test 2 FAIL: read from full -> {got}"
        got = apply(ctx, dut, 1, 3, 0, 0, CMD_READ)
        assert got == (1, 0, 0, 0, 0, 0), f"Test 2 FAIL: rd_ptr wrap -> {got}"
        print("Test 2 PASSED: Read only advances rd_ptr.")

        # ---- Test 3: Read from empty ----
        got = apply(ctx, dut, 2, 2, 0, 1, CMD_READ)
        assert got == (2, 2, 0, 1, 0, 0), f"Test 3 FAIL: {got}"
        print("Test 3 PASSED: Read from empty ignored.")

        # ---- Test 4: Write only ----
        got = apply(ctx, dut, 0, 0, 0, 1, CMD_WRITE)
        assert got == (1, 0, 0, 0, 0, 1), f"Test 4 FAIL: first write -> {got}"
        got = apply(ctx, dut, 3, 0, 0, 0, CMD_WRITE)
        assert got == (0, 0, 1, 0, 0, 1), f"Test 4 FAIL: filling write -> {got}"
        print("Test 4 PASSED: Write only advances wr_ptr and asserts wr_en.")

        # ---- Test 5: Write to full ----
        got = apply(ctx, dut, 1, 1, 1, 0, CMD_WRITE)
        assert got == (1, 1, 1, 0, 0, 0), f"Test 5 FAIL: {got}"
        print("Test 5 PASSED: Write to full ignored.")

        # ---- Test 6: Simultaneous write+read (guarded) ----
        got = apply(ctx, dut, 2, 0, 0, 0, CMD_READ_WRITE)
        assert got == (3, 1, 0, 0, 0, 1), f"Test 6 FAIL: partial -> {got}"
        got = apply(ctx, dut, 1, 1, 0, 1, CMD_READ_WRITE)
        assert got == (2, 1, 0, 0, 0, 1), f"Test 6 FAIL: empty -> {got}"
        got = apply(ctx, dut, 1, 1, 1, 0, CMD_READ_WRITE)
        assert got == (1, 2, 0, 0, 0, 0), f"Test 6 FAIL: full -> {got}"
        got = apply(ctx, dut, 1, 1, 1, 1, CMD_READ_WRITE)
        assert got == (1, 1, 1, 1, 0, 0), f"Test 6 FAIL: empty&full -> {got}"
        print("Test 6 PASSED: Simultaneous write+read split on occupancy.")

    sim.add_testbench(testbench)
    sim.run()


def test_fifo_next_state_unguarded():
    dut = FIFONextState(address_width=ADDRESS_WIDTH, guard_simultaneous=False)
    sim = Simulator(dut)

    async def testbench(ctx):
        # ---- Test 7: Both pointers advance whatever the occupancy ----
        got = apply(ctx, dut, 1, 1, 0, 1, CMD_READ_WRITE)
        assert got == (2, 2, 0, 1, 0, 1), f"Test 7 FAIL: empty -> {got}"
        # Full: the write lands on the unread head slot
        got = apply(ctx, dut, 1, 1, 1, 0, CMD_READ_WRITE)
        assert got == (2, 2, 1, 0, 0, 1), f"Test 7 FAIL: full -> {got}"
        got = apply(ctx, dut, 2, 0, 0, 0, CMD_READ_WRITE)
        assert got == (3, 1, 0, 0, 0, 1), f"Test 7 FAIL: partial -> {got}"

        # Single-sided commands are unaffected by the policy
        got = apply(ctx, dut, 1, 1, 1, 0, CMD_WRITE)
        assert got == (1, 1, 1, 0, 0, 0), f"Test 7 FAIL: write to full -> {got}"
        print("Test 7 PASSED: Unguarded simultaneous write+read.")

    sim.add_testbench(testbench)
    sim.run()


def test_fifo_next_state_invalid_command():
    dut = FIFONextState(address_width=ADDRESS_WIDTH, cmd_width=3)
    sim = Simulator(dut)

    async def testbench(ctx):
        # ---- Test 8: Codes 4..7 raise error and change nothing ----
        for cmd in range(4, 8):
            got = apply(ctx, dut, 2, 1, 0, 0, cmd)
            assert got == (2, 1, 0, 0, 1, 0), f"Test 8 FAIL: cmd {cmd} -> {got}"
        got = apply(ctx, dut, 2, 1, 0, 0, CMD_WRITE)
        assert got == (3, 1, 0, 0, 0, 1), f"Test 8 FAIL: valid cmd after error -> {got}"
        print("Test 8 PASSED: Invalid command codes raise error only.")

    sim.add_testbench(testbench)
    sim.run()


def test_fifo_next_state_rejects_narrow_command():
    with pytest.raises(ValueError):
        FIFONextState(address_width=2, cmd_width=1)
    with pytest.raises(ValueError):
        FIFONextState(address_width=-1)


if __name__ == "__main__":
    test_fifo_next_state()
    test_fifo_next_state_unguarded()
    test_fifo_next_state_invalid_command()
