"""
Python cycle model of the synchronous FIFO controller.

Mirrors src/hardware/modules/sync_fifo.py one tick at a time, and is the
reference the Amaranth simulation is checked against. Each step computes
the next pointer/status state from a frozen snapshot of the current one
(next_state), then commits the new state and the storage write together.

Step contract (same as the hardware, sampled around one clock edge):
  - read_data is the word at the committed read pointer while the command
    is applied, i.e. the word an accepted read consumes this cycle;
  - empty / full / error are the flags after the commit;
  - a reset step reports the cleared state with read_data = 0.
"""

from dataclasses import dataclass, replace

# Command encoding (must match modules/fifo_next_state.py)
CMD_NOP = 0b00
CMD_READ = 0b01
CMD_WRITE = 0b10
CMD_READ_WRITE = 0b11

DEFAULT_WORD_WIDTH = 8
DEFAULT_ADDRESS_WIDTH = 4


def encode_command(write_request: bool, read_request: bool) -> int:
    """Pack the two request bits into a command code (write is bit 1)."""
    return (int(bool(write_request)) << 1) | int(bool(read_request))


@dataclass(frozen=True)
class FIFOConfig:
    word_width: int = DEFAULT_WORD_WIDTH
    address_width: int = DEFAULT_ADDRESS_WIDTH
    guard_simultaneous: bool = True

    def __post_init__(self):
        if self.word_width < 1:
            raise ValueError(f"word_width must be >= 1, got {self.word_width}")
        if self.address_width < 0:
            raise ValueError(f"address_width must be >= 0, got {self.address_width}")

    @property
    def capacity(self) -> int:
        return 1 << self.address_width

    @property
    def data_mask(self) -> int:
        return (1 << self.word_width) - 1


@dataclass(frozen=True)
class PointerState:
    """Committed pointer and status registers."""
    write_ptr: int = 0
    read_ptr: int = 0
    full: bool = False
    empty: bool = True
    error: bool = False


@dataclass(frozen=True)
class Transition:
    state: PointerState
    write_enable: bool = False
    read_enable: bool = False   # read side advanced this tick


@dataclass(frozen=True)
class StepInput:
    reset: bool = False
    read_request: bool = False
    write_request: bool = False
    write_data: int = 0

    def __post_init__(self):
        if self.write_data < 0:
            raise ValueError(f"write_data must be unsigned, got {self.write_data}")


@dataclass(frozen=True)
class StepOutput:
    read_data: int
    empty: bool
    full: bool
    error: bool


@dataclass
class ModelCounters:
    cycles: int = 0            # steps taken, reset steps included
    resets: int = 0
    writes_accepted: int = 0
    writes_dropped: int = 0    # write requested while full
    reads_accepted: int = 0
    reads_ignored: int = 0     # read requested while empty
    error_cycles: int = 0
    max_occupancy: int = 0


def next_state(state: PointerState, cmd: int, capacity: int,
               guard_simultaneous: bool = True) -> Transition:
    """
    Compute the state registered on the next tick.

    Pure function of the committed state and the command code. Codes
    outside 0..3 latch error for one cycle and change nothing else.
    """
    def wrap(ptr):
        return (ptr + 1) % capacity

    # Default: carry state forward, clear the one-cycle error
    carried = replace(state, error=False)

    def advance_write(s):
        wr = wrap(s.write_ptr)
        return replace(s, write_ptr=wr, empty=False, full=(wr == s.read_ptr))

    def advance_read(s):
        rd = wrap(s.read_ptr)
        return replace(s, read_ptr=rd, full=False, empty=(rd == s.write_ptr))

    if cmd == CMD_NOP:
        return Transition(carried)

    if cmd == CMD_READ:
        if state.empty:
            return Transition(carried)
        return Transition(advance_read(carried), read_enable=True)

    if cmd == CMD_WRITE:
        if state.full:
            return Transition(carried)
        return Transition(advance_write(carried), write_enable=True)

    if cmd == CMD_READ_WRITE:
        both = Transition(
            replace(carried, write_ptr=wrap(state.write_ptr),
                    read_ptr=wrap(state.read_ptr)),
            write_enable=True,
            read_enable=True,
        )
        if not guard_simultaneous:
            # Both sides advance whatever the occupancy; flags are left as-is
            return both
        if not state.empty and not state.full:
            return both
        if state.empty and not state.full:
            return Transition(advance_write(carried), write_enable=True)
        if state.full and not state.empty:
            return Transition(advance_read(carried), read_enable=True)
        return Transition(carried)

    return Transition(replace(state, error=True))


class FIFOModel:
    """Cycle model of SyncFIFO. One call to step() is one clock tick."""

    def __init__(self, config: FIFOConfig = None):
        self.config = config or FIFOConfig()
        self.counters = ModelCounters()
        self.state = PointerState()
        self.slots = [0] * self.config.capacity

    def reset(self):
        """Asynchronous reset: empty buffer, zeroed storage."""
        self.state = PointerState()
        self.slots = [0] * self.config.capacity

    @property
    def read_data(self) -> int:
        return self.slots[self.state.read_ptr]

    @property
    def occupancy(self) -> int:
        s = self.state
        if s.full:
            return self.config.capacity
        return (s.write_ptr - s.read_ptr) % self.config.capacity

    def status(self) -> StepOutput:
        """Outputs visible between ticks."""
        return StepOutput(
            read_data=self.read_data,
            empty=self.state.empty,
            full=self.state.full,
            error=self.state.error,
        )

    def snapshot(self) -> dict:
        """Committed state as a plain dict (pointers, flags, occupancy, slots)."""
        s = self.state
        return {
            "write_ptr": s.write_ptr,
            "read_ptr": s.read_ptr,
            "full": s.full,
            "empty": s.empty,
            "error": s.error,
            "occupancy": self.occupancy,
            "slots": list(self.slots),
        }

    def step(self, inp: StepInput) -> StepOutput:
        c = self.counters
        c.cycles += 1

        if inp.reset:
            c.resets += 1
            self.reset()
            return self.status()

        read_data = self.read_data
        cmd = encode_command(inp.write_request, inp.read_request)
        before = self.state
        t = next_state(before, cmd, self.config.capacity,
                       self.config.guard_simultaneous)

        # Commit: storage write at the pre-tick write pointer, then state
        if t.write_enable:
            self.slots[before.write_ptr] = inp.write_data & self.config.data_mask
        self.state = t.state

        self._count(inp, t)
        return StepOutput(
            read_data=read_data,
            empty=self.state.empty,
            full=self.state.full,
            error=self.state.error,
        )

    def run(self, trace) -> list:
        """Step through a whole trace. Returns the list of StepOutputs."""
        return [self.step(inp) for inp in trace]

    def _count(self, inp, t):
        c = self.counters
        if inp.write_request:
            if t.write_enable:
                c.writes_accepted += 1
            else:
                c.writes_dropped += 1
        if inp.read_request:
            if t.read_enable:
                c.reads_accepted += 1
            else:
                c.reads_ignored += 1
        if t.state.error:
            c.error_cycles += 1
        occ = self.occupancy
        c.max_occupancy = max(c.max_occupancy, occ)
