"""
Next-State Logic for the synchronous FIFO controller.

Purely combinational: given the committed pointers, the full/empty flags
and this cycle's command code, computes the values the controller will
register on the next clock edge, plus the storage write enable.

Command code = {write_requested, read_requested}:

    0b00  no-op
    0b01  read only
    0b10  write only
    0b11  write and read in the same cycle

Any other code (only reachable with cmd_width > 2) raises error_next for
one cycle and leaves all other state unchanged.
"""

from amaranth import *


# Command encoding (bit 1 = write, bit 0 = read)
CMD_NOP = 0b00
CMD_READ = 0b01
CMD_WRITE = 0b10
CMD_READ_WRITE = 0b11
CMD_WIDTH = 2


class FIFONextState(Elaboratable):
    """
    FIFO Next-State Logic.

    Parameters
    ----------
    address_width : int
        Pointer width; capacity = 2**address_width.
    cmd_width : int
        Width of the command code input (default 2).
    guard_simultaneous : bool
        When True (default), a simultaneous write+read only performs the
        side that is legal for the current occupancy. When False, both
        pointers advance unconditionally, which overwrites unread data
        when full and fabricates a read when empty.

    Ports
    -----
    wr_ptr, rd_ptr : Signal(range(capacity)), in
        Committed pointers.
    full, empty : Signal(), in
        Committed status flags.
    cmd : Signal(cmd_width), in
        Command code for this cycle.
    wr_ptr_next, rd_ptr_next : Signal(range(capacity)), out
    full_next, empty_next, error_next : Signal(), out
    wr_en : Signal(), out
        Storage write enable for this cycle (write lands at wr_ptr).
    """

    def __init__(self, address_width, cmd_width=CMD_WIDTH, guard_simultaneous=True):
        if address_width < 0:
            raise ValueError(f"address_width must be >= 0, got {address_width}")
        if cmd_width < CMD_WIDTH:
            raise ValueError(f"cmd_width must be >= {CMD_WIDTH}, got {cmd_width}")

        self.address_width = address_width
        self.capacity = 1 << address_width
        self.cmd_width = cmd_width
        self.guard_simultaneous = guard_simultaneous

        # Current state
        self.wr_ptr = Signal(range(self.capacity))
        self.rd_ptr = Signal(range(self.capacity))
        self.full = Signal()
        self.empty = Signal()
        self.cmd = Signal(cmd_width)

        # Next state
        self.wr_ptr_next = Signal(range(self.capacity))
        self.rd_ptr_next = Signal(range(self.capacity))
        self.full_next = Signal()
        self.empty_next = Signal()
        self.error_next = Signal()
        self.wr_en = Signal()

    def elaborate(self, platform):
        m = Module()

        capacity = self.capacity

        # Incremented pointers with explicit wraparound
        wr_inc = Signal(range(capacity))
        rd_inc = Signal(range(capacity))
        m.d.comb += [
            wr_inc.eq(Mux(self.wr_ptr == capacity - 1, 0, self.wr_ptr + 1)),
            rd_inc.eq(Mux(self.rd_ptr == capacity - 1, 0, self.rd_ptr + 1)),
        ]

        # Default: carry everything forward
        m.d.comb += [
            self.wr_ptr_next.eq(self.wr_ptr),
            self.rd_ptr_next.eq(self.rd_ptr),
            self.full_next.eq(self.full),
            self.empty_next.eq(self.empty),
            self.error_next.eq(0),
            self.wr_en.eq(0),
        ]

        def advance_write():
            m.d.comb += [
                self.wr_ptr_next.eq(wr_inc),
                self.empty_next.eq(0),
                self.full_next.eq(wr_inc == self.rd_ptr),
                self.wr_en.eq(1),
            ]

        def advance_read():
            m.d.comb += [
                self.rd_ptr_next.eq(rd_inc),
                self.full_next.eq(0),
                self.empty_next.eq(rd_inc == self.wr_ptr),
            ]

        with m.Switch(self.cmd):
            with m.Case(CMD_NOP):
                pass

            with m.Case(CMD_READ):
                with m.If(~self.empty):
                    advance_read()

            with m.Case(CMD_WRITE):
                with m.If(~self.full):
                    advance_write()

            with m.Case(CMD_READ_WRITE):
                if self.guard_simultaneous:
                    with m.If(~self.empty & ~self.full):
                        # Occupancy unchanged; flags stay clear
                        m.d.comb += [
                            self.wr_ptr_next.eq(wr_inc),
                            self.rd_ptr_next.eq(rd_inc),
                            self.wr_en.eq(1),
                        ]
                    with m.Elif(self.empty & ~self.full):
                        advance_write()
                    with m.Elif(self.full & ~self.empty):
                        advance_read()
                    # empty & full: nothing proceeds
                else:
                    m.d.comb += [
                        self.wr_ptr_next.eq(wr_inc),
                        self.rd_ptr_next.eq(rd_inc),
                        self.wr_en.eq(1),
                    ]

            with m.Default():
                m.d.comb += self.error_next.eq(1)

        return m
