"""
Synchronous FIFO Controller.

Circular buffer of fixed-width words with explicit full/empty flags and a
one-cycle error indicator. Wires the FIFO Storage register file to the
Next-State Logic and registers the result on each clock edge.

All state lives in a local "fifo" clock domain that is clocked by "sync"
and reset asynchronously by `rst` (or the "sync" domain reset). Reset
clears pointers, flags and every storage slot without waiting for a tick.

    write_data ──► FIFOStorage[wr_ptr]          FIFOStorage[rd_ptr] ──► read_data
                        ▲ wr_en                         ▲
    write_request ─┐    │                               │
                   ├─► FIFONextState ──► wr_ptr / rd_ptr / full / empty / error
    read_request ──┘         ▲                  │
                             └──────────────────┘  (registered, "fifo" domain)
"""

from amaranth import *

from memory.fifo_storage import FIFOStorage, DEFAULT_WORD_WIDTH, DEFAULT_ADDRESS_WIDTH
from modules.fifo_next_state import FIFONextState


class SyncFIFO(Elaboratable):
    """
    Synchronous FIFO.

    Parameters
    ----------
    word_width : int
        Bits per data word (default 8).
    address_width : int
        Capacity is 2**address_width words (default 4).
    guard_simultaneous : bool
        Simultaneous write+read policy, see FIFONextState (default True).

    Ports
    -----
    rst : Signal(), in
        Asynchronous reset; takes priority over any command.
    write_request : Signal(), in
        Push write_data on the next clock edge (ignored when full).
    write_data : Signal(word_width), in
        Word to push.
    read_request : Signal(), in
        Pop the head word on the next clock edge (ignored when empty).
    read_data : Signal(word_width), out
        Head word, combinational from the committed read pointer.
    empty : Signal(), out
        No words queued.
    full : Signal(), out
        capacity words queued.
    error : Signal(), out
        Invalid command seen on the previous cycle.
    """

    def __init__(self, word_width=DEFAULT_WORD_WIDTH, address_width=DEFAULT_ADDRESS_WIDTH,
                 guard_simultaneous=True):
        self.word_width = word_width
        self.address_width = address_width
        self.capacity = 1 << address_width
        self.guard_simultaneous = guard_simultaneous

        self.storage = FIFOStorage(word_width=word_width, address_width=address_width)
        self.next_state = FIFONextState(address_width=address_width,
                                        guard_simultaneous=guard_simultaneous)

        # Control
        self.rst = Signal()

        # Producer side
        self.write_request = Signal()
        self.write_data = Signal(word_width)

        # Consumer side
        self.read_request = Signal()
        self.read_data = Signal(word_width)

        # Status (registered)
        self.empty = Signal(init=1)
        self.full = Signal()
        self.error = Signal()

        # Pointers (registered)
        self.wr_ptr = Signal(range(self.capacity))
        self.rd_ptr = Signal(range(self.capacity))

    def ports(self):
        return [
            self.rst,
            self.write_request, self.write_data,
            self.read_request, self.read_data,
            self.empty, self.full, self.error,
        ]

    def elaborate(self, platform):
        m = Module()

        # Local domain: same clock as sync, asynchronous reset
        m.domains += ClockDomain("fifo", async_reset=True, local=True)
        m.d.comb += [
            ClockSignal("fifo").eq(ClockSignal("sync")),
            ResetSignal("fifo").eq(self.rst | ResetSignal("sync")),
        ]

        storage = self.storage
        ns = self.next_state

        m.submodules.storage = DomainRenamer("fifo")(storage)
        m.submodules.next_state = ns

        # ── Next-state inputs: frozen committed state + command ──────────
        m.d.comb += [
            ns.wr_ptr.eq(self.wr_ptr),
            ns.rd_ptr.eq(self.rd_ptr),
            ns.full.eq(self.full),
            ns.empty.eq(self.empty),
            ns.cmd.eq(Cat(self.read_request, self.write_request)),
        ]

        # ── Storage: write at pre-tick wr_ptr, read at committed rd_ptr ──
        m.d.comb += [
            storage.wr_addr.eq(self.wr_ptr),
            storage.wr_data.eq(self.write_data),
            storage.wr_en.eq(ns.wr_en),
            storage.rd_addr.eq(self.rd_ptr),
            self.read_data.eq(storage.rd_data),
        ]

        # ── Commit ───────────────────────────────────────────────────────
        m.d.fifo += [
            self.wr_ptr.eq(ns.wr_ptr_next),
            self.rd_ptr.eq(ns.rd_ptr_next),
            self.full.eq(ns.full_next),
            self.empty.eq(ns.empty_next),
            self.error.eq(ns.error_next),
        ]

        return m
