"""
FIFO Storage Module for the synchronous FIFO controller.

Register-file backing store: 2**address_width words of word_width bits.
Reads are combinational so the head word is visible in the same cycle;
writes are committed on the clock edge. Every slot is a plain register,
so a domain reset clears the whole array to zero.
"""

from amaranth import *


# Default configuration
DEFAULT_WORD_WIDTH = 8
DEFAULT_ADDRESS_WIDTH = 4


class FIFOStorage(Elaboratable):
    """
    FIFO Storage.

    Parameters
    ----------
    word_width : int
        Bits per stored word (default 8).
    address_width : int
        Address bits; the array holds 2**address_width words (default 4).

    Ports
    -----
    rd_addr : Signal(range(depth)), in
        Slot to present on rd_data.
    rd_data : Signal(word_width), out
        Word stored at rd_addr (combinational).
    wr_addr : Signal(range(depth)), in
        Slot to write.
    wr_data : Signal(word_width), in
        Word to write.
    wr_en : Signal(), in
        Write enable; the write lands on the next clock edge.
    """

    def __init__(self, word_width=DEFAULT_WORD_WIDTH, address_width=DEFAULT_ADDRESS_WIDTH):
        if word_width < 1:
            raise ValueError(f"word_width must be >= 1, got {word_width}")
        if address_width < 0:
            raise ValueError(f"address_width must be >= 0, got {address_width}")

        self.word_width = word_width
        self.address_width = address_width
        self.depth = 1 << address_width

        # Read port (to the FIFO output)
        self.rd_addr = Signal(range(self.depth))
        self.rd_data = Signal(word_width)

        # Write port (from the FIFO input)
        self.wr_addr = Signal(range(self.depth))
        self.wr_data = Signal(word_width)
        self.wr_en = Signal()

        self.slots = [Signal(word_width, name=f"slot{i}") for i in range(self.depth)]

    def elaborate(self, platform):
        m = Module()

        slots = Array(self.slots)

        # Read port - combinational
        m.d.comb += self.rd_data.eq(slots[self.rd_addr])

        # Write port - synchronous
        with m.If(self.wr_en):
            m.d.sync += slots[self.wr_addr].eq(self.wr_data)

        return m
