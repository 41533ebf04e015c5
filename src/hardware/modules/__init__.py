"""Control modules for the synchronous FIFO controller."""

from .fifo_next_state import (
    FIFONextState, CMD_NOP, CMD_READ, CMD_WRITE, CMD_READ_WRITE, CMD_WIDTH,
)
from .sync_fifo import SyncFIFO
