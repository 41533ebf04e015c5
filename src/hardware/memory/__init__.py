"""Memory subsystem modules for the synchronous FIFO controller."""

from .fifo_storage import FIFOStorage, DEFAULT_WORD_WIDTH, DEFAULT_ADDRESS_WIDTH
