"""Python-side bench for the synchronous FIFO: cycle model, stimulus, simulation runner."""
