"""
Stimulus traces for the FIFO model and the hardware simulation.

A trace is a list of StepInput, one per clock tick. Every named scenario
starts with a reset step so model and hardware begin from the same state.
"""

import json
import random
from dataclasses import asdict

from .fifo_model import FIFOConfig, StepInput


RESET = StepInput(reset=True)
IDLE = StepInput()


def write(value):
    return StepInput(write_request=True, write_data=value)


def read():
    return StepInput(read_request=True)


def write_read(value):
    return StepInput(write_request=True, read_request=True, write_data=value)


def random_trace(cycles, seed=0, word_width=8, write_prob=0.5, read_prob=0.5,
                 reset_prob=0.0):
    """Random command mix; write data is uniform over the word range."""
    rng = random.Random(seed)
    mask = (1 << word_width) - 1
    trace = [RESET]
    for _ in range(cycles):
        trace.append(StepInput(
            reset=rng.random() < reset_prob,
            read_request=rng.random() < read_prob,
            write_request=rng.random() < write_prob,
            write_data=rng.randint(0, mask),
        ))
    return trace


def fill_drain_trace(capacity, word_width=8, overflow=1):
    """Fill to capacity, push `overflow` extra words, then drain plus one extra read."""
    mask = (1 << word_width) - 1
    values = [(i + 1) & mask for i in range(capacity + overflow)]
    trace = [RESET]
    trace += [write(v) for v in values]
    trace += [read() for _ in range(capacity + 1)]
    return trace


def wraparound_trace(capacity, word_width=8, rounds=3):
    """Keep occupancy around half full so both pointers lap the array several times."""
    mask = (1 << word_width) - 1
    half = max(1, capacity // 2)
    trace = [RESET]
    value = 1
    for _ in range(rounds):
        for _ in range(half):
            trace.append(write(value & mask))
            value += 1
        for _ in range(capacity):
            trace.append(write_read(value & mask))
            value += 1
        for _ in range(half):
            trace.append(read())
    return trace


def simultaneous_trace(capacity, word_width=8):
    """Simultaneous write+read from empty, from partially full, and from full."""
    mask = (1 << word_width) - 1
    trace = [RESET, write_read(0x11 & mask)]
    trace += [write((0x20 + i) & mask) for i in range(capacity)]
    trace += [write_read(0x33 & mask), write_read(0x44 & mask)]
    trace += [read() for _ in range(capacity + 1)]
    return trace


def reset_mid_trace(capacity, word_width=8):
    """Reset while partially full, then check the buffer behaves as fresh."""
    mask = (1 << word_width) - 1
    trace = [RESET]
    trace += [write((0x50 + i) & mask) for i in range(max(1, capacity // 2))]
    trace += [RESET, read(), IDLE]
    trace += [write((0x60 + i) & mask) for i in range(capacity)]
    trace += [read() for _ in range(capacity)]
    return trace


SCENARIOS = {
    "random": lambda cfg, cycles, seed: random_trace(
        cycles, seed=seed, word_width=cfg.word_width, reset_prob=0.02),
    "fill_drain": lambda cfg, cycles, seed: fill_drain_trace(
        cfg.capacity, cfg.word_width),
    "wraparound": lambda cfg, cycles, seed: wraparound_trace(
        cfg.capacity, cfg.word_width),
    "simultaneous": lambda cfg, cycles, seed: simultaneous_trace(
        cfg.capacity, cfg.word_width),
    "reset_mid": lambda cfg, cycles, seed: reset_mid_trace(
        cfg.capacity, cfg.word_width),
}


def build_scenario(name, config: FIFOConfig, cycles=1000, seed=0):
    """Build a named scenario trace for the given configuration."""
    if name not in SCENARIOS:
        raise ValueError(
            f"Unknown scenario '{name}' (expected one of {', '.join(sorted(SCENARIOS))})")
    return SCENARIOS[name](config, cycles, seed)


def save_trace(trace, path):
    with open(path, "w") as f:
        json.dump([asdict(inp) for inp in trace], f, indent=1)


def load_trace(path):
    """Load a JSON trace: a list of objects with StepInput field names."""
    with open(path) as f:
        raw = json.load(f)
    return [StepInput(**entry) for entry in raw]
