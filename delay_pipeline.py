# Delay Pipeline
# Fixed-lag FIFO used for orders travelling upstream and goods travelling downstream.

from collections import deque

from config import ConfigurationError


class DelayPipeline:
    def __init__(self, delay):
        """
        FIFO of fixed length 'delay'. It starts pre-filled with zeros, so
        whatever is pushed in a turn pops out exactly 'delay' turns later.
        """
        if delay < 1:
            raise ConfigurationError(f"Pipeline delay must be at least 1, got {delay}")
        self.delay = delay
        self.queue = deque([0] * delay)

    def pop_arrival(self):
        """
        Remove and return the oldest entry. Call once at the start of a turn.
        """
        if self.queue:
            return self.queue.popleft()
        return 0

    def push_departure(self, quantity):
        """
        Append a new entry at the tail. Call once at the end of a turn, after pop_arrival.
        """
        self.queue.append(max(0, quantity))
        assert len(self.queue) <= self.delay, "push_departure called without a matching pop_arrival"

    def __len__(self):
        return len(self.queue)

    def contents(self):
        """Entries oldest first; the first one arrives next turn."""
        return list(self.queue)

    def total_in_transit(self):
        return sum(self.queue)
