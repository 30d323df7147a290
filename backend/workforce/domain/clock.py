from typing import Callable
import time

# Zero-argument provider of the current time in epoch milliseconds.
Clock = Callable[[], int]


def epoch_millis() -> int:
    return int(time.time() * 1000)
