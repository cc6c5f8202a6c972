# profiler.py

import functools
import time

from config import global_config
from logger import get_logger

log = get_logger(__name__)

# Accumulates total time spent in named segments
_profile_accumulators = {}  # label -> [total_time, count]

class Profiler:
    @staticmethod
    def timed(name=""):
        """Accumulate wall time and call count of the wrapped function under
        `f:<name>` (defaults to the function name). Accounting is skipped while
        `global_config.profiling_enabled` is off."""
        def wrapper(fn):
            label = "f:" + (name or fn.__name__)

            @functools.wraps(fn)
            def inner(*args, **kwargs):
                if not global_config.profiling_enabled.val:
                    return fn(*args, **kwargs)
                start = time.perf_counter()
                result = fn(*args, **kwargs)
                elapsed = time.perf_counter() - start
                if label not in _profile_accumulators:
                    _profile_accumulators[label] = [0.0, 0]
                _profile_accumulators[label][0] += elapsed
                _profile_accumulators[label][1] += 1
                return result
            return inner
        return wrapper

    @staticmethod
    def stats(label: str) -> tuple[float, int]:
        """(total seconds, call count) recorded for `label` so far."""
        total, count = _profile_accumulators.get(label, (0.0, 0))
        return total, count

    @staticmethod
    def report() -> list[str]:
        """Log one line per label, return the lines, then clear everything."""
        grand_total = sum(total for total, _ in _profile_accumulators.values())
        lines = []
        for label, (total, count) in sorted(_profile_accumulators.items()):
            if count == 0:
                continue
            percent = (total / grand_total) * 100 if grand_total > 0 else 0
            if percent >= 100:
                percent_str = "100%"
            elif percent >= 10:
                percent_str = f"{percent:4.1f}%"
            else:
                percent_str = f"{percent:4.2f}%"
            avg_ms = total / count * 1000
            lines.append(f"{percent_str} - {label}: {total * 1000:.3f}ms total over {count} calls (avg {avg_ms:.3f}ms)")

        for line in lines:
            log.info(line)
        _profile_accumulators.clear()
        return lines

    @staticmethod
    def reset() -> None:
        _profile_accumulators.clear()
