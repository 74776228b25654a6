# profiler.py
#
# Wall clock totals per named section of the frame. Sections are opened and closed
# by name, functions decorated with Profiler.timed() are recorded under "f:<name>".

import functools
import logging
import time

logger = logging.getLogger(__name__)

# name -> [total seconds, finished calls, start of the open call or None]
_profile_accumulators = {}

enabled_profiler = True


def _add_sample(name: str, elapsed: float):
    slot = _profile_accumulators.setdefault(name, [0.0, 0, None])
    slot[0] += elapsed
    slot[1] += 1


class Profiler:
    @staticmethod
    def profile_accumulate_start(name: str):
        if not enabled_profiler:
            return
        _profile_accumulators.setdefault(name, [0.0, 0, None])[2] = time.perf_counter()

    @staticmethod
    def profile_accumulate_end(name: str):
        if not enabled_profiler:
            return
        slot = _profile_accumulators.get(name)
        if slot is None or slot[2] is None:
            return  # end without a start
        _add_sample(name, time.perf_counter() - slot[2])
        slot[2] = None

    @staticmethod
    def profile_accumulate_report(intervals=1) -> dict:
        """
        Logs the accumulated timings and clears them.

        Returns:
            dict: name -> (total_ms, calls) averaged over `intervals` frames.
        """
        report = {}
        if not enabled_profiler:
            return report
        grand_total = sum(slot[0] for slot in _profile_accumulators.values())

        logger.info("==== Profile report (%d frames) ====", intervals)
        # Frame sections first, then the timed functions, each alphabetical
        for name in sorted(_profile_accumulators, key=lambda n: (n.startswith("f:"), n)):
            total, count, _ = _profile_accumulators[name]
            if count == 0:
                continue
            share = 100.0 * total / grand_total if grand_total > 0 else 0.0
            report[name] = (total * 1000 / intervals, count / intervals)
            logger.info("%5.1f%% %s: %.3fms over %.1f calls (avg %.4fms)",
                        share, name, *report[name], total * 1000 / count)

        _profile_accumulators.clear()
        return report

    @staticmethod
    def reset():
        _profile_accumulators.clear()

    @staticmethod
    def timed(name=""):
        """Records every call of the decorated function, including calls that raise."""
        def wrapper(fn):
            label = "f:" + (name or fn.__name__)

            @functools.wraps(fn)
            def inner(*args, **kwargs):
                if not enabled_profiler:
                    return fn(*args, **kwargs)
                start = time.perf_counter()
                try:
                    return fn(*args, **kwargs)
                finally:
                    _add_sample(label, time.perf_counter() - start)
            return inner
        return wrapper
