"""Testing fakes – in-memory doubles for engine ports."""
from snapreg.testing.fakes.clock import FakeClock
from snapreg.testing.fakes.observer import RecordingObserver
from snapreg.kernel.time import FrozenClock

__all__ = ["FakeClock", "FrozenClock", "RecordingObserver"]
