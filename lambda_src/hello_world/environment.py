# environment.py
import threading
import time
import uuid
from dataclasses import dataclass, field


@dataclass
class ExecutionEnvironment:
    """State that lives as long as one execution environment (warm container).

    Built once per cold start and shared by every invocation the environment
    serves. If the environment is reclaimed and recreated, the id changes and
    the counter starts over.
    """

    environment_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: float = field(default_factory=time.time)
    invocation_count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_invocation(self) -> int:
        """Count one invocation and return the new total."""
        with self._lock:
            self.invocation_count += 1
            return self.invocation_count
