from threading import Lock

from samples.models import SplitReport
from samples.splitter import SplitOrchestrator


class SplitBusyError(Exception):
    pass


class SplitManager:
    def __init__(self, orchestrator: SplitOrchestrator):
        self.orchestrator = orchestrator
        self._run_lock = Lock()
        self._state_lock = Lock()
        self._last_report: SplitReport | None = None

    def is_running(self) -> bool:
        return self._run_lock.locked()

    def last_report(self) -> SplitReport | None:
        with self._state_lock:
            return self._last_report

    def run(self) -> SplitReport:
        if not self._run_lock.acquire(blocking=False):
            raise SplitBusyError("A voice sample split is already running. Try again when it finishes.")

        try:
            report = self.orchestrator.run()
        finally:
            self._run_lock.release()

        with self._state_lock:
            self._last_report = report
        return report
