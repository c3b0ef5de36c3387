"""
Environment-ready gate for the one-shot graph setup routine.

The hosting shell decides when its environment is ready (Flask app
created, console started) and signals it here. The setup callback runs
exactly once, either immediately when the gate is already open or on the
first signal.
"""

import logging

logger = logging.getLogger(__name__)


class ReadinessGate:
    """One-shot gate: runs a setup callback once the environment is ready"""

    def __init__(self, ready=False):
        self._ready = ready
        self._setup = None
        self._has_run = False
        self.result = None

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def has_run(self) -> bool:
        return self._has_run

    def when_ready(self, setup):
        """
        Register the setup routine.

        Args:
            setup: Zero-argument callable; its return value is kept in .result

        Raises:
            RuntimeError: If a setup routine was already registered
        """
        if self._setup is not None:
            raise RuntimeError("Setup routine already registered")
        self._setup = setup

        if self._ready:
            self._run()

    def signal_ready(self):
        """Mark environment ready; runs the pending setup routine once"""
        self._ready = True
        if self._setup is not None and not self._has_run:
            self._run()

    def _run(self):
        logger.info("Environment ready, running setup")
        self._has_run = True
        self.result = self._setup()
