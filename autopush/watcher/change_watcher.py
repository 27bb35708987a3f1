import os
import time
import logging
from typing import Callable, Optional

from .fingerprint import FileHasher
from ..models.change import CycleResult
from ..processor.change_processor import ChangeProcessor

logger = logging.getLogger(__name__)


class ChangeWatcher:
    """
    Polls the monitored target and hands detected changes to the processor.
    Owns the last seen fingerprint; nothing else writes it.
    """

    def __init__(self, repo_path: str, monitor_target: str, hasher: FileHasher,
                 processor: ChangeProcessor, poll_interval: float = 5,
                 sleep: Callable[[float], None] = time.sleep):
        self.repo_path = os.path.abspath(repo_path)
        self.monitor_target = monitor_target
        self.target_path = os.path.join(self.repo_path, monitor_target)
        self.hasher = hasher
        self.processor = processor
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.fingerprint: Optional[str] = None
        self.is_running = False

    def compute_fingerprint(self) -> Optional[str]:
        """Returns None when the target could not be fingerprinted"""
        try:
            return self.hasher.compute_fingerprint(self.target_path)
        except Exception as e:
            logger.error(f"Error computing fingerprint of {self.target_path}: {e}")
            return None

    def initialize(self) -> Optional[str]:
        self.fingerprint = self.compute_fingerprint()
        logger.info(f"Monitoring '{self.monitor_target}' in repo: {self.repo_path}")
        logger.info(f"Initial checksum: {self.fingerprint}")
        return self.fingerprint

    def poll_once(self) -> Optional[CycleResult]:
        """
        Compare the current fingerprint with the stored one and run a cycle
        on change. The stored fingerprint always moves to the new value after
        a detected change, whatever the cycle outcome.
        """
        if self.fingerprint is None:
            self.initialize()
            if self.fingerprint is None:
                return None

        new_fingerprint = self.compute_fingerprint()
        # Unknown state is never treated as a change
        if new_fingerprint is None or new_fingerprint == self.fingerprint:
            return None

        old_fingerprint = self.fingerprint
        logger.info(f"Change detected! old={old_fingerprint} new={new_fingerprint}")

        result = None
        try:
            result = self.processor.process_change(
                self.target_path, self.monitor_target, old_fingerprint, new_fingerprint
            )
        except Exception as e:
            logger.error(f"Unexpected error while processing change: {e}")
        finally:
            self.fingerprint = new_fingerprint

        return result

    def poll_loop(self, max_polls: Optional[int] = None):
        """
        Sleep, poll, repeat until stop() is called (or max_polls is reached)
        """
        if self.fingerprint is None:
            self.initialize()

        self.is_running = True
        polls = 0
        while self.is_running:
            self.sleep(self.poll_interval)
            self.poll_once()

            polls += 1
            if max_polls is not None and polls >= max_polls:
                break

        self.is_running = False

    def stop(self):
        self.is_running = False
