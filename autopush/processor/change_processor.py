import logging

from ..errors import CycleError
from ..models.change import ChangeEvent, CycleResult, CycleStage
from ..notifier.email_sender import EmailSender
from ..vcs.git_client import VersionControlClient

logger = logging.getLogger(__name__)


class ChangeProcessor:
    """
    Runs the stage -> commit -> push -> notify sequence for one detected change.
    Any stage failure ends the cycle early; nothing is retried.
    """

    def __init__(self, vcs: VersionControlClient, email_sender: EmailSender,
                 remote_name: str, branch_name: str):
        self.vcs = vcs
        self.email_sender = email_sender
        self.remote_name = remote_name
        self.branch_name = branch_name

    def process_change(self, target_path: str, target_name: str,
                       old_fingerprint: str, new_fingerprint: str) -> CycleResult:
        """
        Main entry point for a detected change. Never raises: the outcome,
        including the stage a failure happened at, is returned as CycleResult.
        """
        stage = CycleStage.STAGE
        event = None
        try:
            self.vcs.stage(target_path)

            if not self.vcs.has_staged_changes():
                logger.info("No staged changes to commit.")
                return CycleResult(stage=stage, completed=False)

            event = ChangeEvent(
                target=target_name,
                old_fingerprint=old_fingerprint,
                new_fingerprint=new_fingerprint,
                changed_files=self.vcs.staged_files(),
            )

            stage = CycleStage.COMMIT
            commit_hash = self.vcs.commit(event.commit_message())
            logger.info(f"Committed {commit_hash[:8]}: {', '.join(event.changed_files)}")

            stage = CycleStage.PUSH
            self._push()

        except CycleError as e:
            logger.error(f"{e}{': ' + e.output.strip() if e.output else ''}")
            return CycleResult(stage=stage, completed=False, error=str(e), event=event)

        stage = CycleStage.NOTIFY
        notified = self._notify(event)
        return CycleResult(stage=stage, completed=True, event=event, notified=notified)

    def _push(self):
        try:
            self.vcs.push(self.remote_name, self.branch_name)
        except CycleError:
            logger.error("ERROR: git push failed. Attempting to show remote status...")
            logger.error(f"Remotes:\n{self.vcs.list_remotes()}")
            raise
        logger.info(f"git push succeeded to {self.remote_name}/{self.branch_name}")

    def _notify(self, event: ChangeEvent) -> bool:
        if self.email_sender.send(event.email_body(self.vcs.name)):
            logger.info("Notification email sent.")
            return True

        logger.warning("WARNING: Notification email failed to send.")
        return False
