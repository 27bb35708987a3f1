import os
import sys
import logging
from typing import Optional

from .config.settings import DEFAULT_CONFIG_FILE, config_summary, load_settings
from .errors import AutopushError, ConfigError, RepositoryEnvironmentError
from .notifier.email_sender import EmailSender
from .processor.change_processor import ChangeProcessor
from .vcs.git_client import VersionControlClient
from .watcher.change_watcher import ChangeWatcher
from .watcher.fingerprint import FileHasher

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def setup_logging(log_file: str, level: int = logging.INFO):
    """
    Log to an append-only file and to stderr
    """
    log_dir = os.path.dirname(os.path.abspath(log_file))
    os.makedirs(log_dir, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=[
            logging.FileHandler(log_file, mode="a", encoding="utf-8"),
            logging.StreamHandler(sys.stderr),
        ],
        force=True,
    )


def enter_repository(repo_path: str) -> str:
    try:
        os.chdir(repo_path)
    except OSError as e:
        raise RepositoryEnvironmentError(f"cannot cd to repo path: {repo_path}") from e
    return os.getcwd()


def build_watcher(settings, config_file: str, repo_path: str) -> ChangeWatcher:
    vcs = VersionControlClient(repo_path)
    email_sender = EmailSender(
        api_key=settings.SENDGRID_API_KEY,
        sender=settings.SENDER_EMAIL,
        recipients=settings.COLLAB_EMAILS,
        subject=settings.EMAIL_SUBJECT,
        url=settings.SENDGRID_URL,
        timeout=settings.EMAIL_TIMEOUT,
    )
    processor = ChangeProcessor(vcs, email_sender, settings.REMOTE_NAME, settings.BRANCH_NAME)
    hasher = FileHasher(excluded_names=[os.path.basename(config_file)])
    return ChangeWatcher(
        repo_path=repo_path,
        monitor_target=settings.MONITOR_TARGET,
        hasher=hasher,
        processor=processor,
        poll_interval=settings.POLL_INTERVAL,
    )


def run(config_file: Optional[str] = None) -> int:
    """
    Start the watcher and return a process exit code.
    Only configuration and repository problems end the process.
    """
    config_file = os.path.abspath(config_file or os.getenv("AUTOPUSH_CONFIG", DEFAULT_CONFIG_FILE))

    try:
        settings = load_settings(config_file)
    except ConfigError as e:
        print(str(e), file=sys.stderr)
        return e.exit_code

    try:
        setup_logging(settings.LOGFILE)
    except OSError as e:
        error = ConfigError(f"Cannot open LOGFILE {settings.LOGFILE}: {e}")
        print(str(error), file=sys.stderr)
        return error.exit_code

    logger.info(f"Configuration: {config_summary(settings)}")

    try:
        repo_path = enter_repository(settings.REPO_PATH)
        watcher = build_watcher(settings, config_file, repo_path)
    except AutopushError as e:
        logger.error(f"ERROR: {e}")
        return e.exit_code

    try:
        watcher.poll_loop()
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user")
        watcher.stop()

    return 0


def main():
    """Main entry point"""
    config_file = sys.argv[1] if len(sys.argv) > 1 else None
    sys.exit(run(config_file))


if __name__ == "__main__":
    main()
