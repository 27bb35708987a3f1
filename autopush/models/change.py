from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from enum import Enum

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S UTC"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CycleStage(str, Enum):
    STAGE = "stage"
    COMMIT = "commit"
    PUSH = "push"
    NOTIFY = "notify"


class ChangeEvent(BaseModel):
    target: str
    old_fingerprint: str
    new_fingerprint: str
    changed_files: List[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utc_now)

    @property
    def timestamp_text(self) -> str:
        return self.timestamp.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)

    def commit_message(self) -> str:
        """
        First line names the target and time, followed by the staged files
        """
        lines = [
            f"Auto-commit: changes detected in {self.target} on {self.timestamp_text}",
            "Files:",
        ]
        lines.extend(self.changed_files)
        return "\n".join(lines)

    def email_body(self, repo_name: str) -> str:
        lines = [
            "Auto-deploy notification:",
            f"Repository: {repo_name}",
            f"Target: {self.target}",
            "Committed files:",
        ]
        lines.extend(self.changed_files)
        lines.append("Commit message:")
        lines.append(self.commit_message())
        lines.append(f"Timestamp: {self.timestamp_text}")
        return "\n".join(lines)


class CycleResult(BaseModel):
    stage: CycleStage
    completed: bool
    error: Optional[str] = None
    event: Optional[ChangeEvent] = None
    notified: bool = False
