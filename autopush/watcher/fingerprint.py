import os
import hashlib
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Returned when the monitored target does not exist
MISSING_FINGERPRINT = ""

CHUNK_SIZE = 64 * 1024


class FileHasher:
    """
    Computes a deterministic SHA-256 fingerprint of a file or directory tree
    """

    def __init__(self, excluded_names: Optional[Iterable[str]] = None):
        self.ignored_dirs = {".git"}
        self.excluded_names = set(excluded_names or [])

    def hash_file(self, file_path: str) -> str:
        digest = hashlib.sha256()
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                digest.update(chunk)
        return digest.hexdigest()

    def should_ignore_file(self, file_path: str) -> bool:
        path = Path(file_path)
        if any(part in self.ignored_dirs for part in path.parts):
            return True
        return path.name in self.excluded_names

    def list_file_digests(self, directory: str) -> List[Tuple[str, str]]:
        """
        Return (digest, relative path) pairs for every regular file under
        directory, sorted by path
        """
        entries = []
        for root, dirs, files in os.walk(directory):
            # Skip .git directory
            dirs[:] = [d for d in dirs if d not in self.ignored_dirs]

            for file in files:
                file_path = os.path.join(root, file)
                relative_path = Path(os.path.relpath(file_path, directory)).as_posix()

                if self.should_ignore_file(relative_path):
                    continue
                if os.path.islink(file_path) or not os.path.isfile(file_path):
                    continue

                try:
                    entries.append((self.hash_file(file_path), relative_path))
                except OSError as e:
                    # File vanished or became unreadable mid-walk
                    logger.debug(f"Skipping {relative_path}: {e}")

        entries.sort(key=lambda entry: entry[1])
        return entries

    def compute_fingerprint(self, target: str) -> str:
        """
        Fingerprint a single file or a whole directory.

        A file hashes to the digest of its contents. A directory hashes to the
        digest of its sorted "<digest>  <path>" listing, so the result does not
        depend on enumeration order but changes with any content or file-set
        change. A missing target yields MISSING_FINGERPRINT.
        """
        if os.path.isfile(target):
            try:
                return self.hash_file(target)
            except OSError as e:
                logger.debug(f"Could not read {target}: {e}")
                return MISSING_FINGERPRINT

        if not os.path.isdir(target):
            return MISSING_FINGERPRINT

        # Paths are encoded with os.fsencode so undecodable file names still hash
        listing = b"".join(
            digest.encode("ascii") + b"  " + os.fsencode(path) + b"\n"
            for digest, path in self.list_file_digests(target)
        )
        return hashlib.sha256(listing).hexdigest()
