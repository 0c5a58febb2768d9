"""Release channel detection."""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .settings import Settings

logger = logging.getLogger(__name__)

UNSTABLE_CHANNELS = ("master", "main")
DEFAULT_CHANNEL = "stable"


@dataclass(frozen=True)
class Channel:
    """A release channel (stable, beta, dev, master)."""

    name: str

    @property
    def is_unstable(self) -> bool:
        """True on the unstable development channel."""
        return self.name in UNSTABLE_CHANNELS


class ChannelDetector:
    """Determines which release channel the tool runs on."""

    @staticmethod
    def detect(
        settings: Settings, environ: Optional[Mapping[str, str]] = None
    ) -> Channel:
        """Detect the channel.

        Checks PRECACHE_CHANNEL, then the settings file, then the git branch
        of $FLUTTER_ROOT, and falls back to stable.
        """
        environ = os.environ if environ is None else environ

        name = environ.get("PRECACHE_CHANNEL") or settings.channel
        if not name:
            flutter_root = environ.get("FLUTTER_ROOT")
            if flutter_root:
                name = ChannelDetector._git_branch(Path(flutter_root))

        # Channel names are matched case-insensitively
        name = (name or "").strip().lower()
        return Channel(name or DEFAULT_CHANNEL)

    @staticmethod
    def _git_branch(repo_dir: Path) -> Optional[str]:
        """Current branch of a git checkout, or None if unavailable."""
        if not repo_dir.is_dir():
            return None
        try:
            result = subprocess.run(
                ["git", "rev-parse", "--abbrev-ref", "HEAD"],
                cwd=repo_dir,
                capture_output=True,
                text=True,
                timeout=10,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"Could not run git in {repo_dir}: {e}")
            return None
        if result.returncode != 0:
            logger.debug(f"git rev-parse failed in {repo_dir}: {result.stderr.strip()}")
            return None
        branch = result.stdout.strip()
        if not branch or branch == "HEAD":
            return None
        return branch
