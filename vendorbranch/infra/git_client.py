"""
Git client infrastructure for vendorbranch.

Provides a clean abstraction over git command execution.
All git operations go through this client, making them:
- Easy to mock for testing
- Consistent in error handling
- Isolated from business logic

Commands are always passed to git as argument lists, never through a
shell, so cookbook names and versions need no quoting.
"""

import subprocess
from dataclasses import dataclass
from typing import List, Optional
import logging

from ..exit_codes import CommandFailure

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Exit status and captured output of one git invocation."""
    args: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitClient:
    """
    Abstraction over git commands.

    `run` never raises on a non-zero exit status; callers inspect the
    returned CommandResult. `run_checked` raises CommandFailure instead.
    Nothing is ever retried: a failed commit or checkout is reported
    as-is to the caller.

    Example:
        client = GitClient()
        if client.branch_exists("/path/to/repo", "master"):
            client.checkout("/path/to/repo", "master")
    """

    def __init__(self, timeout: int = 300):
        """
        Initialize GitClient.

        Args:
            timeout: Command timeout in seconds (default: 300)
        """
        self.timeout = timeout

    def run(self, args: List[str], cwd: str) -> CommandResult:
        """
        Run a git command.

        Args:
            args: Arguments after `git` (e.g., ['status', '--porcelain'])
            cwd: Working directory

        Returns:
            CommandResult with returncode, stdout and stderr
        """
        full_command = ['git'] + list(args)
        logger.debug(f"Running in '{cwd}': {' '.join(full_command)}")

        try:
            result = subprocess.run(
                full_command,
                cwd=cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Git command timed out: {' '.join(full_command)}")
            return CommandResult(full_command, -1, stderr=f"timed out after {self.timeout}s")
        except OSError as e:
            logger.error(f"Git command failed: {' '.join(full_command)} - {e}")
            return CommandResult(full_command, -1, stderr=str(e))

        return CommandResult(
            full_command,
            result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or ""
        )

    def run_checked(self, args: List[str], cwd: str) -> CommandResult:
        """Run a git command, raising CommandFailure on a non-zero exit."""
        result = self.run(args, cwd=cwd)
        if not result.ok:
            raise CommandFailure(result.args, result.returncode, result.stdout, result.stderr)
        return result

    def branch_names(self, path: str) -> List[str]:
        """List local branch names, without the current-branch marker."""
        output = self.run_checked(['branch', '--list', '--no-color'], cwd=path).stdout
        names = []
        for line in output.splitlines():
            name = line.lstrip('*+ ').strip()
            # Detached HEAD shows up as "(HEAD detached at ...)"
            if name and not name.startswith('('):
                names.append(name)
        return names

    def branch_exists(self, path: str, branch: str) -> bool:
        """Check if a local branch exists."""
        return branch in self.branch_names(path)

    def current_branch(self, path: str) -> Optional[str]:
        """Get current branch name."""
        result = self.run(['rev-parse', '--abbrev-ref', 'HEAD'], cwd=path)
        if result.ok and result.stdout.strip():
            return result.stdout.strip()
        return None

    def status_porcelain(self, path: str, pathspec: Optional[str] = None,
                         all_untracked: bool = False) -> str:
        """
        Get `git status --porcelain` output.

        Args:
            path: Path to git repository
            pathspec: Restrict status to this path
            all_untracked: List every untracked file instead of collapsing
                untracked directories into one line

        Returns:
            Raw porcelain output
        """
        args = ['status', '--porcelain']
        if all_untracked:
            args.append('--untracked-files=all')
        if pathspec:
            args += ['--', pathspec]
        return self.run_checked(args, cwd=path).stdout

    def status(self, path: str) -> CommandResult:
        """Human-readable `git status`, for showing to the operator."""
        return self.run(['status'], cwd=path)

    def checkout(self, path: str, branch: str) -> CommandResult:
        return self.run_checked(['checkout', branch], cwd=path)

    def create_branch(self, path: str, branch: str) -> CommandResult:
        """Create a branch from HEAD and check it out."""
        return self.run_checked(['checkout', '-b', branch], cwd=path)

    def add(self, path: str, pathspec: str) -> CommandResult:
        return self.run_checked(['add', '--', pathspec], cwd=path)

    def commit(self, path: str, message: str, pathspec: str) -> CommandResult:
        """Commit only the changes under pathspec."""
        return self.run_checked(['commit', '-m', message, '--', pathspec], cwd=path)

    def force_tag(self, path: str, name: str) -> CommandResult:
        """Create a lightweight tag at HEAD, moving it if it already exists."""
        return self.run_checked(['tag', '--force', name], cwd=path)

    def merge(self, path: str, branch: str) -> CommandResult:
        """
        Merge a branch into the current branch.

        Does not raise: a non-zero status usually means conflicts, which
        the caller reports rather than treats as a command failure.
        """
        return self.run(['merge', '--no-edit', branch], cwd=path)

    def list_tags(self, path: str, pattern: Optional[str] = None) -> List[str]:
        """List tag names, optionally filtered by a glob pattern."""
        args = ['tag', '--list']
        if pattern:
            args.append(pattern)
        output = self.run_checked(args, cwd=path).stdout
        return [line.strip() for line in output.splitlines() if line.strip()]
