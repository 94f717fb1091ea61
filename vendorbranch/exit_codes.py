"""
Standard exit codes for vendorbranch commands.

Following Unix/POSIX conventions for command-line tools, with one
application-specific code for unresolved merge conflicts.
"""
from enum import Enum
from typing import List, Optional

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # Usage, guard and command errors

# Application-specific exit codes
MERGE_CONFLICT = 3       # Merge of a vendor branch needs manual resolution
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    hint: Optional[str] = None

    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class UsageError(CommandError):
    """Raised for bad or missing command arguments."""
    def __init__(self, message: str):
        super().__init__(message, GENERAL_ERROR)


class GuardFailureKind(Enum):
    """Why a repository failed its pre-flight checks."""
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_REPOSITORY = "not_a_repository"
    MISSING_DEFAULT_BRANCH = "missing_default_branch"
    UNCOMMITTED_CHANGES = "uncommitted_changes"


class GuardFailure(CommandError):
    """
    Raised when the cookbook repository is not in a state to import into.

    Always carries a remediation hint for the operator. Guard failures
    are terminal for the whole run and are never retried.
    """
    def __init__(self, kind: GuardFailureKind, message: str, hint: str,
                 details: Optional[str] = None):
        super().__init__(message, GENERAL_ERROR)
        self.kind = kind
        self.hint = hint
        self.details = details


class CommandFailure(CommandError):
    """Raised when a git or filesystem command exits non-zero."""
    def __init__(self, args: List[str], returncode: int,
                 stdout: str = "", stderr: str = ""):
        detail = (stderr or stdout).strip()
        message = f"Command failed ({returncode}): {' '.join(args)}"
        if detail:
            message += f"\n{detail}"
        super().__init__(message, GENERAL_ERROR)
        self.argv = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


class FetchError(CommandError):
    """Raised when a cookbook cannot be downloaded or unpacked."""
    def __init__(self, message: str):
        super().__init__(message, GENERAL_ERROR)


class MergeConflictError(CommandError):
    """
    Raised when merging a vendor branch back leaves conflicts.

    The working tree is left exactly as git left it; resolving the
    conflicts and committing is up to the operator.
    """
    def __init__(self, repo_path: str, branch: str, status_output: str,
                 target_branch: Optional[str] = None):
        super().__init__(
            "You have merge conflicts - please resolve manually",
            MERGE_CONFLICT,
        )
        self.repo_path = repo_path
        self.branch = branch
        self.target_branch = target_branch
        self.status_output = status_output
        self.hint = (
            f"Merge status (cd {repo_path}; git status) is shown above. "
            f"Resolve the conflicts on {target_branch or 'the current branch'} and commit the merge."
        )
