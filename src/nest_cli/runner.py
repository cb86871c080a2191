"""
Execution of the external tools the CLI delegates to.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .structured_logging import log_subprocess_call


def run_command(
    command: List[str],
    cwd: Optional[Union[str, Path]] = None,
    capture_output: bool = True,
    tool: Optional[str] = None,
) -> Tuple[str, str, int]:
    """
    Run an external command without a shell.

    Args:
        command: Command and arguments to run
        cwd: Working directory
        capture_output: Whether to capture stdout/stderr; when False the
            tool writes straight to the terminal
        tool: Name used in log records, the executable by default

    Returns:
        Tuple of (stdout, stderr, return_code)

    Raises:
        OSError: If the executable cannot be started
    """
    if not command or not isinstance(command[0], str):
        raise ValueError("Invalid command")

    safe_command = [str(arg) for arg in command]
    result = subprocess.run(
        safe_command,
        cwd=str(cwd) if cwd is not None else None,
        capture_output=capture_output,
        text=True,
        check=False,
    )

    log_subprocess_call(
        tool or safe_command[0],
        safe_command[1:],
        cwd=str(cwd) if cwd is not None else None,
        returncode=result.returncode,
    )
    return result.stdout or "", result.stderr or "", result.returncode
