import logging
import subprocess
import platform
from dataclasses import dataclass

# Configure logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of running one command."""

    command: str
    success: bool
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return self.stdout if self.success else self.stderr


@dataclass(frozen=True)
class ExecutionHistory:
    """The previous attempt, fed back to the model when refining a command."""

    command: str
    output: str
    success: bool
    attempt: int


class CommandExecutor:
    """Handles execution of shell commands."""

    def __init__(self, shell: str = "/bin/sh"):
        self.shell = shell

    def execute_command(self, command: str) -> ExecutionResult:
        """
        Execute a single shell command.

        Args:
            command: The shell command to execute

        Returns:
            ExecutionResult with the exit status and captured output
        """
        logger.info(f"Executing command: {command}")

        try:
            # Check if we're on Windows
            is_windows = platform.system() == "Windows"

            if is_windows:
                # On Windows, let the default command interpreter handle it
                process = subprocess.Popen(
                    command,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True,
                    shell=True
                )
            else:
                # Pipes, redirections and heredocs need a real shell
                process = subprocess.Popen(
                    [self.shell, "-c", command],
                    stdout=subprocess.PIPE,
                    stderr=subprocess.PIPE,
                    text=True
                )

            stdout, stderr = process.communicate()
        except OSError as e:
            logger.info(f"Error executing command '{command}': {str(e)}", exc_info=True)
            return ExecutionResult(command, False, 127, "", str(e))

        success = process.returncode == 0
        if success:
            logger.info(f"Command executed successfully: {command}")
        else:
            logger.info(f"Command failed with return code {process.returncode}: {command}")
            logger.info(f"stderr: {stderr}")

        return ExecutionResult(command, success, process.returncode, stdout, stderr)


# Create a global executor instance
executor = CommandExecutor()
