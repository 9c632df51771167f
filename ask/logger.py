import json
import logging
import os
import time
from datetime import datetime

from rich.logging import RichHandler
from rich.console import Console
from logging.handlers import RotatingFileHandler

from .config import Config
from .executor import ExecutionResult

logger = logging.getLogger(__name__)


def setup_logging(config: Config, debug: bool = False):
    """Set up logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if debug else logging.INFO)

    # Console handler (with Rich)
    console = Console(stderr=True)
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True
    )
    rich_handler.setLevel(logging.DEBUG if debug else logging.WARNING)
    root_logger.addHandler(rich_handler)

    # File handler (Rotating)
    try:
        os.makedirs(config.log_dir, exist_ok=True)
        log_file = os.path.join(config.log_dir, "ask.log")
        file_handler = RotatingFileHandler(
            log_file, maxBytes=10*1024*1024, backupCount=5  # 10 MB per file, 5 backups
        )
    except OSError as e:
        logger.warning(f"File logging disabled, cannot use {config.log_dir}: {e}")
    else:
        file_handler.setLevel(logging.INFO)
        file_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Keep HTTP client chatter out of the console
    for noisy in ("urllib3", "httpx", "httpcore", "openai"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(f"Logger initialized. Logs will be stored in {config.log_dir}")


class CommandLogger:
    """
    Appends a JSON record of every executed command to a history journal.
    """
    def __init__(self, log_dir: str):
        """Initialize the command logger."""
        self.log_dir = log_dir
        self.history_file = os.path.join(log_dir, "command_history.jsonl")

    def log_command_execution(self,
                              user_instruction: str,
                              result: ExecutionResult,
                              attempt: int) -> str:
        """
        Log command execution details to the history journal.

        Args:
            user_instruction: Original user instruction
            result: Execution result of the generated command
            attempt: Attempt number within this invocation

        Returns:
            Path to the journal, or an empty string if it could not be written
        """
        log_data = {
            "timestamp": int(time.time()),
            "datetime": datetime.now().isoformat(),
            "user_instruction": user_instruction,
            "command": result.command,
            "attempt": attempt,
            "success": result.success,
            "return_code": result.returncode,
            "stdout": result.stdout,
            "stderr": result.stderr,
        }

        try:
            os.makedirs(self.log_dir, exist_ok=True)
            with open(self.history_file, 'a', encoding='utf-8') as f:
                f.write(json.dumps(log_data, ensure_ascii=False) + "\n")
            logger.info(f"Command execution logged to {self.history_file}")
            return self.history_file
        except OSError as e:
            logger.error(f"Failed to log command execution: {str(e)}")
            return ""
