import logging
from typing import Optional

from . import ui
from .api import CommandSynthesizer
from .config import Config
from .errors import BlockedCommand, ExecutionFailure, SynthesisFailure
from .executor import CommandExecutor, ExecutionHistory, ExecutionResult
from .logger import CommandLogger
from .safety import SafetyScreener

logger = logging.getLogger(__name__)


class AskSession:
    """Runs one request: synthesize, screen, confirm, execute and refine."""

    def __init__(
        self,
        config: Config,
        synthesizer: CommandSynthesizer,
        executor: CommandExecutor,
        screener: Optional[SafetyScreener] = None,
        dry_run: bool = False,
        verbose: bool = True,
        command_logger: Optional[CommandLogger] = None,
    ):
        self.config = config
        self.language = config.language
        self.max_attempts = config.max_attempts
        self.synthesizer = synthesizer
        self.executor = executor
        self.screener = screener or config.screener()
        self.dry_run = dry_run
        self.verbose = verbose
        self.command_logger = command_logger or CommandLogger(config.log_dir)

    def run(self, prompt: str) -> int:
        """Handle a prompt end to end and return the process exit code."""
        try:
            return self._run(prompt)
        except BlockedCommand as e:
            ui.display_blocked(e.reason, self.language)
            return e.exit_code
        except SynthesisFailure as e:
            ui.display_synthesis_error(str(e), self.language)
            return e.exit_code
        except ExecutionFailure as e:
            logger.info(f"Giving up after failed execution: {e}")
            return e.exit_code

    def _run(self, prompt: str) -> int:
        history: Optional[ExecutionHistory] = None
        last_result: Optional[ExecutionResult] = None

        for attempt in range(1, self.max_attempts + 1):
            ui.display_thinking(self.language)
            command = self.synthesizer.synthesize(prompt, history)
            ui.display_command(command, self.language)

            verdict = self.screener.screen(command)
            if verdict.blocked:
                logger.info(f"Refusing to run '{command}': {verdict.reason}")
                raise BlockedCommand(verdict.reason)

            if self.dry_run:
                ui.display_dry_run(self.language)
                return 0

            if not ui.confirm_execution(self.language):
                return 0

            ui.display_executing(self.language)
            last_result = self.executor.execute_command(command)
            ui.display_result(last_result, self.verbose, self.language)
            self.command_logger.log_command_execution(prompt, last_result, attempt)

            history = ExecutionHistory(
                command=command,
                output=last_result.output,
                success=last_result.success,
                attempt=attempt,
            )

            if last_result.success and ui.confirm_goal_reached(self.language):
                return 0

        ui.display_max_attempts(self.language)
        if last_result is not None and not last_result.success:
            raise ExecutionFailure(last_result.returncode)
        return 0
