import logging
import unittest
from unittest.mock import patch, MagicMock

from ask.executor import CommandExecutor, ExecutionResult


class TestCommandExecutor(unittest.TestCase):
    """Test cases for the CommandExecutor class."""

    def setUp(self):
        """Set up test fixtures."""
        self.executor = CommandExecutor()

    @patch('ask.executor.platform.system', return_value="Linux")
    @patch('ask.executor.subprocess.Popen')
    def test_execute_command_success(self, mock_popen, _mock_system):
        """Test successful command execution."""
        process_mock = MagicMock()
        process_mock.returncode = 0
        process_mock.communicate.return_value = ("command output", "")
        mock_popen.return_value = process_mock

        result = self.executor.execute_command("echo 'hello' | tr a-z A-Z")

        self.assertTrue(result.success)
        self.assertEqual(result.returncode, 0)
        self.assertEqual(result.stdout, "command output")
        self.assertEqual(result.output, "command output")

        # The whole command goes to the shell untouched
        mock_popen.assert_called_once()
        args, kwargs = mock_popen.call_args
        self.assertEqual(args[0], ["/bin/sh", "-c", "echo 'hello' | tr a-z A-Z"])
        self.assertTrue(kwargs["text"])

    @patch('ask.executor.platform.system', return_value="Linux")
    @patch('ask.executor.subprocess.Popen')
    def test_execute_command_failure(self, mock_popen, _mock_system):
        """Test failed command execution."""
        process_mock = MagicMock()
        process_mock.returncode = 2
        process_mock.communicate.return_value = ("", "command error")
        mock_popen.return_value = process_mock

        result = self.executor.execute_command("invalid_command")

        self.assertFalse(result.success)
        self.assertEqual(result.returncode, 2)
        self.assertEqual(result.stderr, "command error")
        self.assertEqual(result.output, "command error")

    @patch('ask.executor.platform.system', return_value="Linux")
    @patch('ask.executor.subprocess.Popen')
    def test_failure_is_not_logged_above_info(self, mock_popen, _mock_system):
        mock_popen.return_value.returncode = 1
        mock_popen.return_value.communicate.return_value = ("", "command error")

        with self.assertLogs('ask.executor', level='INFO') as logs:
            self.executor.execute_command("false")

        self.assertTrue(all(record.levelno < logging.WARNING for record in logs.records))

    @patch('ask.executor.platform.system', return_value="Windows")
    @patch('ask.executor.subprocess.Popen')
    def test_execute_command_on_windows_uses_shell(self, mock_popen, _mock_system):
        process_mock = MagicMock()
        process_mock.returncode = 0
        process_mock.communicate.return_value = ("", "")
        mock_popen.return_value = process_mock

        self.executor.execute_command("dir")

        args, kwargs = mock_popen.call_args
        self.assertEqual(args[0], "dir")
        self.assertTrue(kwargs["shell"])

    @patch('ask.executor.subprocess.Popen', side_effect=FileNotFoundError("no shell"))
    def test_spawn_error_becomes_failed_result(self, _mock_popen):
        result = self.executor.execute_command("ls")

        self.assertFalse(result.success)
        self.assertEqual(result.returncode, 127)
        self.assertIn("no shell", result.stderr)

    def test_custom_shell(self):
        executor = CommandExecutor(shell="/bin/bash")
        with patch('ask.executor.platform.system', return_value="Darwin"), \
                patch('ask.executor.subprocess.Popen') as mock_popen:
            mock_popen.return_value.returncode = 0
            mock_popen.return_value.communicate.return_value = ("", "")
            executor.execute_command("ls")
            self.assertEqual(mock_popen.call_args[0][0], ["/bin/bash", "-c", "ls"])

    def test_result_output_prefers_stdout_on_success(self):
        ok = ExecutionResult("ls", True, 0, "files", "warning")
        failed = ExecutionResult("ls", False, 1, "partial", "boom")
        self.assertEqual(ok.output, "files")
        self.assertEqual(failed.output, "boom")


if __name__ == "__main__":
    unittest.main()
