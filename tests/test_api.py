import unittest
from unittest.mock import MagicMock, patch

from ask.api import CommandSynthesizer, OpenAIClient, clean_command_output, create_client
from ask.errors import SynthesisFailure
from ask.executor import ExecutionHistory


class TestCleanCommandOutput(unittest.TestCase):
    """Test cases for stripping model formatting."""

    def test_plain_text_is_trimmed(self):
        self.assertEqual(clean_command_output("  ls -la\n"), "ls -la")

    def test_fenced_block_is_extracted(self):
        for fence in ("```bash", "```shell", "```sh", "```"):
            with self.subTest(fence=fence):
                text = f"Here you go:\n{fence}\nfind . -name '*.py'\n```\nEnjoy."
                self.assertEqual(clean_command_output(text), "find . -name '*.py'")

    def test_multiline_script_is_kept(self):
        text = "```bash\ncat << 'EOF' > hi.py\nprint('hi')\nEOF\npython3 hi.py\n```"
        self.assertEqual(clean_command_output(text), "cat << 'EOF' > hi.py\nprint('hi')\nEOF\npython3 hi.py")

    def test_any_info_string_is_dropped(self):
        for tag in ("zsh", "console", "powershell", "shell-session", "c++"):
            with self.subTest(tag=tag):
                self.assertEqual(clean_command_output(f"```{tag}\nls -la\n```"), "ls -la")

    def test_single_line_fence_keeps_command(self):
        self.assertEqual(clean_command_output("```ls -la```"), "ls -la")


class TestCommandSynthesizer(unittest.TestCase):
    """Test cases for the CommandSynthesizer class."""

    def setUp(self):
        self.client = MagicMock()

    def test_synthesize_returns_clean_command(self):
        self.client.complete.return_value = "```bash\ndu -sh *\n```"
        synthesizer = CommandSynthesizer(self.client)

        self.assertEqual(synthesizer.synthesize("disk usage per folder"), "du -sh *")

        system_prompt, user_prompt = self.client.complete.call_args[0]
        self.assertIn("shell command expert", system_prompt)
        self.assertIn("Working directory", system_prompt)
        self.assertIn("disk usage per folder", user_prompt)

    def test_history_is_sent_for_refinement(self):
        self.client.complete.return_value = "ls -la"
        history = ExecutionHistory(command="ls -z", output="invalid option", success=False, attempt=1)

        CommandSynthesizer(self.client).synthesize("list files", history)

        user_prompt = self.client.complete.call_args[0][1]
        self.assertIn("ls -z", user_prompt)
        self.assertIn("invalid option", user_prompt)
        self.assertIn("attempt number 1", user_prompt)

    def test_chinese_prompts(self):
        self.client.complete.return_value = "ls"
        CommandSynthesizer(self.client, language="zh").synthesize("列出文件")

        system_prompt, user_prompt = self.client.complete.call_args[0]
        self.assertIn("Shell命令专家", system_prompt)
        self.assertIn("列出文件", user_prompt)

    def test_empty_reply_raises(self):
        for reply in ("", "   ", "```bash\n```", None):
            with self.subTest(reply=reply):
                self.client.complete.return_value = reply
                with self.assertRaises(SynthesisFailure):
                    CommandSynthesizer(self.client).synthesize("anything")

    def test_client_error_raises_synthesis_failure(self):
        self.client.complete.side_effect = ValueError("response blocked")

        with self.assertRaises(SynthesisFailure) as ctx:
            CommandSynthesizer(self.client).synthesize("anything")
        self.assertIn("response blocked", str(ctx.exception))

    def test_debug_callback_receives_prompts(self):
        self.client.complete.return_value = "pwd"
        on_debug = MagicMock()

        CommandSynthesizer(self.client, debug=True, on_debug=on_debug).synthesize("where am I")
        on_debug.assert_called_once()
        self.assertIn("where am I", on_debug.call_args[0][1])

        on_debug.reset_mock()
        CommandSynthesizer(self.client, debug=False, on_debug=on_debug).synthesize("where am I")
        on_debug.assert_not_called()


class TestClients(unittest.TestCase):
    """Test cases for provider clients."""

    @patch('ask.api.OpenAI')
    def test_openai_client_complete(self, mock_openai):
        message = MagicMock()
        message.content = "ls"
        choice = MagicMock()
        choice.message = message
        mock_openai.return_value.chat.completions.create.return_value = MagicMock(choices=[choice])

        client = OpenAIClient(api_key="k", base_url="https://llm.example.com/v1", model="m")
        self.assertEqual(client.complete("sys", "user"), "ls")

        mock_openai.assert_called_once_with(api_key="k", base_url="https://llm.example.com/v1")
        kwargs = mock_openai.return_value.chat.completions.create.call_args[1]
        self.assertEqual(kwargs["model"], "m")
        self.assertEqual([m["role"] for m in kwargs["messages"]], ["system", "user"])

    @patch('ask.api.OpenAI')
    def test_openai_client_without_choices(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = MagicMock(choices=[])
        client = OpenAIClient(api_key="k", base_url="u", model="m")
        self.assertEqual(client.complete("sys", "user"), "")

    @patch('ask.api.genai')
    def test_gemini_client_complete(self, mock_genai):
        mock_genai.GenerativeModel.return_value.generate_content.return_value = MagicMock(text="pwd")

        config = MagicMock(provider="gemini", gemini_api_key="g", model="gemini-2.5-flash")
        client = create_client(config)

        self.assertEqual(client.complete("sys", "user"), "pwd")
        mock_genai.configure.assert_called_once_with(api_key="g")
        prompt = mock_genai.GenerativeModel.return_value.generate_content.call_args[0][0]
        self.assertIn("sys", prompt)
        self.assertIn("user", prompt)

    @patch('ask.api.OpenAI')
    def test_create_client_defaults_to_openai(self, mock_openai):
        config = MagicMock(provider="openai", api_key="k", base_url="u", model="m")
        self.assertIsInstance(create_client(config), OpenAIClient)


if __name__ == "__main__":
    unittest.main()
