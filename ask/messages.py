"""User-facing strings for each supported interface language."""
from typing import Dict

MESSAGES: Dict[str, Dict[str, str]] = {
    "en": {
        "thinking": "🤔 Thinking...",
        "generated_command": "📝 Generated command:",
        "blocked": "⚠️  Warning: potentially dangerous command detected, refusing to run it!",
        "blocked_reason": "Reason: {reason}",
        "dry_run": "Dry run: the command was not executed.",
        "confirm_execute": "Run this command?",
        "executing": "🚀 Running command...",
        "success": "✅ Command succeeded!",
        "failure": "❌ Command failed (exit status {returncode}):",
        "confirm_goal": "Did the command achieve what you wanted?",
        "max_attempts": "⚠️  Maximum number of attempts reached, stopping.",
        "synthesis_failed": "Error: could not get a command from the model: {error}",
        "debug_title": "🔍 Debug information",
        "debug_system": "System prompt",
        "debug_user": "User prompt",
        "config_invalid": "Configuration is incomplete:",
        "config_hint": "Set values with `ask set config KEY=VALUE` or environment variables.",
        "config_saved": "Saved {key} to {path}",
    },
    "zh": {
        "thinking": "🤔 正在思考中...",
        "generated_command": "📝 生成的命令：",
        "blocked": "⚠️  警告：检测到潜在的危险命令，拒绝执行！",
        "blocked_reason": "原因：{reason}",
        "dry_run": "仅预览：命令未被执行。",
        "confirm_execute": "是否要执行这个命令？",
        "executing": "🚀 正在执行命令...",
        "success": "✅ 命令执行成功！",
        "failure": "❌ 命令执行失败（退出码 {returncode}）：",
        "confirm_goal": "命令是否达到了预期目标？",
        "max_attempts": "⚠️  已达到最大尝试次数，程序终止。",
        "synthesis_failed": "错误：无法从模型获取命令：{error}",
        "debug_title": "🔍 调试信息",
        "debug_system": "系统提示",
        "debug_user": "用户提示",
        "config_invalid": "配置不完整：",
        "config_hint": "请使用 `ask set config KEY=VALUE` 或环境变量进行设置。",
        "config_saved": "已将 {key} 保存到 {path}",
    },
}


def get_message(key: str, language: str = "en", /, **kwargs) -> str:
    """Look up a message, falling back to English for unknown languages."""
    table = MESSAGES.get(language, MESSAGES["en"])
    text = table.get(key, MESSAGES["en"][key])
    return text.format(**kwargs) if kwargs else text
