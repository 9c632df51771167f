import os
import platform
from typing import Optional

from .executor import ExecutionHistory

SYSTEM_PROMPTS = {
    "en": """
You are a shell command expert. Based on the user's request and any previous
execution results, generate or improve a shell command.

If this is the first attempt (no history):
- Generate a single executable shell command.
- Prefer built-in tools available on the user's system over third-party programs.
- Make sure every option and argument you use actually exists.
- Do not wrap the command in code fences or any other formatting.

If there is a previous attempt:
- Look at the previous command and its output.
- Decide whether it achieved the user's goal.
- If it did not, work out why and generate an improved command.

If the task needs code that the shell cannot express directly, you may write a
script with a heredoc and run it, for example:
cat << 'EOF' > hello.py
print("Hello, World!")
EOF
python3 hello.py

Reply with the command only.
""",
    "zh": """
你是一个Shell命令专家，请根据用户的需求和历史执行结果生成或优化shell命令。

如果是首次执行（没有历史记录）：
- 生成一个可执行的shell命令
- 优先使用系统自带的工具，而不是第三方程序
- 确保命令的所有参数都是正确且存在的
- 不要使用代码块标记或其他格式标记

如果有历史执行记录：
- 查看上一次的命令及其输出
- 判断是否达到了用户的目标
- 如果没有达到，分析原因并生成改进的命令

如果需要写shell无法直接完成的代码，可以用heredoc写出脚本再运行，例如：
cat << 'EOF' > hello.py
print("Hello, World!")
EOF
python3 hello.py

只回复命令本身。
""",
}

SYSTEM_INFO_TEMPLATES = {
    "en": "Current system environment:\n- OS: {os}\n- Shell: {shell}\n- Terminal: {term}\n- User: {user}\n- Working directory: {cwd}\n",
    "zh": "当前系统环境信息：\n- 操作系统: {os}\n- Shell类型: {shell}\n- 终端类型: {term}\n- 当前用户: {user}\n- 当前目录: {cwd}\n",
}

FIRST_ATTEMPT_TEMPLATES = {
    "en": "The user's request is: {prompt}\nGenerate the shell command that fulfils it.",
    "zh": "现在，用户的问题为：{prompt}，请你根据用户的问题生成对应的shell命令来实现用户的需求。",
}

REFINEMENT_TEMPLATES = {
    "en": (
        "The user's request is: {prompt}\n"
        "The previous command was: {command}\n"
        "Its output was: {output}\n"
        "It succeeded: {success}\n"
        "This is attempt number {attempt}.\n"
        "Analyse the result. If the goal was not reached, explain why and generate an improved command."
    ),
    "zh": (
        "用户的问题为：{prompt}\n"
        "上一次执行的命令是：{command}\n"
        "执行结果是：{output}\n"
        "执行是否成功：{success}\n"
        "这是第{attempt}次尝试。\n"
        "请根据上述信息分析执行结果，判断是否达到预期目标，如果没有达到目标，分析原因并生成改进的命令。"
    ),
}


def _os_name() -> str:
    system = platform.system()
    return {"Darwin": "macOS", "Linux": "Linux", "Windows": "Windows"}.get(system, "Unknown OS")


def get_system_info(language: str = "en") -> str:
    """Describe the host environment so the model can target the right shell."""
    template = SYSTEM_INFO_TEMPLATES.get(language, SYSTEM_INFO_TEMPLATES["en"])
    return template.format(
        os=_os_name(),
        shell=os.environ.get("SHELL", "Unknown"),
        term=os.environ.get("TERM", "Unknown"),
        user=os.environ.get("USER") or os.environ.get("USERNAME", "Unknown"),
        cwd=os.getcwd(),
    )


def build_system_prompt(language: str = "en") -> str:
    base = SYSTEM_PROMPTS.get(language, SYSTEM_PROMPTS["en"])
    return f"{base.strip()}\n\n{get_system_info(language)}"


def build_user_prompt(prompt: str, history: Optional[ExecutionHistory] = None, language: str = "en") -> str:
    """Builds the first-attempt prompt, or the refinement prompt when history exists."""
    if history is None:
        template = FIRST_ATTEMPT_TEMPLATES.get(language, FIRST_ATTEMPT_TEMPLATES["en"])
        return template.format(prompt=prompt)
    template = REFINEMENT_TEMPLATES.get(language, REFINEMENT_TEMPLATES["en"])
    return template.format(
        prompt=prompt,
        command=history.command,
        output=history.output,
        success=history.success,
        attempt=history.attempt,
    )
