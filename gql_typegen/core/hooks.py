"""Hooks run around code generation.

Pre-generate hooks adjust the compiled module before any template is rendered;
post-generate hooks rewrite the source of each rendered file.
"""

from typing import Protocol, runtime_checkable

from .output import CompiledModule


@runtime_checkable
class PreGenerateHook(Protocol):
    """Receives the compiled module and returns the module to render."""

    def pre_generate(self, module: CompiledModule) -> CompiledModule:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Receives one rendered file and returns its final source.

    ``filename`` is relative to the output directory, e.g. ``pets/a.py``.
    """

    def post_generate(self, filename: str, content: str) -> str:
        ...


class AddHeaderHook:
    """Prepends a fixed header, such as a license notice, to every file."""

    def __init__(self, header: str):
        self.header = header

    def post_generate(self, _filename: str, content: str) -> str:
        separator = "\n" if self.header.endswith("\n") else "\n\n"
        return f"{self.header}{separator}{content}"


class HookRunner:
    """Applies registered hooks in registration order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, module: CompiledModule) -> CompiledModule:
        for hook in self.pre_hooks:
            module = hook.pre_generate(module)
        return module

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
