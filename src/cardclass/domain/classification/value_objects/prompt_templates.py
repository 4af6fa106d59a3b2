"""Prompt template value objects."""

from dataclasses import dataclass

from cardclass.domain.classification.defaults import (
    DEFAULT_SYSTEM_PROMPT,
    DEFAULT_USER_PROMPT,
)


@dataclass(frozen=True)
class PromptTemplates:
    """
    Editable system/user prompt templates of one tenant.

    Plain strings with ``{{placeholder}}`` tokens. They are not validated:
    a template that drops a placeholder silently loses that context.
    """

    system_prompt: str
    user_prompt: str

    @classmethod
    def default(cls) -> "PromptTemplates":
        return cls(system_prompt=DEFAULT_SYSTEM_PROMPT, user_prompt=DEFAULT_USER_PROMPT)


@dataclass(frozen=True)
class BuiltPrompts:
    """Fully resolved prompts, ready to send to a model."""

    system_prompt: str
    user_prompt: str
