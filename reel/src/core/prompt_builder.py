"""
Reel - PromptAssembler
=======================
Folds retrieved context, the conversation so far, the fixed answering
rules and the current question into a single generation request.

The output is fully deterministic for a given input: same context
entries, same memory, same question → byte-identical prompt.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from reel.config.prompt_templates import RAG_PROMPT_TEMPLATE, SYSTEM_PROMPT
from reel.src.core.models import GenerationRequest


class PromptAssembler:
    """
    Builds the four-section prompt: context, previous conversations,
    rules, user question.

    Parameters
    ----------
    system_instruction
        System message sent alongside every prompt.  Defaults to
        ``SYSTEM_PROMPT``.
    template
        Override the prompt template (must expose ``{context}``,
        ``{history}`` and ``{question}``).
    """

    __slots__ = ("_system_instruction", "_template")

    def __init__(self, system_instruction: str = SYSTEM_PROMPT, template: str = RAG_PROMPT_TEMPLATE) -> None:
        self._system_instruction = system_instruction
        self._template = template


    def build(self, context: Iterable[str], memory: Sequence[str], query: str) -> str:
        """
        Render the prompt text.

        Parameters
        ----------
        context
            Rendered context entries, one per line in the given order.
        memory
            Conversation history, oldest first.
        query
            The literal user question.
        """
        context_block = "\n".join(context)
        history_block = "\n".join(memory).strip()
        return self._template.format(context=context_block, history=history_block, question=query)


    def build_request(self, context: Iterable[str], memory: Sequence[str], query: str) -> GenerationRequest:
        return GenerationRequest(system_instruction=self._system_instruction, prompt=self.build(context, memory, query))
