# Prompt fragments and composition for the answer call.
# compose() is pure: identical inputs give byte-identical output.

from __future__ import annotations
from typing import List, Sequence

from .types import ComposedPrompt, ConversationStyle, Message, Role, Sender, Turn

IDENTITY_PROMPT = "\n".join([
    "You are a chatbot for Everlast Health, which is an app designed to help people with stress and anxiety.",
    "You have all the knowledge of a functional medicine practitioner.",
    "Any questions that the user asks will be related to stress and anxiety.",
    "Respond in clear, natural prose. Only use numbered lists if the user specifically asks for steps, tips, or a list of items.",
])

STYLE_PROMPTS = {
    ConversationStyle.DEFAULT: "\n".join([
        "You should answer the question in a way that is helpful and accessible to the user.",
        "Keep responses concise but informative, typically 2-3 sentences.",
    ]),
    ConversationStyle.ANALYTICAL: "\n".join([
        "You should provide detailed, technical responses that include mechanisms of action in the body.",
        'Assume the user has a good understanding of health concepts and wants to understand the "why" behind your recommendations.',
        "Use clear paragraphs to explain concepts and their scientific basis.",
    ]),
    ConversationStyle.PRACTICAL: "\n".join([
        "Focus on providing clear, actionable guidance without detailed explanations.",
        'Prioritize "what to do" over "why to do it".',
        "Be direct and concise in your advice.",
    ]),
}

CONTEXT_HEADER = "Relevant information from knowledge base:"
EMPTY_CONTEXT = "(no relevant information found)"

STYLE_DETECTION_PROMPT = """\
You are a style classifier that determines if a user is requesting a change in conversational style.
The available styles are:
- default: friendly and concise
- analytical: evidence-based and scientific
- practical: action-oriented and implementable

You must respond with a JSON object containing these exact fields:
- requestingStyle: a boolean indicating if the user is requesting a style change
- confidence: a number between 0.0 and 1.0 indicating detection confidence
- suggestedStyle: one of ["default", "analytical", "practical"], use "default" if the user is not requesting a style change
- explanation: a brief text explaining your decision

Important: Your response must be a single, valid JSON object. Do not include any other text, comments, or explanations outside the JSON structure."""

_ROLE_FOR_SENDER = {Sender.USER: Role.HUMAN, Sender.ASSISTANT: Role.AI}


def build_instructions(style: ConversationStyle, context_text: str) -> str:
    context = context_text if context_text.strip() else EMPTY_CONTEXT
    return f"{IDENTITY_PROMPT}\n{STYLE_PROMPTS[ConversationStyle(style)]}\n\n{CONTEXT_HEADER}\n{context}"


def history_to_turns(history: Sequence[Message]) -> List[Turn]:
    return [Turn(role=_ROLE_FOR_SENDER[Sender(m.sender)], text=m.text) for m in history]


def compose(style: ConversationStyle, context_text: str, history: Sequence[Message]) -> ComposedPrompt:
    """Instructions for `style` with the retrieved context, plus history as turns (live message excluded)."""
    return ComposedPrompt(
        instructions=build_instructions(style, context_text),
        turns=history_to_turns(history),
    )
