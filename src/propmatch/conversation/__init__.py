"""
Conversation module.

Button-driven preference collection and the transport-neutral chat
service on top of it.
"""

from propmatch.conversation.flow import ConversationFlow, TRANSITIONS, summarize
from propmatch.conversation.prompts import PROMPTS, Option, StepPrompt
from propmatch.conversation.service import Button, ChatReply, ChatService

__all__ = [
    "ConversationFlow",
    "TRANSITIONS",
    "summarize",
    "PROMPTS",
    "Option",
    "StepPrompt",
    "Button",
    "ChatReply",
    "ChatService",
]
