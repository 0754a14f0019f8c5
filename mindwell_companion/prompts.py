"""
Instruction texts sent to the inference service.

The persona and the classifier/journal instructions are fixed for the lifetime
of the process. Only the companion system prompt depends on the request.
"""

from .models import ConversationContext, MoodSample

DEFAULT_TONE = "friendly"

PERSONA = (
    "You are a compassionate AI mental health companion named MindWell "
    "Assistant. Your role is to provide emotional support, encouragement, and "
    "gentle guidance."
)

_GUIDELINES = """Key guidelines:
- Be warm, empathetic, and non-judgmental
- Provide practical coping strategies when appropriate
- Encourage professional help for serious concerns
- Use a {tone} tone
- Keep responses conversational and supportive
- Suggest breathing exercises, mindfulness, or other wellness activities when relevant
- Never provide medical diagnoses or replace professional therapy"""

_CLOSING = (
    "Respond with helpful, caring support. If the user seems to be in crisis, "
    "gently suggest professional resources."
)

SENTIMENT_INSTRUCTION = (
    "You are a sentiment analysis expert. Analyze the sentiment of the text and "
    "provide a rating from 1 (very negative) to 5 (very positive) and a "
    "confidence score between 0 and 1. Respond with JSON in this format: "
    '{ "rating": number, "confidence": number }'
)

JOURNAL_INSTRUCTION = (
    "Generate a thoughtful, therapeutic journal prompt that encourages "
    "self-reflection and emotional awareness. The prompt should be open-ended "
    "and supportive."
)

JOURNAL_TRIGGER = "Please provide a journal prompt for today."


def format_mood_sample(sample: MoodSample) -> str:
    return f"{sample.value}/5 ({sample.note or 'no note'})"


def build_system_prompt(context: ConversationContext) -> str:
    """
    Build the companion system prompt for a conversation.

    Args:
        context: Display name, tone and recent moods of the user

    Returns:
        The instruction string. Absent context fields are left out.
    """
    sections = [
        PERSONA,
        _GUIDELINES.format(tone=context.tone_hint or DEFAULT_TONE),
    ]

    if context.display_name:
        sections.append(f"The user's name is {context.display_name}.")

    if context.recent_moods:
        moods = ", ".join(format_mood_sample(m) for m in context.recent_moods)
        sections.append(f"Recent mood data: {moods}")

    sections.append(_CLOSING)
    return "\n\n".join(sections)
