from typing import List, Sequence

from agentic_loop.domain.messages import AgentMessage, MessageRole


def apply_message_window(
    messages: Sequence[AgentMessage], max_messages: int
) -> List[AgentMessage]:
    """Project the transcript onto at most ``max_messages`` entries.

    A leading system message is pinned; only index 0 counts as the system
    marker. The input sequence is never modified.

    Args:
        messages: Full transcript.
        max_messages: Window size.

    Returns:
        A new list holding the windowed view.
    """

    if len(messages) <= max_messages:
        return list(messages)
    if max_messages <= 1:
        return list(messages[-1:])

    first = messages[0]
    if first.role != MessageRole.SYSTEM:
        return list(messages[-max_messages:])
    return [first, *messages[-(max_messages - 1):]]
