"""Help topic and command-name resolution (pure)."""

from __future__ import annotations

from collections.abc import Sequence

from mirari.exceptions import UnknownTopicError, UsageError

TOPICS_TOPIC: str = "topics"
"""Pseudo-topic listing every registered command."""


def _quote_choices(choices: Sequence[str]) -> str:
    quoted = [f"'{choice}'" for choice in sorted(choices)]
    if len(quoted) == 1:
        return quoted[0]
    return ", ".join(quoted[:-1]) + f" or {quoted[-1]}"


def match_choice(value: str, choices: Sequence[str]) -> str | None:
    """Return the choice that *value* names exactly or by unique prefix.

    Returns ``None`` when nothing matches.

    Raises
    ------
    UsageError
        If *value* is a prefix of several choices and equal to none.
    """
    if value in choices:
        return value
    candidates = [choice for choice in choices if choice.startswith(value)]
    if len(candidates) == 1:
        return candidates[0]
    if len(candidates) > 1:
        raise UsageError(
            f"'{value}' is ambiguous, could be {_quote_choices(candidates)}",
        )
    return None


def resolve_topic(value: str, commands: Sequence[str]) -> str:
    """Resolve a ``mirari help`` argument to a topic name.

    The valid topics are :data:`TOPICS_TOPIC` and the registered
    *commands*.

    Raises
    ------
    UnknownTopicError
        If *value* matches no topic.
    UsageError
        If *value* is an ambiguous prefix.
    """
    topics = [TOPICS_TOPIC, *commands]
    try:
        topic = match_choice(value, topics)
    except UsageError as exc:
        raise UnknownTopicError(str(exc), command="help") from exc
    if topic is None:
        raise UnknownTopicError(
            f"invalid value '{value}', expected one of {_quote_choices(topics)}",
            command="help",
            hint="Use 'mirari help topics' to list the help topics.",
        )
    return topic
