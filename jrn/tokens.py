"""
Token splitting shared by tag strings and editor argument strings.

    >>> split_tokens("+one two three")
    ['+one', 'two', 'three']
    >>> split_tokens("one,,two, three")
    ['one', 'two', 'three']
"""

from typing import Iterable, List

# Characters that separate tags typed on the command line or in a config file
TAG_DELIMITERS = frozenset(",_-/\\ ")

# Editor arguments keep dashes and commas ("-c", "+set ft=md")
ARG_DELIMITERS = frozenset(" \t")


def split_tokens(text: str, delimiters: Iterable[str] = TAG_DELIMITERS) -> List[str]:
    """
    Split text on any delimiter character.

    Runs of delimiters count as a single split point, so no empty tokens are
    produced, and a leading delimiter is dropped. Non-delimiter characters at
    the start of the first token are kept as they are. Text without any
    delimiter comes back as a single-element list.

    Args:
        text: String to split
        delimiters: Characters to split on

    Returns:
        List of tokens
    """
    delimiters = frozenset(delimiters)
    if not any(ch in delimiters for ch in text):
        return [text]

    tokens = []
    current = []
    for ch in text:
        if ch in delimiters:
            if current:
                tokens.append(''.join(current))
                current = []
        else:
            current.append(ch)

    if current:
        tokens.append(''.join(current))

    return tokens
