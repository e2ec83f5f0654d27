"""
Tokenization helpers for markovgraph.
"""

from __future__ import annotations

from typing import List


def to_words(text: str) -> List[str]:
    """
    Split text into whitespace-delimited tokens.

    Runs of whitespace count as one delimiter, so no empty tokens are produced.

    :param text: Source text.
    :type text: str
    :return: Tokens in order.
    :rtype: list[str]
    """
    return text.split()
