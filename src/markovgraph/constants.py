"""
Shared constants for markovgraph.
"""

DEFAULT_MIN_TOKENS = 5
DEFAULT_GRAPH_FILENAME = "markov.dot"
DEFAULT_MESSAGES_FIELD = "messages"
DEFAULT_TEXT_FIELD = "text"
DEFAULT_CHAIN_DELIMITER = "-------------------"
LOG_PREFIX = "[markovgraph]"
