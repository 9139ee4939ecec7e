"""Size estimates for an export artifact: lines, characters and tokens.

Exact token counts use OpenAI's tiktoken library, installed through the
``token_counting`` extra. Without a model the counter still reports lines and
characters, and :func:`approximate_tokens` gives the rough four-characters-per-token
estimate shown next to a generated prompt.
"""

import importlib.util
import math
from collections import namedtuple
from typing import Any, Optional

from dir2prompt.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])

CHARACTERS_PER_TOKEN = 4


def approximate_tokens(text: str) -> int:
    """Estimate a token count without a tokenizer.

    Example:
        >>> approximate_tokens("")
        0
        >>> approximate_tokens("Hello world")
        3
    """
    return math.ceil(len(text) / CHARACTERS_PER_TOKEN)


def tiktoken_available() -> bool:
    return importlib.util.find_spec("tiktoken") is not None


class TokenCounter:
    """Counter for tokens, lines, and characters in export text.

    Token counting requires both a model name and the tiktoken library. With no model,
    token counts are None and only lines and characters are counted.

    Attributes:
        model (Optional[str]): Model whose tokenizer is used, or None.
        encoder (Optional[Any]): The tiktoken encoder, or None when tokens are not counted.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("first\\nsecond")
        CountResult(lines=1, tokens=None, characters=12)
        >>> counter.get_total_characters()
        12

    Raises:
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken has no tokenizer for the given model.
    """

    def __init__(self, model: Optional[str] = None):
        self.model = model
        self.encoder: Optional[Any] = None
        if model is not None:
            if not tiktoken_available():
                raise TokenizerNotAvailableError()
            self.encoder = self._get_encoder(model)
        self.reset_counts()

    @staticmethod
    def _get_encoder(model: str) -> Any:
        # Imported lazily so the package works without the optional extra
        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider a well-supported model like "
                "'gpt-4' (cl100k_base encoding); its counts are a useful approximation for most "
                "modern language models."
            ) from None

    @property
    def counts_tokens(self) -> bool:
        return self.encoder is not None

    def count(self, text: str) -> CountResult:
        """Count lines, tokens, and characters in ``text`` and add them to the totals.

        Raises:
            TokenizationError: If token counting is enabled but the tokenizer fails.
        """
        lines = text.count("\n")
        characters = len(text)
        tokens = None
        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {e}") from e
            self._total_tokens = (self._total_tokens or 0) + tokens

        self._total_lines += lines
        self._total_characters += characters
        return CountResult(lines=lines, tokens=tokens, characters=characters)

    def get_total_tokens(self) -> Optional[int]:
        """Total tokens counted so far, or None when token counting is disabled."""
        return self._total_tokens

    def get_total_lines(self) -> int:
        return self._total_lines

    def get_total_characters(self) -> int:
        return self._total_characters

    def get_estimated_tokens(self) -> int:
        """Exact total when a tokenizer is in use, otherwise the character-based estimate."""
        if self._total_tokens is not None:
            return self._total_tokens
        return math.ceil(self._total_characters / CHARACTERS_PER_TOKEN)

    def reset_counts(self) -> None:
        """Reset all running totals, keeping the tokenizer configuration."""
        self._total_tokens: Optional[int] = 0 if self.encoder is not None else None
        self._total_lines = 0
        self._total_characters = 0
