"""Text-preservation check for the first refinement pass.

The engine is told to keep the original wording, but compliance is not
guaranteed. The preservation rate is a quality signal only: it is logged,
never used to block or retry a pass.
"""

from typing import Iterable, Union

from tutorsim.models.transcript import Utterance

DEFAULT_PRESERVATION_THRESHOLD = 0.8


def tokenize(text: str) -> list[str]:
    """Lower-cased whitespace tokens."""
    return text.lower().split()


def joined_text(utterances: Iterable[Utterance]) -> str:
    return " ".join(u.text for u in utterances)


def preservation_rate(original: str, result: Union[str, Iterable[Utterance]]) -> float:
    """Fraction of original tokens that appear anywhere in the result.

    Each occurrence in ``original`` counts separately, but a result token
    only needs to be present once (presence, not multiset, semantics):
    "The cat sat on the mat" vs "the dog sat on the rug" gives 4/6.

    Args:
        original: Raw input text.
        result: Result text, or utterances whose texts are joined.

    Returns:
        Rate in [0.0, 1.0]; 1.0 when the original has no tokens.
    """
    original_tokens = tokenize(original)
    if not original_tokens:
        return 1.0

    result_text = result if isinstance(result, str) else joined_text(result)
    result_vocabulary = set(tokenize(result_text))

    preserved = sum(1 for token in original_tokens if token in result_vocabulary)
    return preserved / len(original_tokens)


def is_low_preservation(rate: float, threshold: float = DEFAULT_PRESERVATION_THRESHOLD) -> bool:
    return rate < threshold
