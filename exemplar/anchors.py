from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Union

from exemplar.classifier import Classifier, TokenClass

if TYPE_CHECKING:
    from collections.abc import Callable

    from exemplar.tokens import Token

logger = logging.getLogger(__name__)

_ClassLike = Union[TokenClass, str]
AnchorPattern = Union[_ClassLike, Sequence[_ClassLike]]


def _as_class(item: _ClassLike, classify: Callable[[str], TokenClass]) -> TokenClass:
    if isinstance(item, TokenClass):
        return item
    return classify(item)


def _as_window(
    pattern: AnchorPattern, classify: Callable[[str], TokenClass]
) -> tuple[TokenClass, ...]:
    if isinstance(pattern, (TokenClass, str)):
        return (_as_class(pattern, classify),)
    return tuple(_as_class(item, classify) for item in pattern)


def find_indices(
    stream: Sequence[Token],
    patterns: Sequence[AnchorPattern],
    start: int = 0,
    classifier: Callable[[str], TokenClass] | None = None,
) -> list[int]:
    """Find each of ``patterns`` in ``stream``, in order.

    A pattern is a class, a token text (classified with ``classifier``) or a
    fixed-width sequence of them, which matches where every position of the
    window matches. Only the current pattern is tried at each stream position
    starting at ``start``; once it matches, the next pattern is searched for
    from the following position on.

    Return one index per pattern: where its window begins, or ``-1`` for the
    first pattern that could not be found and every pattern after it.
    """
    classify = classifier or Classifier()
    windows = [_as_window(p, classify) for p in patterns]
    found: list[int] = []
    current = 0
    size = len(stream)
    for i in range(max(start, 0), size):
        if current == len(windows):
            break
        window = windows[current]
        if i + len(window) > size:
            continue
        if all(stream[i + k].cls == cls for k, cls in enumerate(window)):
            logger.debug("Anchor %(anchor)d found at %(index)d", {"anchor": current, "index": i})
            found.append(i)
            current += 1
    found.extend([-1] * (len(windows) - current))
    return found
