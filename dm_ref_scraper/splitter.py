"""Split the monolithic reference HTML into ordered page fragments.

The exported reference is a single HTML document in which pages are separated
by a literal horizontal rule. There is no escaping mechanism, so a delimiter
that appears inside a page's own content (for example in a code sample) will
split that page in two.

Example
-------
>>> from dm_ref_scraper.splitter import split_reference
>>> split_reference("<p>a</p><hr><p>b</p>")
['<p>a</p>', '<p>b</p>']
"""

from __future__ import annotations

from ._constants import DEFAULT_DELIMITER


def split_reference(raw: str, delimiter: str = DEFAULT_DELIMITER) -> list[str]:
    """Return the fragments of ``raw`` separated by ``delimiter``, in order.

    Parameters
    ----------
    raw : str
        Entire reference document.
    delimiter : str, optional
        Literal separator token; defaults to ``"<hr>"``.

    Returns
    -------
    list[str]
        Raw fragments in source order. Empty input yields a single empty
        fragment, which pass 1 drops because it carries no named anchor.

    Raises
    ------
    ValueError
        If ``delimiter`` is empty.
    """
    if not delimiter:
        msg = "The page delimiter must be a non-empty string."
        raise ValueError(msg)
    return raw.split(delimiter)


__all__ = ["split_reference"]
