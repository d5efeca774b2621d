"""WN-LMF (WordNet XML) to dictionary lines."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from synonym_graph.exceptions import DictionaryLoadError
from synonym_graph.parser import CANCEL_PREFIX, MERGE_PREFIX, direction_marker

logger = logging.getLogger(__name__)


def lines_from_lmf(source: str | Path) -> Iterator[str]:
    """Yield one ADD line per synset, tagged with the synset's lexfile.

    Raises:
        FileNotFoundError: If ``source`` does not exist.
        DictionaryLoadError: If the XML cannot be parsed.
    """
    import wn.lmf

    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"File not found: {source}")

    try:
        resource = wn.lmf.load(str(source))
    except Exception as e:
        raise DictionaryLoadError(f"Failed to parse XML: {e}") from e

    for lex in resource.get("lexicons", []):
        yield from _lexicon_lines(lex)


def _usable(form: str) -> bool:
    return bool(form) and "," not in form and direction_marker(form) is None


def _leads_safely(form: str) -> bool:
    return not (form[0].isdecimal() or form.startswith((MERGE_PREFIX, CANCEL_PREFIX)))


def _lexicon_lines(lex: dict[str, Any]) -> Iterator[str]:
    members: dict[str, list[str]] = {}
    for entry in lex.get("entries", []):
        form = (entry.get("lemma", {}).get("writtenForm") or "").strip()
        if not _usable(form):
            logger.debug("Skipping lemma %r of entry %s", form, entry.get("id"))
            continue
        for sense in entry.get("senses", []):
            forms = members.setdefault(sense.get("synset", ""), [])
            if form not in forms:
                forms.append(form)

    for syn in lex.get("synsets", []):
        forms = members.get(syn.get("id", ""))
        if not forms:
            continue
        # a leading digit, '*' or '!' would change how the line is read
        forms = sorted(forms, key=lambda f: not _leads_safely(f))
        if not _leads_safely(forms[0]):
            logger.debug("Skipping synset %s: no form can lead the line", syn.get("id"))
            continue
        line = ",".join(forms)
        lexfile = syn.get("lexfile")
        if lexfile:
            line += f",({lexfile})"
        yield line
