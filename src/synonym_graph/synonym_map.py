"""SynonymMap: a loaded dictionary plus its compiled transducer."""

from __future__ import annotations

import json
import logging
import struct
from functools import cached_property
from pathlib import Path

from synonym_graph.codec import decode_ids, encode_ids
from synonym_graph.dictionary import SynonymDictionary
from synonym_graph.exceptions import DictionaryLoadError
from synonym_graph.models import WORD_SEPARATOR
from synonym_graph.tokenizer import Tokenizer
from synonym_graph.transducer import Transducer, TransducerBuilder
from synonym_graph.vocabulary import Vocabulary

logger = logging.getLogger(__name__)

MAGIC = b"SYNG"
FORMAT_VERSION = 1
_LENGTH = struct.Struct(">Q")


class SynonymMap:
    """Immutable match structure shared by every filter built from it.

    ``transducer`` is ``None`` when no key has any related word; filters
    then pass tokens through untouched.
    """

    def __init__(
        self,
        dictionary: SynonymDictionary,
        transducer: Transducer | None,
        max_horizontal_context: int,
    ) -> None:
        self.dictionary = dictionary
        self.transducer = transducer
        self.max_horizontal_context = max_horizontal_context

    def related_ids(self, key: str) -> list[int]:
        if self.transducer is None:
            return []
        output = self.transducer.get(key)
        if output is None:
            return []
        return decode_ids(output)

    def related_words(self, key: str) -> list[str]:
        return self.dictionary.vocabulary.ids_to_words(self.related_ids(key))

    # ------------------------------------------------------------------
    # Case-folded view
    # ------------------------------------------------------------------

    @cached_property
    def _folded(self) -> tuple[Vocabulary, dict[str, list[str]]]:
        vocab = Vocabulary()
        originals: dict[str, list[str]] = {}
        for key in self.dictionary.sorted_keys():
            folded = key.lower()
            if folded not in originals:
                originals[folded] = []
                vocab.insert(folded)
            originals[folded].append(key)
        return vocab, originals

    def match_vocabulary(self, ignore_case: bool = False) -> Vocabulary:
        """Vocabulary used for matching, lower-cased when ``ignore_case``."""
        if ignore_case:
            return self._folded[0]
        return self.dictionary.vocabulary

    def dictionary_keys(self, key: str, ignore_case: bool = False) -> list[str]:
        """Dictionary keys a (possibly lower-cased) match refers to.

        With ``ignore_case`` every differently-cased key folding to ``key`` is
        returned, in sorted order.
        """
        if ignore_case:
            return list(self._folded[1].get(key, [key]))
        return [key]

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------

    class Builder:
        """Compiles a loaded SynonymDictionary into a SynonymMap."""

        def __init__(self, dedup: bool = True) -> None:
            self.dedup = dedup

        def build(self, dictionary: SynonymDictionary) -> SynonymMap:
            """Build the transducer.

            Raises:
                BuildError: If the key order invariant is violated.
            """
            keys = dictionary.sorted_keys()
            builder = TransducerBuilder()
            max_context = 0
            for key in keys:
                max_context = max(max_context, key.count(WORD_SEPARATOR) + 1)
                ids = dictionary.synonym_ids_for_key(key)
                if not ids:
                    continue
                if self.dedup:
                    ids = list(dict.fromkeys(ids))
                builder.add(key, encode_ids(ids))

            transducer = builder.finish()
            logger.info(
                "Built synonym map: %d keys with synonyms out of %d, "
                "max_horizontal_context=%d",
                len(builder), len(keys), max_context,
            )
            return SynonymMap(dictionary, transducer, max_context)

    # ------------------------------------------------------------------
    # Binary form
    # ------------------------------------------------------------------

    def dump(self, path: str | Path) -> None:
        """Write the dictionary snapshot and the transducer to ``path``."""
        snapshot = self.dictionary.to_snapshot()
        snapshot["max_horizontal_context"] = self.max_horizontal_context
        body = json.dumps(snapshot, ensure_ascii=False).encode("utf-8")
        fst = self.transducer.to_bytes() if self.transducer is not None else b""

        path = Path(path)
        with open(path, "wb") as f:
            f.write(MAGIC)
            f.write(bytes([FORMAT_VERSION]))
            f.write(_LENGTH.pack(len(body)))
            f.write(body)
            f.write(_LENGTH.pack(len(fst)))
            f.write(fst)
        logger.info("Dumped synonym map to %s", path)

    @classmethod
    def read(cls, path: str | Path, tokenizer: Tokenizer | None = None) -> SynonymMap:
        """Restore a map written by :meth:`dump`.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            DictionaryLoadError: If the file is not a valid dump.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        data = path.read_bytes()

        header = len(MAGIC) + 1
        if data[:len(MAGIC)] != MAGIC:
            raise DictionaryLoadError(f"{path} is not a synonym map dump")
        if len(data) < header or data[len(MAGIC)] != FORMAT_VERSION:
            raise DictionaryLoadError(f"{path}: unsupported format version")

        body, pos = _read_section(data, header, path)
        fst, pos = _read_section(data, pos, path)
        if pos != len(data):
            raise DictionaryLoadError(f"{path}: trailing bytes after transducer")

        try:
            snapshot = json.loads(body.decode("utf-8"))
            dictionary = SynonymDictionary.from_snapshot(snapshot, tokenizer)
            max_context = int(snapshot["max_horizontal_context"])
        except (ValueError, KeyError, TypeError) as e:
            raise DictionaryLoadError(f"{path}: corrupt dictionary snapshot: {e}") from e

        transducer = Transducer.from_bytes(fst) if fst else None
        logger.info("Restored synonym map from %s", path)
        return cls(dictionary, transducer, max_context)


def _read_section(data: bytes, pos: int, path: Path) -> tuple[bytes, int]:
    end = pos + _LENGTH.size
    if end > len(data):
        raise DictionaryLoadError(f"{path}: truncated section header")
    (size,) = _LENGTH.unpack_from(data, pos)
    if end + size > len(data):
        raise DictionaryLoadError(f"{path}: truncated section")
    return data[end:end + size], end + size
