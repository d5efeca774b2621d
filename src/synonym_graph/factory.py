"""Filter factories: settings in, synonym-rewritten token streams out."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from synonym_graph.cache import DictionaryCache, content_hash
from synonym_graph.config import FilterSettings, _reject
from synonym_graph.dictionary import SynonymDictionary
from synonym_graph.exceptions import BuildError, SynonymGraphError
from synonym_graph.matcher import SynonymFilter, SynonymGraphFilter
from synonym_graph.models import Token
from synonym_graph.synonym_map import SynonymMap
from synonym_graph.tokenizer import Tokenizer, WhitespaceTokenizer

logger = logging.getLogger(__name__)


class _FilterFactory:
    def __init__(
        self,
        settings: FilterSettings,
        tokenizer: Tokenizer | None = None,
    ) -> None:
        self.settings = settings
        self.tokenizer: Tokenizer = (
            tokenizer if tokenizer is not None else WhitespaceTokenizer()
        )
        self.synonym_map = self._build_guarded()

    def _build_guarded(self) -> SynonymMap:
        try:
            return self._build()
        except SynonymGraphError:
            raise
        except Exception as e:
            raise BuildError("failed to build synonyms") from e

    def _build(self) -> SynonymMap:
        raise NotImplementedError

    def _new_dictionary(self) -> SynonymDictionary:
        return SynonymDictionary(
            self.tokenizer, restrict_mode=self.settings.restrict_mode
        )


class SynonymFilterFactory(_FilterFactory):
    """Flat filter over either text dictionaries or a binary dump."""

    def _build(self) -> SynonymMap:
        s = self.settings
        if bool(s.dict_list) == bool(s.dict_bin_path):
            raise _reject("Specify exactly one of 'dict_list' and 'dict_bin_path'")

        if s.dict_bin_path:
            return SynonymMap.read(s.resolve(s.dict_bin_path), self.tokenizer)

        dictionary = self._new_dictionary()
        for path in s.dict_list:
            dictionary.load_dictionary(s.resolve(path))
        return SynonymMap.Builder(dedup=True).build(dictionary)

    def create(self, tokens: Iterable[Token]) -> Iterable[Token]:
        if self.synonym_map.transducer is None:
            return tokens
        return SynonymFilter(
            tokens, self.synonym_map, ignore_case=self.settings.ignore_case
        )


class SynonymGraphFilterFactory(_FilterFactory):
    """Graph filter over a system dictionary plus optional user dictionaries."""

    def __init__(
        self,
        settings: FilterSettings,
        tokenizer: Tokenizer | None = None,
        cache: DictionaryCache | None = None,
    ) -> None:
        self.cache = cache if cache is not None else DictionaryCache()
        super().__init__(settings, tokenizer)

    def _build(self) -> SynonymMap:
        s = self.settings
        if not s.system_dict:
            raise _reject("'system_dict' is required")
        if not s.user_dict_list:
            logger.warning("No 'user_dict_list' configured; using the system dictionary only")

        system_path = s.resolve(s.system_dict)
        if s.enable_cache:
            dictionary = self._cached_system_dictionary(system_path).clone()
        else:
            dictionary = self._new_dictionary()
            dictionary.load_dictionary(system_path)

        for path in s.user_dict_list:
            dictionary.load_dictionary(s.resolve(path), required=False)
        return SynonymMap.Builder(dedup=True).build(dictionary)

    def _cached_system_dictionary(self, path: Path) -> SynonymDictionary:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        key = (self.settings.system_dict_id, content_hash(path))

        def build() -> SynonymDictionary:
            dictionary = self._new_dictionary()
            dictionary.load_dictionary(path)
            return dictionary

        return self.cache.get_or_build(key, build)

    def create(self, tokens: Iterable[Token]) -> Iterable[Token]:
        if self.synonym_map.transducer is None:
            return tokens
        return SynonymGraphFilter(
            tokens, self.synonym_map, ignore_case=self.settings.ignore_case
        )
