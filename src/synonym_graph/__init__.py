__version__ = "0.1.0"

from .exceptions import (
    SynonymGraphError as SynonymGraphError,
    DictionaryParseError as DictionaryParseError,
    ConfigError as ConfigError,
    BuildError as BuildError,
    DictionaryLoadError as DictionaryLoadError,
)

from .models import (
    WORD_SEPARATOR as WORD_SEPARATOR,
    TYPE_WORD as TYPE_WORD,
    TYPE_SYNONYM as TYPE_SYNONYM,
    Entry as Entry,
    LoadType as LoadType,
    ParsedLine as ParsedLine,
    Token as Token,
    ValidationResult as ValidationResult,
    ValidationSeverity as ValidationSeverity,
)

from .tokenizer import (
    Tokenizer as Tokenizer,
    WhitespaceTokenizer as WhitespaceTokenizer,
    LowercaseTokenizer as LowercaseTokenizer,
)

from .vocabulary import Vocabulary as Vocabulary
from .relations import RelationGraph as RelationGraph
from .parser import parse_line as parse_line
from .dictionary import SynonymDictionary as SynonymDictionary
from .transducer import (
    Transducer as Transducer,
    TransducerBuilder as TransducerBuilder,
)
from .synonym_map import SynonymMap as SynonymMap

from .matcher import (
    Keep as Keep,
    Replace as Replace,
    SynonymFilter as SynonymFilter,
    SynonymGraphFilter as SynonymGraphFilter,
    edit_script as edit_script,
)

from .cache import DictionaryCache as DictionaryCache
from .config import (
    FilterSettings as FilterSettings,
    load_settings as load_settings,
)
from .factory import (
    SynonymFilterFactory as SynonymFilterFactory,
    SynonymGraphFilterFactory as SynonymGraphFilterFactory,
)
from .validator import validate_dictionary as validate_dictionary
from .lmf import lines_from_lmf as lines_from_lmf

__all__ = [
    # Errors
    "SynonymGraphError",
    "DictionaryParseError",
    "ConfigError",
    "BuildError",
    "DictionaryLoadError",
    # Models
    "WORD_SEPARATOR",
    "TYPE_WORD",
    "TYPE_SYNONYM",
    "Entry",
    "LoadType",
    "ParsedLine",
    "Token",
    "ValidationResult",
    "ValidationSeverity",
    # Tokenizers
    "Tokenizer",
    "WhitespaceTokenizer",
    "LowercaseTokenizer",
    # Core structures
    "Vocabulary",
    "RelationGraph",
    "parse_line",
    "SynonymDictionary",
    "Transducer",
    "TransducerBuilder",
    "SynonymMap",
    # Matching
    "Keep",
    "Replace",
    "SynonymFilter",
    "SynonymGraphFilter",
    "edit_script",
    # Host integration
    "DictionaryCache",
    "FilterSettings",
    "load_settings",
    "SynonymFilterFactory",
    "SynonymGraphFilterFactory",
    "validate_dictionary",
    "lines_from_lmf",
]
