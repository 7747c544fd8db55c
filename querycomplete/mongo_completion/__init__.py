"""MongoDB completion engine.

Provides context-aware autocompletion for JSON command documents with:
- Structure tracking through nested objects and arrays
- Aggregation pipeline awareness ($match, $group, $project, $facet sub-pipelines)
- Query and update operators, stages, accumulators and expressions
- Field names and "$field" paths from sampled document schemas
- Command snippets for common find, aggregate and update shapes
"""

from querycomplete.domains.mongo.completion.completion import (
    HANDLERS,
    bucket_of,
    complete,
    get_completions,
)
from querycomplete.domains.mongo.completion.context import (
    find_collection,
    find_pipeline_index,
    get_context,
    get_current_word,
    scan,
)
from querycomplete.domains.mongo.completion.core import (
    Boost,
    FieldInfo,
    Frame,
    MetadataError,
    MongoContext,
    MongoContextKind,
    MongoMetadata,
)
from querycomplete.domains.mongo.completion.operators import (
    ALL_OPERATORS,
    ALL_QUERY_OPERATORS,
    ALL_UPDATE_OPERATORS,
    MongoOperator,
    get_operator,
    search_operators,
    search_query_operators,
    search_update_operators,
)
from querycomplete.domains.mongo.completion.snippets import MONGO_SNIPPETS, ROOT_PROPERTIES
from querycomplete.domains.mongo.completion.stages import (
    ALL_ACCUMULATORS,
    ALL_EXPRESSIONS,
    ALL_STAGES,
    SYSTEM_VARIABLES,
    AggregationEntry,
    get_accumulator,
    get_expression,
    get_stage,
    search_accumulators,
    search_expressions,
    search_stages,
)

__all__ = [
    "ALL_ACCUMULATORS",
    "ALL_EXPRESSIONS",
    "ALL_OPERATORS",
    "ALL_QUERY_OPERATORS",
    "ALL_STAGES",
    "ALL_UPDATE_OPERATORS",
    "AggregationEntry",
    "Boost",
    "FieldInfo",
    "Frame",
    "HANDLERS",
    "MONGO_SNIPPETS",
    "MetadataError",
    "MongoContext",
    "MongoContextKind",
    "MongoMetadata",
    "MongoOperator",
    "ROOT_PROPERTIES",
    "SYSTEM_VARIABLES",
    "bucket_of",
    "complete",
    "find_collection",
    "find_pipeline_index",
    "get_accumulator",
    "get_completions",
    "get_context",
    "get_current_word",
    "get_expression",
    "get_operator",
    "get_stage",
    "scan",
    "search_accumulators",
    "search_expressions",
    "search_operators",
    "search_query_operators",
    "search_stages",
    "search_update_operators",
]
