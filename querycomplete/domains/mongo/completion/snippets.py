"""Canned MongoDB command templates and the top-level command properties."""

from __future__ import annotations

from typing import NamedTuple

from querycomplete.domains.sql.completion.snippets import render_template


class MongoSnippet(NamedTuple):
    label: str
    detail: str
    template: str
    info: str

    @property
    def text(self) -> str:
        return render_template(self.template)


class RootProperty(NamedTuple):
    name: str
    detail: str
    info: str


ROOT_PROPERTIES: tuple[RootProperty, ...] = (
    RootProperty("collection", "string", "Collection to query"),
    RootProperty("find", "object", "Query filter for find operation"),
    RootProperty("aggregate", "array", "Aggregation pipeline stages"),
    RootProperty("pipeline", "array", "Aggregation pipeline (alternative)"),
    RootProperty("projection", "object", "Fields to include/exclude"),
    RootProperty("sort", "object", "Sort specification"),
    RootProperty("limit", "number", "Maximum documents to return"),
    RootProperty("skip", "number", "Documents to skip"),
    RootProperty("hint", "object/string", "Index hint"),
    RootProperty("update", "object", "Update operations"),
    RootProperty("upsert", "boolean", "Insert if not found"),
    RootProperty("multi", "boolean", "Update multiple documents"),
)

# Root keys whose value is a boolean flag
BOOLEAN_PROPERTIES = frozenset({"upsert", "multi"})


MONGO_SNIPPETS: tuple[MongoSnippet, ...] = (
    MongoSnippet(
        "find-basic",
        "Basic Find",
        """{
  "collection": "${1:collectionName}",
  "find": { "${2:field}": "${3:value}" },
  "limit": 10
}""",
        "Simple find query",
    ),
    MongoSnippet(
        "find-operators",
        "Find with Operators",
        """{
  "collection": "${1:collectionName}",
  "find": {
    "${2:field}": { "$gte": ${3:0} },
    "${4:status}": { "$in": ["${5:active}", "${6:pending}"] }
  },
  "projection": { "${7:field1}": 1, "${8:field2}": 1 },
  "sort": { "${9:createdAt}": -1 },
  "limit": 20
}""",
        "Find with comparison and projection",
    ),
    MongoSnippet(
        "find-text-search",
        "Text Search",
        """{
  "collection": "${1:collectionName}",
  "find": {
    "$text": { "$search": "${2:search terms}" }
  },
  "projection": { "score": { "$meta": "textScore" } },
  "sort": { "score": { "$meta": "textScore" } }
}""",
        "Full-text search query",
    ),
    MongoSnippet(
        "aggregate-basic",
        "Basic Aggregation",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$match": { "${2:status}": "${3:active}" } },
    { "$group": {
        "_id": "$${4:category}",
        "count": { "$sum": 1 }
      }
    },
    { "$sort": { "count": -1 } }
  ]
}""",
        "Group and count aggregation",
    ),
    MongoSnippet(
        "aggregate-lookup",
        "Aggregation with Lookup",
        """{
  "collection": "${1:orders}",
  "pipeline": [
    { "$lookup": {
        "from": "${2:users}",
        "localField": "${3:userId}",
        "foreignField": "${4:_id}",
        "as": "${5:user}"
      }
    },
    { "$unwind": "$${5:user}" },
    { "$project": {
        "orderId": 1,
        "userName": "$${5:user}.name",
        "total": 1
      }
    }
  ]
}""",
        "Join with another collection",
    ),
    MongoSnippet(
        "aggregate-group-stats",
        "Group with Statistics",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$match": { "${2:field}": { "$exists": true } } },
    { "$group": {
        "_id": "$${3:category}",
        "count": { "$sum": 1 },
        "total": { "$sum": "$${4:amount}" },
        "avg": { "$avg": "$${4:amount}" },
        "min": { "$min": "$${4:amount}" },
        "max": { "$max": "$${4:amount}" }
      }
    },
    { "$sort": { "total": -1 } }
  ]
}""",
        "Statistical aggregation by group",
    ),
    MongoSnippet(
        "aggregate-date",
        "Date Aggregation",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$match": {
        "${2:createdAt}": {
          "$gte": { "$date": "${3:2023-01-01T00:00:00Z}" },
          "$lt": { "$date": "${4:2024-01-01T00:00:00Z}" }
        }
      }
    },
    { "$group": {
        "_id": {
          "year": { "$year": "$${2:createdAt}" },
          "month": { "$month": "$${2:createdAt}" }
        },
        "count": { "$sum": 1 }
      }
    },
    { "$sort": { "_id.year": 1, "_id.month": 1 } }
  ]
}""",
        "Group by date parts",
    ),
    MongoSnippet(
        "aggregate-bucket",
        "Bucket Aggregation",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$bucket": {
        "groupBy": "$${2:price}",
        "boundaries": [0, 50, 100, 200, 500],
        "default": "Other",
        "output": {
          "count": { "$sum": 1 },
          "items": { "$push": "$${3:name}" }
        }
      }
    }
  ]
}""",
        "Bucket documents by value ranges",
    ),
    MongoSnippet(
        "aggregate-facet",
        "Faceted Search",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$match": { "${2:status}": "${3:active}" } },
    { "$facet": {
        "byCategory": [
          { "$sortByCount": "$${4:category}" }
        ],
        "byPrice": [
          { "$bucket": {
              "groupBy": "$${5:price}",
              "boundaries": [0, 100, 500, 1000]
            }
          }
        ],
        "total": [
          { "$count": "count" }
        ]
      }
    }
  ]
}""",
        "Multiple aggregations in one query",
    ),
    MongoSnippet(
        "aggregate-unwind",
        "Unwind Array",
        """{
  "collection": "${1:collectionName}",
  "pipeline": [
    { "$match": { "${2:tags}": { "$exists": true } } },
    { "$unwind": {
        "path": "$${2:tags}",
        "preserveNullAndEmptyArrays": false
      }
    },
    { "$group": {
        "_id": "$${2:tags}",
        "count": { "$sum": 1 }
      }
    },
    { "$sort": { "count": -1 } }
  ]
}""",
        "Deconstruct and analyze arrays",
    ),
    MongoSnippet(
        "update-set",
        "Update with $set",
        """{
  "collection": "${1:collectionName}",
  "find": { "${2:_id}": "${3:id}" },
  "update": {
    "$set": {
      "${4:field}": "${5:value}",
      "updatedAt": { "$date": "now" }
    }
  }
}""",
        "Update document fields",
    ),
    MongoSnippet(
        "update-array",
        "Update Array",
        """{
  "collection": "${1:collectionName}",
  "find": { "${2:_id}": "${3:id}" },
  "update": {
    "$push": {
      "${4:items}": {
        "$each": [${5:newItem}],
        "$position": 0
      }
    }
  }
}""",
        "Push to array with options",
    ),
)
