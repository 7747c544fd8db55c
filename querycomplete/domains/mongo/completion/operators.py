"""MongoDB query and update operators."""

from __future__ import annotations

from typing import NamedTuple


class MongoOperator(NamedTuple):
    name: str
    category: str
    description: str
    syntax: str
    example: str


_op = MongoOperator

# fmt: off
# Comparison operators
COMPARISON_OPERATORS = (
    _op("$eq", "comparison", "Matches values equal to a specified value", '{ field: { $eq: value } }', '{ "status": { "$eq": "active" } }'),
    _op("$ne", "comparison", "Matches values not equal to a specified value", '{ field: { $ne: value } }', '{ "status": { "$ne": "deleted" } }'),
    _op("$gt", "comparison", "Matches values greater than a specified value", '{ field: { $gt: value } }', '{ "age": { "$gt": 18 } }'),
    _op("$gte", "comparison", "Matches values greater than or equal to a specified value", '{ field: { $gte: value } }', '{ "age": { "$gte": 21 } }'),
    _op("$lt", "comparison", "Matches values less than a specified value", '{ field: { $lt: value } }', '{ "price": { "$lt": 100 } }'),
    _op("$lte", "comparison", "Matches values less than or equal to a specified value", '{ field: { $lte: value } }', '{ "price": { "$lte": 50 } }'),
    _op("$in", "comparison", "Matches any value in an array", '{ field: { $in: [val1, val2, ...] } }', '{ "status": { "$in": ["active", "pending"] } }'),
    _op("$nin", "comparison", "Matches none of the values in an array", '{ field: { $nin: [val1, val2, ...] } }', '{ "status": { "$nin": ["deleted", "archived"] } }'),
)

# Logical operators
LOGICAL_OPERATORS = (
    _op("$and", "logical", "Joins query clauses with a logical AND", '{ $and: [ { expr1 }, { expr2 }, ... ] }', '{ "$and": [{ "status": "active" }, { "age": { "$gte": 18 } }] }'),
    _op("$or", "logical", "Joins query clauses with a logical OR", '{ $or: [ { expr1 }, { expr2 }, ... ] }', '{ "$or": [{ "status": "active" }, { "role": "admin" }] }'),
    _op("$not", "logical", "Inverts the effect of a query expression", '{ field: { $not: { operator-expression } } }', '{ "price": { "$not": { "$gt": 100 } } }'),
    _op("$nor", "logical", "Joins query clauses with a logical NOR", '{ $nor: [ { expr1 }, { expr2 }, ... ] }', '{ "$nor": [{ "status": "deleted" }, { "archived": true }] }'),
)

# Element operators
ELEMENT_OPERATORS = (
    _op("$exists", "element", "Matches documents that have the specified field", '{ field: { $exists: boolean } }', '{ "email": { "$exists": true } }'),
    _op("$type", "element", "Selects documents if a field is of the specified type", '{ field: { $type: BSONType } }', '{ "age": { "$type": "number" } }'),
)

# Evaluation operators
EVALUATION_OPERATORS = (
    _op("$regex", "evaluation", "Selects documents where values match a regex pattern", '{ field: { $regex: pattern, $options: opts } }', '{ "name": { "$regex": "^John", "$options": "i" } }'),
    _op("$expr", "evaluation", "Allows use of aggregation expressions within the query", '{ $expr: { expression } }', '{ "$expr": { "$gt": ["$spent", "$budget"] } }'),
    _op("$mod", "evaluation", "Performs a modulo operation on the value of a field", '{ field: { $mod: [divisor, remainder] } }', '{ "qty": { "$mod": [4, 0] } }'),
    _op("$text", "evaluation", "Performs text search", '{ $text: { $search: string, $language: lang, $caseSensitive: bool } }', '{ "$text": { "$search": "coffee shop" } }'),
    _op("$where", "evaluation", "Matches documents that satisfy a JavaScript expression", '{ $where: jsExpr }', '{ "$where": "this.credits > this.debits" }'),
    _op("$jsonSchema", "evaluation", "Validate documents against the given JSON Schema", '{ $jsonSchema: schemaObject }', '{ "$jsonSchema": { "required": ["name", "email"] } }'),
)

# Array operators
ARRAY_OPERATORS = (
    _op("$all", "array", "Matches arrays that contain all specified elements", '{ field: { $all: [val1, val2, ...] } }', '{ "tags": { "$all": ["mongodb", "database"] } }'),
    _op("$elemMatch", "array", "Matches documents with array field containing element matching all conditions", '{ field: { $elemMatch: { condition1, condition2, ... } } }', '{ "results": { "$elemMatch": { "score": { "$gt": 80 }, "item": "abc" } } }'),
    _op("$size", "array", "Matches arrays with specific number of elements", '{ field: { $size: number } }', '{ "tags": { "$size": 3 } }'),
)

# Bitwise operators
BITWISE_OPERATORS = (
    _op("$bitsAllClear", "bitwise", "Matches where all bit positions are clear", '{ field: { $bitsAllClear: bitmask } }', '{ "flags": { "$bitsAllClear": [1, 5] } }'),
    _op("$bitsAllSet", "bitwise", "Matches where all bit positions are set", '{ field: { $bitsAllSet: bitmask } }', '{ "flags": { "$bitsAllSet": [1, 5] } }'),
    _op("$bitsAnyClear", "bitwise", "Matches where any bit position is clear", '{ field: { $bitsAnyClear: bitmask } }', '{ "flags": { "$bitsAnyClear": [1, 5] } }'),
    _op("$bitsAnySet", "bitwise", "Matches where any bit position is set", '{ field: { $bitsAnySet: bitmask } }', '{ "flags": { "$bitsAnySet": [1, 5] } }'),
)

# Geospatial operators
GEOSPATIAL_OPERATORS = (
    _op("$geoWithin", "geospatial", "Selects geometries within a bounding GeoJSON geometry", '{ field: { $geoWithin: { $geometry: geoJSON } } }', '{ "location": { "$geoWithin": { "$centerSphere": [[-73.93, 40.82], 5/3963.2] } } }'),
    _op("$geoIntersects", "geospatial", "Selects geometries that intersect with a GeoJSON geometry", '{ field: { $geoIntersects: { $geometry: geoJSON } } }', '{ "location": { "$geoIntersects": { "$geometry": { "type": "Point", "coordinates": [-73.93, 40.82] } } } }'),
    _op("$near", "geospatial", "Returns geospatial objects in proximity to a point", '{ field: { $near: { $geometry: point, $maxDistance: meters } } }', '{ "location": { "$near": { "$geometry": { "type": "Point", "coordinates": [-73.93, 40.82] }, "$maxDistance": 5000 } } }'),
    _op("$nearSphere", "geospatial", "Returns geospatial objects in proximity using spherical geometry", '{ field: { $nearSphere: { $geometry: point, $maxDistance: meters } } }', '{ "location": { "$nearSphere": { "$geometry": { "type": "Point", "coordinates": [-73.93, 40.82] }, "$maxDistance": 5000 } } }'),
)

# Update field operators
UPDATE_FIELD_OPERATORS = (
    _op("$set", "update_field", "Sets the value of a field", '{ $set: { field: value, ... } }', '{ "$set": { "status": "active", "updatedAt": new Date() } }'),
    _op("$unset", "update_field", "Removes a field from a document", '{ $unset: { field: "", ... } }', '{ "$unset": { "tempField": "" } }'),
    _op("$inc", "update_field", "Increments a field by a specified value", '{ $inc: { field: amount, ... } }', '{ "$inc": { "views": 1, "score": 5 } }'),
    _op("$mul", "update_field", "Multiplies a field by a specified value", '{ $mul: { field: number, ... } }', '{ "$mul": { "price": 1.1 } }'),
    _op("$rename", "update_field", "Renames a field", '{ $rename: { oldName: newName, ... } }', '{ "$rename": { "nickname": "alias" } }'),
    _op("$min", "update_field", "Only updates if the value is less than the existing value", '{ $min: { field: value, ... } }', '{ "$min": { "lowestScore": 50 } }'),
    _op("$max", "update_field", "Only updates if the value is greater than the existing value", '{ $max: { field: value, ... } }', '{ "$max": { "highestScore": 100 } }'),
    _op("$currentDate", "update_field", "Sets the value of a field to the current date", '{ $currentDate: { field: true | { $type: "date" | "timestamp" } } }', '{ "$currentDate": { "lastModified": true } }'),
    _op("$setOnInsert", "update_field", "Sets fields only when inserting during an upsert", '{ $setOnInsert: { field: value, ... } }', '{ "$setOnInsert": { "createdAt": new Date() } }'),
)

# Update array operators
UPDATE_ARRAY_OPERATORS = (
    _op("$push", "update_array", "Adds an element to an array", '{ $push: { field: value } }', '{ "$push": { "tags": "new-tag" } }'),
    _op("$pop", "update_array", "Removes the first or last element of an array", '{ $pop: { field: 1 | -1 } }', '{ "$pop": { "items": -1 } }'),
    _op("$pull", "update_array", "Removes all instances of a value from an array", '{ $pull: { field: value | condition } }', '{ "$pull": { "tags": "deprecated" } }'),
    _op("$pullAll", "update_array", "Removes all matching values from an array", '{ $pullAll: { field: [val1, val2, ...] } }', '{ "$pullAll": { "tags": ["old", "deprecated"] } }'),
    _op("$addToSet", "update_array", "Adds elements to an array only if they don't exist", '{ $addToSet: { field: value } }', '{ "$addToSet": { "tags": "unique-tag" } }'),
    _op("$each", "update_array", "Modifier for $push and $addToSet to add multiple elements", '{ $push: { field: { $each: [val1, val2] } } }', '{ "$push": { "tags": { "$each": ["tag1", "tag2"] } } }'),
    _op("$slice", "update_array", "Modifier for $push to limit array size", '{ $push: { field: { $each: [...], $slice: num } } }', '{ "$push": { "scores": { "$each": [90], "$slice": -5 } } }'),
    _op("$sort", "update_array", "Modifier for $push to sort array elements", '{ $push: { field: { $each: [...], $sort: spec } } }', '{ "$push": { "scores": { "$each": [90], "$sort": -1 } } }'),
    _op("$position", "update_array", "Modifier for $push to specify position", '{ $push: { field: { $each: [...], $position: num } } }', '{ "$push": { "items": { "$each": ["new"], "$position": 0 } } }'),
)

# fmt: on

ALL_QUERY_OPERATORS: tuple[MongoOperator, ...] = (
    COMPARISON_OPERATORS
    + LOGICAL_OPERATORS
    + ELEMENT_OPERATORS
    + EVALUATION_OPERATORS
    + ARRAY_OPERATORS
    + BITWISE_OPERATORS
    + GEOSPATIAL_OPERATORS
)

ALL_UPDATE_OPERATORS: tuple[MongoOperator, ...] = UPDATE_FIELD_OPERATORS + UPDATE_ARRAY_OPERATORS

ALL_OPERATORS: tuple[MongoOperator, ...] = ALL_QUERY_OPERATORS + ALL_UPDATE_OPERATORS

OPERATOR_MAP: dict[str, MongoOperator] = {op.name: op for op in ALL_OPERATORS}


def get_operator(name: str) -> MongoOperator | None:
    return OPERATOR_MAP.get(name)


def _search(operators: tuple[MongoOperator, ...], prefix: str) -> list[MongoOperator]:
    lower = prefix.lower()
    return [op for op in operators if op.name.lower().startswith(lower)]


def search_operators(prefix: str) -> list[MongoOperator]:
    """Search all operators by name prefix, in table order."""
    return _search(ALL_OPERATORS, prefix)


def search_query_operators(prefix: str) -> list[MongoOperator]:
    return _search(ALL_QUERY_OPERATORS, prefix)


def search_update_operators(prefix: str) -> list[MongoOperator]:
    return _search(ALL_UPDATE_OPERATORS, prefix)
