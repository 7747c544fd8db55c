"""MongoDB aggregation pipeline stages, accumulators and expressions."""

from __future__ import annotations

from typing import NamedTuple


class AggregationEntry(NamedTuple):
    """A stage, accumulator or expression operator."""

    name: str
    category: str
    description: str
    syntax: str
    example: str


class SystemVariable(NamedTuple):
    name: str
    description: str


_entry = AggregationEntry

# fmt: off
# Filter stages
FILTER_STAGES = (
    _entry("$match", "filter", "Filters documents to pass only matching documents to the next stage", '{ $match: { query } }', '{ "$match": { "status": "active", "age": { "$gte": 18 } } }'),
    _entry("$limit", "filter", "Limits the number of documents passed to the next stage", '{ $limit: number }', '{ "$limit": 10 }'),
    _entry("$skip", "filter", "Skips a specified number of documents", '{ $skip: number }', '{ "$skip": 20 }'),
    _entry("$sample", "filter", "Randomly selects the specified number of documents", '{ $sample: { size: number } }', '{ "$sample": { "size": 5 } }'),
)

# Transform stages
TRANSFORM_STAGES = (
    _entry("$project", "transform", "Reshapes documents by including, excluding, or computing fields", '{ $project: { field: 1 | 0 | expression, ... } }', '{ "$project": { "name": 1, "fullName": { "$concat": ["$firstName", " ", "$lastName"] }, "_id": 0 } }'),
    _entry("$addFields", "transform", "Adds new fields to documents", '{ $addFields: { newField: expression, ... } }', '{ "$addFields": { "totalPrice": { "$multiply": ["$price", "$quantity"] } } }'),
    _entry("$set", "transform", "Alias for $addFields - adds or updates fields", '{ $set: { field: expression, ... } }', '{ "$set": { "status": "processed", "processedAt": "$$NOW" } }'),
    _entry("$unset", "transform", "Removes specified fields from documents", '{ $unset: field | [field1, field2, ...] }', '{ "$unset": ["tempField", "internalId"] }'),
    _entry("$replaceRoot", "transform", "Replaces the input document with the specified document", '{ $replaceRoot: { newRoot: expression } }', '{ "$replaceRoot": { "newRoot": "$embeddedDoc" } }'),
    _entry("$replaceWith", "transform", "Alias for $replaceRoot - replaces document with expression result", '{ $replaceWith: expression }', '{ "$replaceWith": { "$mergeObjects": ["$defaults", "$$ROOT"] } }'),
)

# Group stages
GROUP_STAGES = (
    _entry("$group", "group", "Groups documents by a specified expression and applies accumulators", '{ $group: { _id: expression, field: { accumulator: expr }, ... } }', '{ "$group": { "_id": "$category", "count": { "$sum": 1 }, "avgPrice": { "$avg": "$price" } } }'),
    _entry("$bucket", "group", "Categorizes documents into buckets based on specified boundaries", '{ $bucket: { groupBy: expr, boundaries: [...], default: label, output: {...} } }', '{ "$bucket": { "groupBy": "$price", "boundaries": [0, 100, 500, 1000], "default": "Other", "output": { "count": { "$sum": 1 } } } }'),
    _entry("$bucketAuto", "group", "Automatically creates buckets with evenly distributed documents", '{ $bucketAuto: { groupBy: expr, buckets: number, output: {...} } }', '{ "$bucketAuto": { "groupBy": "$price", "buckets": 4, "output": { "count": { "$sum": 1 }, "avgPrice": { "$avg": "$price" } } } }'),
    _entry("$count", "group", "Returns a count of documents at this stage", '{ $count: fieldName }', '{ "$count": "totalDocuments" }'),
    _entry("$sortByCount", "group", "Groups by expression, counts, and sorts by count descending", '{ $sortByCount: expression }', '{ "$sortByCount": "$category" }'),
)

# Sort stages
SORT_STAGES = (
    _entry("$sort", "sort", "Reorders documents based on specified sort key", '{ $sort: { field1: 1 | -1, field2: 1 | -1, ... } }', '{ "$sort": { "score": -1, "name": 1 } }'),
)

# Join stages
JOIN_STAGES = (
    _entry("$lookup", "join", "Performs a left outer join with another collection", '{ $lookup: { from: coll, localField: field, foreignField: field, as: outputArray } }', '{ "$lookup": { "from": "orders", "localField": "_id", "foreignField": "userId", "as": "userOrders" } }'),
    _entry("$graphLookup", "join", "Performs recursive search on a collection", '{ $graphLookup: { from: coll, startWith: expr, connectFromField: field, connectToField: field, as: output, maxDepth: num } }', '{ "$graphLookup": { "from": "employees", "startWith": "$reportsTo", "connectFromField": "reportsTo", "connectToField": "_id", "as": "reportingHierarchy" } }'),
)

# Reshape stages
RESHAPE_STAGES = (
    _entry("$unwind", "reshape", "Deconstructs an array field to output one document per element", '{ $unwind: "$arrayField" | { path: "$arrayField", includeArrayIndex: field, preserveNullAndEmptyArrays: bool } }', '{ "$unwind": { "path": "$items", "includeArrayIndex": "itemIndex", "preserveNullAndEmptyArrays": true } }'),
    _entry("$facet", "reshape", "Creates multiple pipelines from a single input", '{ $facet: { outputField1: [stage1, stage2, ...], outputField2: [...] } }', '{ "$facet": { "byCategory": [{ "$sortByCount": "$category" }], "byPrice": [{ "$bucket": { "groupBy": "$price", "boundaries": [0, 100, 500] } }] } }'),
    _entry("$redact", "reshape", "Restricts content for each document based on stored access levels", '{ $redact: expression }', '{ "$redact": { "$cond": { "if": { "$eq": ["$level", "public"] }, "then": "$$DESCEND", "else": "$$PRUNE" } } }'),
)

# Output stages
OUTPUT_STAGES = (
    _entry("$out", "output", "Writes the pipeline results to a collection", '{ $out: collectionName | { db: dbName, coll: collName } }', '{ "$out": "processedOrders" }'),
    _entry("$merge", "output", "Merges pipeline results into an existing collection", '{ $merge: { into: coll, on: field, whenMatched: action, whenNotMatched: action } }', '{ "$merge": { "into": "reports", "on": "_id", "whenMatched": "replace", "whenNotMatched": "insert" } }'),
)

# Other stages
OTHER_STAGES = (
    _entry("$unionWith", "other", "Combines documents from two collections", '{ $unionWith: { coll: collName, pipeline: [...] } }', '{ "$unionWith": { "coll": "archivedOrders", "pipeline": [{ "$match": { "status": "completed" } }] } }'),
    _entry("$setWindowFields", "other", "Performs window calculations on documents", '{ $setWindowFields: { partitionBy: expr, sortBy: spec, output: { field: { windowOp: expr, window: {...} } } } }', '{ "$setWindowFields": { "partitionBy": "$state", "sortBy": { "date": 1 }, "output": { "cumulative": { "$sum": "$sales", "window": { "documents": ["unbounded", "current"] } } } } }'),
    _entry("$densify", "other", "Creates new documents to fill gaps in time or value sequences", '{ $densify: { field: fieldPath, partitionByFields: [...], range: { step: num, unit: string, bounds: ... } } }', '{ "$densify": { "field": "timestamp", "range": { "step": 1, "unit": "hour", "bounds": "full" } } }'),
    _entry("$fill", "other", "Populates null and missing field values", '{ $fill: { partitionBy: expr, sortBy: spec, output: { field: { method: methodName } } } }', '{ "$fill": { "sortBy": { "date": 1 }, "output": { "value": { "method": "linear" } } } }'),
)

# fmt: on

ALL_STAGES: tuple[AggregationEntry, ...] = (
    FILTER_STAGES
    + TRANSFORM_STAGES
    + GROUP_STAGES
    + SORT_STAGES
    + JOIN_STAGES
    + RESHAPE_STAGES
    + OUTPUT_STAGES
    + OTHER_STAGES
)

STAGE_MAP: dict[str, AggregationEntry] = {s.name: s for s in ALL_STAGES}

# fmt: off
# Accumulators (used in $group, $bucket, $setWindowFields)
BASIC_ACCUMULATORS = (
    _entry("$sum", "basic", "Returns the sum of numeric values", '{ $sum: expression }', '{ "$sum": "$quantity" }'),
    _entry("$avg", "basic", "Returns the average of numeric values", '{ $avg: expression }', '{ "$avg": "$price" }'),
    _entry("$min", "basic", "Returns the minimum value", '{ $min: expression }', '{ "$min": "$age" }'),
    _entry("$max", "basic", "Returns the maximum value", '{ $max: expression }', '{ "$max": "$score" }'),
    _entry("$first", "basic", "Returns the first value in a group", '{ $first: expression }', '{ "$first": "$date" }'),
    _entry("$last", "basic", "Returns the last value in a group", '{ $last: expression }', '{ "$last": "$status" }'),
    _entry("$count", "count", "Returns the count of documents", '{ $count: {} }', '{ "$count": {} }'),
)

ARRAY_ACCUMULATORS = (
    _entry("$push", "array", "Returns an array of all values in the group", '{ $push: expression }', '{ "$push": "$item" }'),
    _entry("$addToSet", "array", "Returns an array of unique values", '{ $addToSet: expression }', '{ "$addToSet": "$category" }'),
)

STATISTICAL_ACCUMULATORS = (
    _entry("$stdDevPop", "statistical", "Returns the population standard deviation", '{ $stdDevPop: expression }', '{ "$stdDevPop": "$score" }'),
    _entry("$stdDevSamp", "statistical", "Returns the sample standard deviation", '{ $stdDevSamp: expression }', '{ "$stdDevSamp": "$score" }'),
)

# fmt: on

ALL_ACCUMULATORS: tuple[AggregationEntry, ...] = (
    BASIC_ACCUMULATORS + ARRAY_ACCUMULATORS + STATISTICAL_ACCUMULATORS
)

ACCUMULATOR_MAP: dict[str, AggregationEntry] = {a.name: a for a in ALL_ACCUMULATORS}

# fmt: off
# Aggregation expressions
ARITHMETIC_EXPRESSIONS = (
    _entry("$add", "arithmetic", "Adds numbers or dates", '{ $add: [expr1, expr2, ...] }', '{ "$add": ["$price", "$tax"] }'),
    _entry("$subtract", "arithmetic", "Subtracts two numbers or dates", '{ $subtract: [expr1, expr2] }', '{ "$subtract": ["$total", "$discount"] }'),
    _entry("$multiply", "arithmetic", "Multiplies numbers", '{ $multiply: [expr1, expr2, ...] }', '{ "$multiply": ["$price", "$quantity"] }'),
    _entry("$divide", "arithmetic", "Divides two numbers", '{ $divide: [expr1, expr2] }', '{ "$divide": ["$total", "$count"] }'),
    _entry("$mod", "arithmetic", "Returns remainder of division", '{ $mod: [expr1, expr2] }', '{ "$mod": ["$value", 3] }'),
    _entry("$abs", "arithmetic", "Returns absolute value", '{ $abs: expression }', '{ "$abs": "$change" }'),
    _entry("$ceil", "arithmetic", "Returns smallest integer >= value", '{ $ceil: expression }', '{ "$ceil": "$rating" }'),
    _entry("$floor", "arithmetic", "Returns largest integer <= value", '{ $floor: expression }', '{ "$floor": "$rating" }'),
    _entry("$round", "arithmetic", "Rounds to specified decimal place", '{ $round: [number, place] }', '{ "$round": ["$price", 2] }'),
    _entry("$trunc", "arithmetic", "Truncates to integer", '{ $trunc: expression }', '{ "$trunc": "$rating" }'),
    _entry("$pow", "arithmetic", "Raises to an exponent", '{ $pow: [number, exponent] }', '{ "$pow": [2, "$exponent"] }'),
    _entry("$sqrt", "arithmetic", "Returns square root", '{ $sqrt: expression }', '{ "$sqrt": "$variance" }'),
    _entry("$log", "arithmetic", "Returns logarithm", '{ $log: [number, base] }', '{ "$log": ["$value", 10] }'),
    _entry("$log10", "arithmetic", "Returns log base 10", '{ $log10: expression }', '{ "$log10": "$value" }'),
    _entry("$ln", "arithmetic", "Returns natural logarithm", '{ $ln: expression }', '{ "$ln": "$value" }'),
    _entry("$exp", "arithmetic", "Returns e^x", '{ $exp: expression }', '{ "$exp": "$growth" }'),
)

STRING_EXPRESSIONS = (
    _entry("$concat", "string", "Concatenates strings", '{ $concat: [str1, str2, ...] }', '{ "$concat": ["$firstName", " ", "$lastName"] }'),
    _entry("$substr", "string", "Returns substring (deprecated)", '{ $substr: [string, start, length] }', '{ "$substr": ["$name", 0, 5] }'),
    _entry("$substrBytes", "string", "Returns substring by byte index", '{ $substrBytes: [string, start, length] }', '{ "$substrBytes": ["$name", 0, 5] }'),
    _entry("$substrCP", "string", "Returns substring by code point", '{ $substrCP: [string, start, length] }', '{ "$substrCP": ["$name", 0, 5] }'),
    _entry("$toUpper", "string", "Converts to uppercase", '{ $toUpper: expression }', '{ "$toUpper": "$name" }'),
    _entry("$toLower", "string", "Converts to lowercase", '{ $toLower: expression }', '{ "$toLower": "$email" }'),
    _entry("$trim", "string", "Removes whitespace", '{ $trim: { input: string, chars: charStr } }', '{ "$trim": { "input": "$name" } }'),
    _entry("$ltrim", "string", "Removes leading whitespace", '{ $ltrim: { input: string } }', '{ "$ltrim": { "input": "$name" } }'),
    _entry("$rtrim", "string", "Removes trailing whitespace", '{ $rtrim: { input: string } }', '{ "$rtrim": { "input": "$name" } }'),
    _entry("$split", "string", "Splits string by delimiter", '{ $split: [string, delimiter] }', '{ "$split": ["$tags", ","] }'),
    _entry("$strLenBytes", "string", "Returns byte length", '{ $strLenBytes: expression }', '{ "$strLenBytes": "$name" }'),
    _entry("$strLenCP", "string", "Returns code point length", '{ $strLenCP: expression }', '{ "$strLenCP": "$name" }'),
    _entry("$strcasecmp", "string", "Case-insensitive string comparison", '{ $strcasecmp: [str1, str2] }', '{ "$strcasecmp": ["$name", "John"] }'),
    _entry("$indexOfBytes", "string", "Returns byte index of substring", '{ $indexOfBytes: [string, substring] }', '{ "$indexOfBytes": ["$email", "@"] }'),
    _entry("$indexOfCP", "string", "Returns code point index", '{ $indexOfCP: [string, substring] }', '{ "$indexOfCP": ["$email", "@"] }'),
    _entry("$regexFind", "string", "Finds first regex match", '{ $regexFind: { input: string, regex: pattern } }', '{ "$regexFind": { "input": "$desc", "regex": "\\\\d+" } }'),
    _entry("$regexFindAll", "string", "Finds all regex matches", '{ $regexFindAll: { input: string, regex: pattern } }', '{ "$regexFindAll": { "input": "$desc", "regex": "\\\\d+" } }'),
    _entry("$regexMatch", "string", "Returns true if regex matches", '{ $regexMatch: { input: string, regex: pattern } }', '{ "$regexMatch": { "input": "$email", "regex": "^[a-z]+@" } }'),
    _entry("$replaceOne", "string", "Replaces first occurrence", '{ $replaceOne: { input: string, find: str, replacement: str } }', '{ "$replaceOne": { "input": "$text", "find": "old", "replacement": "new" } }'),
    _entry("$replaceAll", "string", "Replaces all occurrences", '{ $replaceAll: { input: string, find: str, replacement: str } }', '{ "$replaceAll": { "input": "$text", "find": "old", "replacement": "new" } }'),
)

DATE_EXPRESSIONS = (
    _entry("$year", "date", "Returns the year", '{ $year: date }', '{ "$year": "$createdAt" }'),
    _entry("$month", "date", "Returns the month (1-12)", '{ $month: date }', '{ "$month": "$createdAt" }'),
    _entry("$dayOfMonth", "date", "Returns day of month (1-31)", '{ $dayOfMonth: date }', '{ "$dayOfMonth": "$createdAt" }'),
    _entry("$dayOfWeek", "date", "Returns day of week (1-7)", '{ $dayOfWeek: date }', '{ "$dayOfWeek": "$createdAt" }'),
    _entry("$dayOfYear", "date", "Returns day of year (1-366)", '{ $dayOfYear: date }', '{ "$dayOfYear": "$createdAt" }'),
    _entry("$hour", "date", "Returns the hour (0-23)", '{ $hour: date }', '{ "$hour": "$timestamp" }'),
    _entry("$minute", "date", "Returns the minute (0-59)", '{ $minute: date }', '{ "$minute": "$timestamp" }'),
    _entry("$second", "date", "Returns the second (0-59)", '{ $second: date }', '{ "$second": "$timestamp" }'),
    _entry("$millisecond", "date", "Returns the millisecond", '{ $millisecond: date }', '{ "$millisecond": "$timestamp" }'),
    _entry("$week", "date", "Returns the week (0-53)", '{ $week: date }', '{ "$week": "$createdAt" }'),
    _entry("$isoWeek", "date", "Returns ISO week (1-53)", '{ $isoWeek: date }', '{ "$isoWeek": "$createdAt" }'),
    _entry("$isoWeekYear", "date", "Returns ISO week year", '{ $isoWeekYear: date }', '{ "$isoWeekYear": "$createdAt" }'),
    _entry("$isoDayOfWeek", "date", "Returns ISO day of week (1-7)", '{ $isoDayOfWeek: date }', '{ "$isoDayOfWeek": "$createdAt" }'),
    _entry("$dateFromParts", "date", "Constructs date from parts", '{ $dateFromParts: { year: y, month: m, day: d, ... } }', '{ "$dateFromParts": { "year": 2023, "month": 1, "day": 15 } }'),
    _entry("$dateToParts", "date", "Returns date components", '{ $dateToParts: { date: expr } }', '{ "$dateToParts": { "date": "$createdAt" } }'),
    _entry("$dateFromString", "date", "Converts string to date", '{ $dateFromString: { dateString: string, format: fmt } }', '{ "$dateFromString": { "dateString": "2023-01-15" } }'),
    _entry("$dateToString", "date", "Converts date to string", '{ $dateToString: { date: expr, format: fmt } }', '{ "$dateToString": { "date": "$createdAt", "format": "%Y-%m-%d" } }'),
    _entry("$dateAdd", "date", "Adds time to date", '{ $dateAdd: { startDate: date, unit: unit, amount: num } }', '{ "$dateAdd": { "startDate": "$date", "unit": "day", "amount": 7 } }'),
    _entry("$dateSubtract", "date", "Subtracts time from date", '{ $dateSubtract: { startDate: date, unit: unit, amount: num } }', '{ "$dateSubtract": { "startDate": "$date", "unit": "month", "amount": 1 } }'),
    _entry("$dateDiff", "date", "Returns difference between dates", '{ $dateDiff: { startDate: d1, endDate: d2, unit: unit } }', '{ "$dateDiff": { "startDate": "$start", "endDate": "$end", "unit": "day" } }'),
    _entry("$dateTrunc", "date", "Truncates date to unit", '{ $dateTrunc: { date: expr, unit: unit } }', '{ "$dateTrunc": { "date": "$timestamp", "unit": "hour" } }'),
)

ARRAY_EXPRESSIONS = (
    _entry("$arrayElemAt", "array_expr", "Returns element at index", '{ $arrayElemAt: [array, index] }', '{ "$arrayElemAt": ["$items", 0] }'),
    _entry("$first", "array_expr", "Returns first element", '{ $first: array }', '{ "$first": "$items" }'),
    _entry("$last", "array_expr", "Returns last element", '{ $last: array }', '{ "$last": "$items" }'),
    _entry("$concatArrays", "array_expr", "Concatenates arrays", '{ $concatArrays: [arr1, arr2, ...] }', '{ "$concatArrays": ["$arr1", "$arr2"] }'),
    _entry("$filter", "array_expr", "Filters array elements", '{ $filter: { input: array, as: var, cond: expr } }', '{ "$filter": { "input": "$items", "as": "item", "cond": { "$gte": ["$$item.price", 100] } } }'),
    _entry("$map", "array_expr", "Applies expression to each element", '{ $map: { input: array, as: var, in: expr } }', '{ "$map": { "input": "$items", "as": "item", "in": "$$item.name" } }'),
    _entry("$reduce", "array_expr", "Reduces array to single value", '{ $reduce: { input: array, initialValue: val, in: expr } }', '{ "$reduce": { "input": "$items", "initialValue": 0, "in": { "$add": ["$$value", "$$this.qty"] } } }'),
    _entry("$size", "array_expr", "Returns array length", '{ $size: array }', '{ "$size": "$items" }'),
    _entry("$slice", "array_expr", "Returns subset of array", '{ $slice: [array, n] | [array, pos, n] }', '{ "$slice": ["$items", 3] }'),
    _entry("$reverseArray", "array_expr", "Reverses array order", '{ $reverseArray: array }', '{ "$reverseArray": "$items" }'),
    _entry("$sortArray", "array_expr", "Sorts array elements", '{ $sortArray: { input: array, sortBy: spec } }', '{ "$sortArray": { "input": "$items", "sortBy": { "price": 1 } } }'),
    _entry("$in", "array_expr", "Checks if value is in array", '{ $in: [expr, array] }', '{ "$in": ["$category", ["A", "B", "C"]] }'),
    _entry("$indexOfArray", "array_expr", "Returns index of element", '{ $indexOfArray: [array, search] }', '{ "$indexOfArray": ["$items", "target"] }'),
    _entry("$isArray", "array_expr", "Checks if value is array", '{ $isArray: expression }', '{ "$isArray": "$items" }'),
    _entry("$range", "array_expr", "Generates array of integers", '{ $range: [start, end, step] }', '{ "$range": [0, 10, 2] }'),
    _entry("$zip", "array_expr", "Transposes arrays", '{ $zip: { inputs: [arr1, arr2], useLongestLength: bool } }', '{ "$zip": { "inputs": ["$names", "$ages"] } }'),
)

CONDITIONAL_EXPRESSIONS = (
    _entry("$cond", "conditional", "If-then-else conditional", '{ $cond: { if: bool, then: expr, else: expr } }', '{ "$cond": { "if": { "$gte": ["$qty", 100] }, "then": "bulk", "else": "retail" } }'),
    _entry("$ifNull", "conditional", "Returns fallback if null", '{ $ifNull: [expr, fallback] }', '{ "$ifNull": ["$description", "No description"] }'),
    _entry("$switch", "conditional", "Evaluates case expressions", '{ $switch: { branches: [{case: cond, then: expr}, ...], default: expr } }', '{ "$switch": { "branches": [{ "case": { "$eq": ["$status", "A"] }, "then": "Active" }], "default": "Unknown" } }'),
)

TYPE_EXPRESSIONS = (
    _entry("$type", "type_expr", "Returns BSON type of field", '{ $type: expression }', '{ "$type": "$field" }'),
    _entry("$convert", "type_expr", "Converts value to type", '{ $convert: { input: expr, to: type, onError: expr, onNull: expr } }', '{ "$convert": { "input": "$qty", "to": "int" } }'),
    _entry("$toBool", "type_expr", "Converts to boolean", '{ $toBool: expression }', '{ "$toBool": "$active" }'),
    _entry("$toDate", "type_expr", "Converts to date", '{ $toDate: expression }', '{ "$toDate": "$dateString" }'),
    _entry("$toDecimal", "type_expr", "Converts to decimal", '{ $toDecimal: expression }', '{ "$toDecimal": "$price" }'),
    _entry("$toDouble", "type_expr", "Converts to double", '{ $toDouble: expression }', '{ "$toDouble": "$value" }'),
    _entry("$toInt", "type_expr", "Converts to integer", '{ $toInt: expression }', '{ "$toInt": "$qty" }'),
    _entry("$toLong", "type_expr", "Converts to long", '{ $toLong: expression }', '{ "$toLong": "$bigNumber" }'),
    _entry("$toObjectId", "type_expr", "Converts to ObjectId", '{ $toObjectId: expression }', '{ "$toObjectId": "$idString" }'),
    _entry("$toString", "type_expr", "Converts to string", '{ $toString: expression }', '{ "$toString": "$value" }'),
)

OBJECT_EXPRESSIONS = (
    _entry("$objectToArray", "object", "Converts object to array", '{ $objectToArray: object }', '{ "$objectToArray": "$specs" }'),
    _entry("$arrayToObject", "object", "Converts array to object", '{ $arrayToObject: array }', '{ "$arrayToObject": "$kvPairs" }'),
    _entry("$mergeObjects", "object", "Merges objects into one", '{ $mergeObjects: [obj1, obj2, ...] }', '{ "$mergeObjects": ["$defaults", "$overrides"] }'),
    _entry("$getField", "object", "Gets field value by name", '{ $getField: { field: name, input: obj } }', '{ "$getField": { "field": "a.b", "input": "$doc" } }'),
    _entry("$setField", "object", "Sets field value", '{ $setField: { field: name, input: obj, value: expr } }', '{ "$setField": { "field": "status", "input": "$$ROOT", "value": "updated" } }'),
)

SET_EXPRESSIONS = (
    _entry("$setEquals", "set", "Returns true if sets are equal", '{ $setEquals: [arr1, arr2] }', '{ "$setEquals": ["$arr1", "$arr2"] }'),
    _entry("$setIntersection", "set", "Returns set intersection", '{ $setIntersection: [arr1, arr2, ...] }', '{ "$setIntersection": ["$tags1", "$tags2"] }'),
    _entry("$setUnion", "set", "Returns set union", '{ $setUnion: [arr1, arr2, ...] }', '{ "$setUnion": ["$tags1", "$tags2"] }'),
    _entry("$setDifference", "set", "Returns set difference", '{ $setDifference: [arr1, arr2] }', '{ "$setDifference": ["$all", "$excluded"] }'),
    _entry("$setIsSubset", "set", "Returns true if first is subset", '{ $setIsSubset: [arr1, arr2] }', '{ "$setIsSubset": ["$required", "$available"] }'),
    _entry("$allElementsTrue", "set", "Returns true if all elements true", '{ $allElementsTrue: array }', '{ "$allElementsTrue": ["$flags"] }'),
    _entry("$anyElementTrue", "set", "Returns true if any element true", '{ $anyElementTrue: array }', '{ "$anyElementTrue": ["$flags"] }'),
)

COMPARISON_EXPRESSIONS = (
    _entry("$cmp", "comparison_expr", "Compares two values", '{ $cmp: [expr1, expr2] }', '{ "$cmp": ["$a", "$b"] }'),
    _entry("$eq", "comparison_expr", "Returns true if equal", '{ $eq: [expr1, expr2] }', '{ "$eq": ["$status", "active"] }'),
    _entry("$gt", "comparison_expr", "Returns true if greater", '{ $gt: [expr1, expr2] }', '{ "$gt": ["$age", 18] }'),
    _entry("$gte", "comparison_expr", "Returns true if greater or equal", '{ $gte: [expr1, expr2] }', '{ "$gte": ["$score", 80] }'),
    _entry("$lt", "comparison_expr", "Returns true if less", '{ $lt: [expr1, expr2] }', '{ "$lt": ["$price", 100] }'),
    _entry("$lte", "comparison_expr", "Returns true if less or equal", '{ $lte: [expr1, expr2] }', '{ "$lte": ["$qty", 10] }'),
    _entry("$ne", "comparison_expr", "Returns true if not equal", '{ $ne: [expr1, expr2] }', '{ "$ne": ["$status", "deleted"] }'),
)

VARIABLE_EXPRESSIONS = (
    _entry("$let", "variable", "Binds variables for use in expression", '{ $let: { vars: { var: expr, ... }, in: expr } }', '{ "$let": { "vars": { "total": { "$add": ["$price", "$tax"] } }, "in": { "$multiply": ["$$total", 1.1] } } }'),
)

# fmt: on

ALL_EXPRESSIONS: tuple[AggregationEntry, ...] = (
    ARITHMETIC_EXPRESSIONS
    + STRING_EXPRESSIONS
    + DATE_EXPRESSIONS
    + ARRAY_EXPRESSIONS
    + CONDITIONAL_EXPRESSIONS
    + TYPE_EXPRESSIONS
    + OBJECT_EXPRESSIONS
    + SET_EXPRESSIONS
    + COMPARISON_EXPRESSIONS
    + VARIABLE_EXPRESSIONS
)

EXPRESSION_MAP: dict[str, AggregationEntry] = {e.name: e for e in ALL_EXPRESSIONS}

# System variables
SYSTEM_VARIABLES = (
    SystemVariable("$$ROOT", "The root document being processed"),
    SystemVariable("$$CURRENT", "The current document being processed"),
    SystemVariable("$$NOW", "Current datetime"),
    SystemVariable("$$CLUSTER_TIME", "Current cluster timestamp"),
    SystemVariable("$$REMOVE", "Indicates field should be removed"),
    SystemVariable("$$DESCEND", "Return subdocuments in $redact"),
    SystemVariable("$$PRUNE", "Exclude all fields at current level in $redact"),
    SystemVariable("$$KEEP", "Keep all fields at current level in $redact"),
)


def _search(entries: tuple[AggregationEntry, ...], prefix: str) -> list[AggregationEntry]:
    lower = prefix.lower()
    return [e for e in entries if e.name.lower().startswith(lower)]


def get_stage(name: str) -> AggregationEntry | None:
    return STAGE_MAP.get(name)


def get_accumulator(name: str) -> AggregationEntry | None:
    return ACCUMULATOR_MAP.get(name)


def get_expression(name: str) -> AggregationEntry | None:
    return EXPRESSION_MAP.get(name)


def search_stages(prefix: str) -> list[AggregationEntry]:
    """Stages whose name starts with ``prefix`` (case-insensitive), in table order."""
    return _search(ALL_STAGES, prefix)


def search_accumulators(prefix: str) -> list[AggregationEntry]:
    return _search(ALL_ACCUMULATORS, prefix)


def search_expressions(prefix: str) -> list[AggregationEntry]:
    """Expressions whose name starts with ``prefix`` (case-insensitive), in table order."""
    return _search(ALL_EXPRESSIONS, prefix)
