"""Typed aggregation pipelines.

A pipeline is an ordered tuple of stages. ``to_mongo()`` renders it in
MongoDB's native form for ``collection.aggregate``; ``run()`` evaluates the
same stages over plain documents, following the server's semantics for the
handful of stages supported here.
"""
import copy
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

_MISSING = object()

def _get_path(document: Dict[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict) or part not in value:
            return _MISSING
        value = value[part]
    return value

def _set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    parts = path.split(".")
    for part in parts[:-1]:
        document = document.setdefault(part, {})
    document[parts[-1]] = value


class Stage(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_mongo(self) -> Dict[str, Any]:
        raise NotImplementedError

    def apply(self, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        raise NotImplementedError


class MatchStage(Stage):
    """Keep documents whose field equals the given value"""
    field: str
    value: Any

    def to_mongo(self) -> Dict[str, Any]:
        return {"$match": {self.field: self.value}}

    def apply(self, documents):
        return [doc for doc in documents if _get_path(doc, self.field) == self.value]


class UnwindStage(Stage):
    """Emit one document per element of an array field"""
    path: str

    def to_mongo(self) -> Dict[str, Any]:
        return {"$unwind": f"${self.path}"}

    def apply(self, documents):
        out = []
        for doc in documents:
            values = _get_path(doc, self.path)
            # Missing, null and empty arrays produce no output
            if values is _MISSING or values is None:
                continue
            if not isinstance(values, list):
                values = [values]
            for value in values:
                row = copy.deepcopy(doc)
                _set_path(row, self.path, value)
                out.append(row)
        return out


class GroupAverageStage(Stage):
    """Group on a key field and average a numeric field per group"""
    key: str
    field: str
    output: str

    def to_mongo(self) -> Dict[str, Any]:
        return {"$group": {"_id": f"${self.key}", self.output: {"$avg": f"${self.field}"}}}

    def apply(self, documents):
        groups: Dict[Any, List[float]] = {}
        order: List[Any] = []
        for doc in documents:
            key = _get_path(doc, self.key)
            key = None if key is _MISSING else key
            if key not in groups:
                groups[key] = []
                order.append(key)
            value = _get_path(doc, self.field)
            # $avg ignores non-numeric values
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                groups[key].append(value)
        rows = []
        for key in order:
            values = groups[key]
            average: Optional[float] = sum(values) / len(values) if values else None
            rows.append({"_id": key, self.output: average})
        return rows


class Pipeline(BaseModel):
    model_config = ConfigDict(frozen=True)

    stages: Tuple[Stage, ...] = ()

    def _then(self, stage: Stage) -> "Pipeline":
        return Pipeline(stages=self.stages + (stage,))

    def match(self, field: str, value: Any) -> "Pipeline":
        return self._then(MatchStage(field=field, value=value))

    def unwind(self, path: str) -> "Pipeline":
        return self._then(UnwindStage(path=path))

    def group_average(self, key: str, field: str, output: str) -> "Pipeline":
        return self._then(GroupAverageStage(key=key, field=field, output=output))

    def to_mongo(self) -> List[Dict[str, Any]]:
        return [stage.to_mongo() for stage in self.stages]

    def run(self, documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        rows = list(documents)
        for stage in self.stages:
            rows = stage.apply(rows)
        return rows


AVERAGE_FIELD = "AvgRating"

def average_rating_pipeline(plu: int) -> Pipeline:
    """Mean of every rating stored on the product with the given PLU"""
    return (
        Pipeline()
        .match("PLU", plu)
        .unwind("Ratings")
        .group_average(key="_id", field="Ratings.Rating", output=AVERAGE_FIELD)
    )
