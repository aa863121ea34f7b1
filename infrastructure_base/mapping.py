"""
Object mapping between query results and target types.

Rows produced by projections and stored procedures are mapped field by
field onto the type the caller asks for. Supported targets:

- pydantic models (validated, nested models included)
- SQLAlchemy mapped classes (columns and relationships)
- dataclasses (nested dataclasses included)
- ``dict`` (the plain nested data)
- any other class accepting the fields as keyword arguments

Source keys are matched to target fields exactly first, then ignoring case
and underscores, so a ``CustomerId`` column fills a ``customer_id`` field.
Keys with no matching field are ignored.
"""

import dataclasses
import inspect
import types
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.engine import Row
from sqlalchemy.orm import Mapper

from infrastructure_base.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

def _normalize(key: str) -> str:
    return key.replace("_", "").lower()

def _mapper_for(target_type: Any) -> Optional[Mapper]:
    if not isinstance(target_type, type):
        return None
    mapper = sa_inspect(target_type, raiseerr=False)
    return mapper if isinstance(mapper, Mapper) else None

def _is_mappable(target_type: Any) -> bool:
    if not isinstance(target_type, type):
        return False
    return (
        issubclass(target_type, BaseModel)
        or dataclasses.is_dataclass(target_type)
        or _mapper_for(target_type) is not None
    )

def _nested_type(annotation: Any) -> Optional[Tuple[type, bool]]:
    """Return the mappable type inside an annotation and whether it is a list."""
    origin = get_origin(annotation)
    if origin is list:
        args = get_args(annotation)
        if args and _is_mappable(args[0]):
            return args[0], True
        return None
    if origin is Union or origin is types.UnionType:
        for arg in get_args(annotation):
            if arg is type(None):
                continue
            nested = _nested_type(arg)
            if nested:
                return nested
        return None
    if _is_mappable(annotation):
        return annotation, False
    return None

class ObjectMapper:
    """Maps rows, dictionaries and objects onto target types."""

    def map(self, source: Any, target_type: Type[T]) -> T:
        """
        Map a single source onto ``target_type``.

        Args:
            source: A mapping, a SQLAlchemy Row, or an object with attributes
            target_type: Type to produce

        Returns:
            T: Instance of ``target_type``
        """
        if target_type is dict or get_origin(target_type) is dict:
            return self.to_dict(source)

        if isinstance(target_type, type) and issubclass(target_type, BaseModel):
            return self._map_model(source, target_type)

        data = self.to_dict(source)

        mapper = _mapper_for(target_type)
        if mapper is not None:
            return self._map_entity(data, mapper)

        if dataclasses.is_dataclass(target_type):
            return self._map_dataclass(data, target_type)

        return self._map_plain(data, target_type)

    def map_many(self, sources: Iterable[Any], target_type: Type[T]) -> List[T]:
        """Map every source onto ``target_type``."""
        return [self.map(source, target_type) for source in sources]

    def to_dict(self, source: Any) -> Dict[str, Any]:
        """
        Read the fields of a source as a dictionary.

        Mapped entities contribute their column attributes; other objects
        their public instance attributes.
        """
        if isinstance(source, Mapping):
            return dict(source)
        if isinstance(source, Row):
            return dict(source._mapping)

        mapper = _mapper_for(type(source))
        if mapper is not None:
            return {attr.key: getattr(source, attr.key) for attr in mapper.column_attrs}

        return {key: value for key, value in vars(source).items() if not key.startswith("_")}

    def _match_keys(self, data: Mapping[str, Any], names: Iterable[str]) -> Dict[str, Any]:
        """Rename source keys to the target's field names, dropping unknown keys."""
        names = list(names)
        exact = set(names)
        by_normalized = {_normalize(name): name for name in names}

        matched = {}
        for key, value in data.items():
            name = key if key in exact else by_normalized.get(_normalize(key))
            if name is None:
                logger.debug(f"Ignoring unmapped field {key}")
                continue
            matched[name] = value
        return matched

    def _map_nested(self, value: Any, annotation: Any) -> Any:
        nested = _nested_type(annotation)
        if nested is None or value is None:
            return value

        nested_type, is_list = nested
        if is_list:
            items = value if isinstance(value, (list, tuple)) else [value]
            return [self.map(item, nested_type) for item in items]
        if isinstance(value, (Mapping, Row)):
            return self.map(value, nested_type)
        return value

    def _map_model(self, source: Any, target_type: Type[BaseModel]) -> BaseModel:
        if not isinstance(source, (Mapping, Row)):
            return target_type.model_validate(source, from_attributes=True)

        fields = target_type.model_fields
        data = self._match_keys(self.to_dict(source), fields.keys())
        values = {}
        for name, value in data.items():
            field = fields[name]
            values[field.alias or name] = self._map_nested(value, field.annotation)
        return target_type.model_validate(values)

    def _map_dataclass(self, data: Mapping[str, Any], target_type: type) -> Any:
        hints = get_type_hints(target_type)
        init_fields = [f.name for f in dataclasses.fields(target_type) if f.init]
        values = {
            name: self._map_nested(value, hints.get(name))
            for name, value in self._match_keys(data, init_fields).items()
        }
        return target_type(**values)

    def _map_plain(self, data: Mapping[str, Any], target_type: type) -> Any:
        parameters = inspect.signature(target_type).parameters.values()
        if any(p.kind is inspect.Parameter.VAR_KEYWORD for p in parameters):
            return target_type(**data)

        names = [
            p.name for p in parameters
            if p.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)
        ]
        return target_type(**self._match_keys(data, names))

    def _map_entity(self, data: Mapping[str, Any], mapper: Mapper) -> Any:
        columns = [attr.key for attr in mapper.column_attrs]
        relationships = mapper.relationships
        values = {}
        for name, value in self._match_keys(data, columns + list(relationships.keys())).items():
            if name not in relationships:
                values[name] = value
                continue
            if value is None:
                continue

            relationship = relationships[name]
            related = relationship.mapper.class_
            if relationship.uselist:
                items = value if isinstance(value, (list, tuple)) else [value]
                values[name] = [self.map(item, related) for item in items]
            else:
                values[name] = self.map(value, related)
        return mapper.class_(**values)

default_mapper = ObjectMapper()
