"""
Entity-Component Store
=======================
Integer entity IDs with one component dictionary per component type.

Destruction is two-phase: destroy_entity() marks, compact() removes.
The simulation compacts at the end of every tick so no marked entity
is ever visible to the next one.
"""

from typing import Any, Dict, Iterator, Optional, Set, Tuple, Type, TypeVar

from .components import EntityTag, Kind


C = TypeVar('C')


class World:
    """Owns every entity of one game and all of their components."""

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Set[int] = set()
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()

    def spawn(self, *components: Any) -> int:
        """Create an entity holding the given components and return its ID."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities.add(entity_id)
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for removal at the next compact()."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def compact(self) -> int:
        """Remove all marked entities. Returns how many were removed."""
        removed = 0
        for entity_id in self._dead_entities:
            if entity_id in self._entities:
                self._entities.remove(entity_id)
                for component_store in self._components.values():
                    component_store.pop(entity_id, None)
                removed += 1
        self._dead_entities.clear()
        return removed

    def add_component(self, entity_id: int, component: Any) -> None:
        self._components.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Yield (entity_id, component1, component2, ...) for every live
        entity that has ALL of the given component types.

        Entities are yielded in creation order so systems are deterministic.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if store is None:
                return
            stores.append(store)

        candidates = set(stores[0])
        for store in stores[1:]:
            candidates &= set(store)

        for entity_id in sorted(candidates):
            if entity_id in self._dead_entities:
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def of_kind(self, kind: Kind) -> Iterator[int]:
        """Live entity IDs tagged with the given kind, oldest first."""
        for entity_id, tag in self.query(EntityTag):
            if tag.kind is kind:
                yield entity_id

    def entity_count(self) -> int:
        """Number of live entities (marked ones excluded)."""
        return len(self._entities) - len(self._dead_entities & self._entities)

    def is_alive(self, entity_id: int) -> bool:
        """Check if an entity exists and is not marked for removal."""
        return entity_id in self._entities and entity_id not in self._dead_entities

    def pending_removals(self) -> int:
        return len(self._dead_entities)
