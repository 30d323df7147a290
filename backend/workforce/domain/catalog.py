"""Which task kinds every reference type requires.

The mapping is plain data handed to TaskCatalog, so deployments and tests
can supply their own instead of the default one.
"""
from __future__ import annotations
from typing import Dict, Iterable, Mapping, Tuple

from .enums import ReferenceType, TaskKind


DEFAULT_TASK_KINDS: Dict[ReferenceType, Tuple[TaskKind, ...]] = {
    ReferenceType.ORDER: (
        TaskKind.CREATE_INVOICE,
        TaskKind.ARRANGE_PICKUP,
        TaskKind.COLLECT_PAYMENT,
    ),
    ReferenceType.ENTITY: (TaskKind.ASSIGN_CUSTOMER_TO_SALES_PERSON,),
    ReferenceType.ENQUIRY: (TaskKind.CONVERT_ENQUIRY_TO_ORDER,),
}


class TaskCatalog:
    def __init__(self, mapping: Mapping[ReferenceType, Iterable[TaskKind]] | None = None):
        source = DEFAULT_TASK_KINDS if mapping is None else mapping
        self._mapping: Dict[str, Tuple[TaskKind, ...]] = {
            ReferenceType(ref).value: tuple(TaskKind(k) for k in kinds)
            for ref, kinds in source.items()
        }

    def kinds_for(self, reference_type: ReferenceType | str) -> Tuple[TaskKind, ...]:
        """Ordered task kinds for the reference type; empty when it is not mapped."""
        key = reference_type.value if isinstance(reference_type, ReferenceType) else str(reference_type)
        return self._mapping.get(key, ())

    def reference_types(self) -> Tuple[ReferenceType, ...]:
        return tuple(ReferenceType(k) for k in self._mapping)


DEFAULT_CATALOG = TaskCatalog()
