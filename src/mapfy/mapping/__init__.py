from mapfy.mapping.exceptions import (
    CyclicMappingError,
    MapperNotConfiguredError,
    MappingConfigurationError,
    MappingNotFoundError,
)
from mapfy.mapping.members import MemberDescriptor, readable_members, settable_members
from mapfy.mapping.plan import MappingPlan, MappingStep, StepKind
from mapfy.mapping.registry import TypeMapRegistry
from mapfy.mapping.type_map import Strategy, TypeMap
from mapfy.mapping.type_pair import TypePair

__all__ = [
    "CyclicMappingError",
    "MapperNotConfiguredError",
    "MappingConfigurationError",
    "MappingNotFoundError",
    "MappingPlan",
    "MappingStep",
    "MemberDescriptor",
    "StepKind",
    "Strategy",
    "TypeMap",
    "TypeMapRegistry",
    "TypePair",
    "readable_members",
    "settable_members",
]
