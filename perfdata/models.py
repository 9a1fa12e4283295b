"""Performance data value types"""
from typing import Dict, List, NamedTuple
from pydantic import BaseModel, Field

# Key under which single-instance objects report their counters
EMPTY_INSTANCE = ""


class CounterValues(NamedTuple):
    """Raw values of one counter; only first_value is a directly exported reading"""
    first_value: float
    second_value: float = 0.0


class PerfInstance(BaseModel):
    """One instance of a performance object as found in a snapshot blob"""
    name: str = EMPTY_INSTANCE
    counters: Dict[str, float] = Field(default_factory=dict)


class PerfObject(BaseModel):
    """Snapshot of a named performance object"""
    name: str
    instances: List[PerfInstance] = Field(default_factory=list)

    def keyed_instances(self) -> Dict[str, PerfInstance]:
        """Instances by name, first occurrence wins.

        A single-instance object reports its only instance under
        EMPTY_INSTANCE whatever name the dump gave it, so every reader
        resolves the singleton the same way.
        """
        if len(self.instances) == 1:
            return {EMPTY_INSTANCE: self.instances[0]}
        keyed = {}
        for instance in self.instances:
            keyed.setdefault(instance.name, instance)
        return keyed

    def to_counter_table(self) -> Dict[str, Dict[str, CounterValues]]:
        """Project instances into the instance -> counter -> values shape"""
        return {
            name: {
                counter: CounterValues(first_value=value)
                for counter, value in instance.counters.items()
            }
            for name, instance in self.keyed_instances().items()
        }
