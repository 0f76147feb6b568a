"""Runtime support for generated state machines.

Generated modules import their base classes and errors from here. The
package also provides FsmEngine, which runs an FsmModel directly with the
same execution contract as generated code.
"""

from fsmgen.runtime.base import (
    BaseFsm,
    BreakpointAction,
    BreakpointsResetAction,
    DebugSupport,
    FsmContext,
    IntrospectionSupport,
    InvalidOperationError,
    UnhandledEventError,
)
from fsmgen.runtime.engine import (
    DispatchTable,
    EngineContext,
    FsmEngine,
    Ignored,
    InternalAction,
    Transition,
)

__all__ = [
    # Base types
    "BaseFsm",
    "FsmContext",
    "IntrospectionSupport",
    "DebugSupport",
    "BreakpointAction",
    "BreakpointsResetAction",
    # Errors
    "InvalidOperationError",
    "UnhandledEventError",
    # Engine
    "FsmEngine",
    "EngineContext",
    "DispatchTable",
    "Transition",
    "InternalAction",
    "Ignored",
]
