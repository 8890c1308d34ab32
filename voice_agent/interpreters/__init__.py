"""
Intent interpreters: one per category, each turning free text into at most
one structured state change.
"""
from .base import (
    FILTERS_UPDATED,
    UNKNOWN,
    InterpretResult,
    Interpreter,
    InterpreterContext,
)
from .checkout import OrderCompletionInterpreter
from .filters import ClearFiltersInterpreter, FilterInterpreter, FilterRemovalInterpreter
from .general import GeneralCommandInterpreter
from .navigation import CartInterpreter, CategoryNavigationInterpreter, NavigationInterpreter
from .product import ProductActionInterpreter, ProductNavigationInterpreter
from .user_info import UserInfoInterpreter
