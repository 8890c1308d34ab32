"""
Voice command package for the storefront: the interpreting brain.

Contains the classifier gateway, primary intent classification, filter value
normalization, the per-intent interpreters and the command dispatcher. All
LLM calls live here.

Talks to storefront state only through the collaborator interfaces in
storefront.core.stores; capture, the listening loop and HTTP live in storefront.
"""
from .action_registry import IntentCategory, parse_category, GENERAL_ACTIONS
from .gateway import ClassifierGateway, UNKNOWN
from .errors import ParseFailure, TransportFailure, RecognitionError, CaptureUnavailable
from .normalizer import ValueNormalizer, normalize
from .classifier import PrimaryClassifier
from .interpreters import InterpreterContext, InterpretResult, FILTERS_UPDATED
from .dispatcher import CommandDispatcher, DispatchOutcome, create_dispatcher
