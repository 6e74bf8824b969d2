"""Client for the Queno on-chain lottery."""

from queno.constants import Currency
from queno.correlator import ResolvedOutcome, ResultCorrelator
from queno.errors import CorrelationError, QuenoError, SubmissionError, ValidationError
from queno.ledger import HistoryEntry, HistoryLedger
from queno.request import BetRequest, build_request
from queno.session import BetSession

__version__ = "0.1.0"
