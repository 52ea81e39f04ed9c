"""
Scoring Module

Asynchronous application scoring: the queue producers enqueue one job per
application id, and RQ workers run process_scoring_task.
"""

from scoring.tasks import (
    ScoringWorker,
    ScoringOutcome,
    ScoringStatus,
    process_scoring_task,
)
from scoring.queue import ScoringQueue

__all__ = [
    'ScoringWorker',
    'ScoringOutcome',
    'ScoringStatus',
    'ScoringQueue',
    'process_scoring_task',
]
