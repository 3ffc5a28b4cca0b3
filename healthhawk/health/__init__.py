"""Health subsystem — probe engine, limiter, aggregator, scheduler."""

from .aggregator import aggregate, export_results, load_results, sort_outcomes
from .engine import check_endpoint, probe_endpoint
from .limiter import ConcurrencyLimiter
from .models import Outcome, RunConfig, RunResult, RunState
from .scheduler import HealthRunner, WatchScheduler, run_health_check
