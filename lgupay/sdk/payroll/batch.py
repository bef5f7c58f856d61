"""Batch payroll: fan out independent employee computations.

Each request is computed independently, optionally on a thread pool. Results
keep request order. An employee whose inputs are rejected becomes a
BatchFailure instead of aborting the run.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from ..config import resolve_payroll_rules
from ..exceptions import PayrollError
from ..money import total
from ..schemas import PayrollRequest, PayrollResult
from ..taxes.schemas import PayrollRules
from .engine import coerce_input, compute_request
from .schemas import BatchFailure, BatchResult, BatchSummary, result_ids

logger = logging.getLogger(__name__)

RequestLike = Union[PayrollRequest, Mapping[str, Any]]


def _employee_id(raw: RequestLike) -> Optional[Union[int, str]]:
    if isinstance(raw, PayrollRequest):
        return raw.employee.id
    employee = raw.get("employee") if isinstance(raw, Mapping) else None
    if isinstance(employee, Mapping):
        return employee.get("id")
    return None


def _run_one(
    index: int,
    raw: RequestLike,
    rules: Optional[PayrollRules],
    rules_by_date: Dict[date, PayrollRules],
) -> Union[PayrollResult, BatchFailure]:
    try:
        request = coerce_input(PayrollRequest, raw, f"payroll request #{index}")
        table = rules or rules_by_date.get(request.period.rules_date)
        return compute_request(request, table)
    except PayrollError as e:
        logger.warning(f"Payroll request #{index} failed: {e}")
        return BatchFailure(index=index, employee_id=_employee_id(raw), error=str(e))


def _preload_rules(requests: List[RequestLike]) -> Dict[date, PayrollRules]:
    """Resolve rule tables once per distinct pay date before fanning out."""
    rules_by_date: Dict[date, PayrollRules] = {}
    for raw in requests:
        try:
            request = coerce_input(PayrollRequest, raw, "payroll request")
        except PayrollError:
            continue  # reported as a failure by _run_one
        on_date = request.period.rules_date
        if on_date not in rules_by_date:
            rules_by_date[on_date] = resolve_payroll_rules(on_date)
    return rules_by_date


def summarize(results: List[PayrollResult], failures: List[BatchFailure]) -> BatchSummary:
    return BatchSummary(
        total=len(results) + len(failures),
        successful=len(results),
        failed=len(failures),
        total_gross_pay=total(r.gross_pay for r in results),
        total_deductions=total(r.total_deductions for r in results),
        total_net_pay=total(r.net_pay for r in results),
        total_employer_contributions=total(r.total_employer_contributions for r in results),
        with_warnings=result_ids(results, "warnings"),
        with_errors=result_ids(results, "errors"),
    )


def compute_payroll_batch(
    requests: Iterable[RequestLike],
    *,
    max_workers: Optional[int] = None,
    rules: Optional[PayrollRules] = None,
) -> BatchResult:
    """Compute payroll for many employees.

    Args:
        requests: PayrollRequest instances or dicts with employee, period,
            and optional working_days, attendance, adjustments
        max_workers: Thread pool size; None or 1 computes sequentially
        rules: Rule table for every request; resolved per pay date when omitted

    Returns:
        BatchResult with results and failures in request order, plus a summary
    """
    requests = list(requests)
    rules_by_date = {} if rules is not None else _preload_rules(requests)

    if max_workers is not None and max_workers > 1 and len(requests) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            outcomes = list(
                executor.map(
                    lambda item: _run_one(item[0], item[1], rules, rules_by_date),
                    enumerate(requests),
                )
            )
    else:
        outcomes = [_run_one(i, raw, rules, rules_by_date) for i, raw in enumerate(requests)]

    results: List[PayrollResult] = [o for o in outcomes if isinstance(o, PayrollResult)]
    failures: List[BatchFailure] = [o for o in outcomes if isinstance(o, BatchFailure)]
    summary = summarize(results, failures)

    logger.info(
        f"Batch payroll: {summary.successful}/{summary.total} computed, "
        f"{summary.failed} failed, net {summary.total_net_pay}"
    )
    return BatchResult(results=tuple(results), failures=tuple(failures), summary=summary)
