from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from fastapi.responses import Response

from contracts.client_api import (
    ExportFormat,
    RuleCreatePayload,
    RuleDeleteResponse,
    RuleListResponse,
    RuleResponse,
    RuleStatsResponse,
    RuleUpdatePayload,
)
from contracts.common import RuleStatus
from core.errors import AnalysisSupersededError, RuleNotFoundError
from core.logging import get_agent_logger, preview
from helper.export import MEDIA_TYPES, STATS_EXPORT_PREFIXES, export_filename
from services.rule_service import RuleService

from .deps import get_rule_service

router = APIRouter(prefix="/rules", tags=["rules"])

logger = get_agent_logger(__name__)


def _not_found(rule_id: str, request_id: Optional[str]) -> HTTPException:
    logger.warning("Rule not found id=%s request_id=%s", rule_id, request_id)
    return HTTPException(status_code=404, detail="RULE_NOT_FOUND")


def _superseded(exc: AnalysisSupersededError, request_id: Optional[str]) -> HTTPException:
    logger.info("Analysis superseded %s request_id=%s", exc, request_id)
    return HTTPException(status_code=409, detail="ANALYSIS_SUPERSEDED")


@router.get("", response_model=RuleListResponse)
def list_rules(
    q: Optional[str] = Query(default=None),
    priority: Optional[int] = Query(default=None, ge=1, le=4),
    status: Optional[RuleStatus] = Query(default=None),
    service: RuleService = Depends(get_rule_service),
) -> RuleListResponse:
    rules = service.list_rules(search=q, priority=priority, status=status)
    return RuleListResponse(rules=rules, total=len(rules))


@router.post("", response_model=RuleResponse, status_code=201)
def create_rule(
    payload: RuleCreatePayload,
    service: RuleService = Depends(get_rule_service),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RuleResponse:
    if not payload.original.strip():
        logger.warning("Missing rule text on create request_id=%s", x_request_id)
        raise HTTPException(status_code=400, detail="RULE_REQUIRED")
    logger.info("Create rule request_id=%s rule='%s'", x_request_id, preview(payload.original))
    rule = service.create_rule(payload.original, priority=payload.priority, weight=payload.weight)
    return RuleResponse(rule=rule)


@router.get("/export")
def export_rules(
    format: ExportFormat = Query(default="json"),
    service: RuleService = Depends(get_rule_service),
) -> Response:
    body = service.export(format)
    return Response(
        content=body,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{export_filename(format)}"'},
    )


@router.get("/stats", response_model=RuleStatsResponse)
def rule_stats(service: RuleService = Depends(get_rule_service)) -> RuleStatsResponse:
    return RuleStatsResponse(stats=service.stats())


@router.get("/stats/export")
def export_stats(
    format: ExportFormat = Query(default="json"),
    service: RuleService = Depends(get_rule_service),
) -> Response:
    body = service.export_stats(format)
    filename = export_filename(format, prefix=STATS_EXPORT_PREFIXES[format])
    return Response(
        content=body,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{rule_id}", response_model=RuleResponse)
def get_rule(
    rule_id: str,
    service: RuleService = Depends(get_rule_service),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RuleResponse:
    try:
        return RuleResponse(rule=service.get_rule(rule_id))
    except RuleNotFoundError:
        raise _not_found(rule_id, x_request_id)


@router.put("/{rule_id}", response_model=RuleResponse)
def update_rule(
    rule_id: str,
    payload: RuleUpdatePayload,
    service: RuleService = Depends(get_rule_service),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RuleResponse:
    if payload.original is not None and not payload.original.strip():
        logger.warning("Blank rule text on update id=%s request_id=%s", rule_id, x_request_id)
        raise HTTPException(status_code=400, detail="RULE_REQUIRED")
    try:
        rule = service.update_rule(
            rule_id,
            original=payload.original,
            priority=payload.priority,
            weight=payload.weight,
        )
    except RuleNotFoundError:
        raise _not_found(rule_id, x_request_id)
    except AnalysisSupersededError as exc:
        raise _superseded(exc, x_request_id)
    logger.info("Updated rule id=%s status=%s request_id=%s", rule.id, rule.status, x_request_id)
    return RuleResponse(rule=rule)


@router.post("/{rule_id}/revalidate", response_model=RuleResponse)
def revalidate_rule(
    rule_id: str,
    service: RuleService = Depends(get_rule_service),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RuleResponse:
    try:
        rule = service.revalidate(rule_id)
    except RuleNotFoundError:
        raise _not_found(rule_id, x_request_id)
    except AnalysisSupersededError as exc:
        raise _superseded(exc, x_request_id)
    return RuleResponse(rule=rule)


@router.delete("/{rule_id}", response_model=RuleDeleteResponse)
def delete_rule(
    rule_id: str,
    service: RuleService = Depends(get_rule_service),
    x_request_id: Optional[str] = Header(default=None, alias="X-Request-Id"),
) -> RuleDeleteResponse:
    try:
        service.delete_rule(rule_id)
    except RuleNotFoundError:
        raise _not_found(rule_id, x_request_id)
    logger.info("Deleted rule id=%s request_id=%s", rule_id, x_request_id)
    return RuleDeleteResponse()
