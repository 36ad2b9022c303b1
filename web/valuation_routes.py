"""
Valuation Routes - JSON API for property valuations

Endpoints:
- POST /api/valuations/estimate   instant estimate with market context
- POST /api/valuations/report     estimate rendered as a PDF
- POST /api/valuations            save an estimate to the caller's history
- GET  /api/valuations            caller's saved estimates, newest first
- DELETE /api/valuations/{id}     remove one of the caller's estimates
- /api/subscriptions              price-change alert subscriptions
- POST /api/alerts/check          run the change monitor and send alerts
                                  (X-Alert-Key service header)
- POST /api/mortgage              monthly payment calculator

Saved history and subscriptions are private: every such route requires an
X-User-Id header and only ever touches records owned by that user.
"""

from __future__ import annotations

import logging
import secrets
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel, Field

from core.history import (
    DEFAULT_THRESHOLD_PERCENTAGE,
    AlertDispatcher,
    SubscriptionRepository,
    ValuationChangeMonitor,
    ValuationRepository,
    get_subscription_repository,
    get_valuation_repository,
)
from core.mortgage import (
    DEFAULT_ANNUAL_RATE_PERCENT,
    DEFAULT_DOWN_PAYMENT_PERCENT,
    DEFAULT_TERM_YEARS,
    calculate_mortgage,
)
from core.valuation import (
    InvalidValuationInput,
    PropertyValuationEngine,
    ValuationInput,
    create_valuation_input,
)
from reporting.valuation_pdf import ValuationReportGenerator
from utils.config import Config

logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

router = APIRouter(prefix="/api", tags=["valuation"])


# =============================================================================
# Request Models
# =============================================================================

class ValuationRequest(BaseModel):
    """Property attributes submitted for valuation."""
    property_type: str
    location: str
    area_sqft: float
    condition: str
    age_years: Optional[int] = 0
    bedrooms: Optional[Union[int, str]] = None
    bathrooms: Optional[Union[int, str]] = None
    amenities: List[str] = Field(default_factory=list)


class EstimateRequest(ValuationRequest):
    """Valuation request with display options."""
    include_market: bool = True
    include_comparables: bool = True
    seed: Optional[int] = None


class ReportRequest(EstimateRequest):
    reference: Optional[str] = None


class SubscriptionRequest(BaseModel):
    location: str
    email: str
    threshold_percentage: float = DEFAULT_THRESHOLD_PERCENTAGE


class MortgageRequest(BaseModel):
    property_price: float
    down_payment_percent: float = DEFAULT_DOWN_PAYMENT_PERCENT
    annual_rate_percent: float = DEFAULT_ANNUAL_RATE_PERCENT
    term_years: int = DEFAULT_TERM_YEARS


# =============================================================================
# Dependencies
# =============================================================================

def get_config() -> Config:
    return Config.load()


def valuation_repository(config: Config = Depends(get_config)) -> ValuationRepository:
    return get_valuation_repository(config.valuations_path)


def subscription_repository(config: Config = Depends(get_config)) -> SubscriptionRepository:
    return get_subscription_repository(config.subscriptions_path)


def require_user(x_user_id: Optional[str] = Header(default=None)) -> str:
    """
    Resolve the calling user from the X-User-Id header.

    Raises:
        HTTPException(401) if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required")
    return x_user_id.strip()


def require_alert_service(
    x_alert_key: Optional[str] = Header(default=None),
    config: Config = Depends(get_config),
) -> None:
    """
    Only the scheduler holding ALERT_CHECK_KEY may run the alert check.

    Raises:
        HTTPException(401) if no key is configured or the header does not match
    """
    expected = config.alert_check_key
    if not expected or not x_alert_key:
        raise HTTPException(status_code=401, detail="Alert service key required")
    if not secrets.compare_digest(x_alert_key.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Alert service key required")


def build_valuation_input(payload: ValuationRequest) -> ValuationInput:
    """
    Validate a request body into a ValuationInput.

    Raises:
        HTTPException(422) with the list of validation errors
    """
    data = payload.model_dump(include=set(ValuationRequest.model_fields))
    try:
        return create_valuation_input(data)
    except InvalidValuationInput as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid valuation input", "errors": list(e.errors)},
        )


def appraise(payload: EstimateRequest):
    valuation_input = build_valuation_input(payload)
    engine = PropertyValuationEngine(seed=payload.seed)
    try:
        return engine.appraise(
            valuation_input,
            include_market=payload.include_market,
            include_comparables=payload.include_comparables,
        )
    except InvalidValuationInput as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid valuation input", "errors": list(e.errors)},
        )


# =============================================================================
# Estimates
# =============================================================================

@router.post("/valuations/estimate")
async def estimate_valuation(payload: EstimateRequest):
    """Return the estimate plus simulated market context and comparables."""
    report = appraise(payload)
    logger.info(
        "Estimated %s in %s at %d",
        report.valuation_input.property_type.value,
        report.valuation_input.location,
        report.result.estimated_value,
    )
    return report.to_dict()


@router.post("/valuations/report")
def valuation_report(payload: ReportRequest):
    """Return the valuation as a downloadable PDF."""
    report = appraise(payload)
    pdf_bytes = ValuationReportGenerator().generate_from_report(
        report, reference=payload.reference
    )

    filename = f"valuation-{payload.reference or 'report'}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# =============================================================================
# Saved Valuations
# =============================================================================

@router.post("/valuations", status_code=201)
async def save_valuation(
    payload: ValuationRequest,
    user_id: str = Depends(require_user),
    repo: ValuationRepository = Depends(valuation_repository),
):
    """Value the property and store the result in the caller's history."""
    valuation_input = build_valuation_input(payload)
    try:
        result = PropertyValuationEngine().estimator.valuate(valuation_input)
    except InvalidValuationInput as e:
        raise HTTPException(
            status_code=422,
            detail={"message": "Invalid valuation input", "errors": list(e.errors)},
        )

    record_id = repo.save(user_id, valuation_input, result)
    return repo.get(record_id, user_id).to_dict()


@router.get("/valuations")
async def list_valuations(
    user_id: str = Depends(require_user),
    repo: ValuationRepository = Depends(valuation_repository),
):
    records = repo.list(user_id)
    return {
        "count": len(records),
        "valuations": [record.to_dict() for record in records],
    }


@router.get("/valuations/{record_id}")
async def get_valuation(
    record_id: str,
    user_id: str = Depends(require_user),
    repo: ValuationRepository = Depends(valuation_repository),
):
    record = repo.get(record_id, user_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Valuation not found")
    return record.to_dict()


@router.delete("/valuations/{record_id}")
async def delete_valuation(
    record_id: str,
    user_id: str = Depends(require_user),
    repo: ValuationRepository = Depends(valuation_repository),
):
    if not repo.delete(record_id, user_id):
        raise HTTPException(status_code=404, detail="Valuation not found")
    return {"success": True, "id": record_id}


# =============================================================================
# Subscriptions
# =============================================================================

@router.post("/subscriptions", status_code=201)
async def create_subscription(
    payload: SubscriptionRequest,
    user_id: str = Depends(require_user),
    repo: SubscriptionRepository = Depends(subscription_repository),
):
    try:
        subscription = repo.subscribe(
            user_id,
            payload.location,
            payload.email,
            payload.threshold_percentage,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return subscription.to_dict()


@router.get("/subscriptions")
async def list_subscriptions(
    user_id: str = Depends(require_user),
    repo: SubscriptionRepository = Depends(subscription_repository),
):
    subscriptions = repo.list(user_id)
    return {
        "count": len(subscriptions),
        "subscriptions": [s.to_dict() for s in subscriptions],
    }


@router.delete("/subscriptions/{subscription_id}")
async def delete_subscription(
    subscription_id: str,
    user_id: str = Depends(require_user),
    repo: SubscriptionRepository = Depends(subscription_repository),
):
    if not repo.unsubscribe(subscription_id, user_id):
        raise HTTPException(status_code=404, detail="Subscription not found")
    return {"success": True, "id": subscription_id}


# =============================================================================
# Alerts
# =============================================================================

@router.post("/alerts/check", dependencies=[Depends(require_alert_service)])
def check_alerts(
    config: Config = Depends(get_config),
    valuations: ValuationRepository = Depends(valuation_repository),
    subscriptions: SubscriptionRepository = Depends(subscription_repository),
):
    """
    Compare recent and older valuations per location and notify subscribers.

    Declared with def so the blocking delivery runs in the threadpool.
    The response carries counts only, never subscriber details.
    """
    alerts = ValuationChangeMonitor(valuations, subscriptions).check()

    dispatcher = AlertDispatcher(
        config.alert_endpoint,
        subscriptions,
        api_key=config.alert_api_key,
        timeout=config.alert_timeout,
    )
    sent = dispatcher.dispatch(alerts)

    return {
        "alerts": len(alerts),
        "sent": sent,
    }


# =============================================================================
# Mortgage
# =============================================================================

@router.post("/mortgage")
async def mortgage_quote(payload: MortgageRequest):
    try:
        quote = calculate_mortgage(
            payload.property_price,
            down_payment_percent=payload.down_payment_percent,
            annual_rate_percent=payload.annual_rate_percent,
            term_years=payload.term_years,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return quote.to_dict()
