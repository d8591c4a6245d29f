from fastapi import Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Any, Dict, Iterator, Optional

import requests

from .config import Settings, get_settings
from .db_connection import (
    assign_official,
    check_database_exists,
    fetch_issue,
    fetch_verified_officials,
    get_official_count,
)
from .errors import CivicFixError, IssueNotFound, LocationValidationError
from .extract_location import to_location_query
from .logging_config import get_logger, setup_logging
from .match_logic import match_official
from .match_record import LocationQuery, MatchResult
from .matchmodels import (
    AssignRequest,
    AssignResponse,
    MatchedOfficial,
    MatchResponse,
    NotificationRequest,
    NotifyOfficialsRequest,
)
from .notifications import IssueNotice, NotificationDispatcher

_settings = get_settings()
setup_logging(_settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title=_settings.project_name, version=_settings.version)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

def json_response(payload: Any, status_code: int = 200) -> JSONResponse:
    return JSONResponse(
        content=payload,
        status_code=status_code,
        media_type="application/json; charset=utf-8",
        headers={"Cache-Control": "no-store"},
    )

@app.exception_handler(CivicFixError)
async def civicfix_error_handler(request: Request, exc: CivicFixError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return json_response(exc.to_dict(), status_code=exc.status_code)

def get_dispatcher(settings: Settings = Depends(get_settings)) -> Iterator[NotificationDispatcher]:
    session = requests.Session()
    try:
        yield NotificationDispatcher(settings, settings.database_path, session=session)
    finally:
        session.close()

#city and state are the minimum for a meaningful match
def require_city_state(query: LocationQuery) -> None:
    missing = [name for name in ("city", "state") if getattr(query, name) is None]
    if missing:
        raise LocationValidationError(
            f"Location is missing required fields: {', '.join(missing)}",
            missing=missing,
        )

def build_match_response(result: MatchResult) -> MatchResponse:
    best = result.best_match
    return MatchResponse(
        matched_official=MatchedOfficial.from_scored(best) if best else None,
        alternatives=[MatchedOfficial.from_scored(a) for a in result.alternatives],
        total_officials_checked=result.total_checked,
    )

def run_match(query: LocationQuery, settings: Settings) -> MatchResult:
    candidates = fetch_verified_officials(settings.database_path)
    result = match_official(query, candidates, settings)

    if result.ranking:
        top = result.ranking[0]
        logger.info(f"Official matching for {query.city}, {query.state}: "
                    f"best {top.candidate.full_name} (score {top.score}), "
                    f"reasons: {', '.join(top.match_reasons) or 'none'}")
    return result

@app.get("/")
def manifest(settings: Settings = Depends(get_settings)):
    payload = {
        "name": settings.project_name,
        "version": settings.version,
        "endpoints": ["/match-official", "/issues/{issue_id}/assign",
                      "/send-notifications", "/notify-officials", "/healthy"],
        "thresholds": {
            "best_match": settings.best_match_threshold,
            "alternative": settings.alternative_threshold,
            "max_alternatives": settings.max_alternatives,
        },
    }
    return json_response(payload)

@app.post("/match-official")
def match_official_endpoint(
    payload: Dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
):
    query = to_location_query(payload)
    require_city_state(query)

    result = run_match(query, settings)
    response = build_match_response(result)
    if result.total_checked == 0:
        response.message = "No verified officials found"

    return json_response(response.model_dump())

@app.post("/issues/{issue_id}/assign")
def assign_issue(
    issue_id: str,
    body: AssignRequest,
    settings: Settings = Depends(get_settings),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    issue = fetch_issue(settings.database_path, issue_id)
    if issue is None:
        raise IssueNotFound(issue_id)

    query = to_location_query(body.location)
    require_city_state(query)

    result = run_match(query, settings)
    official_id: Optional[str] = result.best_match.official_id if result.best_match else None
    assign_official(settings.database_path, issue_id, official_id)

    notice = IssueNotice(
        issue_id=issue_id,
        title=body.issue_title or issue["title"],
        issue_type=body.issue_type or issue["issue_type"] or "other",
        city=query.city,
        state=query.state,
        ward=query.ward,
        area=query.area,
        pincode=query.pincode,
    )
    notifications = dispatcher.dispatch(notice, official_id, body.citizen_phone)

    match = build_match_response(result)
    response = AssignResponse(
        **match.model_dump(),
        issue_id=issue_id,
        assigned_official_id=official_id,
        notifications=notifications,
    )
    return json_response(response.model_dump())

@app.post("/send-notifications")
def send_notifications(
    body: NotificationRequest,
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    loc = body.location
    notice = IssueNotice(
        issue_id=body.issue_id,
        title=body.issue_title,
        issue_type=body.issue_type,
        city=loc.city,
        state=loc.state,
        ward=loc.ward,
        area=loc.area,
        pincode=loc.pincode,
    )
    notifications = dispatcher.dispatch(notice, body.assigned_official_id, body.citizen_phone)

    payload = {
        "message": f"Processed {len(notifications)} notifications",
        "notifications": notifications,
        "issue_id": body.issue_id,
    }
    return json_response(payload)

@app.post("/notify-officials")
def notify_officials(
    body: NotifyOfficialsRequest,
    settings: Settings = Depends(get_settings),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    loc = body.location
    query = to_location_query(loc.model_dump())
    require_city_state(query)

    officials = fetch_verified_officials(settings.database_path, city=query.city, state=query.state)
    if not officials:
        logger.info("No verified officials found for this location")
        return json_response({"message": "No officials found", "notified": 0, "emails_sent": 0})

    notice = IssueNotice(
        issue_id=body.issue_id,
        title=body.issue_title,
        issue_type=body.issue_type,
        city=loc.city,
        state=loc.state,
        ward=loc.ward,
        area=loc.area,
    )
    report = dispatcher.notify_area_officials(notice, officials)

    return json_response({
        "message": f"Successfully notified {report['notified']} officials",
        **report,
    })

@app.get("/healthy")
def health(settings: Settings = Depends(get_settings)):
    exists = check_database_exists(settings.database_path)
    payload = {
        "status": "ok",
        "directory": exists,
        "officials": get_official_count(settings.database_path) if exists else 0,
    }
    return json_response(payload)
