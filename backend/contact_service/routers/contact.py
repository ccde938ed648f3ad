# contact_service/routers/contact.py
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from contact_service.core.mailer import get_notifier
from contact_service.lib.rate_limit import RateLimiter, get_client_id, get_rate_limiter
from contact_service.lib.validation import INVALID_DATA, build_contact_form, validate_contact_form

router = APIRouter(tags=["contact"])
log = logging.getLogger("uvicorn.error")

SUCCESS_MESSAGE = "ההודעה נשלחה בהצלחה"
RATE_LIMITED = "יותר מדי בקשות. אנא נסו שוב בעוד 15 דקות."
SEND_FAILED = "אירעה שגיאה בשליחת ההודעה. אנא נסו שוב מאוחר יותר."


def _fail(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse({"success": False, "error": error, **extra}, status_code=status_code)


@router.post("/contact")
async def submit_contact(
    request: Request,
    limiter: RateLimiter = Depends(get_rate_limiter),
    notifier=Depends(get_notifier),
):
    client_id = get_client_id(request.headers)
    # store calls may block (Redis), keep them off the event loop
    if not await run_in_threadpool(limiter.admit, client_id):
        log.info(f"[contact] rate limited client={client_id}")
        resp = _fail(429, RATE_LIMITED)
        resp.headers["Retry-After"] = str(await run_in_threadpool(limiter.retry_after, client_id))
        return resp

    try:
        try:
            body = await request.json()
        except (ValueError, RecursionError):
            return _fail(400, INVALID_DATA)

        validation = validate_contact_form(body)
        if not validation.is_valid:
            return _fail(400, INVALID_DATA, details=validation.errors)

        form = build_contact_form(body)
        await notifier.deliver(form)
    except Exception:
        log.exception("[contact] Contact form error")
        return _fail(500, SEND_FAILED)

    return {"success": True, "message": SUCCESS_MESSAGE}


@router.api_route("/contact", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"], include_in_schema=False)
async def contact_method_not_allowed():
    return JSONResponse({"error": "Method not allowed"}, status_code=405)
