from __future__ import annotations

import hmac
import hashlib
import json
import time
from datetime import datetime, timezone

from fastapi import BackgroundTasks, FastAPI, HTTPException, Request

from reviewbot.agents.base import check_ai_health
from reviewbot.core.config import ReviewBotConfig, load_config
from reviewbot.github.review_job import ReviewJob, process_pull_request_review

SERVICE_NAME = "AI PR Review Bot"
SERVICE_VERSION = "1.0.0"

REVIEWED_ACTIONS = {"opened", "synchronize"}


def verify_github_signature(raw_body: bytes, signature_header: str | None, secret: str) -> None:
    """Verify X-Hub-Signature-256 using the webhook secret."""
    if not secret:
        raise HTTPException(status_code=500, detail="Missing webhook secret")

    if not signature_header or not signature_header.startswith("sha256="):
        raise HTTPException(status_code=401, detail="Missing/invalid signature header")

    expected = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    received = signature_header.removeprefix("sha256=")

    if not hmac.compare_digest(expected, received):
        raise HTTPException(status_code=401, detail="Invalid signature")


def create_app(cfg: ReviewBotConfig | None = None) -> FastAPI:
    """Build the webhook app. Loads config from the environment when none is given."""
    if cfg is None:
        cfg = load_config()

    app = FastAPI(title=SERVICE_NAME, version=SERVICE_VERSION)
    started_at = time.monotonic()

    @app.get("/")
    def root():
        return {
            "status": "running",
            "service": SERVICE_NAME,
            "version": SERVICE_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/health")
    def health():
        return {
            "status": "healthy",
            "uptime": time.monotonic() - started_at,
            "environment": cfg.environment,
        }

    @app.get("/health/ai")
    async def health_ai():
        return {"ok": await check_ai_health(cfg)}

    @app.post("/webhook")
    @app.post("/github/webhook")
    async def github_webhook(request: Request, background_tasks: BackgroundTasks):
        raw = await request.body()
        event = request.headers.get("X-GitHub-Event", "")
        sig = request.headers.get("X-Hub-Signature-256")

        # Verify authenticity (do this before parsing)
        verify_github_signature(raw, sig, cfg.webhook_secret)

        try:
            payload = json.loads(raw or b"{}")
        except json.JSONDecodeError as error:
            raise HTTPException(status_code=400, detail=f"Invalid JSON payload: {error}")
        if not isinstance(payload, dict):
            raise HTTPException(status_code=400, detail="Webhook payload must be a JSON object")
        print(f"[ReviewBot] 📥 Incoming webhook: {event}")

        if event == "ping":
            return {"ok": True, "msg": "pong", "zen": payload.get("zen")}

        if event != "pull_request":
            return {"ok": True, "triggered": False, "message": f"Event ignored ({event or 'unknown'})"}

        action = payload.get("action")
        if action not in REVIEWED_ACTIONS:
            print(f"[ReviewBot] ⏭️ Ignoring PR action: {action}")
            return {"ok": True, "triggered": False, "message": f"Event ignored (action: {action})"}

        try:
            job = ReviewJob.from_payload(payload)
        except (KeyError, TypeError, ValueError) as error:
            raise HTTPException(status_code=400, detail=f"Malformed pull_request payload: {error}")

        print(f"[ReviewBot] 🔎 Queued review for {job.owner}/{job.repo}#{job.pr_number} (installation {job.installation_id})")

        # Respond right away; GitHub times out webhooks after 10 seconds
        background_tasks.add_task(process_pull_request_review, job, cfg)
        return {"ok": True, "triggered": True, "message": "Webhook received, processing PR review..."}

    return app
