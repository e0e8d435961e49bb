from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from typing import Optional
import logging
import uvicorn
from interfaces.slack.core_slack_orchestration import SlackInterface, create_slack_app
from runtime.settings import HoroscopeSettings

logger = logging.getLogger(__name__)


def create_app(slack_interface: Optional[SlackInterface] = None) -> FastAPI:
    """Build the FastAPI app around a Slack interface (created from env if not given)"""
    if slack_interface is None:
        settings = HoroscopeSettings.from_env()
        logging.basicConfig(level=settings.log_level)
        slack_interface = create_slack_app(settings)

    # Startup/shutdown
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await slack_interface.start()
        logger.info("🔮 Daily horoscope service started")
        yield
        await slack_interface.stop()
        logger.info("Daily horoscope service stopped")

    app = FastAPI(
        title="Daily Horoscope - Slack Server",
        description="Slack webhook server and scheduler for the daily horoscope broadcast",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.slack_interface = slack_interface
    slack_handler = slack_interface.get_fastapi_handler()

    @app.post("/slack/events")
    async def slack_events_endpoint(request: Request):
        """Endpoint for Slack Events API (URL verification, events)"""
        return await slack_handler.handle(request)

    @app.get("/api/horoscope/status")
    async def horoscope_status():
        """Cache sizes, sent-marker date and next scheduled broadcast"""
        return {"status": "healthy", **slack_interface.get_status()}

    @app.get("/health")
    async def health_check():
        """Health check for the horoscope service"""
        return {"status": "healthy", "services": ["slack", "scheduler"]}

    return app


if __name__ == "__main__":
    uvicorn.run(
        "slack_webhook_server:create_app",
        factory=True,
        host="0.0.0.0",
        port=HoroscopeSettings.from_env().port
    )
