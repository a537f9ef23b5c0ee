"""Main entry point for the SlipTactix sports assistant"""

import sys
import json
import time
import argparse
import logging

from sliptactix.utils.logging import setup_logging
from sliptactix.utils.config import config

logger = setup_logging(
    log_level=config.get_log_level(),
    log_file="sliptactix.log"
)


def enable_debug():
    """Switch logging and data dumps to debug"""
    import os
    os.environ['DEBUG'] = 'true'
    logger.setLevel(logging.DEBUG)
    for handler in logger.handlers:
        handler.setLevel(logging.DEBUG)


def ask(question: str) -> int:
    """Answer one question on stdout"""
    from sliptactix.chat import ChatService
    from sliptactix.data.models import to_serializable
    from sliptactix.utils.errors import ChatValidationError

    try:
        result = ChatService().handle(question)
    except ChatValidationError as e:
        logger.error(f"Invalid question: {e}")
        return 1

    print(result.response)
    print()
    print(f"Sources: {', '.join(result.sources)} | Confidence: {result.confidence:.2f}"
          + (f" | Fallback: {result.reason}" if result.fallback else ""))
    logger.debug(json.dumps(to_serializable(result.data_used), indent=2, default=str))
    return 0


def run_sync(sync_type: str) -> int:
    from sliptactix.orchestration.data_sync import DataSyncService

    service = DataSyncService()
    try:
        result = service.perform_quick_sync() if sync_type == "quick" else service.perform_full_sync()
    finally:
        service.db.close()

    logger.info(
        f"Sync ({result.type}) finished: {result.props} props, {result.games} games, "
        f"{result.injuries} injuries, {result.news} news, {len(result.errors)} errors"
    )
    return 1 if result.errors else 0


def run_scheduler() -> int:
    """Sync now and every interval until interrupted"""
    from sliptactix.orchestration.data_sync import DataSyncService

    service = DataSyncService()
    service.start_real_time_sync()
    logger.info("Starting scheduler...")
    try:
        while True:
            time.sleep(1)
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
    finally:
        service.stop_real_time_sync()
        service.db.close()
    return 0


def run_diagnosis() -> int:
    from sliptactix.data.clients.sports_games_odds import SportsGamesOddsClient
    from sliptactix.utils.security import validate_environment

    env_ok, issues = validate_environment()
    for issue in issues:
        logger.warning(f"⚠️ {issue}")

    diagnosis = SportsGamesOddsClient().diagnose_api()
    print(json.dumps(diagnosis, indent=2, default=str))
    return 0 if env_ok and diagnosis["working_endpoints"] else 1


def serve(host: str, port: int) -> int:
    import uvicorn

    logger.info(f"🌐 Serving API on http://{host}:{port}")
    uvicorn.run("sliptactix.api.app:app", host=host, port=port, log_level=config.get_log_level().lower())
    return 0


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(description='SlipTactix NBA betting assistant')
    parser.add_argument(
        '--ask',
        type=str,
        metavar='QUESTION',
        help='Answer a single sports question and exit'
    )
    parser.add_argument(
        '--sync',
        choices=['quick', 'full'],
        help='Run one data sync into the database and exit'
    )
    parser.add_argument(
        '--schedule',
        action='store_true',
        help='Run the real-time data sync as a daemon'
    )
    parser.add_argument(
        '--diagnose',
        action='store_true',
        help='Check API keys and test each Sports Games Odds endpoint'
    )
    parser.add_argument(
        '--serve',
        action='store_true',
        help='Serve the HTTP API'
    )
    parser.add_argument('--host', type=str, default='127.0.0.1', help='API host (with --serve)')
    parser.add_argument('--port', type=int, default=8000, help='API port (with --serve)')
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Debug mode: Enable detailed logging of all data objects at each step'
    )

    args = parser.parse_args()

    if args.debug:
        enable_debug()
        logger.info("🐛 DEBUG MODE ENABLED")

    if args.ask:
        sys.exit(ask(args.ask))
    elif args.sync:
        sys.exit(run_sync(args.sync))
    elif args.schedule:
        sys.exit(run_scheduler())
    elif args.diagnose:
        sys.exit(run_diagnosis())
    elif args.serve:
        sys.exit(serve(args.host, args.port))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == '__main__':
    main()
